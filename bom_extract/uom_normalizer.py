#!/usr/bin/env python3
"""
UoM Normalizer - Canonicalize unit tokens found in BOM documents
Uses the unit_mapping table from shared.yaml; unknown tokens pass through lowercased
"""

import logging
from typing import Optional

from .rule_loader import BomRules, DEFAULT_RULES

logger = logging.getLogger(__name__)


def normalize_unit(token: Optional[str], rules: BomRules = DEFAULT_RULES) -> Optional[str]:
    """
    Normalize a unit token.

    Lookup order: exact token, then the lowercased token, then the lowercased
    token itself. Every canonical value maps to itself, so the function is
    idempotent.

    Args:
        token: Raw unit text (e.g. "KG", "pcs", " mL ")
        rules: Rule tables to use

    Returns:
        Canonical unit (e.g. "kg", "unit", "ml", "L") or None for blank input
    """
    if token is None:
        return None

    trimmed = str(token).strip()
    if not trimmed:
        return None

    mapping = rules.unit_mapping
    if trimmed in mapping:
        return mapping[trimmed]

    lowered = trimmed.lower()
    if lowered in mapping:
        return mapping[lowered]

    logger.debug(f"Unknown unit token '{trimmed}', keeping as '{lowered}'")
    return lowered
