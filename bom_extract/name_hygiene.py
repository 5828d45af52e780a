#!/usr/bin/env python3
"""
Name Hygiene Module
Strips bracketed supplier codes (e.g. "[BABS GVAL003]") from raw BOM names,
creates a clean_name, and classifies it as ingredient or packaging.
"""

import re
import logging
from typing import Any, Optional

from .models import ExtractedLineItem, ItemType
from .rule_loader import BomRules, DEFAULT_RULES
from .uom_normalizer import normalize_unit

logger = logging.getLogger(__name__)

# Applied in order; the last one removes any remaining embedded group
CODE_PATTERNS = [
    # Leading code: "[BABS GVAL003] N04 Valerian Extract"
    re.compile(r'^\[[^\[\]]*\]\s*'),
    # Dash-prefixed code: "  -  [Hop Extract] Name"
    re.compile(r'^\s*-\s*\[[^\[\]]*\]\s*'),
    # Embedded code anywhere in the name
    re.compile(r'\[[^\[\]]*\]\s*'),
]

BRACKET_GROUP_RX = re.compile(r'\[[^\[\]]*\]')
LEADING_DASH_RX = re.compile(r'^\s*-\s*')
WHITESPACE_RX = re.compile(r'\s+')


def clean_material_name(raw_name: Any) -> str:
    """
    Create a clean material name from a raw BOM name.

    Removes every bracket-enclosed group (nested groups are peeled from the
    inside out), a leading dash, and collapses whitespace.

    Args:
        raw_name: Raw name as extracted

    Returns:
        Clean name ("" for empty/None input)
    """
    if raw_name is None:
        return ''

    cleaned = str(raw_name)
    while True:
        before = cleaned
        for pattern in CODE_PATTERNS:
            cleaned = pattern.sub('', cleaned)
        if cleaned == before or not BRACKET_GROUP_RX.search(cleaned):
            break

    cleaned = LEADING_DASH_RX.sub('', cleaned)
    cleaned = WHITESPACE_RX.sub(' ', cleaned).strip()

    if cleaned != raw_name:
        logger.debug(f"Cleaned name '{raw_name}' -> '{cleaned}'")
    return cleaned


def detect_item_type(name: Any, rules: BomRules = DEFAULT_RULES) -> ItemType:
    """
    Classify a cleaned name as packaging or ingredient by keyword containment

    Args:
        name: Cleaned material name
        rules: Rule tables holding packaging_keywords

    Returns:
        ItemType.PACKAGING if any packaging keyword occurs in the name, else ItemType.INGREDIENT
    """
    name_lower = str(name or '').lower()
    if any(keyword in name_lower for keyword in rules.packaging_keywords):
        return ItemType.PACKAGING
    return ItemType.INGREDIENT


def build_line_item(raw_name: str, quantity: Optional[float] = None, unit: Optional[str] = None,
                    unit_cost: Optional[float] = None, total_cost: Optional[float] = None,
                    rules: BomRules = DEFAULT_RULES) -> ExtractedLineItem:
    """
    Create an ExtractedLineItem from raw extracted values

    Cleans the name, classifies it, and normalizes the unit token.
    """
    clean_name = clean_material_name(raw_name)
    return ExtractedLineItem(
        raw_name=raw_name,
        clean_name=clean_name,
        quantity=quantity,
        unit=normalize_unit(unit, rules),
        item_type=detect_item_type(clean_name, rules),
        unit_cost=unit_cost,
        total_cost=total_cost,
    )
