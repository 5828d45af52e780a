#!/usr/bin/env python3
"""
Rule Loader - Load BOM extraction rules from the rules directory
Builds an immutable BomRules snapshot from shared.yaml
"""

import os
import re
import yaml
import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Any, FrozenSet, Mapping, Optional, Pattern, Tuple

logger = logging.getLogger(__name__)

DEFAULT_RULES_DIR = Path(__file__).parent / 'rules'


@dataclass(frozen=True)
class BomRules:
    """Read-only lookup tables shared by every extractor"""
    packaging_keywords: FrozenSet[str]
    unit_mapping: Mapping[str, str]
    text_unit_tokens: Tuple[str, ...]
    table_unit_tokens: Tuple[str, ...]
    default_table_unit: str
    concatenated_decimal_places: Tuple[int, ...]
    header_tokens: Tuple[str, ...]
    junk_name_fragments: Tuple[str, ...]
    skip_patterns: Tuple[Pattern, ...]
    line_pass_ignore_tokens: Tuple[str, ...]
    line_pass_ignore_tokens_ci: Tuple[str, ...]


class RuleLoader:
    """Load and parse YAML rules from a rules directory"""

    def __init__(self, rules_dir: Optional[Path] = None):
        """
        Initialize rule loader with rules directory

        Args:
            rules_dir: Directory holding shared.yaml (defaults to the packaged rules)
        """
        self.rules_dir = Path(rules_dir) if rules_dir else DEFAULT_RULES_DIR
        self._shared_rules = None  # Cache shared.yaml

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load a YAML file directly"""
        if not file_path.exists():
            raise FileNotFoundError(f"Rule file not found: {file_path}")
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Rule file {file_path} must contain a mapping at the top level")
        return data

    def _load_shared_rules(self) -> Dict[str, Any]:
        """Load shared.yaml rules"""
        if self._shared_rules is None:
            self._shared_rules = self._load_yaml_file(self.rules_dir / 'shared.yaml')
            logger.debug(f"Loaded shared.yaml from {self.rules_dir}")
        return self._shared_rules

    def _require(self, section: Dict[str, Any], key: str, where: str = 'shared.yaml') -> Any:
        value = section.get(key)
        if value is None:
            raise ValueError(f"Missing required rule '{key}' in {where}")
        return value

    def build_rules(self) -> BomRules:
        """
        Build the frozen rule snapshot used by the extractors

        Returns:
            BomRules with every table converted to an immutable container

        Raises:
            FileNotFoundError: shared.yaml is missing
            ValueError: a required section is missing or malformed
        """
        shared = self._load_shared_rules()
        text_export = shared.get('text_export', {})
        pdf_table = shared.get('pdf_table', {})

        unit_mapping = self._require(shared, 'unit_mapping')
        if not isinstance(unit_mapping, dict):
            raise ValueError("unit_mapping must be a mapping of token -> canonical unit")

        decimal_places = tuple(int(p) for p in self._require(shared, 'concatenated_decimal_places'))
        if len(decimal_places) != 4:
            raise ValueError("concatenated_decimal_places must list exactly 4 columns")

        try:
            skip_patterns = tuple(
                re.compile(p, re.IGNORECASE)
                for p in self._require(pdf_table, 'skip_patterns', 'pdf_table')
            )
        except re.error as e:
            raise ValueError(f"Invalid pdf_table.skip_patterns entry: {e}") from e

        rules = BomRules(
            packaging_keywords=frozenset(
                str(k).lower() for k in self._require(shared, 'packaging_keywords')
            ),
            unit_mapping=MappingProxyType({str(k): str(v) for k, v in unit_mapping.items()}),
            text_unit_tokens=tuple(str(u) for u in self._require(shared, 'text_unit_tokens')),
            table_unit_tokens=tuple(str(u) for u in self._require(shared, 'table_unit_tokens')),
            default_table_unit=str(shared.get('default_table_unit', 'kg')),
            concatenated_decimal_places=decimal_places,
            header_tokens=tuple(self._require(text_export, 'header_tokens', 'text_export')),
            junk_name_fragments=tuple(
                str(f).lower() for f in self._require(text_export, 'junk_name_fragments', 'text_export')
            ),
            skip_patterns=skip_patterns,
            line_pass_ignore_tokens=tuple(pdf_table.get('line_pass_ignore_tokens', [])),
            line_pass_ignore_tokens_ci=tuple(
                str(t).lower() for t in pdf_table.get('line_pass_ignore_tokens_ci', [])
            ),
        )
        logger.debug(
            f"Built BOM rules: {len(rules.packaging_keywords)} packaging keywords, "
            f"{len(rules.unit_mapping)} unit synonyms, {len(rules.skip_patterns)} skip patterns"
        )
        return rules


def load_default_rules() -> BomRules:
    """Load rules from BOM_EXTRACT_RULES_DIR if set, else from the packaged rules"""
    rules_dir = os.getenv('BOM_EXTRACT_RULES_DIR')
    return RuleLoader(Path(rules_dir) if rules_dir else None).build_rules()


# Built once at import; shared read-only by all extractors
DEFAULT_RULES = load_default_rules()
