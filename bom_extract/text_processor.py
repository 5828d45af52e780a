#!/usr/bin/env python3
"""
Text Processor - Extract BOM line items from labeled free-text exports

Item lines end in four numeric columns: quantity, wastage, unit cost, total cost.

    [BABS GVAL003] N04 Valerian Extract KG 0.0008 0.0000 75.3356 0.06
    Sugar Syrup 1.2000 0.0000 0.5500 0.66
"""

import re
import logging
from typing import List, Optional

from .dedup import deduplicate_items
from .metadata_extractor import extract_metadata
from .models import ExtractedLineItem, ParseResult
from .name_hygiene import build_line_item
from .number_parser import parse_quantity
from .rule_loader import BomRules, DEFAULT_RULES
from .utils.line_filter import clean_lines

logger = logging.getLogger(__name__)

NO_ITEMS_ERROR = 'No components could be extracted from the BOM'

MIN_NAME_LENGTH = 3
NUMBER_COLUMNS = r'([\d.,]+)\s+([\d.,]+)\s+([\d.,]+)\s+([\d.,]+)$'


class TextProcessor:
    """Parse free-text BOM exports line by line"""

    def __init__(self, rules: BomRules = DEFAULT_RULES):
        self.rules = rules
        units = '|'.join(re.escape(u) for u in rules.text_unit_tokens)
        # Tried in order; first match with an acceptable name wins
        self.line_patterns = [
            # Bracket-coded name, optional unit
            re.compile(rf'^(?:\s*-\s*)?(\[[^\]]+\]\s*.+?)\s+(?:({units})\s+)?{NUMBER_COLUMNS}', re.IGNORECASE),
            # Plain name, optional unit
            re.compile(rf'^(.+?)\s+(?:({units})\s+)?{NUMBER_COLUMNS}', re.IGNORECASE),
        ]

    def is_header_line(self, line: str) -> bool:
        return any(token in line for token in self.rules.header_tokens)

    def is_junk_name(self, raw_name: str) -> bool:
        if len(raw_name) < MIN_NAME_LENGTH:
            return True
        name_lower = raw_name.lower()
        return any(fragment in name_lower for fragment in self.rules.junk_name_fragments)

    def parse_line(self, line: str) -> Optional[ExtractedLineItem]:
        """
        Parse one item line

        Args:
            line: Trimmed line

        Returns:
            ExtractedLineItem or None if the line has no item shape
        """
        for pattern in self.line_patterns:
            match = pattern.match(line)
            if not match:
                continue

            raw_name = (match.group(1) or '').strip()
            if self.is_junk_name(raw_name):
                logger.debug(f"Rejected candidate name '{raw_name}'")
                continue

            unit, quantity, _wastage, unit_cost, total_cost = match.groups()[1:]
            return build_line_item(
                raw_name,
                quantity=parse_quantity(quantity),
                unit=unit,
                unit_cost=parse_quantity(unit_cost),
                total_cost=parse_quantity(total_cost),
                rules=self.rules,
            )
        return None

    def parse(self, text: str) -> ParseResult:
        """
        Parse a free-text BOM export

        Args:
            text: Raw export text

        Returns:
            ParseResult with metadata and deduplicated items
        """
        lines = clean_lines(text)
        metadata = extract_metadata(lines)

        items: List[ExtractedLineItem] = []
        for line in lines:
            if self.is_header_line(line):
                continue
            item = self.parse_line(line)
            if item:
                items.append(item)

        items = deduplicate_items(items)
        if items:
            logger.info(f"Extracted {len(items)} items from text export")
        else:
            logger.warning("No components extracted from text export")
        return ParseResult.from_items(items, metadata, NO_ITEMS_ERROR)


def parse_bom_text(text: str, rules: BomRules = DEFAULT_RULES) -> ParseResult:
    """Extract BOM items from a labeled free-text export"""
    return TextProcessor(rules).parse(text)
