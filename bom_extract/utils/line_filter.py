#!/usr/bin/env python3
"""
Line Filter - Split raw document text into lines and skip header/footer/address lines
"""

import logging
from typing import List

from ..rule_loader import BomRules, DEFAULT_RULES

logger = logging.getLogger(__name__)


def clean_lines(text: str, keep_blank: bool = False) -> List[str]:
    """
    Split text into trimmed lines

    Args:
        text: Raw document text (any newline convention, form feeds split pages)
        keep_blank: Keep empty lines (default: drop them)

    Returns:
        List of stripped lines
    """
    if not text:
        return []
    lines = [line.strip() for line in str(text).splitlines()]
    if keep_blank:
        return lines
    return [line for line in lines if line]


class LineFilter:
    """Filter out header, footer and address lines from PDF table text"""

    def __init__(self, rules: BomRules = DEFAULT_RULES):
        """
        Initialize line filter patterns

        Args:
            rules: Rule tables holding pdf_table.skip_patterns
        """
        self.skip_patterns = rules.skip_patterns

    def is_skip_line(self, line: str) -> bool:
        """
        Check if a line is a header/footer/address line

        Args:
            line: Trimmed line to check

        Returns:
            True if the line matches any skip pattern
        """
        for pattern in self.skip_patterns:
            if pattern.search(line):
                return True
        return False
