#!/usr/bin/env python3
"""
Metadata Extractor - Document-level fields from BOM exports

Recognised labels (case-insensitive, anywhere on a line):
- Product Code: <value>          value runs to " Created" or end of line
- Product Description: <value>   value runs to " Created" or end of line
- Total Value: <number>
- Created Date: <dd/mm/yyyy>

A label seen on several lines keeps the last value.
"""

import re
import logging
from typing import Dict, Iterable, Optional

from .models import ParseMetadata
from .number_parser import parse_quantity

logger = logging.getLogger(__name__)

PRODUCT_CODE_RX = re.compile(r'Product Code:\s*(.+?)(?:\s+Created|$)', re.IGNORECASE)
PRODUCT_DESCRIPTION_RX = re.compile(r'Product Description:\s*(.+?)(?:\s+Created|$)', re.IGNORECASE)
TOTAL_VALUE_RX = re.compile(r'Total Value:\s*([\d.,]+)', re.IGNORECASE)
CREATED_DATE_RX = re.compile(r'Created Date:\s*([\d/]+)', re.IGNORECASE)


def extract_metadata(lines: Iterable[str]) -> ParseMetadata:
    """
    Scan every line for labeled document fields

    Args:
        lines: Trimmed document lines

    Returns:
        ParseMetadata with whatever fields were found
    """
    found: Dict[str, Optional[object]] = {}

    for line in lines:
        match = PRODUCT_CODE_RX.search(line)
        if match:
            found['product_code'] = match.group(1).strip()

        match = PRODUCT_DESCRIPTION_RX.search(line)
        if match:
            found['product_description'] = match.group(1).strip()

        match = TOTAL_VALUE_RX.search(line)
        if match:
            total_value = parse_quantity(match.group(1))
            if total_value is not None:
                found['total_value'] = total_value

        match = CREATED_DATE_RX.search(line)
        if match:
            found['created_date'] = match.group(1).strip()

    if found:
        logger.debug(f"Extracted document metadata: {found}")
    return ParseMetadata(**found)
