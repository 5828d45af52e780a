#!/usr/bin/env python3
"""
Deduplicate extracted BOM items by clean name
"""

import logging
from typing import Iterable, List

from .models import ExtractedLineItem

logger = logging.getLogger(__name__)

MIN_CLEAN_NAME_LENGTH = 3


def deduplicate_items(items: Iterable[ExtractedLineItem]) -> List[ExtractedLineItem]:
    """
    Keep the first item per case-insensitive clean name.

    Later duplicates are dropped whole (quantities are not summed). Items
    whose clean name is shorter than 3 characters are always dropped.

    Args:
        items: Extracted items in document order

    Returns:
        New list of unique items, order preserved
    """
    seen = set()
    unique: List[ExtractedLineItem] = []

    for item in items:
        key = (item.clean_name or '').strip().lower()
        if len(key) < MIN_CLEAN_NAME_LENGTH:
            logger.debug(f"Dropping item with short name '{item.clean_name}'")
            continue
        if key in seen:
            logger.debug(f"Dropping duplicate item '{item.clean_name}'")
            continue
        seen.add(key)
        unique.append(item)

    return unique
