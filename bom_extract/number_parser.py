#!/usr/bin/env python3
"""
Number Parser - Tolerant string -> float conversion for BOM fields
Thousands separators are dropped; blanks and non-numbers become None
"""

import math
import re
from typing import Any, Optional

# Leading numeric prefix, e.g. "1.5kg" -> "1.5", "-.25" -> "-.25", "2e3" -> "2e3"
LEADING_NUMBER_RX = re.compile(r'^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')


def parse_quantity(value: Any) -> Optional[float]:
    """
    Parse a quantity or cost cell.

    Commas are treated as thousands separators and removed. Only the leading
    numeric part is used, so trailing text such as a unit is ignored.

    Args:
        value: Raw cell or token (str, number, or None)

    Returns:
        Parsed float or None if empty / not a number
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None

    cleaned = str(value).replace(',', '').strip()
    if not cleaned:
        return None

    match = LEADING_NUMBER_RX.match(cleaned)
    if not match:
        return None

    try:
        number = float(match.group(0))
    except ValueError:
        return None
    return number if math.isfinite(number) else None
