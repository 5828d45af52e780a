#!/usr/bin/env python3
"""
Concatenated Number Splitter

PDF text extraction often drops the whitespace between the four numeric
columns of a BOM table row, producing one run such as

    "0.0675.33560.00000.0008"  ->  0.06 | 75.3356 | 0.0000 | 0.0008

Columns are, left to right: total cost, unit cost, wastage, quantity.

Two strategies are tried:
1. Regex: every "digits.digits" match; with 4 or more, the last 4 are used.
2. Boundary walk: cut one number at a time. Between two decimal points sits
   the fraction of the current number followed by the integer part of the
   next one. The cut leaves the configured number of decimal places on the
   current number when the rest is a plausible integer part; otherwise it
   walks back from the second point to the first plausible integer part.

A plausible integer part is "0" or a digit run without a leading zero.
Numbers whose integer parts are both ambiguous can still be split wrongly;
the result is a best guess, never a partial one.
"""

import math
import re
import logging
from typing import List, NamedTuple, Optional, Sequence

from .rule_loader import DEFAULT_RULES

logger = logging.getLogger(__name__)

DECIMAL_NUMBER_RX = re.compile(r'\d+\.\d+')

EXPECTED_COUNT = 4


class ConcatenatedNumbers(NamedTuple):
    total_cost: float
    unit_cost: float
    wastage: float
    quantity: float


def _to_float(text: str) -> Optional[float]:
    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _is_plausible_integer(digits: str) -> bool:
    return digits == '0' or (digits.isdigit() and not digits.startswith('0'))


def _find_cut(segment: str, places: Optional[int]) -> Optional[int]:
    """
    Position in segment where the next number's integer part begins

    segment holds the digits between two decimal points. The current number
    keeps at least one fraction digit and the next one gets at least one
    integer digit.
    """
    if places is not None and 0 < places < len(segment):
        if _is_plausible_integer(segment[places:]):
            return places

    # Walk back from the second decimal point
    for cut in range(len(segment) - 1, 0, -1):
        if _is_plausible_integer(segment[cut:]):
            return cut
    return None


def _split_by_regex(cleaned: str) -> Optional[List[float]]:
    matches = DECIMAL_NUMBER_RX.findall(cleaned)
    if len(matches) < EXPECTED_COUNT:
        return None
    numbers = [_to_float(m) for m in matches[-EXPECTED_COUNT:]]
    if any(n is None for n in numbers):
        return None
    return numbers


def _split_by_boundaries(cleaned: str, decimal_places: Sequence[int]) -> Optional[List[float]]:
    remaining = cleaned
    numbers: List[float] = []

    while remaining and len(numbers) < EXPECTED_COUNT:
        first_dot = remaining.find('.')
        if first_dot == -1:
            break

        second_dot = remaining.find('.', first_dot + 1)
        if second_dot == -1:
            # Last number: take the rest
            value = _to_float(remaining)
            if value is None:
                return None
            numbers.append(value)
            remaining = ''
            break

        segment = remaining[first_dot + 1:second_dot]
        places = decimal_places[len(numbers)] if len(numbers) < len(decimal_places) else None
        cut = _find_cut(segment, places)
        if cut is None:
            logger.debug(f"No plausible boundary in '{segment}' of run '{cleaned}'")
            return None

        split_point = first_dot + 1 + cut
        value = _to_float(remaining[:split_point])
        if value is None:
            return None
        numbers.append(value)
        remaining = remaining[split_point:]

    if len(numbers) != EXPECTED_COUNT or remaining:
        return None
    return numbers


def split_concatenated_numbers(run: str,
                               decimal_places: Optional[Sequence[int]] = None) -> Optional[ConcatenatedNumbers]:
    """
    Split a concatenated numeric run into its four columns

    Args:
        run: Digits, decimal points and commas, e.g. "0.0675.33560.00000.0008"
        decimal_places: Expected fraction digits per column (defaults to the rules)

    Returns:
        ConcatenatedNumbers or None if the run cannot be split into exactly four numbers
    """
    if not run:
        return None
    if decimal_places is None:
        decimal_places = DEFAULT_RULES.concatenated_decimal_places

    cleaned = str(run).replace(',', '').strip()
    if cleaned.count('.') < EXPECTED_COUNT:
        return None

    numbers = _split_by_regex(cleaned)
    strategy = 'regex'
    if numbers is None:
        numbers = _split_by_boundaries(cleaned, decimal_places)
        strategy = 'boundary walk'

    if numbers is None:
        logger.debug(f"Could not split concatenated run '{run}'")
        return None

    logger.debug(f"Split run '{run}' by {strategy}: {numbers}")
    return ConcatenatedNumbers(*numbers)
