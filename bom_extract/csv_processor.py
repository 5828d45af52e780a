#!/usr/bin/env python3
"""
CSV Processor - Extract BOM line items from CSV/TSV spreadsheets
Columns are located by header keywords; cells are parsed tolerantly
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .dedup import deduplicate_items
from .models import ExtractedLineItem, ParseResult
from .name_hygiene import build_line_item
from .number_parser import parse_quantity
from .rule_loader import BomRules, DEFAULT_RULES
from .utils.line_filter import clean_lines

logger = logging.getLogger(__name__)

TOO_FEW_ROWS_ERROR = 'CSV file must have at least a header row and one data row'
NO_NAME_COLUMN_ERROR = 'Could not identify a name/description column in the CSV'
NO_ITEMS_ERROR = 'No valid items could be extracted from the CSV'

MIN_NAME_LENGTH = 2

# Header keywords per field, checked in order
NAME_KEYWORDS = ('name', 'description', 'component', 'product', 'material', 'item')
QUANTITY_KEYWORDS = ('quantity', 'qty', 'amount', 'vol', 'weight')
UNIT_KEYWORDS = ('unit', 'units', 'uom')
UNIT_COST_KEYWORDS = ('unit cost', 'unit_cost', 'unitcost', 'price')
TOTAL_COST_KEYWORDS = ('total cost', 'total_cost', 'totalcost', 'total', 'cost')

CANDIDATE_DELIMITERS = (',', ';', '\t', '|')


@dataclass(frozen=True)
class ColumnMapping:
    """Column index per field; None when the field has no column"""
    name: Optional[int] = None
    quantity: Optional[int] = None
    unit: Optional[int] = None
    unit_cost: Optional[int] = None
    total_cost: Optional[int] = None
    name_from_header: bool = False


def split_csv_line(line: str, delimiter: str = ',') -> List[str]:
    """
    Split one CSV line honoring quotes

    A doubled quote inside a quoted field is a literal quote. Cells are trimmed.

    Args:
        line: One line of CSV text
        delimiter: Single-character delimiter

    Returns:
        List of cell values
    """
    cells: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            cells.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    cells.append(''.join(current).strip())
    return cells


def _matches_unit_header(header: str) -> bool:
    return any(header == k or header.startswith(k + ' ') for k in UNIT_KEYWORDS)


def _contains_any(header: str, keywords: Sequence[str]) -> bool:
    return any(k in header for k in keywords)


def detect_column_mapping(headers: Sequence[str]) -> ColumnMapping:
    """
    Map BOM fields to column indexes using header keywords

    The first header matching a field wins. A header that matches a unit-cost
    keyword is never used as total cost. Without a name header, column 0 is used.

    Args:
        headers: Header cells

    Returns:
        ColumnMapping
    """
    found = {}
    for index, header in enumerate(headers):
        h = str(header).strip().lower()

        if 'name' not in found and _contains_any(h, NAME_KEYWORDS):
            found['name'] = index
        if 'quantity' not in found and _contains_any(h, QUANTITY_KEYWORDS):
            found['quantity'] = index
        if 'unit' not in found and _matches_unit_header(h):
            found['unit'] = index
        if 'unit_cost' not in found and _contains_any(h, UNIT_COST_KEYWORDS):
            found['unit_cost'] = index
        if 'total_cost' not in found and _contains_any(h, TOTAL_COST_KEYWORDS):
            if not _contains_any(h, UNIT_COST_KEYWORDS):
                found['total_cost'] = index

    name_from_header = 'name' in found
    if not name_from_header and headers:
        found['name'] = 0

    mapping = ColumnMapping(name_from_header=name_from_header, **found)
    logger.debug(f"Column mapping for headers {list(headers)}: {mapping}")
    return mapping


def sniff_delimiter(content: str) -> str:
    """
    Guess the delimiter from the header line

    Returns:
        The most frequent candidate delimiter, ',' when none occurs
    """
    lines = clean_lines(content)
    if not lines:
        return ','
    counts = Counter({d: lines[0].count(d) for d in CANDIDATE_DELIMITERS})
    delimiter, count = counts.most_common(1)[0]
    return delimiter if count > 0 else ','


def _cell(values: Sequence[str], index: Optional[int]) -> Optional[str]:
    if index is None or index >= len(values):
        return None
    return values[index]


class CSVProcessor:
    """Extract BOM items from CSV text"""

    def __init__(self, rules: BomRules = DEFAULT_RULES):
        self.rules = rules

    def parse_row(self, values: Sequence[str], mapping: ColumnMapping) -> Optional[ExtractedLineItem]:
        raw_name = _cell(values, mapping.name) or ''
        if len(raw_name) < MIN_NAME_LENGTH:
            return None

        return build_line_item(
            raw_name,
            quantity=parse_quantity(_cell(values, mapping.quantity)),
            unit=_cell(values, mapping.unit),
            unit_cost=parse_quantity(_cell(values, mapping.unit_cost)),
            total_cost=parse_quantity(_cell(values, mapping.total_cost)),
            rules=self.rules,
        )

    def parse(self, content: str, delimiter: str = ',') -> ParseResult:
        """
        Parse CSV content

        Args:
            content: Whole CSV body
            delimiter: Single-character delimiter (default: ',')

        Returns:
            ParseResult; failures carry one of the module's error strings
        """
        lines = clean_lines(content)
        if len(lines) < 2:
            logger.warning(f"CSV has {len(lines)} non-blank lines, need a header and data")
            return ParseResult.failure(TOO_FEW_ROWS_ERROR)

        headers = [h.lower().strip() for h in split_csv_line(lines[0], delimiter)]
        mapping = detect_column_mapping(headers)
        if mapping.name is None:
            logger.warning("CSV has no usable name column")
            return ParseResult.failure(NO_NAME_COLUMN_ERROR)

        items: List[ExtractedLineItem] = []
        for row_number, line in enumerate(lines[1:], start=2):
            values = split_csv_line(line, delimiter)
            item = self.parse_row(values, mapping)
            if item is None:
                logger.debug(f"Skipping CSV row {row_number}: no usable name")
                continue
            items.append(item)

        items = deduplicate_items(items)
        if items:
            logger.info(f"Extracted {len(items)} items from CSV")
        else:
            logger.warning("No valid items extracted from CSV")
        return ParseResult.from_items(items, empty_error=NO_ITEMS_ERROR)


def parse_csv(content: str, delimiter: str = ',', rules: BomRules = DEFAULT_RULES) -> ParseResult:
    """Extract BOM items from CSV text"""
    return CSVProcessor(rules).parse(content, delimiter)
