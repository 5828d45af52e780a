#!/usr/bin/env python3
"""
PDF Processor - Extract BOM line items from text recovered from PDF tables

Table rows come out of PDF text extraction in one of three shapes:

    SAME_LINE_WITH_UNIT   0.0675.33560.00000.0008KG  -  [BABS GVAL003] N04 Valerian
    SAME_LINE_NO_UNIT     0.08333.29750.00000.0003  -  [Hop Extract] Name
    NUMBERS_ONLY          0.0675.33560.00000.0008KG
                          -  [BABS GVAL003] N04 Valerian
                          Extract

Names may wrap onto following lines; they are stitched back until the next
row starts. Shapes are tried in the order above, first match wins.

If the tabular pass finds nothing, two fallbacks run and the larger result
is kept:
1. Bracket blocks: "[code] text" up to the next "[" or end of text
2. Line pass: a bracket-led line opens an item, a trailing numbers line fills it

Both fallbacks read a glued run ("0.0675.33560.00000.0008KG") with the
concatenated number splitter first, then whitespace-separated columns
("0.5000 0.0000 2.0000 1.00").
"""

import re
import logging
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple

from .concat_numbers import ConcatenatedNumbers, split_concatenated_numbers
from .dedup import deduplicate_items
from .metadata_extractor import extract_metadata
from .models import ExtractedLineItem, ParseResult
from .name_hygiene import build_line_item, clean_material_name
from .number_parser import parse_quantity
from .rule_loader import BomRules, DEFAULT_RULES
from .utils.line_filter import LineFilter, clean_lines

logger = logging.getLogger(__name__)

NO_ITEMS_ERROR = 'Could not extract any components from the PDF. The format may not be supported.'

RUN = r'([\d.,]+)'
NUMBER_COLUMNS = r'([\d.,]+)\s+([\d.,]+)\s+([\d.,]+)\s+([\d.,]+)'

# "  -  [" starts a new item even when no numbers precede it
DASH_BRACKET_RX = re.compile(r'^\s*-\s*\[')
CODE_NAME_RX = re.compile(r'^\s*-?\s*\[([^\]]+)\]\s*(.*)$')
BRACKET_BLOCK_RX = re.compile(r'\[([^\]]+)\]\s*([^\[]+?)(?=\[|\Z)')
NUMBER_TOKEN_RX = re.compile(r'[\d.,]+')


class LineShape(Enum):
    SAME_LINE_WITH_UNIT = 'same_line_with_unit'
    SAME_LINE_NO_UNIT = 'same_line_no_unit'
    NUMBERS_ONLY = 'numbers_only'


class LineMatch(NamedTuple):
    shape: LineShape
    run: str
    unit: Optional[str]
    code: Optional[str]
    name: str


def _alternation(tokens) -> str:
    return '|'.join(re.escape(t) for t in tokens)


class LineClassifier:
    """Match a line against the table-row shapes, in order"""

    def __init__(self, rules: BomRules = DEFAULT_RULES):
        units = _alternation(rules.table_unit_tokens)
        self.patterns: Dict[LineShape, re.Pattern] = {
            LineShape.SAME_LINE_WITH_UNIT: re.compile(
                rf'^{RUN}({units})\s*-\s*\[([^\]]+)\]\s*(.*)$', re.IGNORECASE),
            LineShape.SAME_LINE_NO_UNIT: re.compile(
                rf'^{RUN}\s+-\s+\[([^\]]+)\]\s*(.*)$', re.IGNORECASE),
            LineShape.NUMBERS_ONLY: re.compile(
                rf'^{RUN}({units})?$', re.IGNORECASE),
        }

    def classify(self, line: str) -> Optional[LineMatch]:
        for shape in LineShape:
            match = self.patterns[shape].match(line)
            if not match:
                continue
            if shape is LineShape.SAME_LINE_WITH_UNIT:
                run, unit, code, name = match.groups()
                return LineMatch(shape, run, unit, code.strip(), name.strip())
            if shape is LineShape.SAME_LINE_NO_UNIT:
                run, code, name = match.groups()
                return LineMatch(shape, run, None, code.strip(), name.strip())
            run, unit = match.groups()
            return LineMatch(shape, run, unit, None, '')
        return None


class PDFProcessor:
    """Extract BOM items from PDF text"""

    def __init__(self, rules: BomRules = DEFAULT_RULES):
        """
        Initialize PDF processor

        Args:
            rules: Rule tables (units, skip patterns, decimal places)
        """
        self.rules = rules
        self.classifier = LineClassifier(rules)
        self.line_filter = LineFilter(rules)
        units = _alternation(rules.text_unit_tokens)
        self.unit_word_rx = re.compile(rf'\b({units})\b', re.IGNORECASE)
        self.unit_split_rx = re.compile(rf'\s+(?:{units})\b', re.IGNORECASE)
        self.numbers_row_rx = re.compile(rf'^({units})?\s*{NUMBER_COLUMNS}$', re.IGNORECASE)
        self.number_columns_rx = re.compile(NUMBER_COLUMNS)
        table_units = _alternation(rules.table_unit_tokens)
        self.glued_tail_rx = re.compile(rf'(?:^|\s){RUN}({table_units})?$', re.IGNORECASE)
        self.glued_row_rx = re.compile(rf'^{RUN}({table_units})?$', re.IGNORECASE)

    def parse(self, pdf_text: str) -> ParseResult:
        """
        Parse PDF text into a ParseResult

        Args:
            pdf_text: Text already extracted from the PDF

        Returns:
            ParseResult; success when any strategy produced at least one item
        """
        lines = clean_lines(pdf_text)
        metadata = extract_metadata(lines)
        logger.debug(f"PDF text sample: {(pdf_text or '')[:1500]!r}")

        items = self.parse_table_rows(lines)
        if items:
            logger.info(f"Tabular pass extracted {len(items)} items")
            return ParseResult.from_items(items, metadata, NO_ITEMS_ERROR)

        block_items = self.parse_bracket_blocks(pdf_text or '')
        line_items = self.parse_line_by_line(clean_lines(pdf_text, keep_blank=True))
        if len(line_items) > len(block_items):
            logger.info(f"Using line pass: {len(line_items)} items (bracket blocks: {len(block_items)})")
            items = line_items
        else:
            logger.info(f"Using bracket blocks: {len(block_items)} items (line pass: {len(line_items)})")
            items = block_items

        items = deduplicate_items(items)
        if not items:
            logger.warning("No components extracted from PDF text")
        return ParseResult.from_items(items, metadata, NO_ITEMS_ERROR)

    # --- tabular pass -----------------------------------------------------

    def _is_row_start(self, line: str) -> bool:
        return self.classifier.classify(line) is not None or self.line_filter.is_skip_line(line)

    def _collect_name_lines(self, lines: List[str], start: int, stop_at_dash_bracket: bool) -> Tuple[List[str], int]:
        """Gather wrapped name lines from start until the next row begins"""
        name_lines: List[str] = []
        j = start
        while j < len(lines):
            next_line = lines[j]
            if self._is_row_start(next_line):
                break
            if stop_at_dash_bracket and DASH_BRACKET_RX.match(next_line):
                break
            name_lines.append(next_line)
            j += 1
        return name_lines, j

    def _build_row_item(self, run: str, code: str, name: str, unit: Optional[str]) -> Optional[ExtractedLineItem]:
        numbers = split_concatenated_numbers(run, self.rules.concatenated_decimal_places)
        if numbers is None:
            logger.debug(f"Dropping row '[{code}] {name}': could not split '{run}'")
            return None
        raw_name = f"[{code}] {name}".strip()
        # wastage is not part of the item
        return build_line_item(
            raw_name,
            quantity=numbers.quantity,
            unit=unit or self.rules.default_table_unit,
            unit_cost=numbers.unit_cost,
            total_cost=numbers.total_cost,
            rules=self.rules,
        )

    def parse_table_rows(self, lines: List[str]) -> List[ExtractedLineItem]:
        """
        Tabular pass over trimmed, non-blank lines

        Returns:
            Deduplicated items
        """
        items: List[ExtractedLineItem] = []
        i = 0
        while i < len(lines):
            line = lines[i]

            if self.line_filter.is_skip_line(line):
                i += 1
                continue

            row = self.classifier.classify(line)
            if row is None:
                i += 1
                continue

            if row.shape is LineShape.NUMBERS_ONLY:
                name_lines, j = self._collect_name_lines(lines, i + 1, stop_at_dash_bracket=False)
                code_name = CODE_NAME_RX.match(' '.join(name_lines).strip()) if name_lines else None
                if code_name:
                    item = self._build_row_item(row.run, code_name.group(1).strip(),
                                                code_name.group(2).strip(), row.unit)
                    if item:
                        items.append(item)
                elif name_lines:
                    logger.debug(f"Numbers line '{line}' not followed by a coded name")
            else:
                name_lines, j = self._collect_name_lines(lines, i + 1, stop_at_dash_bracket=True)
                name = ' '.join([row.name] + name_lines).strip()
                item = self._build_row_item(row.run, row.code, name, row.unit)
                if item:
                    items.append(item)

            i = j

        return deduplicate_items(items)

    # --- fallbacks --------------------------------------------------------

    def _split_glued_tail(self, text: str) -> Tuple[str, Optional[ConcatenatedNumbers], Optional[str]]:
        """
        Split a trailing glued number run off text

        Returns:
            (text before the run, split numbers, unit); numbers is None and the
            text is returned whole when the tail does not split into four columns
        """
        tail = self.glued_tail_rx.search(text)
        if not tail:
            return text, None, None
        numbers = split_concatenated_numbers(tail.group(1), self.rules.concatenated_decimal_places)
        if numbers is None:
            return text, None, None
        return text[:tail.start()].strip(), numbers, tail.group(2) or self.rules.default_table_unit

    def parse_bracket_blocks(self, pdf_text: str) -> List[ExtractedLineItem]:
        """Treat every "[code] text" block as one item"""
        items: List[ExtractedLineItem] = []
        for match in BRACKET_BLOCK_RX.finditer(pdf_text):
            code = match.group(1).strip()
            rest = match.group(2).strip()

            name_part, glued, glued_unit = self._split_glued_tail(rest)
            if glued is None:
                name_part = self.unit_split_rx.split(rest, maxsplit=1)[0]
            raw_name = f"[{code}] {name_part}".strip()
            clean_name = clean_material_name(raw_name)
            if len(clean_name) <= 2 or 'page' in clean_name.lower():
                continue

            if glued is not None:
                items.append(build_line_item(
                    raw_name,
                    quantity=glued.quantity,
                    unit=glued_unit,
                    unit_cost=glued.unit_cost,
                    total_cost=glued.total_cost,
                    rules=self.rules,
                ))
                continue

            numbers = self.number_columns_rx.search(rest)
            unit = self.unit_word_rx.search(rest)
            items.append(build_line_item(
                raw_name,
                quantity=parse_quantity(numbers.group(1)) if numbers else None,
                unit=unit.group(1) if unit else None,
                unit_cost=parse_quantity(numbers.group(3)) if numbers else None,
                total_cost=parse_quantity(numbers.group(4)) if numbers else None,
                rules=self.rules,
            ))
        return items

    def _is_line_pass_noise(self, line: str) -> bool:
        if any(token in line for token in self.rules.line_pass_ignore_tokens):
            return True
        line_lower = line.lower()
        return any(token in line_lower for token in self.rules.line_pass_ignore_tokens_ci)

    @staticmethod
    def _fill_from_glued(current: Dict, numbers: ConcatenatedNumbers, unit: str) -> None:
        current['quantity'] = numbers.quantity
        current['unit'] = unit
        current['unit_cost'] = numbers.unit_cost
        current['total_cost'] = numbers.total_cost

    def parse_line_by_line(self, lines: List[str]) -> List[ExtractedLineItem]:
        """Open an item on each bracket-led line; attach a following numbers-only line"""
        items: List[ExtractedLineItem] = []
        current: Optional[Dict] = None

        for line in lines:
            if self._is_line_pass_noise(line):
                continue

            bracket = re.match(r'^\s*-?\s*\[([^\]]+)\]\s*(.+)', line)
            if bracket:
                if current:
                    items.append(build_line_item(**current, rules=self.rules))
                rest, glued, glued_unit = self._split_glued_tail(bracket.group(2).strip())
                current = {
                    'raw_name': f"[{bracket.group(1)}] {rest}".strip(),
                    'quantity': None,
                    'unit': None,
                    'unit_cost': None,
                    'total_cost': None,
                }
                if glued is not None:
                    self._fill_from_glued(current, glued, glued_unit)
                    continue
                unit = self.unit_word_rx.search(rest)
                if unit:
                    current['unit'] = unit.group(1)
                numbers = NUMBER_TOKEN_RX.findall(rest)
                if len(numbers) >= 4:
                    current['quantity'] = parse_quantity(numbers[0])
                    current['unit_cost'] = parse_quantity(numbers[2])
                    current['total_cost'] = parse_quantity(numbers[3])

            if not current or current['quantity'] is not None:
                continue

            numbers_row = self.numbers_row_rx.match(line)
            if numbers_row:
                if numbers_row.group(1):
                    current['unit'] = numbers_row.group(1)
                current['quantity'] = parse_quantity(numbers_row.group(2))
                current['unit_cost'] = parse_quantity(numbers_row.group(4))
                current['total_cost'] = parse_quantity(numbers_row.group(5))
                continue

            glued_row = self.glued_row_rx.match(line.strip())
            if glued_row:
                glued = split_concatenated_numbers(glued_row.group(1), self.rules.concatenated_decimal_places)
                if glued is not None:
                    self._fill_from_glued(current, glued, glued_row.group(2) or self.rules.default_table_unit)

        if current:
            items.append(build_line_item(**current, rules=self.rules))
        return items


def parse_bom_from_pdf_text(pdf_text: str, rules: BomRules = DEFAULT_RULES) -> ParseResult:
    """Extract BOM items from text recovered from a PDF"""
    return PDFProcessor(rules).parse(pdf_text)
