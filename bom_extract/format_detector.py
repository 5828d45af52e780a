#!/usr/bin/env python3
"""
Format Detector - Decide which extractor a BOM document needs

Detection order:
1. File suffix when known (.csv/.tsv -> CSV, .pdf -> PDF text)
2. Content: a concatenated number run line -> PDF text
3. Content: a delimited header row with a name column and a numeric column -> CSV
4. Otherwise free text
"""

import re
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from .csv_processor import detect_column_mapping, sniff_delimiter, split_csv_line
from .utils.line_filter import clean_lines

logger = logging.getLogger(__name__)

# Leading run with at least four decimal points, e.g. "0.0675.33560.00000.0008KG"
CONCATENATED_RUN_RX = re.compile(r'^[\d,]*(?:\.[\d,]*){4,}')

SUFFIX_FORMATS = {
    '.csv': 'csv',
    '.tsv': 'csv',
    '.pdf': 'pdf_text',
}


class DocumentFormat(str, Enum):
    CSV = 'csv'
    PDF_TEXT = 'pdf_text'
    FREE_TEXT = 'free_text'


def _looks_like_pdf_table(lines) -> bool:
    return any(CONCATENATED_RUN_RX.match(line) and line[0].isdigit() for line in lines)


def _looks_like_csv(lines) -> bool:
    if len(lines) < 2:
        return False
    delimiter = sniff_delimiter(lines[0])
    headers = split_csv_line(lines[0], delimiter)
    if len(headers) < 2:
        return False
    mapping = detect_column_mapping(headers)
    has_numeric_column = any(
        col is not None for col in (mapping.quantity, mapping.unit_cost, mapping.total_cost)
    )
    return mapping.name_from_header and has_numeric_column


def detect_format(text: str, source_name: Optional[str] = None) -> DocumentFormat:
    """
    Detect the document format

    Args:
        text: Document text
        source_name: Original file name, if any

    Returns:
        DocumentFormat
    """
    if source_name:
        suffix = Path(source_name).suffix.lower()
        if suffix in SUFFIX_FORMATS:
            detected = DocumentFormat(SUFFIX_FORMATS[suffix])
            logger.debug(f"Format of {source_name} from suffix: {detected.value}")
            return detected

    lines = clean_lines(text)
    if _looks_like_pdf_table(lines):
        detected = DocumentFormat.PDF_TEXT
    elif _looks_like_csv(lines):
        detected = DocumentFormat.CSV
    else:
        detected = DocumentFormat.FREE_TEXT

    logger.debug(f"Format of {source_name or 'document'} from content: {detected.value}")
    return detected
