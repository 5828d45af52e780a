"""
BOM Extract: recover bill-of-materials line items from supplier documents
Reads CSV spreadsheets, labeled text exports and PDF text, and returns
normalized, typed line items.
"""

from .models import ItemType, ExtractedLineItem, ParseMetadata, ParseResult
from .rule_loader import RuleLoader, BomRules, DEFAULT_RULES
from .number_parser import parse_quantity
from .uom_normalizer import normalize_unit
from .name_hygiene import clean_material_name, detect_item_type
from .dedup import deduplicate_items
from .metadata_extractor import extract_metadata
from .concat_numbers import ConcatenatedNumbers, split_concatenated_numbers
from .csv_processor import CSVProcessor, parse_csv, sniff_delimiter
from .text_processor import TextProcessor, parse_bom_text
from .pdf_processor import PDFProcessor, parse_bom_from_pdf_text
from .format_detector import DocumentFormat, detect_format
from .main import parse_bom_document, process_files

__all__ = [
    'ItemType',
    'ExtractedLineItem',
    'ParseMetadata',
    'ParseResult',
    'RuleLoader',
    'BomRules',
    'DEFAULT_RULES',
    'parse_quantity',
    'normalize_unit',
    'clean_material_name',
    'detect_item_type',
    'deduplicate_items',
    'extract_metadata',
    'ConcatenatedNumbers',
    'split_concatenated_numbers',
    'CSVProcessor',
    'parse_csv',
    'sniff_delimiter',
    'TextProcessor',
    'parse_bom_text',
    'PDFProcessor',
    'parse_bom_from_pdf_text',
    'DocumentFormat',
    'detect_format',
    'parse_bom_document',
    'process_files',
]

__version__ = '0.1.0'
