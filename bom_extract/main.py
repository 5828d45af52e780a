#!/usr/bin/env python3
"""
BOM Extract Main Entry Point

Reads every supported document in an input directory, routes it to the
matching extractor and writes the results.

Routing:
1. Format detection (suffix first, then content)
   - CSV/TSV      -> csv_processor (delimiter sniffed unless given)
   - PDF text     -> pdf_processor (text pulled with pdfplumber)
   - labeled text -> text_processor
2. Per-file JSON under <output>/json/
3. Standardized tables, review workbook and manifest under <output>/
"""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from concurrent.futures import ThreadPoolExecutor, as_completed

from .csv_processor import parse_csv, sniff_delimiter
from .format_detector import DocumentFormat, detect_format
from .logger import setup_logger
from .models import ParseResult
from .pdf_processor import parse_bom_from_pdf_text
from .rule_loader import BomRules, DEFAULT_RULES, RuleLoader
from .text_processor import parse_bom_text

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = ('.csv', '.tsv', '.txt', '.pdf')
NO_PDF_TEXT_ERROR = 'No extractable text found in PDF'


def parse_bom_document(text: str, source_name: Optional[str] = None,
                       delimiter: Optional[str] = None,
                       rules: BomRules = DEFAULT_RULES) -> ParseResult:
    """
    Parse one BOM document with the extractor its format calls for

    Never raises: unexpected extractor errors become a failed ParseResult.

    Args:
        text: Document text (CSV body, labeled export or PDF text)
        source_name: Original file name, used for suffix-based detection
        delimiter: CSV delimiter; sniffed from the header line when None
        rules: Rule tables to parse with

    Returns:
        ParseResult
    """
    try:
        doc_format = detect_format(text or '', source_name)
        logger.debug(f"Parsing {source_name or 'document'} as {doc_format.value}")

        if doc_format == DocumentFormat.CSV:
            if delimiter is None:
                delimiter = sniff_delimiter(text or '')
            return parse_csv(text or '', delimiter, rules)
        if doc_format == DocumentFormat.PDF_TEXT:
            return parse_bom_from_pdf_text(text or '', rules)
        return parse_bom_text(text or '', rules)
    except Exception as e:
        logger.error(f"Error parsing {source_name or 'document'}: {e}", exc_info=True)
        return ParseResult.failure(f"Unexpected error while parsing BOM: {e}")


def find_input_files(input_dir: Path) -> List[Path]:
    """All supported files under input_dir, sorted by path"""
    return sorted(
        p for p in Path(input_dir).rglob('*')
        if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES
    )


def process_file(file_path: Path, delimiter: Optional[str] = None,
                 rules: BomRules = DEFAULT_RULES) -> ParseResult:
    """
    Read and parse a single file

    Args:
        file_path: Path to a CSV, TSV, TXT or PDF file
        delimiter: CSV delimiter override
        rules: Rule tables to parse with

    Returns:
        ParseResult; read errors are returned as failures
    """
    # pdfplumber is only needed once files are read from disk
    from .utils.text_extractor import TextExtractor

    try:
        text = TextExtractor().extract_text(file_path)
    except Exception as e:
        logger.error(f"Error reading {file_path.name}: {e}", exc_info=True)
        return ParseResult.failure(f"Could not read file: {e}")

    if text is None:
        return ParseResult.failure(NO_PDF_TEXT_ERROR)
    return parse_bom_document(text, source_name=file_path.name, delimiter=delimiter, rules=rules)


def _write_json(result: ParseResult, source_file: str, output_file: Path) -> None:
    data = result.to_dict()
    data['source_file'] = source_file
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)


def process_files(
    input_dir: Path,
    output_base_dir: Path,
    use_threads: bool = False,
    max_workers: int = 4,
    delimiter: Optional[str] = None,
    rules: BomRules = DEFAULT_RULES,
) -> Dict[str, ParseResult]:
    """
    Main processing function

    Args:
        input_dir: Directory containing BOM documents
        output_base_dir: Base output directory (json/, tables/ and manifest.json are created here)
        use_threads: If True, process files in parallel using ThreadPoolExecutor (default: False)
        max_workers: Maximum number of parallel workers (default: 4)
        delimiter: CSV delimiter override; sniffed per file when None
        rules: Rule tables to parse with

    Returns:
        Dictionary of source file (relative to input_dir) -> ParseResult
    """
    input_dir = Path(input_dir)
    output_base_dir = Path(output_base_dir)

    files = find_input_files(input_dir)
    logger.info(f"Found {len(files)} BOM files in {input_dir}")

    json_dir = output_base_dir / 'json'

    def process_one(file_path: Path) -> Tuple[str, ParseResult]:
        """Parse one file and save its JSON"""
        source_file = str(file_path.relative_to(input_dir))
        logger.info(f"Processing: {source_file}")
        result = process_file(file_path, delimiter=delimiter, rules=rules)

        if result.success:
            logger.info(f"  ✓ Extracted {len(result.items)} items")
        else:
            logger.warning(f"  ✗ {file_path.name}: {'; '.join(result.errors)}")

        _write_json(result, source_file, json_dir / f"{file_path.stem}.json")
        return source_file, result

    results: Dict[str, ParseResult] = {}
    if use_threads and len(files) > 1:
        logger.info(f"Using parallel processing with {max_workers} workers for {len(files)} files")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(process_one, file_path): file_path for file_path in files}
            for future in as_completed(futures):
                source_file, result = future.result()
                results[source_file] = result
    else:
        if use_threads:
            logger.debug("Only 1 file to process, using sequential processing")
        for file_path in files:
            source_file, result = process_one(file_path)
            results[source_file] = result

    # Keep output ordering stable regardless of completion order
    results = dict(sorted(results.items()))

    from .standardized_output import create_standardized_output
    create_standardized_output(results, output_base_dir)

    succeeded = sum(1 for r in results.values() if r.success)
    logger.info(f"Done: {succeeded}/{len(results)} files parsed successfully")
    return results


def main() -> None:
    """Main entry point for bom_extract"""
    import argparse

    try:
        import config
    except ImportError:
        config = None

    parser = argparse.ArgumentParser(
        description='Extract bill-of-materials line items from CSV, text and PDF files',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        'input_dir',
        type=str,
        nargs='?',
        default=getattr(config, 'INPUT_DIR', None),
        help='Input directory containing BOM documents'
    )
    parser.add_argument(
        'output_dir',
        type=str,
        nargs='?',
        default=getattr(config, 'OUTPUT_DIR', 'output'),
        help='Output directory (default: output)'
    )
    parser.add_argument(
        '--rules-dir',
        type=str,
        default=getattr(config, 'BOM_RULES_DIR', None),
        help='Directory containing shared.yaml (default: packaged rules)'
    )
    parser.add_argument(
        '--delimiter',
        type=str,
        default=getattr(config, 'DEFAULT_DELIMITER', None),
        help='CSV delimiter (default: sniffed from the header line)'
    )
    parser.add_argument(
        '--use-threads',
        action='store_true',
        help='Process files in parallel using ThreadPoolExecutor (default: False)'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=getattr(config, 'LOG_LEVEL', 'INFO'),
        help='Logging level (default: INFO)'
    )

    args = parser.parse_args()
    if not args.input_dir:
        parser.error('input_dir is required')

    input_dir = Path(args.input_dir)
    output_dir = Path(args.output_dir)
    setup_logger(log_level=args.log_level, log_dir=output_dir / 'logs')

    rules = RuleLoader(args.rules_dir).build_rules() if args.rules_dir else DEFAULT_RULES
    default_unit = getattr(config, 'DEFAULT_TABLE_UNIT', None)
    if default_unit and default_unit != rules.default_table_unit:
        rules = replace(rules, default_table_unit=default_unit)
    max_workers = getattr(config, 'MAX_WORKERS', 4)

    logger.info(f"Input directory: {input_dir}")
    logger.info(f"Output directory: {output_dir}")
    logger.info(f"Rules directory: {args.rules_dir or 'packaged'}")
    logger.info(f"Use threads: {args.use_threads}")

    process_files(
        input_dir,
        output_dir,
        use_threads=args.use_threads,
        max_workers=max_workers,
        delimiter=args.delimiter,
        rules=rules,
    )


if __name__ == "__main__":
    main()
