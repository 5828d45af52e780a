#!/usr/bin/env python3
"""
Standardized Output Module
Flattens parse results into line tables, a review workbook and a manifest
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from .models import ExtractedLineItem, ParseResult

logger = logging.getLogger(__name__)

LINE_COLUMNS = [
    'line_id', 'source_file',
    'product_code', 'product_description', 'created_date', 'total_value',
    'raw_name', 'clean_name', 'item_type',
    'quantity', 'unit', 'unit_cost', 'total_cost',
    'needs_review_reason',
]


def transform_item_to_line(source_file: str, result: ParseResult,
                           item: ExtractedLineItem, line_index: int) -> Dict[str, Any]:
    """
    Transform an item to match the CSV schema
    """
    line = {
        'line_id': f"{Path(source_file).stem}_{line_index:04d}",
        'source_file': source_file,
        'product_code': result.metadata.product_code,
        'product_description': result.metadata.product_description,
        'created_date': result.metadata.created_date,
        'total_value': result.metadata.total_value,
    }
    line.update(item.to_dict())
    line['needs_review_reason'] = ', '.join(f"missing {name}" for name in item.missing_fields)
    return line


def transform_all_results(results: Dict[str, ParseResult]) -> List[Dict[str, Any]]:
    """
    Transform all parse results to line-level data
    """
    all_lines = []
    for source_file, result in results.items():
        for idx, item in enumerate(result.items):
            all_lines.append(transform_item_to_line(source_file, result, item, idx))
    return all_lines


def create_standardized_output(results: Dict[str, ParseResult], output_base_dir: Path) -> Path:
    """
    Create standardized output under output_base_dir

    Writes tables/lines.csv, tables/needs_review.csv (when any line misses
    a field), tables/bom_review.xlsx and manifest.json.

    Args:
        results: Source file -> ParseResult
        output_base_dir: Base output directory

    Returns:
        Path to the output directory
    """
    output_dir = Path(output_base_dir)
    tables_dir = output_dir / 'tables'
    tables_dir.mkdir(parents=True, exist_ok=True)

    logger.info(f"Creating standardized output in: {output_dir}")

    all_lines = transform_all_results(results)
    df = pd.DataFrame(all_lines, columns=LINE_COLUMNS)

    lines_file = tables_dir / 'lines.csv'
    df.to_csv(lines_file, index=False)
    logger.info(f"Created {lines_file} with {len(df)} lines")

    needs_review = df[df['needs_review_reason'] != '']
    if len(needs_review) > 0:
        needs_review_file = tables_dir / 'needs_review.csv'
        needs_review.to_csv(needs_review_file, index=False)
        logger.info(f"Created {needs_review_file} with {len(needs_review)} lines needing review")

    failed_files = sorted(source for source, result in results.items() if not result.success)

    excel_file = _create_excel_export(df, needs_review, results, tables_dir)
    if excel_file:
        logger.info(f"Created Excel export: {excel_file}")

    manifest = {
        'created_at': datetime.now().isoformat(),
        'counters': {
            'files': len(results),
            'files_failed': len(failed_files),
            'total_lines': len(df),
            'needs_review': len(needs_review),
            'ingredients': int((df['item_type'] == 'ingredient').sum()),
            'packaging': int((df['item_type'] == 'packaging').sum()),
        },
        'failed_files': {source: list(results[source].errors) for source in failed_files},
    }

    manifest_file = output_dir / 'manifest.json'
    with open(manifest_file, 'w', encoding='utf-8') as f:
        json.dump(manifest, f, indent=2)
    logger.info(f"Created {manifest_file}")

    logger.info(f"✅ Standardized output complete: {output_dir}")
    return output_dir


def _create_excel_export(df: pd.DataFrame, needs_review: pd.DataFrame,
                         results: Dict[str, ParseResult], tables_dir: Path) -> Optional[Path]:
    """Create Excel export with one sheet per review view"""
    excel_file = tables_dir / 'bom_review.xlsx'

    try:
        with pd.ExcelWriter(excel_file, engine='openpyxl') as writer:
            # Sheet 1: All Lines (main data)
            df.to_excel(writer, sheet_name='All Lines', index=False)

            # Sheet 2: Lines with missing fields
            if len(needs_review) > 0:
                needs_review.to_excel(writer, sheet_name='Needs Review', index=False)
            else:
                pd.DataFrame(columns=df.columns).to_excel(writer, sheet_name='Needs Review', index=False)

            # Sheet 3: Summary Statistics
            summary_data = {
                'Metric': [
                    'Files',
                    'Files Failed',
                    'Total Lines',
                    'Lines Needing Review',
                    'Ingredient Lines',
                    'Packaging Lines',
                ],
                'Value': [
                    len(results),
                    sum(1 for r in results.values() if not r.success),
                    len(df),
                    len(needs_review),
                    int((df['item_type'] == 'ingredient').sum()),
                    int((df['item_type'] == 'packaging').sum()),
                ]
            }
            pd.DataFrame(summary_data).to_excel(writer, sheet_name='Summary', index=False)
    except Exception as e:
        logger.warning(f"Could not create Excel export: {e}", exc_info=True)
        return None

    _autosize_columns(excel_file)
    return excel_file


def _autosize_columns(excel_file: Path) -> None:
    """Widen each column to fit its longest value"""
    from openpyxl import load_workbook
    from openpyxl.utils import get_column_letter

    wb = load_workbook(excel_file)
    for ws in wb.worksheets:
        for col_idx, column in enumerate(ws.iter_cols(values_only=True), start=1):
            width = max((len(str(v)) for v in column if v is not None), default=8)
            ws.column_dimensions[get_column_letter(col_idx)].width = min(width + 2, 60)
        ws.freeze_panes = 'A2'
    wb.save(excel_file)
