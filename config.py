#!/usr/bin/env python3
"""
Configuration file for BOM Extract
Edit these values to match your folder layout
"""

# Folder Structure
# Input: supplier BOM documents (CSV, TSV, TXT exports, PDF)
# Output: per-file JSON (json/), review tables (tables/), manifest.json, logs/
INPUT_DIR = 'data/bom_input'
OUTPUT_DIR = 'data/bom_output'

# Rule files directory (shared.yaml)
# None uses the rules packaged with bom_extract; the BOM_EXTRACT_RULES_DIR
# environment variable overrides the packaged rules at import time
BOM_RULES_DIR = None

# PDF Settings
# Unit used for PDF table rows that print no unit token
DEFAULT_TABLE_UNIT = 'kg'

# CSV Settings
# None sniffs the delimiter from each file's header line (',', ';', tab, '|')
DEFAULT_DELIMITER = None

# Parallel Processing
# Used when running with --use-threads; each file is parsed independently
MAX_WORKERS = 4

# Logging
LOG_LEVEL = 'INFO'
