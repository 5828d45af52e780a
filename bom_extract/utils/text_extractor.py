#!/usr/bin/env python3
"""
Text Extractor - Read BOM source files into text
PDF pages are extracted with pdfplumber; CSV/TXT files are decoded directly
"""

import logging
from pathlib import Path
from typing import Optional

import pdfplumber

logger = logging.getLogger(__name__)

TEXT_ENCODINGS = ('utf-8-sig', 'cp1252')


class TextExtractor:
    """Extract text from BOM source files without OCR"""

    def __init__(self, threshold: int = 20):
        """
        Initialize text extractor

        Args:
            threshold: Minimum character count for PDF text to count as extracted (default: 20)
        """
        self.threshold = threshold

    def extract_text(self, file_path: Path) -> Optional[str]:
        """
        Extract text from a PDF, CSV or text file

        Args:
            file_path: Path to the file

        Returns:
            Text, or None when a PDF has no usable text layer (scanned image)
        """
        file_path = Path(file_path)
        if file_path.suffix.lower() == '.pdf':
            text = self._extract_with_pdfplumber(file_path)
            if not self._is_valid_text(text):
                logger.warning(f"No usable text layer in {file_path.name} ({len(text.strip())} chars)")
                return None
            logger.debug(f"Extracted text using pdfplumber ({len(text)} chars)")
            return text
        return self._read_text_file(file_path)

    def _extract_with_pdfplumber(self, pdf_path: Path) -> str:
        """Extract text using pdfplumber, one page per block"""
        pages = []
        with pdfplumber.open(pdf_path) as pdf:
            for page_num, page in enumerate(pdf.pages, start=1):
                page_text = page.extract_text() or ''
                logger.debug(f"  - Page {page_num}: {len(page_text)} chars")
                pages.append(page_text)
        return '\n'.join(pages)

    def _read_text_file(self, file_path: Path) -> str:
        """Decode a text file, trying common spreadsheet export encodings"""
        data = file_path.read_bytes()
        for encoding in TEXT_ENCODINGS:
            try:
                return data.decode(encoding)
            except UnicodeDecodeError:
                logger.debug(f"{file_path.name} is not {encoding}")
        # latin-1 decodes any byte sequence
        return data.decode('latin-1')

    def _is_valid_text(self, text: Optional[str]) -> bool:
        if not text:
            return False
        return len(text.strip()) >= self.threshold
