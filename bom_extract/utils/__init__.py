"""
BOM Extract Utilities Module

Contains small helper modules for line filtering and PDF text extraction.
"""

from .line_filter import LineFilter, clean_lines

__all__ = ['LineFilter', 'clean_lines']
