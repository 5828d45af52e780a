#!/usr/bin/env python3
"""
Tests for unit token normalization
"""

import pytest

from bom_extract.uom_normalizer import normalize_unit


class TestNormalizeUnit:
    """Unit synonyms map to canonical units"""

    @pytest.mark.parametrize('token,expected', [
        ('KG', 'kg'),
        ('kg', 'kg'),
        ('G', 'g'),
        ('l', 'L'),
        ('mL', 'ml'),
        ('ML', 'ml'),
        ('EA', 'unit'),
        ('each', 'unit'),
        ('pcs', 'unit'),
        ('units', 'unit'),
    ])
    def test_known_tokens(self, token, expected):
        assert normalize_unit(token) == expected

    def test_whitespace_trimmed(self):
        assert normalize_unit('  KG ') == 'kg'

    def test_case_insensitive_fallback(self):
        """Tokens not listed verbatim fall back to their lowercase form"""
        assert normalize_unit('Kg') == 'kg'
        assert normalize_unit('PCS') == 'unit'

    def test_unknown_token_lowercased(self):
        assert normalize_unit('Drum') == 'drum'

    def test_blank_is_none(self):
        assert normalize_unit(None) is None
        assert normalize_unit('') is None
        assert normalize_unit('   ') is None

    @pytest.mark.parametrize('token', ['KG', 'l', 'L', 'mL', 'EA', 'Pcs', 'Drum', 'M'])
    def test_idempotent(self, token):
        once = normalize_unit(token)
        assert normalize_unit(once) == once
