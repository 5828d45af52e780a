#!/usr/bin/env python3
"""
Tests for clean-name deduplication
"""

import unittest

from bom_extract.dedup import deduplicate_items
from bom_extract.name_hygiene import build_line_item


class TestDeduplicateItems(unittest.TestCase):
    """First occurrence per case-insensitive clean name wins"""

    def setUp(self):
        self.items = [
            build_line_item('Sugar', quantity=1.0),
            build_line_item('sugar ', quantity=5.0),
            build_line_item('[ING2] Citric Acid', quantity=0.2),
            build_line_item('CITRIC ACID', quantity=0.9),
            build_line_item('Ab', quantity=3.0),
        ]

    def test_first_occurrence_kept(self):
        unique = deduplicate_items(self.items)
        self.assertEqual([i.clean_name for i in unique], ['Sugar', 'Citric Acid'])
        self.assertEqual(unique[0].quantity, 1.0, "Quantities must not be summed")
        self.assertEqual(unique[1].quantity, 0.2)

    def test_short_names_dropped(self):
        unique = deduplicate_items([build_line_item('Ab'), build_line_item('[X] Q')])
        self.assertEqual(unique, [])

    def test_idempotent_and_never_grows(self):
        once = deduplicate_items(self.items)
        twice = deduplicate_items(once)
        self.assertEqual(once, twice)
        self.assertLessEqual(len(once), len(self.items))

    def test_input_untouched(self):
        original = list(self.items)
        deduplicate_items(self.items)
        self.assertEqual(self.items, original)

    def test_empty(self):
        self.assertEqual(deduplicate_items([]), [])


if __name__ == '__main__':
    unittest.main()
