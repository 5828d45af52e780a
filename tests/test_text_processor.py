#!/usr/bin/env python3
"""
Text Processor Tests: labeled free-text BOM exports
"""

import unittest

from bom_extract.metadata_extractor import extract_metadata
from bom_extract.models import ItemType
from bom_extract.text_processor import NO_ITEMS_ERROR, TextProcessor, parse_bom_text


SAMPLE_EXPORT = """
Bill of Materials
Product Code: BOM-0042 Created Date: 14/03/2024
Product Description: Valerian Night Tincture 50ml
Component Product Units Quantity Wastage Unit Cost Total Cost
[BABS GVAL003] N04 Valerian Extract KG 0.0008 0.0000 75.3356 0.06
Sugar Syrup 1.2000 0.0000 0.5500 0.66
 - [PKG010] Amber Glass Dropper Bottle EA 1.0000 0.0000 0.4200 0.42
Total Value: 1,234.56
Page 1 of 1
"""


class TestParseBomText(unittest.TestCase):
    """parse_bom_text over a full export"""

    @classmethod
    def setUpClass(cls):
        cls.result = parse_bom_text(SAMPLE_EXPORT)

    def test_success(self):
        self.assertTrue(self.result.success)
        self.assertEqual(
            [i.clean_name for i in self.result.items],
            ['N04 Valerian Extract', 'Sugar Syrup', 'Amber Glass Dropper Bottle'],
        )

    def test_coded_line_with_unit(self):
        item = self.result.items[0]
        self.assertEqual(item.raw_name, '[BABS GVAL003] N04 Valerian Extract')
        self.assertEqual(item.unit, 'kg')
        self.assertEqual(item.quantity, 0.0008)
        self.assertEqual(item.unit_cost, 75.3356)
        self.assertEqual(item.total_cost, 0.06)
        self.assertEqual(item.item_type, ItemType.INGREDIENT)

    def test_plain_line_without_unit(self):
        item = self.result.items[1]
        self.assertIsNone(item.unit)
        self.assertEqual(item.quantity, 1.2)
        self.assertEqual(item.unit_cost, 0.55)
        self.assertEqual(item.total_cost, 0.66)

    def test_dash_prefixed_packaging_line(self):
        item = self.result.items[2]
        self.assertEqual(item.unit, 'unit')
        self.assertEqual(item.item_type, ItemType.PACKAGING)

    def test_metadata(self):
        metadata = self.result.metadata
        self.assertEqual(metadata.product_code, 'BOM-0042')
        self.assertEqual(metadata.product_description, 'Valerian Night Tincture 50ml')
        self.assertEqual(metadata.total_value, 1234.56)
        self.assertEqual(metadata.created_date, '14/03/2024')


class TestTextProcessorLines(unittest.TestCase):

    def setUp(self):
        self.processor = TextProcessor()

    def test_single_line(self):
        result = parse_bom_text('[BABS GVAL003] N04 Valerian Extract KG 0.0008 0.0000 75.3356 0.06')
        self.assertTrue(result.success)
        self.assertEqual(len(result.items), 1)
        self.assertEqual(result.items[0].clean_name, 'N04 Valerian Extract')

    def test_junk_names_rejected(self):
        self.assertIsNone(self.processor.parse_line('Grand TOTAL 1.0000 0.0000 2.0000 2.00'))
        self.assertIsNone(self.processor.parse_line('Page 2 1.0000 0.0000 2.0000 2.00'))
        self.assertIsNone(self.processor.parse_line('ab 1.0000 0.0000 2.0000 2.00'))

    def test_header_lines(self):
        self.assertTrue(self.processor.is_header_line('Component Product Units Wastage'))
        self.assertFalse(self.processor.is_header_line('Sugar Syrup 1.2 0 0.55 0.66'))

    def test_line_without_four_numbers(self):
        self.assertIsNone(self.processor.parse_line('Sugar Syrup 1.2 0.55'))

    def test_thousands_in_columns(self):
        item = self.processor.parse_line('Ethanol 96% L 1,200.0000 0.0000 1.1000 1,320.00')
        self.assertEqual(item.clean_name, 'Ethanol 96%')
        self.assertEqual(item.unit, 'L')
        self.assertEqual(item.quantity, 1200.0)
        self.assertEqual(item.total_cost, 1320.0)

    def test_no_items(self):
        result = parse_bom_text('Bill of Materials\nnothing to see here')
        self.assertFalse(result.success)
        self.assertEqual(result.errors, (NO_ITEMS_ERROR,))

    def test_empty_text(self):
        result = parse_bom_text('')
        self.assertFalse(result.success)
        self.assertEqual(result.errors, (NO_ITEMS_ERROR,))


class TestExtractMetadata(unittest.TestCase):

    def test_last_value_wins(self):
        metadata = extract_metadata(['Total Value: 10.00', 'Total Value: 12.50'])
        self.assertEqual(metadata.total_value, 12.5)

    def test_nothing_found(self):
        metadata = extract_metadata(['no labels here'])
        self.assertIsNone(metadata.product_code)
        self.assertEqual(metadata.to_dict(), {})


if __name__ == '__main__':
    unittest.main()
