#!/usr/bin/env python3
"""
PDF Processor Tests
Text as it comes out of pdfplumber for BOM tables: concatenated number runs,
wrapped names, header/footer noise, and the fallback passes.
"""

import unittest

from bom_extract.models import ItemType
from bom_extract.pdf_processor import (
    NO_ITEMS_ERROR,
    LineClassifier,
    LineShape,
    PDFProcessor,
    parse_bom_from_pdf_text,
)


PDF_TEXT = """Beyond Alcohol Ltd
Acklam Road
London W10 5QZ
Bill of Materials
Product Code: BOM-0042
Product Description: Valerian Night Tincture
Total Cost Unit Cost Wastage Quantity Component Product
0.0675.33560.00000.0008KG  -  [BABS GVAL003] N04 Valerian
Extract
0.08333.29750.00000.0003  -  [Hop Extract] Hop Oil
1.2345.67890.00001.5000EA
-  [PKG001] Amber Glass Bottle 500ml
with cap
Total Value: 1.37
Created Date: 14/03/2024
www.beyondalcohol.com
Page 1 of 1
"""


class TestLineClassifier(unittest.TestCase):

    def setUp(self):
        self.classifier = LineClassifier()

    def test_same_line_with_unit(self):
        match = self.classifier.classify('0.0675.33560.00000.0008KG  -  [BABS GVAL003] N04 Valerian')
        self.assertEqual(match.shape, LineShape.SAME_LINE_WITH_UNIT)
        self.assertEqual(match.run, '0.0675.33560.00000.0008')
        self.assertEqual(match.unit, 'KG')
        self.assertEqual(match.code, 'BABS GVAL003')
        self.assertEqual(match.name, 'N04 Valerian')

    def test_same_line_no_unit(self):
        match = self.classifier.classify('0.08333.29750.00000.0003  -  [Hop Extract] Hop Oil')
        self.assertEqual(match.shape, LineShape.SAME_LINE_NO_UNIT)
        self.assertIsNone(match.unit)
        self.assertEqual(match.code, 'Hop Extract')

    def test_numbers_only(self):
        match = self.classifier.classify('1.2345.67890.00001.5000EA')
        self.assertEqual(match.shape, LineShape.NUMBERS_ONLY)
        self.assertEqual(match.unit, 'EA')
        match = self.classifier.classify('1.2345.67890.00001.5000')
        self.assertEqual(match.shape, LineShape.NUMBERS_ONLY)
        self.assertIsNone(match.unit)

    def test_other_lines(self):
        self.assertIsNone(self.classifier.classify('Extract'))
        self.assertIsNone(self.classifier.classify('-  [PKG001] Amber Glass Bottle'))


class TestTabularPass(unittest.TestCase):
    """Concatenated-run tables"""

    @classmethod
    def setUpClass(cls):
        cls.result = parse_bom_from_pdf_text(PDF_TEXT)

    def test_items(self):
        self.assertTrue(self.result.success)
        self.assertEqual(
            [i.clean_name for i in self.result.items],
            ['N04 Valerian Extract', 'Hop Oil', 'Amber Glass Bottle 500ml with cap'],
        )

    def test_same_line_with_wrapped_name(self):
        item = self.result.items[0]
        self.assertEqual(item.raw_name, '[BABS GVAL003] N04 Valerian Extract')
        self.assertEqual(item.unit, 'kg')
        self.assertAlmostEqual(item.total_cost, 0.06)
        self.assertAlmostEqual(item.unit_cost, 75.3356)
        self.assertAlmostEqual(item.quantity, 0.0008)

    def test_missing_unit_defaults_to_kg(self):
        item = self.result.items[1]
        self.assertEqual(item.unit, 'kg')
        self.assertAlmostEqual(item.total_cost, 0.08)
        self.assertAlmostEqual(item.unit_cost, 333.2975)
        self.assertAlmostEqual(item.quantity, 0.0003)

    def test_numbers_only_row_with_multiline_name(self):
        item = self.result.items[2]
        self.assertEqual(item.unit, 'unit')
        self.assertEqual(item.item_type, ItemType.PACKAGING)
        self.assertAlmostEqual(item.quantity, 1.5)
        self.assertAlmostEqual(item.unit_cost, 45.6789)
        self.assertAlmostEqual(item.total_cost, 1.23)

    def test_metadata(self):
        self.assertEqual(self.result.metadata.product_code, 'BOM-0042')
        self.assertEqual(self.result.metadata.total_value, 1.37)
        self.assertEqual(self.result.metadata.created_date, '14/03/2024')

    def test_unsplittable_row_dropped(self):
        result = parse_bom_from_pdf_text(
            '1.2.3.4KG  -  [X1] Broken Row\n'
            '0.0675.33560.00000.0008KG  -  [BABS GVAL003] N04 Valerian Extract\n'
        )
        self.assertEqual([i.clean_name for i in result.items], ['N04 Valerian Extract'])


class TestFallbacks(unittest.TestCase):
    """Text the tabular pass cannot read"""

    def setUp(self):
        self.processor = PDFProcessor()

    def test_bracket_blocks(self):
        text = (
            '[ING001] Lemon Juice KG 0.5000 0.0000 2.0000 1.00\n'
            '[ING002] Orange Peel KG 0.2500 0.0000 1.2000 0.30\n'
        )
        result = self.processor.parse(text)
        self.assertTrue(result.success)
        self.assertEqual([i.clean_name for i in result.items], ['Lemon Juice', 'Orange Peel'])
        lemon = result.items[0]
        self.assertEqual(lemon.unit, 'kg')
        self.assertEqual(lemon.quantity, 0.5)
        self.assertEqual(lemon.unit_cost, 2.0)
        self.assertEqual(lemon.total_cost, 1.0)

    def test_bracket_block_page_noise_dropped(self):
        items = self.processor.parse_bracket_blocks('[1] Page 2\n[ING001] Lemon Juice')
        self.assertEqual([i.clean_name for i in items], ['Lemon Juice'])

    def test_line_pass(self):
        lines = [
            '[ING001] Lemon Juice',
            'KG 0.5000 0.0000 2.0000 1.00',
            'Page 1 of 2',
            '[ING002] Orange Peel',
            '0.2500 0.0000 1.2000 0.30',
        ]
        items = self.processor.parse_line_by_line(lines)
        self.assertEqual([i.clean_name for i in items], ['Lemon Juice', 'Orange Peel'])
        self.assertEqual(items[0].unit, 'kg')
        self.assertEqual(items[0].quantity, 0.5)
        self.assertEqual(items[0].total_cost, 1.0)
        self.assertIsNone(items[1].unit)
        self.assertEqual(items[1].unit_cost, 1.2)

    def test_line_pass_keeps_first_numbers(self):
        items = self.processor.parse_line_by_line([
            '[ING001] Lemon Juice',
            '0.5000 0.0000 2.0000 1.00',
            '9.0000 0.0000 9.0000 9.00',
        ])
        self.assertEqual(items[0].quantity, 0.5)

    def test_bracket_led_glued_runs(self):
        """Code-first rows with the number run glued at the end of the line"""
        text = (
            '[BABS GVAL003] N04 Valerian Extract 0.0675.33560.00000.0008KG\n'
            '[PKG1] Glass Bottle 1.2345.67890.00001.5000EA'
        )
        result = parse_bom_from_pdf_text(text)
        self.assertTrue(result.success)
        self.assertEqual([i.clean_name for i in result.items], ['N04 Valerian Extract', 'Glass Bottle'])

        valerian, bottle = result.items
        self.assertEqual(valerian.unit, 'kg')
        self.assertAlmostEqual(valerian.quantity, 0.0008)
        self.assertAlmostEqual(valerian.unit_cost, 75.3356)
        self.assertAlmostEqual(valerian.total_cost, 0.06)
        self.assertEqual(bottle.unit, 'unit')
        self.assertAlmostEqual(bottle.quantity, 1.5)
        self.assertAlmostEqual(bottle.unit_cost, 45.6789)
        self.assertAlmostEqual(bottle.total_cost, 1.23)

    def test_bracket_block_glued_run_without_unit(self):
        items = self.processor.parse_bracket_blocks('[HOP1] Hop Oil 0.08333.29750.00000.0003')
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].clean_name, 'Hop Oil')
        self.assertEqual(items[0].unit, 'kg')
        self.assertAlmostEqual(items[0].quantity, 0.0003)
        self.assertAlmostEqual(items[0].unit_cost, 333.2975)

    def test_line_pass_glued_numbers_line(self):
        items = self.processor.parse_line_by_line([
            '[ING001] Lemon Juice',
            '0.0675.33560.00000.0008KG',
            '[ING002] Orange Peel',
            '12.34.5',
        ])
        self.assertEqual([i.clean_name for i in items], ['Lemon Juice', 'Orange Peel'])
        self.assertEqual(items[0].unit, 'kg')
        self.assertAlmostEqual(items[0].quantity, 0.0008)
        self.assertAlmostEqual(items[0].unit_cost, 75.3356)
        self.assertAlmostEqual(items[0].total_cost, 0.06)
        self.assertIsNone(items[1].quantity)
        self.assertIsNone(items[1].unit)

    def test_nothing_found(self):
        result = parse_bom_from_pdf_text('Bill of Materials\nno components at all')
        self.assertFalse(result.success)
        self.assertEqual(result.items, ())
        self.assertEqual(result.errors, (NO_ITEMS_ERROR,))

    def test_empty_text(self):
        result = parse_bom_from_pdf_text('')
        self.assertFalse(result.success)
        self.assertEqual(result.errors, (NO_ITEMS_ERROR,))


if __name__ == '__main__':
    unittest.main()
