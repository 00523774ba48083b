#
# QIS IIIF Image Core
#
# Document:      test_regions.py
# Date started:  19 Oct 2026
# By:            Quru Ltd
# Purpose:       Tests region and size parsing and geometry
# Requires:
# Copyright:     Quru Ltd (www.quru.com)
# Licence:
#
#   This program is free software: you can redistribute it and/or modify
#   it under the terms of the GNU Affero General Public License as published
#   by the Free Software Foundation, either version 3 of the License, or
#   (at your option) any later version.
#
#   This program is distributed in the hope that it will be useful,
#   but WITHOUT ANY WARRANTY; without even the implied warranty of
#   MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#   GNU Affero General Public License for more details.
#
#   You should have received a copy of the GNU Affero General Public License
#   along with this program.  If not, see http://www.gnu.org/licenses/
#
# Notable modifications:
# Date       By    Details
# =========  ====  ============================================================
#

import unittest

from . import tests as main_tests

from iiifimage.errors import InvalidAttributeError
from iiifimage.image_info import ImageInformation
from iiifimage.regions import (
    FULL_REGION, SQUARE_REGION, AbsoluteRegion, CropBox, PercentageRegion,
    decode_region, region_to_str, resolve_region,
    square_offsets
)
from iiifimage.sizes import (
    FULL_SIZE, AbsoluteSize, BestFitSize, PercentageSize,
    decode_size, preserves_aspect, size_to_str, target_dimensions
)


class RegionTests(main_tests.BaseTestCase):
    def test_decode_region(self):
        self.assertEqual(decode_region('full'), FULL_REGION)
        self.assertEqual(decode_region(None), FULL_REGION)
        self.assertEqual(decode_region('square'), SQUARE_REGION)
        self.assertEqual(decode_region('80,15,60,75'), AbsoluteRegion(80, 15, 60, 75))
        self.assertEqual(decode_region('pct:10,10,80,70'), PercentageRegion(10, 10, 80, 70))
        self.assertEqual(
            decode_region('pct:2.5,0,12.25,100'), PercentageRegion(2.5, 0, 12.25, 100)
        )

    def test_decode_region_types(self):
        self.assertIsInstance(decode_region('1,2,3,4').x, int)
        self.assertIsInstance(decode_region('pct:1,2,3,4').x, int)
        self.assertIsInstance(decode_region('pct:1.5,2,3,4').x, float)

    def test_invalid_regions(self):
        for region in [
            '', '150x75', 'FULL', 'Square', 'full ', '1,2,3', '1,2,3,4,5',
            '-1,2,3,4', '1.5,2,3,4', 'pct:1,2,3', 'pct:a,b,c,d', 'pct:-1,2,3,4',
            '10,10,0,10', '10,10,10,0', 'pct:10,10,0,10'
        ]:
            with self.assertRaises(InvalidAttributeError) as ctx:
                decode_region(region)
            self.assertEqual(ctx.exception.field, 'region')
            self.assertEqual(ctx.exception.raw_value, region)
            self.assertEqual(str(ctx.exception), 'Invalid region: ' + region)

    def test_zero_size_region(self):
        # A zero width or height is an error in the IIIF Image API
        for region in ['0,0,0,10', '0,0,10,0', 'pct:0,0,0,50', 'pct:0,0,50,0.0']:
            with self.assertRaises(InvalidAttributeError) as ctx:
                decode_region(region)
            self.assertEqual(ctx.exception.field, 'region')
        # Zero offsets are fine
        self.assertEqual(decode_region('0,0,10,10'), AbsoluteRegion(0, 0, 10, 10))

    def test_region_to_str(self):
        self.assertIsNone(region_to_str(FULL_REGION))
        self.assertEqual(region_to_str(SQUARE_REGION), 'square')
        self.assertEqual(region_to_str(AbsoluteRegion(80, 15, 60, 75)), '80,15,60,75')
        self.assertEqual(region_to_str(PercentageRegion(10.0, 2.5, 80, 70)), 'pct:10,2.5,80,70')
        self.assertRaises(TypeError, region_to_str, 'full')

    def test_square_offsets(self):
        self.assertEqual(square_offsets(ImageInformation(175, 131)), (131, 22, 0))
        self.assertEqual(square_offsets(ImageInformation(131, 175)), (131, 0, 22))
        self.assertEqual(square_offsets(ImageInformation(300, 300)), (300, 0, 0))

    def test_resolve_region(self):
        info = ImageInformation(175, 131)
        self.assertEqual(resolve_region(FULL_REGION, info), CropBox(0, 0, 175, 131))
        self.assertEqual(resolve_region(SQUARE_REGION, info), CropBox(22, 0, 131, 131))
        self.assertEqual(
            resolve_region(AbsoluteRegion(80, 15, 60, 75), info), CropBox(80, 15, 60, 75)
        )
        box = resolve_region(PercentageRegion(10, 10, 80, 70), info)
        self.assertEqual((box.x, box.y), (18, 13))
        self.assertAlmostEqual(box.width, 140.0)
        self.assertAlmostEqual(box.height, 91.7)

    def test_resolve_region_clipped(self):
        info = ImageInformation(175, 131)
        self.assertEqual(
            resolve_region(AbsoluteRegion(100, 100, 500, 500), info), CropBox(100, 100, 75, 31)
        )
        self.assertEqual(
            resolve_region(PercentageRegion(50, 0, 100, 100), info), CropBox(88, 0, 87, 131)
        )

    def test_resolve_region_outside(self):
        info = ImageInformation(175, 131)
        self.assertRaises(InvalidAttributeError, resolve_region, AbsoluteRegion(175, 0, 10, 10), info)
        self.assertRaises(InvalidAttributeError, resolve_region, AbsoluteRegion(0, 200, 10, 10), info)
        self.assertRaises(InvalidAttributeError, resolve_region, PercentageRegion(100, 0, 10, 10), info)


class SizeTests(main_tests.BaseTestCase):
    def test_decode_size(self):
        self.assertEqual(decode_size('full'), FULL_SIZE)
        self.assertEqual(decode_size(None), FULL_SIZE)
        self.assertEqual(decode_size(',50'), AbsoluteSize(None, 50))
        self.assertEqual(decode_size('50,'), AbsoluteSize(50, None))
        self.assertEqual(decode_size('150,75'), AbsoluteSize(150, 75))
        self.assertEqual(decode_size('!150,75'), BestFitSize(150, 75))
        self.assertEqual(decode_size('pct:50'), PercentageSize(50))
        self.assertEqual(decode_size('pct:12.5'), PercentageSize(12.5))

    def test_invalid_sizes(self):
        for size in [
            '', '150x75', 'Full', ',', '!150,', '!,75', 'pct:', 'pct:-5', 'pct:0',
            '0,', ',0', '0,75', '150,0', '!0,75', '1.5,', 'max'
        ]:
            with self.assertRaises(InvalidAttributeError) as ctx:
                decode_size(size)
            self.assertEqual(ctx.exception.field, 'size')
            self.assertEqual(str(ctx.exception), 'Invalid size: ' + size)

    def test_size_to_str(self):
        self.assertIsNone(size_to_str(FULL_SIZE))
        self.assertEqual(size_to_str(AbsoluteSize(None, 50)), ',50')
        self.assertEqual(size_to_str(AbsoluteSize(50, None)), '50,')
        self.assertEqual(size_to_str(AbsoluteSize(150, 75)), '150,75')
        self.assertEqual(size_to_str(BestFitSize(150, 75)), '!150,75')
        self.assertEqual(size_to_str(PercentageSize(50.0)), 'pct:50')
        self.assertEqual(size_to_str(PercentageSize(12.5)), 'pct:12.5')
        self.assertRaises(TypeError, size_to_str, None)

    def test_target_dimensions(self):
        info = ImageInformation(300, 200)
        self.assertEqual(target_dimensions(FULL_SIZE, info), (300, 200))
        self.assertEqual(target_dimensions(AbsoluteSize(150, None), info), (150, 100))
        self.assertEqual(target_dimensions(AbsoluteSize(None, 50), info), (75, 50))
        self.assertEqual(target_dimensions(AbsoluteSize(10, 10), info), (10, 10))
        self.assertEqual(target_dimensions(PercentageSize(25), info), (75, 50))
        self.assertEqual(target_dimensions(BestFitSize(100, 100), info), (100, 67))
        self.assertEqual(target_dimensions(PercentageSize(0.01), info), (1, 1))

    def test_preserves_aspect(self):
        info = ImageInformation(300, 300)
        self.assertTrue(preserves_aspect(FULL_SIZE, info))
        self.assertTrue(preserves_aspect(PercentageSize(20), info))
        self.assertTrue(preserves_aspect(BestFitSize(100, 50), info))
        self.assertTrue(preserves_aspect(AbsoluteSize(145, None), info))
        self.assertTrue(preserves_aspect(AbsoluteSize(145, 145), info))
        self.assertTrue(preserves_aspect(AbsoluteSize(145, 146), info))
        self.assertFalse(preserves_aspect(AbsoluteSize(100, 145), info))


if __name__ == '__main__':
    unittest.main()
