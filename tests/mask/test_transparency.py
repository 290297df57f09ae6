import unittest

import numpy as np

from tokenartisan.mask.transparency import apply_transparent_colors
from tokenartisan.raster.color import Color
from tokenartisan.raster.raster import Raster


class TestTransparentColors(unittest.TestCase):
    def setUp(self):
        self.raster = Raster(4, 1)
        self.raster.pixels[0] = [
            (250, 250, 250, 255),
            (245, 255, 250, 255),
            (0, 128, 0, 255),
            (10, 120, 5, 255),
        ]

    def test_no_colors(self):
        before = self.raster.get_image_data()
        self.assertEqual(apply_transparent_colors(self.raster, []), 0)
        np.testing.assert_array_equal(self.raster.pixels, before)

    def test_neighbors_are_cleared(self):
        count = apply_transparent_colors(self.raster, [Color(255, 255, 255)])
        self.assertEqual(count, 2)
        self.assertEqual(self.raster.get_pixel(0, 0), (0, 0, 0, 0))
        self.assertEqual(self.raster.get_pixel(1, 0), (0, 0, 0, 0))
        self.assertEqual(self.raster.get_pixel(2, 0), (0, 128, 0, 255))

    def test_colors_are_applied_cumulatively(self):
        apply_transparent_colors(self.raster, [Color(255, 255, 255), Color(14, 115, 10)])
        self.assertFalse(self.raster.pixels[0, :2].any())
        self.assertEqual(self.raster.get_pixel(2, 0), (0, 128, 0, 255))
        self.assertEqual(self.raster.get_pixel(3, 0), (0, 0, 0, 0))

    def test_tolerance(self):
        count = apply_transparent_colors(self.raster, [Color(0, 128, 0)], tolerance=0)
        self.assertEqual(count, 1)
        self.assertEqual(self.raster.get_pixel(3, 0), (10, 120, 5, 255))

    def test_second_application_changes_nothing(self):
        color = Color(255, 255, 255)
        apply_transparent_colors(self.raster, [color])
        after_first = self.raster.get_image_data()
        apply_transparent_colors(self.raster, [color])
        np.testing.assert_array_equal(self.raster.pixels, after_first)

    def test_transparent_black_reference_is_stable(self):
        raster = Raster(2, 2)
        raster.pixels[0, 0] = (3, 3, 3, 5)
        color = Color(0, 0, 0, 0)
        apply_transparent_colors(raster, [color])
        after_first = raster.get_image_data()
        apply_transparent_colors(raster, [color])
        np.testing.assert_array_equal(raster.pixels, after_first)
        self.assertFalse(raster.pixels.any())

    def test_matches_are_symmetric(self):
        first = Color(10, 20, 30, 255)
        second = Color(18, 12, 30, 250)
        raster = Raster(1, 1)

        raster.put_pixel(0, 0, second.as_tuple())
        first_clears_second = apply_transparent_colors(raster, [first])
        raster.put_pixel(0, 0, first.as_tuple())
        second_clears_first = apply_transparent_colors(raster, [second])

        self.assertEqual(first_clears_second, 1)
        self.assertEqual(second_clears_first, 1)
