import math
import unittest

import numpy as np

from tokenartisan.mask.contour_mask import extract_contour_mask, fill_polygon
from tokenartisan.raster.raster import Raster


def circle_raster(size: int, radius: int) -> Raster:
    raster = Raster(size, size)
    yy, xx = np.mgrid[0:size, 0:size]
    center = size / 2
    inside = (xx + 0.5 - center) ** 2 + (yy + 0.5 - center) ** 2 <= radius**2
    raster.pixels[inside] = (200, 30, 30, 255)
    return raster


class TestContourMask(unittest.TestCase):
    def test_opaque_source_gives_full_mask(self):
        source = Raster.from_color(8, 8, "#336699")
        mask = extract_contour_mask(source, density=8)
        self.assertEqual(mask.size, (8, 8))
        self.assertTrue((mask.alpha == 255).all())

    def test_transparent_source_gives_empty_mask(self):
        source = Raster(8, 8)
        source.pixels[..., :3] = 255
        mask = extract_contour_mask(source, density=8)
        self.assertEqual(mask.size, (8, 8))
        self.assertTrue((mask.alpha == 0).all())

    def test_mask_is_black(self):
        mask = extract_contour_mask(circle_raster(40, 15), density=40)
        self.assertFalse(mask.pixels[..., :3].any())

    def test_circle_area(self):
        mask = extract_contour_mask(circle_raster(100, 45), density=100)
        expected = math.pi * 45**2
        opaque = int((mask.alpha == 255).sum())
        self.assertLess(abs(opaque - expected), expected * 0.1)

    def test_ring_is_filled(self):
        source = circle_raster(60, 25)
        yy, xx = np.mgrid[0:60, 0:60]
        source.pixels[(xx + 0.5 - 30) ** 2 + (yy + 0.5 - 30) ** 2 <= 15**2] = 0
        mask = extract_contour_mask(source, density=60)
        self.assertEqual(mask.get_pixel(30, 30)[3], 255)
        self.assertEqual(mask.get_pixel(1, 1)[3], 0)

    def test_mask_follows_source_size(self):
        source = circle_raster(50, 20)
        mask = extract_contour_mask(source, density=25)
        self.assertEqual(mask.size, (50, 50))
        self.assertEqual(mask.get_pixel(25, 25)[3], 255)
        self.assertEqual(mask.get_pixel(0, 0)[3], 0)

    def test_semi_transparent_pixels_count_as_transparent(self):
        source = Raster(10, 10)
        source.pixels[...] = (0, 0, 0, 100)
        mask = extract_contour_mask(source, density=10)
        self.assertTrue((mask.alpha == 0).all())

    def test_only_the_first_outline_is_traced(self):
        source = Raster(40, 40)
        source.pixels[2:4, 2:4] = (0, 0, 0, 255)
        source.pixels[20:36, 20:36] = (0, 0, 0, 255)

        mask = extract_contour_mask(source, density=40)

        self.assertEqual(mask.get_pixel(27, 27)[3], 0)
        self.assertLess(int((mask.alpha > 0).sum()), 20)

    def test_fill_polygon_covers_square(self):
        stencil = fill_polygon(6, [(2, 2), (2, 4), (4, 4), (4, 2)])
        self.assertEqual(stencil[2, 2], 255)
        self.assertEqual(stencil[3, 3], 255)
        self.assertEqual(stencil[0, 0], 0)
        self.assertEqual(stencil[5, 5], 0)
