import os
import tempfile
import unittest

import numpy as np
from PIL import Image

from tokenartisan.raster.raster import Raster
from tokenartisan.utilities.image.operations import load_image, merge_rasters, save_raster


class TestOperations(unittest.TestCase):
    def test_merge_rasters_bottom_up(self):
        bottom = Raster.from_color(2, 2, "#ff0000")
        top = Raster(2, 2)
        top.put_pixel(0, 0, (0, 0, 255, 255))

        merged = merge_rasters([bottom, top], 2, 2)

        self.assertEqual(merged.get_pixel(0, 0), (0, 0, 255, 255))
        self.assertEqual(merged.get_pixel(1, 1), (255, 0, 0, 255))

    def test_merge_nothing(self):
        merged = merge_rasters([], 3, 2)
        self.assertEqual(merged.size, (3, 2))
        self.assertTrue(merged.is_completely_transparent(0))

    def test_save_and_load(self):
        raster = Raster(3, 2)
        raster.put_pixel(2, 1, (10, 20, 30, 255))

        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "token.png")
            save_raster(raster, path)
            loaded = load_image(path)

        self.assertEqual(loaded.size, (3, 2))
        np.testing.assert_array_equal(loaded.pixels, raster.pixels)

    def test_load_converts_to_rgba(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, "token.png")
            Image.new("RGB", (2, 2), (1, 2, 3)).save(path)
            loaded = load_image(path)

        self.assertEqual(loaded.get_pixel(1, 1), (1, 2, 3, 255))
