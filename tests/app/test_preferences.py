import os
import tempfile
import unittest

from PyQt6.QtCore import QSettings

from tokenartisan.app.preferences import LayerPreferences, load_preferences
from tokenartisan.constants import MASK_DENSITY, NEIGHBOR_TOLERANCE, TRANSPARENCY_THRESHOLD
from tokenartisan.raster.color import Color


class TestLayerPreferences(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.settings = QSettings(os.path.join(self.temp_dir.name, "settings.ini"), QSettings.Format.IniFormat)

    def tearDown(self):
        del self.settings
        self.temp_dir.cleanup()

    def test_defaults(self):
        preferences = LayerPreferences()
        self.assertFalse(preferences.crop_to_fit)
        self.assertFalse(preferences.use_ray_cast_mask)
        self.assertIsNone(preferences.mask_preview_fill)
        self.assertEqual(preferences.mask_density, MASK_DENSITY)
        self.assertEqual(preferences.transparency_threshold, TRANSPARENCY_THRESHOLD)
        self.assertEqual(preferences.neighbor_tolerance, NEIGHBOR_TOLERANCE)

    def test_preview_fill_is_converted(self):
        preferences = LayerPreferences(mask_preview_fill="#00ff00")
        self.assertEqual(preferences.mask_preview_fill, Color(0, 255, 0))
        self.assertIsNone(LayerPreferences(mask_preview_fill="").mask_preview_fill)

    def test_load_empty_settings(self):
        self.assertEqual(load_preferences(self.settings), LayerPreferences())

    def test_load_settings(self):
        self.settings.setValue("default-crop-image", True)
        self.settings.setValue("default-algorithm", True)
        self.settings.setValue("default-color", "#336699")
        self.settings.sync()

        preferences = load_preferences(self.settings)

        self.assertTrue(preferences.crop_to_fit)
        self.assertTrue(preferences.use_ray_cast_mask)
        self.assertEqual(preferences.mask_preview_fill, Color(0x33, 0x66, 0x99))
