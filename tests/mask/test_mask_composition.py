import unittest

from tokenartisan.layers.layer import Layer
from tokenartisan.layers.layer_manager import LayerManager
from tokenartisan.mask.mask_composition import default_mask_ids, resolve_mask_providers
from tokenartisan.raster.composite import CompositeOperation


class TestMaskComposition(unittest.TestCase):
    def setUp(self):
        self.layer_manager = LayerManager(4, 4)
        self.layer_a = self.layer_manager.add_layer(Layer.from_color("#ff0000", 4, 4))
        self.layer_b = self.layer_manager.add_layer(Layer.from_color("#00ff00", 4, 4))
        self.layer_c = self.layer_manager.add_layer(Layer.from_color("#0000ff", 4, 4))
        self.layer_a.provides_mask = True
        self.layer_c.provides_mask = True

    def test_providers_above_apply(self):
        draws = resolve_mask_providers(self.layer_b, self.layer_manager)
        self.assertEqual([draw.layer_id for draw in draws], [self.layer_c.id])

    def test_default_mask_ids(self):
        self.assertEqual(default_mask_ids(self.layer_b, self.layer_manager), [self.layer_c.id])
        self.assertEqual(default_mask_ids(self.layer_a, self.layer_manager), [self.layer_c.id])
        self.assertEqual(default_mask_ids(self.layer_c, self.layer_manager), [])

    def test_top_layer_has_no_providers(self):
        self.assertEqual(resolve_mask_providers(self.layer_c, self.layer_manager), [])

    def test_no_stack(self):
        self.assertEqual(resolve_mask_providers(self.layer_b, None), [])
        self.assertEqual(default_mask_ids(self.layer_b, None), [])

    def test_operations_switch_after_first_mask(self):
        self.layer_b.provides_mask = True
        draws = resolve_mask_providers(self.layer_a, self.layer_manager)
        self.assertEqual([draw.layer_id for draw in draws], [self.layer_b.id, self.layer_c.id])
        self.assertEqual(draws[0].operation, CompositeOperation.SOURCE_OVER)
        self.assertEqual(draws[1].operation, CompositeOperation.SOURCE_IN)

    def test_uses_rendered_mask(self):
        draws = resolve_mask_providers(self.layer_b, self.layer_manager)
        self.assertIs(draws[0].mask, self.layer_c.rendered_mask)

    def test_custom_mask_layers_in_stack_order(self):
        self.layer_b.custom_mask_layers = True
        self.layer_b.applied_mask_ids = {self.layer_c.id, self.layer_a.id}
        draws = resolve_mask_providers(self.layer_b, self.layer_manager)
        self.assertEqual([draw.layer_id for draw in draws], [self.layer_a.id, self.layer_c.id])

    def test_custom_mask_layers_ignore_unknown_ids(self):
        self.layer_b.custom_mask_layers = True
        self.layer_b.applied_mask_ids = {"missing"}
        self.assertEqual(resolve_mask_providers(self.layer_b, self.layer_manager), [])

    def test_order_follows_moves(self):
        self.layer_manager.move_layer(self.layer_c.id, 0)
        self.assertEqual(resolve_mask_providers(self.layer_b, self.layer_manager), [])
        draws = resolve_mask_providers(self.layer_c, self.layer_manager)
        self.assertEqual([draw.layer_id for draw in draws], [self.layer_a.id])
