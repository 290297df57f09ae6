import logging
from typing import Optional

from tokenartisan.layers.layer import Layer
from tokenartisan.raster.raster import Raster
from tokenartisan.utilities.image.operations import merge_rasters


class LayerManager:
    """Ordered stack of layers, order 0 is the bottom of the token."""

    def __init__(self, width: int, height: int):
        self.logger = logging.getLogger()
        self.width = width
        self.height = height
        self.layers = []

    def shift_order(self, order: int):
        for layer in self.layers:
            if layer.order >= order:
                layer.order += 1

    def add_layer(self, layer: Layer, order: int = None) -> Layer:
        if order is not None:
            self.shift_order(order)
        else:
            order = max(layer.order for layer in self.layers) + 1 if self.layers else 0

        layer.order = order
        layer.view = self
        self.layers.append(layer)
        self.reorder_layers()

        return layer

    def delete_layer(self, layer_id: str):
        deleted_order = None
        for i, layer in enumerate(self.layers):
            if layer.id == layer_id:
                deleted_order = layer.order
                del self.layers[i]
                break

        if deleted_order is not None:
            for layer in self.layers:
                if layer.order > deleted_order:
                    layer.order -= 1

            # masks from the deleted layer no longer apply
            for layer in self.layers:
                layer.applied_mask_ids.discard(layer_id)

    def move_layer(self, layer_id: str, new_order: int):
        layer = self.get_layer_by_id(layer_id)
        if layer is not None:
            self.layers.remove(layer)

            for order, iter_layer in enumerate(self.layers):
                iter_layer.order = order

            for iter_layer in self.layers:
                if iter_layer.order >= new_order:
                    iter_layer.order += 1

            layer.order = new_order
            self.layers.append(layer)

            self.reorder_layers()

    def reorder_layers(self):
        self.layers.sort(key=lambda layer: layer.order)

    def get_layers(self) -> list:
        return self.layers

    def get_layer_by_id(self, layer_id: str) -> Optional[Layer]:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    def get_layer_at_order(self, order: int) -> Optional[Layer]:
        for layer in self.layers:
            if layer.order == order:
                return layer
        return None

    def is_origin_layer_higher(self, origin_id: str, target_id: str) -> bool:
        origin = self.get_layer_by_id(origin_id)
        target = self.get_layer_by_id(target_id)

        if origin is None or target is None:
            return False

        return origin.order > target.order

    @property
    def mask_ids(self) -> list:
        return [layer.id for layer in self.layers if layer.provides_mask]

    def get_mask_layer(self, layer_id: str) -> Optional[Layer]:
        layer = self.get_layer_by_id(layer_id)
        if layer is not None and layer.provides_mask:
            return layer
        return None

    def mask_provider(self, layer_id: str) -> Optional[Raster]:
        layer = self.get_layer_by_id(layer_id)
        return layer.rendered_mask if layer is not None else None

    def redraw_all(self):
        # rendered masks only depend on their own layer, refresh them before anyone reads them
        for layer in self.layers:
            layer.recalculate_mask()

        for layer in self.layers:
            layer.redraw()

        self.logger.debug("Redrew %s layers.", len(self.layers))

    def flatten(self) -> Raster:
        visible = [layer.canvas for layer in self.layers if layer.visible]
        return merge_rasters(visible, self.width, self.height)

    def delete_all(self):
        self.layers = []
