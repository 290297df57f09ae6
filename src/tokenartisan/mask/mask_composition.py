"""Decides which rendered masks restrict a layer and how they are drawn.

The stack is any object with the layer manager query interface:
``get_layers()`` in draw order (bottom first), ``is_origin_layer_higher`` and
``mask_provider``. Layers only keep ids of their mask providers, the masks
themselves are looked up here every time a layer redraws.
"""
import attr

from tokenartisan.raster.composite import CompositeOperation
from tokenartisan.raster.raster import Raster


@attr.s(auto_attribs=True, slots=True)
class MaskDraw:
    layer_id: str = attr.ib()
    mask: Raster = attr.ib()
    operation: CompositeOperation = attr.ib()


def default_mask_ids(layer, stack) -> list:
    if stack is None:
        return []

    return [
        other.id
        for other in stack.get_layers()
        if other.provides_mask and other.id != layer.id and stack.is_origin_layer_higher(other.id, layer.id)
    ]


def resolve_mask_providers(layer, stack) -> list:
    if stack is None:
        return []

    if layer.custom_mask_layers:
        mask_ids = [other.id for other in stack.get_layers() if other.id in layer.applied_mask_ids]
    else:
        mask_ids = default_mask_ids(layer, stack)

    draws = []
    operation = layer.composite_operation
    for mask_id in mask_ids:
        mask = stack.mask_provider(mask_id)
        if mask is None:
            continue
        draws.append(MaskDraw(layer_id=mask_id, mask=mask, operation=operation))
        operation = layer.mask_composite_operation

    return draws
