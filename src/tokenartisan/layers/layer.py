import logging
import math
import uuid
from typing import Callable, Optional, Union

import attr
from PIL import Image

from tokenartisan.app.preferences import LayerPreferences
from tokenartisan.constants import ACTIVE_LABELS, INACTIVE_LABELS, MIN_CANVAS_SIZE
from tokenartisan.errors import LayerError
from tokenartisan.layers.transform_state import TransformState
from tokenartisan.mask.contour_mask import extract_contour_mask
from tokenartisan.mask.mask_composition import default_mask_ids, resolve_mask_providers
from tokenartisan.mask.ray_mask import generate_ray_mask
from tokenartisan.mask.transparency import apply_transparent_colors
from tokenartisan.raster.color import Color, to_color
from tokenartisan.raster.composite import CompositeOperation
from tokenartisan.raster.raster import Raster


class Layer:
    """One image or flat color in a token stack.

    ``canvas`` is what the view composites, ``preview`` is the same rendition
    without any mask applied and ``source`` is the untouched snapshot every
    redraw starts from. Masks come in three stages: ``source_mask`` as created,
    ``mask`` as the working copy (replaced by a custom mask when one is painted)
    and ``rendered_mask`` which follows the layer transform and is what other
    layers use to mask themselves.
    """

    def __init__(
        self,
        canvas: Raster,
        view=None,
        img: Optional[Raster] = None,
        color: Union[Color, str, None] = None,
        tint_color: Union[Color, str, None] = None,
        tint_layer: bool = False,
        preferences: Optional[LayerPreferences] = None,
        mask_editor: Optional[Callable] = None,
        ray_mask_generator: Callable[[Raster], Raster] = generate_ray_mask,
    ):
        self.logger = logging.getLogger()
        self.view = view
        self.id = uuid.uuid4().hex
        self.order = 0
        self.preferences = preferences if preferences is not None else LayerPreferences()
        self.mask_editor = mask_editor
        self.ray_mask_generator = ray_mask_generator

        self.canvas = canvas
        self.source = canvas.clone()
        self.preview = canvas.clone()

        self.transform = TransformState(center_x=canvas.width / 2, center_y=canvas.height / 2)

        # decoded image, shared read-only with clones
        self.img = img

        # only follows input, has no effect on compositing
        self.active = False

        self.provides_mask = False
        self.mask = None
        self.source_mask = None
        self.rendered_mask = Raster(self.source.width, self.source.height)
        self.mask_composite_operation = CompositeOperation.SOURCE_IN
        self.custom_mask = False

        self.applied_mask_ids = set()
        self.custom_mask_layers = False

        self.alpha = 1.0
        self.composite_operation = CompositeOperation.SOURCE_OVER
        self.visible = True

        self.previous_color = None
        self.color = to_color(color)
        self.color_layer = color is not None

        self.previous_alpha_pixel_colors = None
        self.alpha_pixel_colors = []

        self.tint_layer = tint_layer
        self.tint_color = to_color(tint_color)

    @classmethod
    def from_image(
        cls,
        img: Union[Raster, Image.Image],
        canvas_width: int,
        canvas_height: int,
        tint_color: Union[Color, str, None] = None,
        tint_layer: bool = False,
        view=None,
        preferences: Optional[LayerPreferences] = None,
        **kwargs,
    ) -> "Layer":
        if img is None:
            raise LayerError("An image layer needs a decoded image.", None)

        if isinstance(img, Image.Image):
            img = Raster.from_pillow(img)

        preferences = preferences if preferences is not None else LayerPreferences()

        height = max(MIN_CANVAS_SIZE, canvas_height, img.height, img.width)
        width = max(MIN_CANVAS_SIZE, canvas_width, img.height, img.width)

        # cropping covers the canvas with the smallest image side, otherwise the largest side fits
        if preferences.crop_to_fit:
            fit_width = img.height > img.width
        else:
            fit_width = img.height < img.width

        scaled_width = width if fit_width else height * (img.width / img.height)
        scaled_height = width * (img.height / img.width) if fit_width else height

        x_offset = (width - scaled_width) / 2
        y_offset = (height - scaled_height) / 2

        canvas = Raster(width, height)
        canvas.draw_image(img, dest_rect=(x_offset, y_offset, scaled_width, scaled_height))

        layer = cls(
            canvas,
            view=view,
            img=img,
            tint_color=tint_color,
            tint_layer=tint_layer,
            preferences=preferences,
            **kwargs,
        )
        layer.create_mask()
        layer.redraw()
        return layer

    @classmethod
    def from_color(
        cls,
        color: Union[Color, str],
        width: int,
        height: int,
        view=None,
        preferences: Optional[LayerPreferences] = None,
        **kwargs,
    ) -> "Layer":
        canvas = Raster(width, height)
        layer = cls(canvas, view=view, color=color, preferences=preferences, **kwargs)
        layer.set_color(color)
        return layer

    def clone(self) -> "Layer":
        options = {
            "view": self.view,
            "preferences": self.preferences,
            "mask_editor": self.mask_editor,
            "ray_mask_generator": self.ray_mask_generator,
        }

        if self.img is not None:
            new_layer = Layer.from_image(
                self.img,
                self.source.width,
                self.source.height,
                tint_color=self.tint_color,
                tint_layer=self.tint_layer,
                **options,
            )
        else:
            new_layer = Layer.from_color(self.color, self.source.width, self.source.height, **options)

        new_layer.active = False
        new_layer.transform = attr.evolve(self.transform)
        new_layer.visible = self.visible
        new_layer.alpha = self.alpha
        new_layer.provides_mask = self.provides_mask

        new_layer.mask = self.mask.clone() if self.mask is not None else None
        new_layer.source_mask = self.source_mask.clone() if self.source_mask is not None else None
        new_layer.rendered_mask = self.rendered_mask.clone()
        new_layer.custom_mask = self.custom_mask
        new_layer.custom_mask_layers = self.custom_mask_layers
        new_layer.applied_mask_ids = set(self.applied_mask_ids)

        new_layer.composite_operation = self.composite_operation
        new_layer.mask_composite_operation = self.mask_composite_operation

        new_layer.alpha_pixel_colors = list(self.alpha_pixel_colors)
        if self.previous_alpha_pixel_colors is not None:
            new_layer.previous_alpha_pixel_colors = list(self.previous_alpha_pixel_colors)

        new_layer.redraw()

        return new_layer

    @property
    def width(self) -> int:
        return self.canvas.width

    @property
    def height(self) -> int:
        return self.canvas.height

    def get_layer_label(self, active: bool = False) -> str:
        if self.view is None:
            return "?"

        layer_ids = [layer.id for layer in self.view.get_layers()]
        if self.id not in layer_ids:
            return "?"

        index = layer_ids.index(self.id)
        labels = ACTIVE_LABELS if active else INACTIVE_LABELS
        return labels[index] if index < len(labels) else "?"

    def activate(self):
        self.active = True

    def deactivate(self):
        self.active = False

    def is_completely_transparent(self) -> bool:
        return self.source.is_completely_transparent(self.preferences.transparency_threshold)

    def is_completely_opaque(self) -> bool:
        return self.source.is_completely_opaque(self.preferences.transparency_threshold)

    def create_mask(self):
        if self.custom_mask:
            self.logger.debug("Layer %s has a custom mask, skipping mask generation.", self.id)
            return

        if self.preferences.use_ray_cast_mask:
            self.mask = self.ray_mask_generator(self.source)
        else:
            self.mask = extract_contour_mask(
                self.source,
                density=self.preferences.mask_density,
                threshold=self.preferences.transparency_threshold,
            )
        self.source_mask = self.mask.clone()

        self.rendered_mask = Raster(self.source.width, self.source.height)
        self.recalculate_mask()

    def recalculate_mask(self):
        if self.mask is None or self.custom_mask:
            return

        transformed = self._transformed(self.mask)
        self.rendered_mask.clear()
        self.rendered_mask.draw_image(
            transformed, dest_rect=self.transform.placement(self.source.width, self.source.height)
        )

    def apply_custom_mask(self, mask: Raster, callback: Optional[Callable] = None):
        self.custom_mask = True
        self.mask = mask.clone()
        self.rendered_mask = Raster(self.width, self.height)
        self.rendered_mask.draw_image(self.mask, dest_rect=(0, 0, self.width, self.height))

        if callback is not None:
            callback(True)

    def edit_mask(self, callback: Optional[Callable] = None):
        if self.mask_editor is None:
            raise LayerError("No mask editor is available to edit this layer.", self.id)

        self.mask_editor(self, self.apply_custom_mask, callback)

    def mask_preview(self) -> Raster:
        preview = self.preview.clone()
        preview.draw_image(
            self.rendered_mask,
            dest_rect=(0, 0, preview.width, preview.height),
            operation=CompositeOperation.DESTINATION_IN,
        )

        if self.preferences.mask_preview_fill is not None:
            preview.fill(self.preferences.mask_preview_fill, operation=CompositeOperation.DESTINATION_OVER)

        return preview

    def set_color(self, color: Union[Color, str, None] = None):
        if not self.color_layer or color is None:
            return

        self.color = to_color(color)
        self.canvas.fill(self.color, operation=CompositeOperation.COPY)
        self.source = self.canvas.clone()

    def save_color(self):
        self.previous_color = self.color

    def restore_color(self):
        self.set_color(self.previous_color)

    def save_alphas(self):
        self.previous_alpha_pixel_colors = list(self.alpha_pixel_colors)

    def restore_alphas(self):
        self.alpha_pixel_colors = list(self.previous_alpha_pixel_colors or [])

    def add_transparent_colour(self, color: Union[Color, str]):
        color = to_color(color)
        if color not in self.alpha_pixel_colors:
            self.alpha_pixel_colors.append(color)

    def reset_masks(self):
        self.custom_mask_layers = False
        self.applied_mask_ids = set(default_mask_ids(self, self.view))
        self.composite_operation = CompositeOperation.SOURCE_OVER
        self.mask_composite_operation = CompositeOperation.SOURCE_IN
        self.custom_mask = False
        self.mask = self.source_mask.clone() if self.source_mask is not None else None
        self.recalculate_mask()
        self.redraw()

    def reset(self):
        self.custom_mask_layers = False
        self.applied_mask_ids = set(default_mask_ids(self, self.view))
        self.alpha_pixel_colors = []
        self.composite_operation = CompositeOperation.SOURCE_OVER
        self.mask_composite_operation = CompositeOperation.SOURCE_IN

        self.transform.scale = self.width / max(self.source.width, self.source.height)
        self.transform.rotation = 0
        self.transform.x = math.floor((self.width / 2) - ((self.source.width * self.transform.scale) / 2))
        self.transform.y = math.floor((self.height / 2) - ((self.source.height * self.transform.scale) / 2))

        self.mask = None
        self.custom_mask = False
        self.logger.debug("Layer %s reset, rebuilding its mask.", self.id)
        self.redraw()
        self.create_mask()

    def translate(self, dx: float, dy: float):
        self.transform.translate(dx, dy)

    def set_scale(self, factor: float):
        if factor <= 0:
            raise LayerError(f"Scale must be positive, got {factor}.", self.id)
        self.transform.scale = factor

    def rotate(self, degree: float):
        self.transform.rotate(degree)

    def flip(self):
        self.transform.flip()
        self.redraw()

    def _transformed(self, raster: Raster) -> Raster:
        transformed = Raster(self.source.width, self.source.height)
        transformed.draw_image(
            raster,
            dest_rect=(0, 0, self.source.width, self.source.height),
            transform=self.transform.compose(),
        )
        return transformed

    def _apply_tint(self, target: Raster):
        tint = self._transformed(self.source)
        tint.fill(self.tint_color, operation=CompositeOperation.SOURCE_ATOP)
        target.draw_image(tint, operation=CompositeOperation.COLOR)

    def _draw_to_target(self, target: Raster, transformed: Raster, mask_draws: list):
        target.clear()

        operation = self.composite_operation
        for mask_draw in mask_draws:
            target.draw_image(
                mask_draw.mask,
                dest_rect=(0, 0, target.width, target.height),
                operation=mask_draw.operation,
            )
            operation = self.mask_composite_operation

        if self.color_layer:
            target.fill(self.color, operation=operation, alpha=self.alpha)
        else:
            target.draw_image(
                transformed,
                dest_rect=self.transform.placement(self.source.width, self.source.height),
                operation=operation,
                alpha=self.alpha,
            )
            apply_transparent_colors(target, self.alpha_pixel_colors, self.preferences.neighbor_tolerance)

    def redraw(self):
        transformed = self._transformed(self.source)
        if self.tint_layer and self.tint_color is not None:
            self._apply_tint(transformed)

        self._draw_to_target(self.canvas, transformed, resolve_mask_providers(self, self.view))
        self._draw_to_target(self.preview, transformed, [])
