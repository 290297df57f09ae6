import attr
from PyQt6.QtCore import QSettings

from tokenartisan.constants import MASK_DENSITY, NEIGHBOR_TOLERANCE, TRANSPARENCY_THRESHOLD
from tokenartisan.raster.color import to_color


def _optional_color(value):
    if value in (None, ""):
        return None
    return to_color(value)


@attr.s(eq=True)
class LayerPreferences:
    crop_to_fit = attr.ib(type=bool, default=False)
    use_ray_cast_mask = attr.ib(type=bool, default=False)
    mask_preview_fill = attr.ib(default=None, converter=_optional_color)
    mask_density = attr.ib(type=int, default=MASK_DENSITY)
    transparency_threshold = attr.ib(type=int, default=TRANSPARENCY_THRESHOLD)
    neighbor_tolerance = attr.ib(type=int, default=NEIGHBOR_TOLERANCE)


def load_preferences(settings: QSettings) -> LayerPreferences:
    crop_to_fit = settings.value("default-crop-image", False, type=bool)
    use_ray_cast_mask = settings.value("default-algorithm", False, type=bool)
    mask_preview_fill = settings.value("default-color", "", type=str)

    return LayerPreferences(
        crop_to_fit=crop_to_fit,
        use_ray_cast_mask=use_ray_cast_mask,
        mask_preview_fill=mask_preview_fill,
    )
