from typing import Union

import attr
import numpy as np
from PIL import ImageColor

from tokenartisan.constants import NEIGHBOR_TOLERANCE


def _channel(value) -> int:
    value = int(value)
    if not 0 <= value <= 255:
        raise ValueError(f"Color channels must be between 0 and 255, got {value}")
    return value


@attr.s(frozen=True, slots=True)
class Color:
    red = attr.ib(type=int, default=0, converter=_channel)
    green = attr.ib(type=int, default=0, converter=_channel)
    blue = attr.ib(type=int, default=0, converter=_channel)
    alpha = attr.ib(type=int, default=255, converter=_channel)

    @classmethod
    def from_hex(cls, value: str) -> "Color":
        red, green, blue, alpha = ImageColor.getcolor(value, "RGBA")
        return cls(red, green, blue, alpha)

    def to_hex(self) -> str:
        hex_color = f"#{self.red:02x}{self.green:02x}{self.blue:02x}"
        if self.alpha != 255:
            hex_color += f"{self.alpha:02x}"
        return hex_color

    def as_tuple(self) -> tuple:
        return (self.red, self.green, self.blue, self.alpha)

    def neighbor_mask(self, pixels: np.ndarray, tolerance: int = NEIGHBOR_TOLERANCE) -> np.ndarray:
        """Marks the RGBA pixels whose largest channel difference to this color is within ``tolerance``."""
        reference = np.array(self.as_tuple(), dtype=np.int16)
        distance = np.abs(np.asarray(pixels, dtype=np.int16) - reference).max(axis=-1)
        return distance <= tolerance

    def is_neighbor_color(self, other: "Color", tolerance: int = NEIGHBOR_TOLERANCE) -> bool:
        return bool(self.neighbor_mask(other.as_tuple(), tolerance))


def to_color(value: Union[Color, str, tuple, None]) -> Color:
    if value is None or isinstance(value, Color):
        return value
    if isinstance(value, str):
        return Color.from_hex(value)
    return Color(*value)
