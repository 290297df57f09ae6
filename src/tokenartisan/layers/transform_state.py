import math

import attr
import numpy as np

from tokenartisan.constants import TO_RADIANS


def _positive(instance, attribute, value):
    if value <= 0:
        raise ValueError(f"{attribute.name} must be positive, got {value}")


def _translation(x: float, y: float) -> np.ndarray:
    return np.array([[1.0, 0.0, x], [0.0, 1.0, y], [0.0, 0.0, 1.0]])


@attr.s(auto_attribs=True, slots=True, on_setattr=attr.setters.validate)
class TransformState:
    center_x: float = attr.ib(default=0.0)
    center_y: float = attr.ib(default=0.0)
    x: float = attr.ib(default=0.0)
    y: float = attr.ib(default=0.0)
    scale: float = attr.ib(default=1.0, validator=_positive)
    rotation: float = attr.ib(default=0.0)
    mirror: int = attr.ib(default=1, validator=attr.validators.in_((1, -1)))
    flipped: bool = attr.ib(default=False)

    def compose(self) -> np.ndarray:
        """Rotation and mirror around the center as a 2x3 affine.

        Position and scale are not part of it, they are applied when the
        transformed raster is placed (see ``placement``).
        """
        radians = self.rotation * TO_RADIANS
        cos = math.cos(radians)
        sin = math.sin(radians)

        mirror = np.array([[float(self.mirror), 0.0, 0.0], [0.0, 1.0, 0.0], [0.0, 0.0, 1.0]])
        rotation = np.array([[cos, -sin, 0.0], [sin, cos, 0.0], [0.0, 0.0, 1.0]])

        matrix = (
            _translation(self.center_x, self.center_y) @ mirror @ rotation @ _translation(-self.center_x, -self.center_y)
        )
        return matrix[:2]

    def placement(self, width: int, height: int) -> tuple:
        return (self.x, self.y, width * self.scale, height * self.scale)

    def translate(self, dx: float, dy: float):
        self.x -= dx
        self.y -= dy

    def rotate(self, degree: float):
        # steppers send half steps
        self.rotation += degree * 2

    def flip(self):
        self.mirror *= -1
        self.flipped = not self.flipped
