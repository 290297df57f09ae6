from typing import Optional, Union

import cv2
import numpy as np
from PIL import Image

from tokenartisan.errors import RasterError
from tokenartisan.raster.color import Color, to_color
from tokenartisan.raster.composite import CompositeOperation, composite, to_premultiplied, to_straight


def _affine_3x3(matrix: np.ndarray) -> np.ndarray:
    return np.vstack([np.asarray(matrix, dtype=np.float64)[:2], [0.0, 0.0, 1.0]])


class Raster:
    """A fixed size RGBA pixel buffer with canvas-like drawing operations.

    ``pixels`` is a row-major ``(height, width, 4)`` uint8 array of straight
    (non premultiplied) red, green, blue and alpha samples.
    """

    def __init__(self, width: int, height: int, pixels: Optional[np.ndarray] = None):
        width = int(width)
        height = int(height)

        if width <= 0 or height <= 0:
            raise RasterError(f"Raster dimensions must be positive, got {width}x{height}")

        if pixels is None:
            pixels = np.zeros((height, width, 4), dtype=np.uint8)
        elif pixels.shape != (height, width, 4):
            raise RasterError(f"Pixel buffer of shape {pixels.shape} does not match a {width}x{height} RGBA raster")

        self.width = width
        self.height = height
        self.pixels = np.ascontiguousarray(pixels, dtype=np.uint8)

    def __repr__(self):
        return f"Raster({self.width}x{self.height})"

    @classmethod
    def from_pillow(cls, image: Image.Image) -> "Raster":
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        return cls(image.width, image.height, np.array(image, dtype=np.uint8))

    @classmethod
    def from_color(cls, width: int, height: int, color: Union[Color, str]) -> "Raster":
        raster = cls(width, height)
        raster.pixels[:] = to_color(color).as_tuple()
        return raster

    def to_pillow(self) -> Image.Image:
        return Image.fromarray(self.pixels.copy(), "RGBA")

    @property
    def size(self) -> tuple:
        return (self.width, self.height)

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[..., 3]

    def clone(self) -> "Raster":
        return Raster(self.width, self.height, self.pixels.copy())

    def clear(self):
        self.pixels[:] = 0

    def get_pixel(self, x: int, y: int) -> tuple:
        return tuple(int(channel) for channel in self.pixels[y, x])

    def put_pixel(self, x: int, y: int, rgba):
        self.pixels[y, x] = rgba

    def get_image_data(self) -> np.ndarray:
        return self.pixels.copy()

    def put_image_data(self, pixels: np.ndarray):
        if pixels.shape != self.pixels.shape:
            raise RasterError(f"Image data of shape {pixels.shape} does not fit a {self.width}x{self.height} raster")
        self.pixels[:] = pixels

    def opaque_mask(self, threshold: int) -> np.ndarray:
        # alpha at or above the threshold counts as opaque everywhere a mask is built or checked
        return self.alpha >= threshold

    def is_completely_transparent(self, threshold: int) -> bool:
        return not bool(self.opaque_mask(threshold).any())

    def is_completely_opaque(self, threshold: int) -> bool:
        return bool(self.opaque_mask(threshold).all())

    def fill(
        self,
        color: Union[Color, str],
        operation: CompositeOperation = CompositeOperation.SOURCE_OVER,
        alpha: float = 1.0,
    ):
        layer = np.empty_like(self.pixels)
        layer[:] = to_color(color).as_tuple()
        source = to_premultiplied(layer)
        source *= alpha
        self._composite(source, operation)

    def draw_image(
        self,
        source: "Raster",
        dest_rect: Optional[tuple] = None,
        src_rect: Optional[tuple] = None,
        transform: Optional[np.ndarray] = None,
        operation: CompositeOperation = CompositeOperation.SOURCE_OVER,
        alpha: float = 1.0,
    ):
        """Draws ``source`` the way a 2D canvas ``drawImage`` call does.

        The ``src_rect`` region (x, y, width, height, integers) of the source is
        scaled into ``dest_rect``, then the optional 2x3 ``transform`` is applied,
        and the result is composited over the whole raster with ``operation``, so
        operations like source-in also clear everything the image does not cover.
        """
        sx, sy, sw, sh = src_rect if src_rect is not None else (0, 0, source.width, source.height)
        dx, dy, dw, dh = dest_rect if dest_rect is not None else (0, 0, sw, sh)

        if sw <= 0 or sh <= 0 or dw <= 0 or dh <= 0:
            return

        pixels = source.pixels[int(sy) : int(sy) + int(sh), int(sx) : int(sx) + int(sw)]
        premultiplied = to_premultiplied(pixels)

        # pre-shrink large reductions, bilinear warping only samples four neighbors
        scale_x = dw / sw
        scale_y = dh / sh
        if scale_x < 0.5 or scale_y < 0.5:
            reduced_width = max(1, int(round(sw * scale_x)))
            reduced_height = max(1, int(round(sh * scale_y)))
            premultiplied = cv2.resize(premultiplied, (reduced_width, reduced_height), interpolation=cv2.INTER_AREA)
            scale_x = dw / reduced_width
            scale_y = dh / reduced_height

        placement = np.array([[scale_x, 0.0, dx], [0.0, scale_y, dy], [0.0, 0.0, 1.0]])
        matrix = placement if transform is None else _affine_3x3(transform) @ placement

        # map pixel centers, not pixel corners
        to_corner = np.array([[1.0, 0.0, -0.5], [0.0, 1.0, -0.5], [0.0, 0.0, 1.0]])
        to_center = np.array([[1.0, 0.0, 0.5], [0.0, 1.0, 0.5], [0.0, 0.0, 1.0]])
        matrix = (to_corner @ matrix @ to_center)[:2]

        size = (self.width, self.height)
        warped = cv2.warpAffine(
            premultiplied,
            matrix,
            size,
            flags=cv2.INTER_LINEAR,
            borderMode=cv2.BORDER_REPLICATE,
        )
        coverage = cv2.warpAffine(
            np.ones(premultiplied.shape[:2], dtype=np.float32),
            matrix,
            size,
            flags=cv2.INTER_NEAREST,
            borderMode=cv2.BORDER_CONSTANT,
            borderValue=0,
        )
        warped *= coverage[..., None] * np.float32(alpha)

        self._composite(warped, operation)

    def _composite(self, source: np.ndarray, operation: CompositeOperation):
        destination = to_premultiplied(self.pixels)
        self.pixels[:] = to_straight(composite(destination, source, operation))
