"""Silhouette masks traced from the alpha channel of a raster."""
import logging

import cv2
import numpy as np

from tokenartisan.constants import MASK_DENSITY, TRANSPARENCY_THRESHOLD
from tokenartisan.mask.contour import contour, contour_start
from tokenartisan.raster.raster import Raster

logger = logging.getLogger()

# fixed point bits used by cv2.fillPoly
POLYGON_SHIFT = 4


def fill_polygon(size: int, points) -> np.ndarray:
    """Rasterizes a closed polyline of corner coordinates into a ``size`` x ``size`` stencil.

    A pixel is filled when its center falls inside the polygon, the vertices are
    moved half a pixel so cv2 (which samples at integer coordinates) agrees.
    """
    stencil = np.zeros((size, size), dtype=np.uint8)
    polygon = np.round((np.asarray(points, dtype=np.float64) - 0.5) * (1 << POLYGON_SHIFT)).astype(np.int32)
    cv2.fillPoly(stencil, [polygon.reshape(-1, 1, 2)], 255, lineType=cv2.LINE_8, shift=POLYGON_SHIFT)
    return stencil


def extract_contour_mask(
    alpha_source: Raster, density: int = MASK_DENSITY, threshold: int = TRANSPARENCY_THRESHOLD
) -> Raster:
    side = density + 2

    # a transparent border of at least one pixel keeps the walk bounded
    working = Raster(side, side)
    working.draw_image(alpha_source, dest_rect=(1, 1, density, density))

    opaque = working.opaque_mask(threshold)
    interior = opaque[1:-1, 1:-1]

    if not interior.any():
        logger.debug("Contour mask: source is completely transparent, mask is empty.")
        stencil = np.zeros((side, side), dtype=np.uint8)
    elif interior.all():
        logger.debug("Contour mask: source is completely opaque, mask is full.")
        stencil = np.full((side, side), 255, dtype=np.uint8)
    else:

        def grid(x, y):
            return 0 <= x < side and 0 <= y < side and bool(opaque[y, x])

        # only the first outline found from the top left corner is traced, other shapes are left out
        start = contour_start(grid, side, side)
        points = contour(grid, start) if start is not None else []

        if len(points) < 2:
            logger.debug("Contour mask: degenerate contour with %s points, mask is empty.", len(points))
            stencil = np.zeros((side, side), dtype=np.uint8)
        else:
            logger.debug("Contour mask: traced %s points at density %s.", len(points), density)
            stencil = fill_polygon(side, points)

    traced = Raster(side, side)
    traced.pixels[..., 3] = stencil

    mask = Raster(alpha_source.width, alpha_source.height)
    mask.draw_image(
        traced,
        dest_rect=(0, 0, alpha_source.width, alpha_source.height),
        src_rect=(1, 1, density, density),
    )
    return mask
