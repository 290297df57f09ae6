"""Star shaped masks found by casting rays from the center of a raster."""
import logging
import math

import cv2
import numpy as np

from tokenartisan.constants import RAY_COUNT, TRANSPARENCY_THRESHOLD
from tokenartisan.raster.raster import Raster

logger = logging.getLogger()


def generate_ray_mask(source: Raster, ray_count: int = RAY_COUNT, threshold: int = TRANSPARENCY_THRESHOLD) -> Raster:
    mask = Raster(source.width, source.height)
    opaque = source.opaque_mask(threshold)

    if not opaque.any():
        return mask

    center_x = source.width / 2
    center_y = source.height / 2
    radii = np.arange(0, int(math.ceil(math.hypot(source.width, source.height) / 2)) + 1, dtype=np.float64)
    angles = np.linspace(0.0, 2.0 * math.pi, ray_count, endpoint=False)

    xs = np.floor(center_x + np.cos(angles)[:, None] * radii[None, :]).astype(np.int64)
    ys = np.floor(center_y + np.sin(angles)[:, None] * radii[None, :]).astype(np.int64)
    inside = (xs >= 0) & (xs < source.width) & (ys >= 0) & (ys < source.height)

    hits = np.zeros(xs.shape, dtype=bool)
    hits[inside] = opaque[ys[inside], xs[inside]]

    # farthest opaque sample on every ray
    last_hit = hits.shape[1] - 1 - np.argmax(hits[:, ::-1], axis=1)
    distances = np.where(hits.any(axis=1), radii[last_hit] + 1.0, 0.0)

    points = np.stack(
        [center_x + np.cos(angles) * distances, center_y + np.sin(angles) * distances],
        axis=-1,
    )
    logger.debug("Ray mask: %s rays, %s with a hit.", ray_count, int(hits.any(axis=1).sum()))

    stencil = np.zeros((source.height, source.width), dtype=np.uint8)
    polygon = np.round(points * 16).astype(np.int32).reshape(-1, 1, 2)
    cv2.fillPoly(stencil, [polygon], 255, lineType=cv2.LINE_8, shift=4)
    mask.pixels[..., 3] = stencil
    return mask
