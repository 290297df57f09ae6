import logging

from tokenartisan.constants import NEIGHBOR_TOLERANCE
from tokenartisan.raster.raster import Raster

logger = logging.getLogger()


def apply_transparent_colors(raster: Raster, colors, tolerance: int = NEIGHBOR_TOLERANCE) -> int:
    """Clears every pixel that is a neighbor of one of ``colors``, returns how many were cleared."""
    if not colors:
        return 0

    total = 0
    for color in colors:
        matches = color.neighbor_mask(raster.pixels, tolerance)
        count = int(matches.sum())
        raster.pixels[matches] = 0
        total += count
        logger.debug("Applying the following color transparency: %s (%s pixels)", color.to_hex(), count)

    return total
