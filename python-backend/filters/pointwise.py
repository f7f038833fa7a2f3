"""
Pointwise combination of rasters.

Not windowed: every pixel is processed, border included. Only R, G and B
are transformed; alpha comes from the first input.
"""

import logging
from typing import Union

import numpy as np

from core.constants import RasterConstants
from core.enums import CombineOperation, FilterFamily
from core.exceptions import EmptyRaster, InvalidDimensions
from core.raster import Raster
from filters.modes import resolve_operation

logger = logging.getLogger(__name__)

_OPERATIONS = {
    CombineOperation.AND: np.bitwise_and,
    CombineOperation.OR: np.bitwise_or,
    CombineOperation.XOR: np.bitwise_xor,
}

_RGB = slice(RasterConstants.RED, RasterConstants.BLUE + 1)


def combine(
    raster_a: Raster,
    raster_b: Raster,
    operation: Union[CombineOperation, str],
) -> Raster:
    """
    Combine two equally shaped rasters sample by sample.

    Args:
        raster_a: First input, also the source of the output alpha
        raster_b: Second input
        operation: and, or or xor

    Returns:
        New raster with R, G, B = a OP b

    Raises:
        UnsupportedFilterMode: If operation is not and/or/xor
        InvalidDimensions: If the rasters differ in width or height
        EmptyRaster: If a raster has no pixels
    """
    op = resolve_operation(operation, CombineOperation, FilterFamily.COMBINE)

    for raster in (raster_a, raster_b):
        if raster.width * raster.height == 0:
            raise EmptyRaster(raster.width, raster.height)

    if not raster_a.same_shape(raster_b):
        raise InvalidDimensions(
            f"Cannot combine {raster_a.width}x{raster_a.height} raster with "
            f"{raster_b.width}x{raster_b.height} raster",
            expected=raster_a.shape,
            actual=raster_b.shape,
        )

    output = raster_a.copy_pixels()
    _OPERATIONS[op](raster_a.pixels[:, :, _RGB], raster_b.pixels[:, :, _RGB], out=output[:, :, _RGB])

    logger.debug(f"Combined rasters with {op.value} ({raster_a.width}x{raster_a.height})")
    return raster_a.with_pixels(output)


def invert(raster: Raster) -> Raster:
    """
    Invert R, G and B (255 - a); alpha unchanged.

    Raises:
        EmptyRaster: If the raster has no pixels
    """
    if raster.width * raster.height == 0:
        raise EmptyRaster(raster.width, raster.height)

    output = raster.copy_pixels()
    np.subtract(RasterConstants.MAX_SAMPLE, raster.pixels[:, :, _RGB], out=output[:, :, _RGB])

    logger.debug(f"Inverted {raster.width}x{raster.height} raster")
    return raster.with_pixels(output)
