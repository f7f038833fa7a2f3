"""
Neighborhood sampling for windowed operators.

Windows are enumerated row-major: rows y-r..y+r and, within each row,
columns x-r..x+r. Downstream tie-breaks (mode filter) depend on this order.

Coordinates are never wrapped or clamped. Windowed operators only compute
interior pixels (r <= x < W-r, r <= y < H-r) and copy the border verbatim.
"""

import logging
from typing import List

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from core.exceptions import EmptyRaster, InvalidKernelSize
from core.raster import Raster

logger = logging.getLogger(__name__)


def validate_kernel_size(raster: Raster, kernel_size: int) -> int:
    """
    Validate a windowed operator's kernel size against a raster.

    Args:
        raster: Input raster
        kernel_size: Side length of the square window

    Returns:
        Half-size r = kernel_size // 2

    Raises:
        EmptyRaster: If the raster has no pixels
        InvalidKernelSize: If the size is not a positive odd integer smaller
            than min(width, height)
    """
    if raster.width * raster.height == 0:
        raise EmptyRaster(raster.width, raster.height)

    # bool is an int subclass but never a meaningful kernel size
    if isinstance(kernel_size, bool) or not isinstance(kernel_size, (int, np.integer)):
        raise InvalidKernelSize(kernel_size, "must be an integer")
    if kernel_size <= 0:
        raise InvalidKernelSize(kernel_size, "must be positive")
    if kernel_size % 2 == 0:
        raise InvalidKernelSize(kernel_size, "must be odd")
    if kernel_size >= min(raster.width, raster.height):
        raise InvalidKernelSize(
            kernel_size,
            f"must be smaller than min(width, height) = {min(raster.width, raster.height)}",
        )

    return int(kernel_size) // 2


def is_interior(width: int, height: int, x: int, y: int, radius: int) -> bool:
    """Check whether (x, y) has a full window of the given radius."""
    return radius <= x < width - radius and radius <= y < height - radius


def sample_neighborhood(raster: Raster, x: int, y: int, radius: int, channel: int) -> List[int]:
    """
    Collect one channel's values over the window centered on (x, y).

    Args:
        raster: Input raster
        x: Column of the center pixel
        y: Row of the center pixel
        radius: Half-size r of the window
        channel: Channel index (0=R, 1=G, 2=B, 3=A)

    Returns:
        (2r+1)^2 values in row-major window order

    Raises:
        ValueError: If (x, y) is not an interior pixel for the radius
    """
    if not is_interior(raster.width, raster.height, x, y, radius):
        raise ValueError(
            f"Pixel ({x}, {y}) has no full radius-{radius} window in a "
            f"{raster.width}x{raster.height} raster"
        )

    window = raster.pixels[y - radius : y + radius + 1, x - radius : x + radius + 1, channel]
    return window.ravel().tolist()


def neighborhood_windows(plane: np.ndarray, radius: int) -> np.ndarray:
    """
    Window view over one channel plane.

    Entry [y - r, x - r] is the (k, k) window centered on interior pixel
    (x, y); flattening it in C order gives the sample_neighborhood order.

    Args:
        plane: (H, W) channel plane
        radius: Half-size r of the window

    Returns:
        Read-only view of shape (H - 2r, W - 2r, k, k)
    """
    size = 2 * radius + 1
    return sliding_window_view(plane, (size, size))


def flat_windows(plane: np.ndarray, radius: int) -> np.ndarray:
    """Window view flattened to (H - 2r, W - 2r, k*k) in enumeration order."""
    windows = neighborhood_windows(plane, radius)
    rows, cols, size, _ = windows.shape
    return windows.reshape(rows, cols, size * size)
