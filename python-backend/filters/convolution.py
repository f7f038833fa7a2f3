"""
Kernel convolution: high-pass (sharpen) filters and gradient magnitude.

Kernels are applied by correlation, kernel[ky + 1][kx + 1] weighting the
sample at (x + kx, y + ky), with cv2.filter2D. Only interior pixels
(1 <= x < W-1, 1 <= y < H-1) are written; border pixels and alpha are copied.
"""

import logging
from typing import Dict, Optional, Sequence, Tuple, Union

import cv2
import numpy as np

from core.constants import KernelConstants, KernelSizeConstants, RasterConstants
from core.enums import FilterFamily, FilterMode, GradientOperator
from core.exceptions import EmptyRaster
from core.raster import Raster
from filters.bands import Parallelism, run_row_bands
from filters.modes import resolve_mode, resolve_operation

logger = logging.getLogger(__name__)

KernelTable = Sequence[Sequence[int]]

CONVOLUTION_MODES = (
    FilterMode.HIGHPASS_8_NEIGHBOR,
    FilterMode.HIGHPASS_4_NEIGHBOR_WEAK,
    FilterMode.HIGHPASS_4_NEIGHBOR_STRONG,
)

HIGHPASS_KERNELS: Dict[FilterMode, KernelTable] = {
    FilterMode.HIGHPASS_8_NEIGHBOR: KernelConstants.HIGHPASS_8_NEIGHBOR,
    FilterMode.HIGHPASS_4_NEIGHBOR_WEAK: KernelConstants.HIGHPASS_4_NEIGHBOR_WEAK,
    FilterMode.HIGHPASS_4_NEIGHBOR_STRONG: KernelConstants.HIGHPASS_4_NEIGHBOR_STRONG,
}

GRADIENT_KERNELS: Dict[GradientOperator, Tuple[KernelTable, KernelTable]] = {
    GradientOperator.SOBEL: (KernelConstants.SOBEL_X, KernelConstants.SOBEL_Y),
    GradientOperator.ROBERTS: (KernelConstants.ROBERTS_X, KernelConstants.ROBERTS_Y),
}

RADIUS = KernelSizeConstants.FIXED_KERNEL_SIZE // 2


def as_kernel(table: KernelTable) -> np.ndarray:
    """Convert a kernel table to a float64 matrix, checking it is square and odd."""
    kernel = np.asarray(table, dtype=np.float64)
    if kernel.ndim != 2 or kernel.shape[0] != kernel.shape[1] or kernel.shape[0] % 2 == 0:
        raise ValueError(f"Kernel must be an odd-sized square matrix, got shape {kernel.shape}")
    return kernel


def convolve_plane(plane: np.ndarray, kernel: KernelTable) -> np.ndarray:
    """
    Weighted sum of a channel plane under a kernel.

    Args:
        plane: (H, W) channel plane
        kernel: Odd square kernel indexed [ky + r][kx + r]

    Returns:
        (H, W) float64 sums; values within r of an edge are not meaningful
    """
    source = np.ascontiguousarray(plane, dtype=np.float64)
    return cv2.filter2D(source, cv2.CV_64F, as_kernel(kernel), borderType=cv2.BORDER_REFLECT)


def _interior_band(plane: np.ndarray, lo: int, hi: int) -> np.ndarray:
    """Rows [lo - 1, hi + 1) of a plane, enough input for output rows [lo, hi)."""
    return plane[lo - RADIUS : hi + RADIUS]


def _check_not_empty(raster: Raster) -> None:
    if raster.width * raster.height == 0:
        raise EmptyRaster(raster.width, raster.height)


def apply_convolution_filter(
    raster: Raster,
    filter_mode: Union[FilterMode, str],
    parallel: Optional[Parallelism] = None,
) -> Raster:
    """
    Apply a 3x3 high-pass filter.

    The raw signed sum is stored without division, clamped to [0, 255].

    Args:
        raster: Input raster
        filter_mode: highpass_8_neighbor, highpass_4_neighbor_weak or
            highpass_4_neighbor_strong
        parallel: Optional row band settings

    Returns:
        New raster with interior R, G, B sharpened

    Raises:
        UnsupportedFilterMode: If filter_mode is not a high-pass mode
        EmptyRaster: If the raster has no pixels
    """
    mode = resolve_mode(filter_mode, CONVOLUTION_MODES, FilterFamily.CONVOLUTION)
    _check_not_empty(raster)

    kernel = HIGHPASS_KERNELS[mode]
    pixels = raster.pixels
    output = raster.copy_pixels()
    height, width = raster.height, raster.width

    def band(lo: int, hi: int) -> None:
        for channel in RasterConstants.COLOR_CHANNELS:
            sums = convolve_plane(_interior_band(pixels[:, :, channel], lo, hi), kernel)
            interior = np.rint(sums[RADIUS : RADIUS + (hi - lo), RADIUS : width - RADIUS])
            output[lo:hi, RADIUS : width - RADIUS, channel] = np.clip(
                interior, RasterConstants.MIN_SAMPLE, RasterConstants.MAX_SAMPLE
            )

    if width > 2 * RADIUS:
        run_row_bands(band, RADIUS, height - RADIUS, width, parallel)

    logger.debug(f"Applied {mode.value} filter to {width}x{height} raster")
    return raster.with_pixels(output)


def gradient_magnitude(
    plane: np.ndarray, kernel_x: KernelTable, kernel_y: KernelTable
) -> np.ndarray:
    """sqrt(gx^2 + gy^2) of a channel plane under two directional kernels."""
    grad_x = convolve_plane(plane, kernel_x)
    grad_y = convolve_plane(plane, kernel_y)
    return np.sqrt(grad_x**2 + grad_y**2)


def apply_gradient_filter(
    raster: Raster,
    operator: Union[GradientOperator, str],
    parallel: Optional[Parallelism] = None,
) -> Raster:
    """
    Apply a Sobel or Roberts gradient magnitude filter.

    Each channel's magnitude is rounded to the nearest integer (ties to even)
    and clamped to [0, 255].

    Args:
        raster: Input raster
        operator: sobel or roberts
        parallel: Optional row band settings

    Returns:
        New raster with interior R, G, B replaced by edge strength

    Raises:
        UnsupportedFilterMode: If operator is not a gradient operator
        EmptyRaster: If the raster has no pixels
    """
    gradient = resolve_operation(operator, GradientOperator, FilterFamily.GRADIENT)
    _check_not_empty(raster)

    kernel_x, kernel_y = GRADIENT_KERNELS[gradient]
    pixels = raster.pixels
    output = raster.copy_pixels()
    height, width = raster.height, raster.width

    def band(lo: int, hi: int) -> None:
        for channel in RasterConstants.COLOR_CHANNELS:
            magnitude = gradient_magnitude(
                _interior_band(pixels[:, :, channel], lo, hi), kernel_x, kernel_y
            )
            interior = np.rint(magnitude[RADIUS : RADIUS + (hi - lo), RADIUS : width - RADIUS])
            output[lo:hi, RADIUS : width - RADIUS, channel] = np.clip(
                interior, RasterConstants.MIN_SAMPLE, RasterConstants.MAX_SAMPLE
            )

    if width > 2 * RADIUS:
        run_row_bands(band, RADIUS, height - RADIUS, width, parallel)

    logger.debug(f"Applied {gradient.value} gradient to {width}x{height} raster")
    return raster.with_pixels(output)
