"""
Statistic operators: mean (box) filters, median filter and mode filter.

All three operate on R, G and B independently over a k x k window, compute
interior pixels only, and copy border pixels and alpha unchanged.
"""

import logging
from collections import Counter
from typing import Iterable, Optional, Tuple, Union

import cv2
import numpy as np

from core.constants import MeanFilterConstants, RasterConstants
from core.enums import FilterFamily, FilterMode
from core.raster import Raster
from filters.bands import Parallelism, run_row_bands
from filters.modes import resolve_mode
from filters.neighborhood import flat_windows, validate_kernel_size

logger = logging.getLogger(__name__)

STATISTIC_MODES = (
    FilterMode.MEAN,
    FilterMode.MEAN_PARTIAL_5,
    FilterMode.MEAN_CENTER_WEIGHTED_10,
    FilterMode.MEDIAN,
    FilterMode.MODE,
)

MEAN_MODES = (
    FilterMode.MEAN,
    FilterMode.MEAN_PARTIAL_5,
    FilterMode.MEAN_CENTER_WEIGHTED_10,
)


def mean_weights(filter_mode: FilterMode, kernel_size: int) -> Tuple[np.ndarray, int]:
    """
    Coefficient table and divisor of a mean filter variant.

    Args:
        filter_mode: One of the three mean modes
        kernel_size: Window side length (odd)

    Returns:
        Tuple of (weights indexed [ky + r][kx + r], divisor)
    """
    radius = kernel_size // 2

    if filter_mode == FilterMode.MEAN:
        return np.ones((kernel_size, kernel_size), dtype=np.float64), kernel_size * kernel_size

    if filter_mode == FilterMode.MEAN_PARTIAL_5:
        weights = np.ones((kernel_size, kernel_size), dtype=np.float64)
        for kx, ky in MeanFilterConstants.PARTIAL_5_EXCLUDED_OFFSETS:
            if abs(kx) <= radius and abs(ky) <= radius:
                weights[ky + radius, kx + radius] = 0.0
        return weights, MeanFilterConstants.PARTIAL_5_DIVISOR

    if filter_mode == FilterMode.MEAN_CENTER_WEIGHTED_10:
        weights = np.zeros((kernel_size, kernel_size), dtype=np.float64)
        weights[radius, radius] = MeanFilterConstants.CENTER_WEIGHT
        return weights, MeanFilterConstants.CENTER_WEIGHTED_DIVISOR

    raise ValueError(f"Not a mean filter mode: {filter_mode}")


def round_half_up(sums: np.ndarray, divisor: int) -> np.ndarray:
    """
    Integer floor(sum / divisor + 0.5) for non-negative integer sums.

    Halves always round up, never to even.
    """
    sums = sums.astype(np.int64)
    return (2 * sums + divisor) // (2 * divisor)


def median_index(length: int) -> int:
    """Index of the median in a sorted window: floor(length * 0.5)."""
    return int(length * 0.5)


def median_value(values: Iterable[int]) -> int:
    """Median of one window using floor(length * 0.5) indexing."""
    ordered = sorted(values)
    return ordered[median_index(len(ordered))]


def modal_value(values: Iterable[int]) -> int:
    """
    Most frequent value of one window.

    Ties go to the value seen first in enumeration order, so a window of
    distinct values returns its first sample.

    Example:
        >>> modal_value([7, 3, 3, 7, 1])
        7
    """
    counts = Counter(values)
    if not counts:
        raise ValueError("Cannot take the mode of an empty window")
    # Counter keeps first-seen order and most_common() is stable on ties
    value, _ = counts.most_common(1)[0]
    return value


def _mean_plane(
    plane: np.ndarray,
    output: np.ndarray,
    weights: np.ndarray,
    divisor: int,
    radius: int,
    lo: int,
    hi: int,
) -> None:
    """Write mean results for interior rows [lo, hi) of one channel."""
    width = plane.shape[1]
    band = plane[lo - radius : hi + radius].astype(np.float64)
    # Exact integer sums (kernels large enough to trigger DFT stay within 0.5)
    sums = np.rint(cv2.filter2D(band, cv2.CV_64F, weights, borderType=cv2.BORDER_REFLECT))
    interior = sums[radius : radius + (hi - lo), radius : width - radius]
    means = round_half_up(interior, divisor)
    output[lo:hi, radius : width - radius] = np.clip(
        means, RasterConstants.MIN_SAMPLE, RasterConstants.MAX_SAMPLE
    )


def _median_plane(
    plane: np.ndarray, output: np.ndarray, radius: int, lo: int, hi: int
) -> None:
    """Write median results for interior rows [lo, hi) of one channel."""
    width = plane.shape[1]
    windows = flat_windows(plane[lo - radius : hi + radius], radius)
    index = median_index(windows.shape[-1])
    # Partitioning places the same element at index as a full ascending sort
    ranked = np.partition(windows, index, axis=-1)
    output[lo:hi, radius : width - radius] = ranked[..., index]


def _mode_plane(
    plane: np.ndarray, output: np.ndarray, radius: int, lo: int, hi: int
) -> None:
    """Write mode results for interior rows [lo, hi) of one channel."""
    width = plane.shape[1]
    windows = flat_windows(plane[lo - radius : hi + radius], radius)
    for row_offset, row_windows in enumerate(windows.tolist()):
        output[lo + row_offset, radius : width - radius] = [
            modal_value(window) for window in row_windows
        ]


def apply_statistic_filter(
    raster: Raster,
    kernel_size: int,
    filter_mode: Union[FilterMode, str],
    parallel: Optional[Parallelism] = None,
) -> Raster:
    """
    Apply a mean, median or mode filter.

    Args:
        raster: Input raster
        kernel_size: Window side length (positive, odd, < min(W, H))
        filter_mode: mean, mean_partial_5, mean_center_weighted_10, median or mode
        parallel: Optional row band settings

    Returns:
        New raster; border pixels within kernel_size // 2 of an edge and the
        alpha channel are copied from the input

    Raises:
        UnsupportedFilterMode: If filter_mode is not a statistic mode
        InvalidKernelSize: If kernel_size is invalid for the raster
        EmptyRaster: If the raster has no pixels
    """
    mode = resolve_mode(filter_mode, STATISTIC_MODES, FilterFamily.STATISTIC)
    radius = validate_kernel_size(raster, kernel_size)

    pixels = raster.pixels
    output = raster.copy_pixels()
    height, width = raster.height, raster.width

    if mode in MEAN_MODES:
        weights, divisor = mean_weights(mode, kernel_size)

        def band(lo: int, hi: int) -> None:
            for channel in RasterConstants.COLOR_CHANNELS:
                _mean_plane(
                    pixels[:, :, channel], output[:, :, channel], weights, divisor, radius, lo, hi
                )

    elif mode == FilterMode.MEDIAN:

        def band(lo: int, hi: int) -> None:
            for channel in RasterConstants.COLOR_CHANNELS:
                _median_plane(pixels[:, :, channel], output[:, :, channel], radius, lo, hi)

    else:

        def band(lo: int, hi: int) -> None:
            for channel in RasterConstants.COLOR_CHANNELS:
                _mode_plane(pixels[:, :, channel], output[:, :, channel], radius, lo, hi)

    bands = run_row_bands(band, radius, height - radius, width, parallel)

    logger.debug(
        f"Applied {mode.value} filter (k={kernel_size}) to {width}x{height} raster "
        f"in {bands} band(s)"
    )
    return raster.with_pixels(output)
