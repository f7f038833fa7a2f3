"""
Raster Filter Engine.

Pure functions over immutable rasters. Every operator validates its inputs
before allocating output and returns a new Raster:

- apply_statistic_filter: mean (3 tables), median, mode
- apply_convolution_filter: high-pass family
- apply_gradient_filter: Sobel, Roberts
- combine: AND, OR, XOR of two rasters
- invert: 255 - value
- apply_filter: dispatch by FilterMode
"""

from typing import Optional, Union

from core.constants import KernelSizeConstants
from core.enums import CombineOperation, FilterFamily, FilterMode, GradientOperator
from core.exceptions import UnsupportedFilterMode
from core.raster import Raster

from .bands import Parallelism
from .convolution import CONVOLUTION_MODES, apply_convolution_filter, apply_gradient_filter
from .modes import resolve_mode
from .neighborhood import sample_neighborhood, validate_kernel_size
from .pointwise import combine, invert
from .statistic import STATISTIC_MODES, apply_statistic_filter, median_value, modal_value


def apply_filter(
    raster: Raster,
    filter_mode: Union[FilterMode, str],
    kernel_size: int = KernelSizeConstants.DEFAULT_KERNEL_SIZE,
    other: Optional[Raster] = None,
    parallel: Optional[Parallelism] = None,
) -> Raster:
    """
    Apply any filter by its mode tag.

    Args:
        raster: Input raster (first operand for combinations)
        filter_mode: Any FilterMode value
        kernel_size: Window size, used by statistic filters only
        other: Second operand, required by and/or/xor
        parallel: Optional row band settings for windowed filters

    Returns:
        New raster

    Raises:
        UnsupportedFilterMode: If the mode is unknown
        ValueError: If a combination mode is called without a second raster
    """
    mode = resolve_mode(filter_mode, tuple(FilterMode))
    family = mode.family

    if family == FilterFamily.STATISTIC:
        return apply_statistic_filter(raster, kernel_size, mode, parallel=parallel)
    if family == FilterFamily.CONVOLUTION:
        return apply_convolution_filter(raster, mode, parallel=parallel)
    if family == FilterFamily.GRADIENT:
        return apply_gradient_filter(raster, GradientOperator(mode.value), parallel=parallel)
    if family == FilterFamily.COMBINE:
        if other is None:
            raise ValueError(f"Filter mode {mode.value!r} requires a second raster")
        return combine(raster, other, CombineOperation(mode.value))
    if family == FilterFamily.INVERT:
        return invert(raster)

    raise UnsupportedFilterMode(filter_mode)


__all__ = [
    "CONVOLUTION_MODES",
    "STATISTIC_MODES",
    "Parallelism",
    "apply_convolution_filter",
    "apply_filter",
    "apply_gradient_filter",
    "apply_statistic_filter",
    "combine",
    "invert",
    "median_value",
    "modal_value",
    "sample_neighborhood",
    "validate_kernel_size",
]
