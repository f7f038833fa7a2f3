"""
Centralized enumerations for the raster filter engine.

String values are the wire names used by the API and accepted
case-insensitively by the engine facade.
"""

from enum import Enum


class FilterFamily(str, Enum):
    """Operator family a filter mode belongs to."""

    STATISTIC = "statistic"
    CONVOLUTION = "convolution"
    GRADIENT = "gradient"
    COMBINE = "combine"
    INVERT = "invert"


class FilterMode(str, Enum):
    """Every filter the engine can apply. Each tag fixes its coefficient table."""

    MEAN = "mean"
    MEAN_PARTIAL_5 = "mean_partial_5"
    MEAN_CENTER_WEIGHTED_10 = "mean_center_weighted_10"
    MEDIAN = "median"
    MODE = "mode"
    HIGHPASS_8_NEIGHBOR = "highpass_8_neighbor"
    HIGHPASS_4_NEIGHBOR_WEAK = "highpass_4_neighbor_weak"
    HIGHPASS_4_NEIGHBOR_STRONG = "highpass_4_neighbor_strong"
    SOBEL = "sobel"
    ROBERTS = "roberts"
    AND = "and"
    OR = "or"
    XOR = "xor"
    INVERT = "invert"

    @property
    def family(self) -> FilterFamily:
        return _MODE_FAMILIES[self]

    @property
    def windowed(self) -> bool:
        """True for operators that skip border pixels."""
        return self.family in (
            FilterFamily.STATISTIC,
            FilterFamily.CONVOLUTION,
            FilterFamily.GRADIENT,
        )


class GradientOperator(str, Enum):
    """Gradient magnitude operators."""

    SOBEL = "sobel"
    ROBERTS = "roberts"


class CombineOperation(str, Enum):
    """Per-pixel bitwise combinations of two rasters."""

    AND = "and"
    OR = "or"
    XOR = "xor"


_MODE_FAMILIES = {
    FilterMode.MEAN: FilterFamily.STATISTIC,
    FilterMode.MEAN_PARTIAL_5: FilterFamily.STATISTIC,
    FilterMode.MEAN_CENTER_WEIGHTED_10: FilterFamily.STATISTIC,
    FilterMode.MEDIAN: FilterFamily.STATISTIC,
    FilterMode.MODE: FilterFamily.STATISTIC,
    FilterMode.HIGHPASS_8_NEIGHBOR: FilterFamily.CONVOLUTION,
    FilterMode.HIGHPASS_4_NEIGHBOR_WEAK: FilterFamily.CONVOLUTION,
    FilterMode.HIGHPASS_4_NEIGHBOR_STRONG: FilterFamily.CONVOLUTION,
    FilterMode.SOBEL: FilterFamily.GRADIENT,
    FilterMode.ROBERTS: FilterFamily.GRADIENT,
    FilterMode.AND: FilterFamily.COMBINE,
    FilterMode.OR: FilterFamily.COMBINE,
    FilterMode.XOR: FilterFamily.COMBINE,
    FilterMode.INVERT: FilterFamily.INVERT,
}
