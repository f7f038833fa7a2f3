"""
Constants and configuration values for the Raster Filter Flow system.
Centralizes all magic numbers and coefficient tables.
"""


# Raster Constants
class RasterConstants:
    """Constants related to the RGBA raster layout."""

    CHANNELS = 4
    RED = 0
    GREEN = 1
    BLUE = 2
    ALPHA = 3

    # Channels transformed by every operator (alpha is carried through)
    COLOR_CHANNELS = (RED, GREEN, BLUE)

    MIN_SAMPLE = 0
    MAX_SAMPLE = 255


# Kernel Constants
class KernelConstants:
    """
    Fixed 3x3 kernels, indexed kernel[row][col] = kernel[ky + 1][kx + 1].

    Applied by correlation (not flipped).
    """

    SOBEL_X = (
        (1, 0, -1),
        (2, 0, -2),
        (1, 0, -1),
    )
    SOBEL_Y = (
        (1, 2, 1),
        (0, 0, 0),
        (-1, -2, -1),
    )

    # 3x3 embedding of the 2x2 Roberts cross
    ROBERTS_X = (
        (0, 0, -1),
        (0, 1, 0),
        (0, 0, 0),
    )
    ROBERTS_Y = (
        (-1, 0, 0),
        (0, 1, 0),
        (0, 0, 0),
    )

    HIGHPASS_8_NEIGHBOR = (
        (-1, -1, -1),
        (-1, 8, -1),
        (-1, -1, -1),
    )
    # Negative weights sit at (kx, ky) = (0, -1), (-1, 0), (0, 1) and (1, 1);
    # the right neighbor (1, 0) is not one of them
    HIGHPASS_4_NEIGHBOR_WEAK = (
        (0, -1, 0),
        (-1, 4, 0),
        (0, -1, -1),
    )
    HIGHPASS_4_NEIGHBOR_STRONG = (
        (1, -2, 1),
        (-2, 4, 1),
        (1, -2, -2),
    )


# Mean Filter Constants
class MeanFilterConstants:
    """Offset tables and divisors of the three mean filter variants."""

    # (kx, ky) offsets left out of the partial-5 sum
    PARTIAL_5_EXCLUDED_OFFSETS = frozenset({(1, 0), (0, 0), (-1, 1), (1, 1)})
    PARTIAL_5_DIVISOR = 5

    CENTER_WEIGHT = 2
    CENTER_WEIGHTED_DIVISOR = 10


# Kernel Size Constants
class KernelSizeConstants:
    """Limits applied to caller-supplied kernel sizes."""

    DEFAULT_KERNEL_SIZE = 3
    MIN_KERNEL_SIZE = 1
    MAX_KERNEL_SIZE = 31
    FIXED_KERNEL_SIZE = 3


# Store Constants
class StoreConstants:
    """Constants related to the in-memory raster store."""

    DEFAULT_MAX_RASTERS = 100
    DEFAULT_MAX_MEMORY_MB = 512
    MIN_RASTERS = 1
    MAX_RASTERS = 10000
    RASTER_ID_PREFIX = "raster_"


# Parallel Evaluation Constants
class ParallelConstants:
    """Row band partitioning thresholds."""

    # Rasters below this pixel count are evaluated in a single band
    DEFAULT_MIN_PIXELS = 512 * 512
    MAX_WORKERS_CAP = 8
    MIN_BAND_ROWS = 16


# API Constants
class APIConstants:
    """Constants for API endpoints."""

    API_VERSION = "v1"
    MAX_RASTER_DIMENSION = 8192


# System Constants
class SystemConstants:
    """Constants for system operations."""

    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ENV_PREFIX = "RFF_"


# Error Messages
class ErrorMessages:
    """Standard error messages."""

    RASTER_NOT_FOUND = "Raster with ID {raster_id} not found"
    INVALID_BASE64 = "Raster data is not valid base64: {error}"
    PROCESSING_FAILED = "Raster processing failed: {error}"
