"""
Raster filter engine errors.

All engine failures are precondition violations raised before any output
buffer is allocated. Callers must re-invoke with corrected inputs.
"""

from typing import Optional, Tuple


class RasterError(ValueError):
    """Base class for all raster filter engine errors."""


class EmptyRaster(RasterError):
    """Raised when a raster has no pixels (width * height == 0)."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        super().__init__(f"Raster has no pixels ({width}x{height})")


class InvalidDimensions(RasterError):
    """Raised when raster shapes do not match or a buffer has the wrong size."""

    def __init__(
        self,
        message: str,
        expected: Optional[Tuple[int, ...]] = None,
        actual: Optional[Tuple[int, ...]] = None,
    ):
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class InvalidKernelSize(RasterError):
    """Raised when a kernel size is non-positive, even, or leaves no interior pixels."""

    def __init__(self, kernel_size, reason: str):
        self.kernel_size = kernel_size
        super().__init__(f"Invalid kernel size {kernel_size!r}: {reason}")


class InvalidRasterData(RasterError):
    """Raised when a transport payload cannot be decoded into samples."""


class UnsupportedFilterMode(RasterError):
    """Raised when a filter mode is unknown or not valid for the requested operator."""

    def __init__(self, mode, family: Optional[str] = None):
        self.mode = mode
        self.family = family
        if family:
            message = f"Filter mode {mode!r} is not a {family} filter"
        else:
            message = f"Unknown filter mode: {mode!r}"
        super().__init__(message)


class StoreCapacityError(Exception):
    """Raised when a raster can never fit in the raster store."""

    def __init__(self, size_bytes: int, max_bytes: int):
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes
        super().__init__(
            f"Raster of {size_bytes} bytes exceeds store limit of {max_bytes} bytes"
        )
