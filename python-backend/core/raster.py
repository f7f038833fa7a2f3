"""
Raster - immutable RGBA pixel buffer.

A raster holds W*H*4 unsigned 8-bit samples in row-major order with
channel order R, G, B, A. The samples live in a read-only NumPy array of
shape (H, W, 4) so every operator must allocate a new raster for its output.
"""

from typing import Iterable, Sequence, Tuple, Union

import numpy as np

from core.constants import RasterConstants
from core.exceptions import EmptyRaster, InvalidDimensions, InvalidRasterData

BufferLike = Union[bytes, bytearray, memoryview, Sequence[int], np.ndarray]


class Raster:
    """Immutable RGBA raster."""

    __slots__ = ("_pixels",)

    def __init__(self, pixels: np.ndarray):
        """
        Wrap an (H, W, 4) uint8 array.

        The array is copied, so later changes by the caller never reach the
        raster.

        Args:
            pixels: Array of shape (height, width, 4)

        Raises:
            EmptyRaster: If width or height is zero
            InvalidDimensions: If the array is not (H, W, 4)
            InvalidRasterData: If samples are not whole numbers in [0, 255]
        """
        array = np.asarray(pixels)
        if array.ndim != 3 or array.shape[2] != RasterConstants.CHANNELS:
            raise InvalidDimensions(
                f"Raster pixels must have shape (height, width, 4), got {array.shape}",
                actual=tuple(array.shape),
            )

        height, width = array.shape[:2]
        if width * height == 0:
            raise EmptyRaster(width, height)

        if array.dtype != np.uint8:
            if array.dtype.kind not in "uif":
                raise InvalidRasterData(f"Raster samples must be numeric, got dtype {array.dtype}")
            if array.dtype.kind == "f" and not np.all(array == np.floor(array)):
                raise InvalidRasterData("Raster samples must be whole numbers")
            if array.min() < RasterConstants.MIN_SAMPLE or array.max() > RasterConstants.MAX_SAMPLE:
                raise InvalidRasterData("Raster samples must be in the range [0, 255]")
            array = array.astype(np.uint8)

        frozen = np.array(array, dtype=np.uint8, copy=True, order="C")
        frozen.flags.writeable = False
        self._pixels = frozen

    @classmethod
    def from_buffer(cls, width: int, height: int, data: BufferLike) -> "Raster":
        """
        Build a raster from a flat RGBA buffer.

        Args:
            width: Raster width in pixels
            height: Raster height in pixels
            data: W*H*4 samples, row-major, channel order RGBA

        Returns:
            New raster

        Raises:
            EmptyRaster: If width * height == 0
            InvalidDimensions: If the buffer length is not width * height * 4
        """
        if width <= 0 or height <= 0:
            raise EmptyRaster(width, height)

        if isinstance(data, (bytes, bytearray, memoryview)):
            flat = np.frombuffer(data, dtype=np.uint8)
        else:
            flat = np.asarray(data).ravel()

        expected = width * height * RasterConstants.CHANNELS
        if flat.size != expected:
            raise InvalidDimensions(
                f"Buffer holds {flat.size} samples, expected {expected} for {width}x{height} RGBA",
                expected=(expected,),
                actual=(flat.size,),
            )

        return cls(flat.reshape(height, width, RasterConstants.CHANNELS))

    @classmethod
    def blank(
        cls, width: int, height: int, color: Iterable[int] = (0, 0, 0, 255)
    ) -> "Raster":
        """Create a flat-color raster."""
        if width <= 0 or height <= 0:
            raise EmptyRaster(width, height)
        rgba = np.asarray(tuple(color))
        if rgba.shape != (RasterConstants.CHANNELS,):
            raise InvalidRasterData("Color must have exactly 4 RGBA components")
        return cls(np.broadcast_to(rgba, (height, width, RasterConstants.CHANNELS)))

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        """(width, height)"""
        return self.width, self.height

    @property
    def pixels(self) -> np.ndarray:
        """Read-only (H, W, 4) view of the samples."""
        return self._pixels

    @property
    def nbytes(self) -> int:
        return self._pixels.nbytes

    def channel(self, index: int) -> np.ndarray:
        """Read-only (H, W) plane of one channel."""
        return self._pixels[:, :, index]

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        """RGBA tuple at column x, row y."""
        r, g, b, a = self._pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def to_bytes(self) -> bytes:
        """Flat row-major RGBA buffer."""
        return self._pixels.tobytes()

    def copy_pixels(self) -> np.ndarray:
        """Writable copy of the samples, the starting point of every operator output."""
        return self._pixels.copy()

    def with_pixels(self, pixels: np.ndarray) -> "Raster":
        """
        New raster of the same shape with different samples.

        Raises:
            InvalidDimensions: If the new array has a different shape
        """
        if np.shape(pixels) != self._pixels.shape:
            raise InvalidDimensions(
                f"Expected pixels of shape {self._pixels.shape}, got {np.shape(pixels)}",
                expected=self._pixels.shape,
                actual=tuple(np.shape(pixels)),
            )
        return Raster(pixels)

    def same_shape(self, other: "Raster") -> bool:
        return self._pixels.shape == other._pixels.shape

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Raster):
            return NotImplemented
        return self.same_shape(other) and bool(np.array_equal(self._pixels, other._pixels))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Raster(width={self.width}, height={self.height})"
