"""
Raster transport conversions.

Rasters cross the API boundary as base64 of their raw row-major RGBA bytes.
No image file format is involved.
"""

import base64
import binascii
import logging
from typing import Any, Dict

from core.constants import ErrorMessages
from core.exceptions import InvalidRasterData
from core.raster import Raster

logger = logging.getLogger(__name__)


class RasterConverters:
    """Utilities for converting rasters to and from transport payloads."""

    @staticmethod
    def to_base64(raster: Raster) -> str:
        """
        Encode a raster's raw RGBA buffer as base64.

        Args:
            raster: Input raster

        Returns:
            Base64 encoded string of width * height * 4 bytes
        """
        return base64.b64encode(raster.to_bytes()).decode("utf-8")

    @staticmethod
    def from_base64(width: int, height: int, base64_string: str) -> Raster:
        """
        Decode a base64 RGBA buffer into a raster.

        Args:
            width: Raster width in pixels
            height: Raster height in pixels
            base64_string: Base64 encoded width * height * 4 bytes

        Returns:
            New raster

        Raises:
            InvalidRasterData: If the data is not valid base64
            InvalidDimensions: If the decoded buffer has the wrong length
            EmptyRaster: If width * height == 0
        """
        try:
            buffer = base64.b64decode(base64_string, validate=True)
        except (binascii.Error, ValueError) as e:
            logger.error(f"Failed to decode base64 raster: {e}")
            raise InvalidRasterData(ErrorMessages.INVALID_BASE64.format(error=e)) from e

        return Raster.from_buffer(width, height, buffer)

    @staticmethod
    def to_payload(raster: Raster) -> Dict[str, Any]:
        """Raster as a {width, height, data} dictionary."""
        return {
            "width": raster.width,
            "height": raster.height,
            "data": RasterConverters.to_base64(raster),
        }
