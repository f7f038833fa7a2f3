"""
Common API models.

A raster crosses the API as its dimensions plus base64 of the raw
row-major RGBA buffer.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field

from core.constants import APIConstants
from core.image.converters import RasterConverters
from core.raster import Raster


class RasterPayload(BaseModel):
    """Raster dimensions and base64 RGBA samples"""

    width: int = Field(..., gt=0, le=APIConstants.MAX_RASTER_DIMENSION, description="Width in pixels")
    height: int = Field(
        ..., gt=0, le=APIConstants.MAX_RASTER_DIMENSION, description="Height in pixels"
    )
    data: str = Field(..., description="Base64 of width * height * 4 bytes, RGBA row-major")

    @classmethod
    def from_raster(cls, raster: Raster) -> "RasterPayload":
        return cls(**RasterConverters.to_payload(raster))


class RasterInfo(BaseModel):
    """Stored raster description"""

    raster_id: str
    width: int
    height: int
    size_bytes: int
    created_at: str
    access_count: int = 0
    metadata: Dict[str, Any] = Field(default_factory=dict)
