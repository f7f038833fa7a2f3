"""
Raster storage API models.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .common import RasterInfo, RasterPayload


class RasterUploadRequest(RasterPayload):
    """Request to store a raw raster"""

    metadata: Optional[Dict[str, Any]] = Field(
        None, description="Free-form metadata stored with the raster"
    )


class RasterUploadResponse(BaseModel):
    """Response from raster upload"""

    success: bool = True
    raster_id: str
    width: int
    height: int


class RasterResponse(BaseModel):
    """Stored raster with its payload"""

    raster_id: str
    raster: RasterPayload


class RasterListResponse(BaseModel):
    """All stored rasters, newest first"""

    rasters: List[RasterInfo]
    count: int
