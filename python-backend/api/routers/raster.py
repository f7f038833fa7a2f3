"""
Raster API Router - Upload, fetch and remove stored rasters

Upload and fetch are plain functions: base64 decoding and encoding of large
rasters runs in FastAPI's threadpool instead of on the event loop.
"""

import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_filter_service, raster_id_param
from api.exceptions import safe_endpoint
from schemas import (
    RasterInfo,
    RasterListResponse,
    RasterPayload,
    RasterResponse,
    RasterUploadRequest,
    RasterUploadResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/upload")
@safe_endpoint
def upload_raster(
    request: RasterUploadRequest, filter_service=Depends(get_filter_service)
) -> RasterUploadResponse:
    """Store a raw RGBA raster and return its id"""
    raster_id, raster = filter_service.upload(
        request.width, request.height, request.data, request.metadata
    )

    return RasterUploadResponse(raster_id=raster_id, width=raster.width, height=raster.height)


@router.get("/")
@safe_endpoint
async def list_rasters(filter_service=Depends(get_filter_service)) -> RasterListResponse:
    """List stored rasters"""
    rasters = [RasterInfo(**info) for info in filter_service.list_rasters()]

    return RasterListResponse(rasters=rasters, count=len(rasters))


@router.get("/{raster_id}")
@safe_endpoint
def get_raster(
    raster_id: str = Depends(raster_id_param), filter_service=Depends(get_filter_service)
) -> RasterResponse:
    """Get a stored raster payload"""
    raster = filter_service.get_raster(raster_id)

    return RasterResponse(raster_id=raster_id, raster=RasterPayload.from_raster(raster))


@router.delete("/{raster_id}")
@safe_endpoint
async def delete_raster(
    raster_id: str = Depends(raster_id_param), filter_service=Depends(get_filter_service)
) -> dict:
    """Remove a stored raster"""
    filter_service.delete_raster(raster_id)

    return {"success": True, "message": f"Raster {raster_id} deleted"}
