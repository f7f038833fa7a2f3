"""
Filter API Router - Raster filter endpoints

All filter endpoints follow one pattern:
1. Call the filter service with the request's raster ids
2. The service stores the result and returns (raster_id, raster, timing)
3. Return FilterResponse, with the payload when include_data is set

Endpoints are plain functions so FastAPI runs the CPU-bound filters in its
threadpool instead of on the event loop.
"""

import logging
from typing import Any, Callable, Tuple

from fastapi import APIRouter, Depends

from api.dependencies import get_filter_service
from api.exceptions import safe_endpoint
from core.raster import Raster
from schemas import (
    ApplyFilterRequest,
    CombineRequest,
    ConvolutionFilterRequest,
    FilterModeInfo,
    FilterModesResponse,
    FilterResponse,
    GradientFilterRequest,
    InvertRequest,
    RasterPayload,
    StatisticFilterRequest,
)
from services.filter_service import FilterService

logger = logging.getLogger(__name__)

router = APIRouter()


def execute_filter(
    mode: Any,
    include_data: bool,
    filter_callable: Callable[[], Tuple[str, Raster, int]],
) -> FilterResponse:
    """
    Unified helper for executing filter endpoints.

    Args:
        mode: Filter mode (enum or tag) reported in the response
        include_data: Whether to attach the result payload
        filter_callable: Service call returning (raster_id, raster, processing_time_ms)

    Returns:
        FilterResponse for the stored result
    """
    raster_id, raster, processing_time = filter_callable()

    return FilterResponse(
        raster_id=raster_id,
        mode=getattr(mode, "value", mode),
        width=raster.width,
        height=raster.height,
        processing_time_ms=processing_time,
        raster=RasterPayload.from_raster(raster) if include_data else None,
    )


@router.post("/statistic")
@safe_endpoint
def statistic_filter(
    request: StatisticFilterRequest, filter_service=Depends(get_filter_service)
) -> FilterResponse:
    """
    Mean, median or mode filter.

    Pixels closer than kernel_size // 2 to an edge keep their input value.
    """
    return execute_filter(
        request.mode,
        request.include_data,
        lambda: filter_service.statistic(request.raster_id, request.kernel_size, request.mode),
    )


@router.post("/convolution")
@safe_endpoint
def convolution_filter(
    request: ConvolutionFilterRequest, filter_service=Depends(get_filter_service)
) -> FilterResponse:
    """High-pass convolution with a fixed 3x3 kernel"""
    return execute_filter(
        request.mode,
        request.include_data,
        lambda: filter_service.convolution(request.raster_id, request.mode),
    )


@router.post("/gradient")
@safe_endpoint
def gradient_filter(
    request: GradientFilterRequest, filter_service=Depends(get_filter_service)
) -> FilterResponse:
    """Sobel or Roberts gradient magnitude"""
    return execute_filter(
        request.operator,
        request.include_data,
        lambda: filter_service.gradient(request.raster_id, request.operator),
    )


@router.post("/combine")
@safe_endpoint
def combine_rasters(
    request: CombineRequest, filter_service=Depends(get_filter_service)
) -> FilterResponse:
    """Bitwise AND, OR or XOR of two stored rasters of equal size"""
    return execute_filter(
        request.operation,
        request.include_data,
        lambda: filter_service.combine(
            request.raster_id_a, request.raster_id_b, request.operation
        ),
    )


@router.post("/invert")
@safe_endpoint
def invert_raster(
    request: InvertRequest, filter_service=Depends(get_filter_service)
) -> FilterResponse:
    """Invert the color channels, alpha unchanged"""
    return execute_filter(
        "invert",
        request.include_data,
        lambda: filter_service.invert(request.raster_id),
    )


@router.post("/apply")
@safe_endpoint
def apply_filter(
    request: ApplyFilterRequest, filter_service=Depends(get_filter_service)
) -> FilterResponse:
    """Apply any filter by mode tag"""
    return execute_filter(
        request.mode,
        request.include_data,
        lambda: filter_service.apply(
            request.raster_id, request.mode, request.kernel_size, request.other_id
        ),
    )


@router.get("/modes")
async def list_modes() -> FilterModesResponse:
    """Available filter modes"""
    return FilterModesResponse(
        modes=[FilterModeInfo(**info) for info in FilterService.available_modes()]
    )
