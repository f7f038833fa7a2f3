"""
Schemas Package

Pydantic schemas for request validation and response serialization,
organized by domain.
"""

from core.enums import CombineOperation, FilterFamily, FilterMode, GradientOperator

from .common import RasterInfo, RasterPayload
from .filter import (
    ApplyFilterRequest,
    CombineRequest,
    ConvolutionFilterRequest,
    FilterModeInfo,
    FilterModesResponse,
    FilterResponse,
    GradientFilterRequest,
    InvertRequest,
    StatisticFilterRequest,
)
from .raster import RasterListResponse, RasterResponse, RasterUploadRequest, RasterUploadResponse
from .system import SystemStatus

__all__ = [
    # Common models
    "RasterInfo",
    "RasterPayload",
    # Raster models
    "RasterUploadRequest",
    "RasterUploadResponse",
    "RasterResponse",
    "RasterListResponse",
    # Filter models
    "StatisticFilterRequest",
    "ConvolutionFilterRequest",
    "GradientFilterRequest",
    "CombineRequest",
    "InvertRequest",
    "ApplyFilterRequest",
    "FilterResponse",
    "FilterModeInfo",
    "FilterModesResponse",
    # System models
    "SystemStatus",
    # Enums (re-exported from core.enums)
    "CombineOperation",
    "FilterFamily",
    "FilterMode",
    "GradientOperator",
]
