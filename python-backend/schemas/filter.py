"""
Filter API models.

Each request names its input raster(s) by id. Results are stored and
returned by id; include_data adds the result payload to the response.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from core.constants import KernelSizeConstants
from core.enums import CombineOperation, FilterFamily, FilterMode, GradientOperator

from .common import RasterPayload


class BaseFilterRequest(BaseModel):
    """Fields shared by all filter requests"""

    model_config = {"extra": "forbid"}

    raster_id: str = Field(..., description="Input raster identifier")
    include_data: bool = Field(False, description="Return the result raster payload")

    @field_validator("mode", "operator", mode="before", check_fields=False)
    @classmethod
    def normalize_tag(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class StatisticFilterRequest(BaseFilterRequest):
    """Mean, median or mode filter"""

    mode: FilterMode = Field(FilterMode.MEAN, description="Statistic filter mode")
    kernel_size: int = Field(KernelSizeConstants.DEFAULT_KERNEL_SIZE, description="Odd window size")


class ConvolutionFilterRequest(BaseFilterRequest):
    """High-pass convolution filter"""

    mode: FilterMode = Field(FilterMode.HIGHPASS_8_NEIGHBOR, description="High-pass kernel")


class GradientFilterRequest(BaseFilterRequest):
    """Gradient magnitude filter"""

    operator: GradientOperator = GradientOperator.SOBEL


class CombineRequest(BaseModel):
    """Bitwise combination of two stored rasters"""

    model_config = {"extra": "forbid"}

    raster_id_a: str
    raster_id_b: str
    operation: CombineOperation
    include_data: bool = False

    @field_validator("operation", mode="before")
    @classmethod
    def normalize_tag(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class InvertRequest(BaseFilterRequest):
    """Invert color channels"""


class ApplyFilterRequest(BaseFilterRequest):
    """Apply any filter by mode tag"""

    mode: FilterMode
    kernel_size: int = Field(
        KernelSizeConstants.DEFAULT_KERNEL_SIZE, description="Window size for statistic modes"
    )
    other_id: Optional[str] = Field(None, description="Second operand for and/or/xor")

    @model_validator(mode="after")
    def check_operand(self):
        if self.mode.family == FilterFamily.COMBINE and not self.other_id:
            raise ValueError(f"Filter mode {self.mode.value} requires other_id")
        return self


class FilterResponse(BaseModel):
    """Result of a filter operation"""

    success: bool = True
    raster_id: str
    mode: str
    width: int
    height: int
    processing_time_ms: int
    raster: Optional[RasterPayload] = None


class FilterModeInfo(BaseModel):
    """Filter mode description"""

    mode: str
    family: str
    windowed: bool
    parameters: List[str]


class FilterModesResponse(BaseModel):
    modes: List[FilterModeInfo]
