"""
Filter Service - Business logic for raster filter operations.

This service resolves stored rasters by id, runs the filter engine and
stores every result so that operations can be chained.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from api.exceptions import RasterNotFoundException
from config import Settings
from core.enums import CombineOperation, FilterFamily, FilterMode, GradientOperator
from core.exceptions import InvalidKernelSize
from core.image.converters import RasterConverters
from core.raster import Raster
from core.raster_store import RasterStore
from core.utils.decorators import timer
from filters import (
    CONVOLUTION_MODES,
    STATISTIC_MODES,
    Parallelism,
    apply_convolution_filter,
    apply_filter,
    apply_gradient_filter,
    apply_statistic_filter,
    combine,
    invert,
)
from filters.modes import resolve_mode, resolve_operation

logger = logging.getLogger(__name__)

FilterResult = Tuple[str, Raster, int]


class FilterService:
    """
    Service for raster filter operations.

    Every public filter method takes raster ids and returns
    (result_raster_id, result_raster, processing_time_ms).
    """

    def __init__(self, raster_store: RasterStore, settings: Settings):
        """
        Initialize filter service.

        Args:
            raster_store: Store holding uploaded and filtered rasters
            settings: Application settings (engine limits are read from it)
        """
        self.raster_store = raster_store
        self.max_kernel_size = settings.engine.max_kernel_size
        self.parallel = Parallelism(
            max_workers=settings.engine.max_workers,
            min_pixels=settings.engine.parallel_min_pixels,
        )

    def upload(
        self, width: int, height: int, data: str, metadata: Optional[Dict[str, Any]] = None
    ) -> Tuple[str, Raster]:
        """Decode a base64 RGBA payload and store it."""
        raster = RasterConverters.from_base64(width, height, data)
        raster_id = self.raster_store.store(raster, {"source": "upload", **(metadata or {})})
        logger.debug(f"Uploaded raster {raster_id} ({width}x{height})")
        return raster_id, raster

    def get_raster(self, raster_id: str) -> Raster:
        """
        Look up a stored raster.

        Raises:
            RasterNotFoundException: If the id is not in the store
        """
        raster = self.raster_store.get(raster_id)
        if raster is None:
            raise RasterNotFoundException(raster_id)
        return raster

    def delete_raster(self, raster_id: str) -> None:
        if not self.raster_store.delete(raster_id):
            raise RasterNotFoundException(raster_id)

    def list_rasters(self) -> List[Dict[str, Any]]:
        return self.raster_store.list_rasters()

    def _check_kernel_size(self, kernel_size: int):
        if isinstance(kernel_size, int) and kernel_size > self.max_kernel_size:
            raise InvalidKernelSize(
                kernel_size, f"exceeds the configured maximum of {self.max_kernel_size}"
            )

    def _execute_filter(
        self,
        source_ids: List[str],
        filter_func: Callable[..., Raster],
        metadata: Dict[str, Any],
    ) -> FilterResult:
        """
        Template method for filter operations.

        Resolves the source rasters, runs filter_func on them in order,
        times the run and stores the result.

        Args:
            source_ids: Ids of the input rasters, passed positionally to filter_func
            filter_func: Engine call returning the output raster
            metadata: Operation description stored with the result

        Returns:
            Tuple of (raster_id, raster, processing_time_ms)
        """
        sources = [self.get_raster(raster_id) for raster_id in source_ids]

        with timer() as t:
            result = filter_func(*sources)

        # Read processing time AFTER with block (timer updates in finally)
        processing_time_ms = t["ms"]

        raster_id = self.raster_store.store(
            result,
            {"source_ids": list(source_ids), "processing_time_ms": processing_time_ms, **metadata},
        )
        logger.debug(
            f"{metadata.get('mode')} on {', '.join(source_ids)} -> {raster_id} "
            f"in {processing_time_ms} ms"
        )
        return raster_id, result, processing_time_ms

    def statistic(self, raster_id: str, kernel_size: int, mode: Any) -> FilterResult:
        """Mean, median or mode filter over a kernel_size window."""
        filter_mode = resolve_mode(mode, STATISTIC_MODES, FilterFamily.STATISTIC)
        self._check_kernel_size(kernel_size)
        return self._execute_filter(
            [raster_id],
            lambda raster: apply_statistic_filter(
                raster, kernel_size, filter_mode, parallel=self.parallel
            ),
            {"mode": filter_mode.value, "kernel_size": kernel_size},
        )

    def convolution(self, raster_id: str, mode: Any) -> FilterResult:
        """High-pass convolution filter."""
        filter_mode = resolve_mode(mode, CONVOLUTION_MODES, FilterFamily.CONVOLUTION)
        return self._execute_filter(
            [raster_id],
            lambda raster: apply_convolution_filter(raster, filter_mode, parallel=self.parallel),
            {"mode": filter_mode.value, "kernel_size": 3},
        )

    def gradient(self, raster_id: str, operator: Any) -> FilterResult:
        """Sobel or Roberts gradient magnitude."""
        gradient = resolve_operation(operator, GradientOperator, FilterFamily.GRADIENT)
        return self._execute_filter(
            [raster_id],
            lambda raster: apply_gradient_filter(raster, gradient, parallel=self.parallel),
            {"mode": gradient.value, "kernel_size": 3},
        )

    def combine(self, raster_id_a: str, raster_id_b: str, operation: Any) -> FilterResult:
        """Bitwise AND, OR or XOR of two stored rasters."""
        op = resolve_operation(operation, CombineOperation, FilterFamily.COMBINE)
        return self._execute_filter(
            [raster_id_a, raster_id_b],
            lambda a, b: combine(a, b, op),
            {"mode": op.value},
        )

    def invert(self, raster_id: str) -> FilterResult:
        """Invert the color channels."""
        return self._execute_filter(
            [raster_id], invert, {"mode": FilterMode.INVERT.value}
        )

    def apply(
        self,
        raster_id: str,
        mode: Any,
        kernel_size: int = 3,
        other_id: Optional[str] = None,
    ) -> FilterResult:
        """
        Apply any filter by mode tag.

        Combination modes take their second operand from other_id.
        """
        filter_mode = resolve_mode(mode, tuple(FilterMode))
        family = filter_mode.family

        if family == FilterFamily.STATISTIC:
            self._check_kernel_size(kernel_size)

        source_ids = [raster_id]
        if family == FilterFamily.COMBINE:
            if other_id is None:
                raise ValueError(f"Filter mode {filter_mode.value!r} requires other_id")
            source_ids.append(other_id)

        metadata = {"mode": filter_mode.value}
        if filter_mode.windowed:
            metadata["kernel_size"] = kernel_size if family == FilterFamily.STATISTIC else 3

        return self._execute_filter(
            source_ids,
            lambda raster, other=None: apply_filter(
                raster, filter_mode, kernel_size, other=other, parallel=self.parallel
            ),
            metadata,
        )

    @staticmethod
    def available_modes() -> List[Dict[str, Any]]:
        """Describe every filter mode with its family and parameters."""
        modes = []
        for mode in FilterMode:
            family = mode.family
            if family == FilterFamily.STATISTIC:
                parameters = ["kernel_size"]
            elif family == FilterFamily.COMBINE:
                parameters = ["other_id"]
            else:
                parameters = []
            modes.append(
                {
                    "mode": mode.value,
                    "family": family.value,
                    "windowed": mode.windowed,
                    "parameters": parameters,
                }
            )
        return modes
