"""
Row band partitioning for windowed operators.

Output rows never depend on other output rows, only on the immutable input,
so the interior can be split into contiguous bands and evaluated on worker
threads. NumPy releases the GIL for most of the per-band work.
"""

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from core.constants import ParallelConstants

logger = logging.getLogger(__name__)

BandFunc = Callable[[int, int], None]


@dataclass(frozen=True)
class Parallelism:
    """Band evaluation settings for one operator call."""

    max_workers: int = 1
    min_pixels: int = ParallelConstants.DEFAULT_MIN_PIXELS

    @classmethod
    def auto(cls, min_pixels: int = ParallelConstants.DEFAULT_MIN_PIXELS) -> "Parallelism":
        """Use the available CPUs, capped."""
        workers = min(os.cpu_count() or 1, ParallelConstants.MAX_WORKERS_CAP)
        return cls(max_workers=max(1, workers), min_pixels=min_pixels)


SERIAL = Parallelism()


def row_bands(start: int, stop: int, band_count: int) -> List[Tuple[int, int]]:
    """
    Split rows [start, stop) into at most band_count contiguous ranges.

    Example:
        >>> row_bands(0, 10, 3)
        [(0, 4), (4, 8), (8, 10)]
    """
    total = stop - start
    if total <= 0:
        return []
    band_count = max(1, min(band_count, total))
    chunk = (total + band_count - 1) // band_count
    return [(lo, min(lo + chunk, stop)) for lo in range(start, stop, chunk)]


def run_row_bands(
    func: BandFunc,
    start: int,
    stop: int,
    width: int,
    parallel: Optional[Parallelism] = None,
) -> int:
    """
    Evaluate func(lo, hi) over rows [start, stop), banded when worthwhile.

    Each call must write only its own output rows. Exceptions raised by a
    band propagate to the caller.

    Args:
        func: Band worker receiving a half-open row range
        start: First row
        stop: One past the last row
        width: Row width in pixels (for the size threshold)
        parallel: Band settings, serial if None

    Returns:
        Number of bands evaluated
    """
    parallel = parallel or SERIAL
    rows = stop - start
    if rows <= 0:
        return 0

    # Small rasters: threading overhead dominates
    if parallel.max_workers <= 1 or rows * width < parallel.min_pixels:
        func(start, stop)
        return 1

    band_count = min(parallel.max_workers, max(1, rows // ParallelConstants.MIN_BAND_ROWS))
    bands = row_bands(start, stop, band_count)
    if len(bands) == 1:
        func(start, stop)
        return 1

    logger.debug(f"Evaluating rows {start}..{stop} in {len(bands)} bands")
    with ThreadPoolExecutor(max_workers=len(bands)) as pool:
        futures: List[Future] = [pool.submit(func, lo, hi) for lo, hi in bands]
        for future in futures:
            future.result()

    return len(bands)
