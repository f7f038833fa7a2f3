"""
Utility decorators and context managers.
"""

import time
from contextlib import contextmanager
from typing import Dict, Iterator


@contextmanager
def timer() -> Iterator[Dict[str, int]]:
    """
    Measure elapsed wall time of a block in milliseconds.

    The result is written in a finally clause, so read it after the block:

        with timer() as t:
            do_work()
        elapsed = t["ms"]

    Reports at least 1 ms.
    """
    result = {"ms": 0}
    start = time.perf_counter()
    try:
        yield result
    finally:
        elapsed = (time.perf_counter() - start) * 1000
        result["ms"] = max(1, int(round(elapsed)))

