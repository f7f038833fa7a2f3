"""
API exceptions and handlers.

Engine precondition violations (RasterError) become 400 responses, missing
rasters 404, store capacity problems 413. Anything unexpected is logged and
returned as 500.
"""

import functools
import inspect
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from core.constants import ErrorMessages
from core.exceptions import RasterError, StoreCapacityError

logger = logging.getLogger(__name__)


class RasterNotFoundException(Exception):
    """Raised when a raster id is not present in the store."""

    def __init__(self, raster_id: str):
        self.raster_id = raster_id
        super().__init__(ErrorMessages.RASTER_NOT_FOUND.format(raster_id=raster_id))


def _error_body(exc: Exception) -> dict:
    return {"error": type(exc).__name__, "detail": str(exc)}


async def raster_not_found_handler(request: Request, exc: RasterNotFoundException):
    return JSONResponse(status_code=404, content=_error_body(exc))


async def raster_error_handler(request: Request, exc: RasterError):
    logger.warning(f"Rejected request to {request.url.path}: {exc}")
    return JSONResponse(status_code=400, content=_error_body(exc))


async def store_capacity_handler(request: Request, exc: StoreCapacityError):
    logger.warning(f"Raster too large for store: {exc}")
    return JSONResponse(status_code=413, content=_error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain exception handlers to an application."""
    app.add_exception_handler(RasterNotFoundException, raster_not_found_handler)
    app.add_exception_handler(RasterError, raster_error_handler)
    app.add_exception_handler(StoreCapacityError, store_capacity_handler)


_PASSTHROUGH = (HTTPException, RasterNotFoundException, RasterError, StoreCapacityError)


def safe_endpoint(func):
    """
    Wrap an endpoint so unexpected errors become a logged 500.

    HTTP and domain exceptions pass through to their registered handlers.
    Works for both async and sync endpoints.
    """
    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except _PASSTHROUGH:
                raise
            except Exception as e:
                logger.error(f"Error in {func.__name__}: {e}", exc_info=True)
                raise HTTPException(
                    status_code=500,
                    detail=ErrorMessages.PROCESSING_FAILED.format(error=str(e)),
                )

        return async_wrapper

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except _PASSTHROUGH:
            raise
        except Exception as e:
            logger.error(f"Error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(
                status_code=500,
                detail=ErrorMessages.PROCESSING_FAILED.format(error=str(e)),
            )

    return sync_wrapper
