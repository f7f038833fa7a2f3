"""
Shared FastAPI dependencies for the Raster Filter Flow service.
Centralizes access to the objects created at startup in app.state.
"""

import logging
from typing import Any, Dict

from fastapi import Depends, HTTPException, Path, Request

from config import Settings, get_settings
from core.raster_store import RasterStore
from services.filter_service import FilterService

logger = logging.getLogger(__name__)


def get_raster_store(request: Request) -> RasterStore:
    """
    Get RasterStore instance from app state.

    Raises:
        HTTPException: If the store was not initialized
    """
    try:
        return request.app.state.raster_store
    except AttributeError as e:
        logger.error(f"Raster store not initialized in app state: {e}")
        raise HTTPException(
            status_code=500, detail="Internal server error: Raster store not initialized"
        )


def get_app_settings(request: Request) -> Settings:
    """Settings attached at startup, falling back to the environment."""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_config(request: Request) -> Dict[str, Any]:
    """
    Get application configuration as a dictionary.

    Args:
        request: FastAPI request object

    Returns:
        Configuration dictionary
    """
    try:
        return request.app.state.config
    except AttributeError:
        logger.warning("Config not found in app state, using defaults")
        return {}


def get_filter_service(
    raster_store: RasterStore = Depends(get_raster_store),
    settings: Settings = Depends(get_app_settings),
) -> FilterService:
    """
    Get filter service instance.

    Args:
        raster_store: Raster store dependency
        settings: Application settings dependency

    Returns:
        FilterService instance
    """
    return FilterService(raster_store=raster_store, settings=settings)


def raster_id_param(raster_id: str = Path(..., description="Unique raster identifier")) -> str:
    """Common raster ID path parameter."""
    return raster_id
