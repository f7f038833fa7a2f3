"""
System API Router - Status and configuration
"""

import logging
import time
from datetime import datetime

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_app_settings, get_config, get_raster_store
from api.exceptions import safe_endpoint
from core.constants import APIConstants
from schemas import SystemStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


@router.get("/status")
@safe_endpoint
async def get_status(
    raster_store=Depends(get_raster_store), settings=Depends(get_app_settings)
) -> SystemStatus:
    """Get system status"""
    return SystemStatus(
        status="healthy",
        version=APIConstants.API_VERSION,
        uptime=time.time() - START_TIME,
        store=raster_store.get_stats(),
        engine=settings.engine.model_dump(),
    )


@router.post("/debug/{enable}")
@safe_endpoint
async def set_debug_mode(enable: bool, request: Request) -> dict:
    """Enable or disable debug logging"""
    log_level = logging.DEBUG if enable else logging.INFO
    logging.getLogger().setLevel(log_level)

    config = getattr(request.app.state, "config", None)
    if config is not None and "system" in config:
        config["system"]["debug"] = enable

    logger.info(f"Debug mode {'enabled' if enable else 'disabled'}")

    return {"enabled": enable, "log_level": logging.getLevelName(log_level)}


@router.get("/config")
@safe_endpoint
async def get_configuration(config=Depends(get_config)) -> dict:
    """Get current configuration"""
    return config


@router.get("/health")
async def health_check() -> dict:
    """Simple health check"""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}
