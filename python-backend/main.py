"""
Raster Filter Flow - Main FastAPI Application
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))

from api.exceptions import register_exception_handlers  # noqa: E402
from api.routers import filter, raster, system  # noqa: E402
from config import get_settings  # noqa: E402
from core.constants import APIConstants, SystemConstants  # noqa: E402
from core.raster_store import RasterStore  # noqa: E402

# Get configuration
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.system.log_level),
    format=SystemConstants.LOG_FORMAT,
)
logger = logging.getLogger(__name__)

# Suppress watchfiles debug messages
logging.getLogger("watchfiles").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    # Startup
    logger.info("Starting Raster Filter Flow server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")

    raster_store = RasterStore(
        max_rasters=settings.store.max_rasters,
        max_memory_mb=settings.store.max_memory_mb,
    )

    logger.info(
        f"Filter engine ready (max kernel {settings.engine.max_kernel_size}, "
        f"{settings.engine.max_workers} workers)"
    )

    # Store shared objects in app state for access by routers
    app.state.raster_store = raster_store
    app.state.settings = settings
    app.state.config = settings.to_dict()
    app.state.debug = settings.system.debug

    yield

    # Shutdown
    logger.info("Shutting down Raster Filter Flow server...")
    raster_store.cleanup()
    logger.info("Server shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Raster Filter Flow",
    description="Neighborhood, convolution and pointwise filters over RGBA rasters",
    version="1.0.0",
    lifespan=lifespan,
)

if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(raster.router, prefix="/api/raster", tags=["Raster"])
app.include_router(filter.router, prefix="/api/filter", tags=["Filter"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "Raster Filter Flow",
        "status": "running",
        "version": "1.0.0",
        "api_version": APIConstants.API_VERSION,
        "endpoints": {
            "raster": "/api/raster",
            "filter": "/api/filter",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "raster_store": getattr(app.state, "raster_store", None) is not None,
        },
    }


# Error handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": f"Internal server error: {str(exc)}"})


if __name__ == "__main__":
    # Write PID file for process management
    run_dir = os.getenv("RUN_DIR", os.path.join(Path(__file__).parent.parent, "var", "run"))
    pid_file = os.path.join(run_dir, "backend.pid")

    os.makedirs(run_dir, exist_ok=True)

    with open(pid_file, "w") as f:
        f.write(str(os.getpid()))
    logger.info(f"PID {os.getpid()} written to {pid_file}")

    reload_excludes = (
        ["*.log", "*.pyc", "__pycache__", ".git", ".venv", "venv"]
        if settings.system.debug
        else None
    )

    server_config = uvicorn.Config(
        "main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        reload_excludes=reload_excludes,
        log_level=settings.system.log_level.lower(),
        loop="asyncio",
    )

    server = uvicorn.Server(server_config)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    except Exception as e:
        logger.error(f"Server error: {e}")
    finally:
        # Clean up PID file
        try:
            if os.path.exists(pid_file):
                os.remove(pid_file)
                logger.info(f"Removed PID file: {pid_file}")
        except OSError as e:
            logger.warning(f"Failed to remove PID file: {e}")
        logger.info("Server exiting...")
