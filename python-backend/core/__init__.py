"""
Core modules for Raster Filter Flow
"""

from .raster import Raster
from .raster_store import RasterStore, StoredRaster

__all__ = [
    "Raster",
    "RasterStore",
    "StoredRaster",
]
