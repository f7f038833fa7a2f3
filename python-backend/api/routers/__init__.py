"""
API Routers for Raster Filter Flow
"""

from . import filter, raster, system

__all__ = ["filter", "raster", "system"]
