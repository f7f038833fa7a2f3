"""
Raster transport utilities.

- converters: base64 payload conversions for raw RGBA rasters
"""

from core.image.converters import RasterConverters

__all__ = ["RasterConverters"]
