"""
Pytest configuration and fixtures for Raster Filter Flow tests
"""

import numpy as np
import pytest

from config import EngineSettings, Settings
from core.raster import Raster
from core.raster_store import RasterStore
from services.filter_service import FilterService


def make_raster(rgb, alpha=255):
    """Build a raster from an (H, W, 3) or (H, W) array of color samples."""
    rgb = np.asarray(rgb, dtype=np.uint8)
    if rgb.ndim == 2:
        rgb = np.repeat(rgb[:, :, None], 3, axis=2)
    height, width = rgb.shape[:2]
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :, :3] = rgb
    pixels[:, :, 3] = alpha
    return Raster(pixels)


@pytest.fixture(name="make_raster")
def make_raster_fixture():
    return make_raster


@pytest.fixture
def flat_raster():
    """7x6 raster of a single color"""
    return Raster.blank(7, 6, (90, 140, 200, 255))


@pytest.fixture
def bright_pixel_raster():
    """5x5 black raster with one white pixel at (2, 2)"""
    gray = np.zeros((5, 5), dtype=np.uint8)
    gray[2, 2] = 255
    return make_raster(gray)


@pytest.fixture
def gradient_raster():
    """8x8 raster whose value grows with x and y"""
    y, x = np.mgrid[0:8, 0:8]
    rgb = np.stack([x * 30, y * 30, (x + y) * 15], axis=2)
    return make_raster(rgb, alpha=200)


@pytest.fixture
def random_raster():
    """Reproducible 40x33 random raster, alpha included"""
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(33, 40, 4), dtype=np.uint8)
    return Raster(pixels)


@pytest.fixture
def raster_store():
    """Create RasterStore instance for testing"""
    store = RasterStore(max_rasters=10, max_memory_mb=16)
    yield store
    store.cleanup()


@pytest.fixture
def settings():
    """Serial engine settings with the default kernel limit"""
    return Settings(engine=EngineSettings(max_workers=1))


@pytest.fixture
def filter_service(raster_store, settings):
    """Create FilterService instance for testing"""
    return FilterService(raster_store=raster_store, settings=settings)
