"""
Pytest configuration for API integration tests
"""

import base64

import numpy as np
import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="function")
def client():
    """
    Create a test client with properly initialized app state.
    Each test gets a fresh client to avoid state contamination.
    """
    from config import EngineSettings, Settings
    from core.raster_store import RasterStore
    from main import app

    settings = Settings(engine=EngineSettings(max_workers=1, max_kernel_size=9))
    raster_store = RasterStore(max_rasters=20, max_memory_mb=32)

    # Set in app state
    app.state.raster_store = raster_store
    app.state.settings = settings
    app.state.config = settings.to_dict()

    # Create test client (no context manager, lifespan is not needed)
    test_client = TestClient(app, raise_server_exceptions=False)

    yield test_client

    raster_store.cleanup()


def encode_pixels(pixels: np.ndarray) -> dict:
    """Upload payload for an (H, W, 4) uint8 array."""
    height, width = pixels.shape[:2]
    return {
        "width": width,
        "height": height,
        "data": base64.b64encode(pixels.astype(np.uint8).tobytes()).decode("utf-8"),
    }


def decode_payload(payload: dict) -> np.ndarray:
    """(H, W, 4) array from a response payload."""
    buffer = base64.b64decode(payload["data"])
    return np.frombuffer(buffer, dtype=np.uint8).reshape(payload["height"], payload["width"], 4)


@pytest.fixture
def upload(client):
    """Upload an (H, W, 4) array and return its raster id"""

    def _upload(pixels):
        response = client.post("/api/raster/upload", json=encode_pixels(pixels))
        assert response.status_code == 200, response.text
        return response.json()["raster_id"]

    return _upload


@pytest.fixture
def bright_pixel():
    """5x5 black opaque pixels with one white pixel at (2, 2)"""
    pixels = np.zeros((5, 5, 4), dtype=np.uint8)
    pixels[:, :, 3] = 255
    pixels[2, 2, :3] = 255
    return pixels


@pytest.fixture
def encode():
    return encode_pixels


@pytest.fixture
def decode():
    return decode_payload
