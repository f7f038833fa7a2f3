"""
API Integration Tests for Filter Endpoints
"""

import numpy as np
import pytest


class TestFilterAPI:
    """Integration tests for filter endpoints"""

    @pytest.fixture
    def bright_id(self, upload, bright_pixel):
        return upload(bright_pixel)

    def test_statistic_mean(self, client, decode, bright_id):
        """Test the 5x5 bright pixel example through the API"""
        response = client.post(
            "/api/filter/statistic",
            json={"raster_id": bright_id, "mode": "mean", "kernel_size": 3, "include_data": True},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["mode"] == "mean"
        assert data["width"] == 5
        assert data["processing_time_ms"] > 0

        pixels = decode(data["raster"])
        assert np.all(pixels[1:4, 1:4, :3] == 28)
        assert np.all(pixels[0] == [0, 0, 0, 255])

    def test_result_without_data(self, client, bright_id):
        response = client.post("/api/filter/statistic", json={"raster_id": bright_id})

        assert response.status_code == 200
        assert response.json()["raster"] is None

    def test_result_is_stored(self, client, decode, bright_id):
        """Test filter results can be fetched and chained"""
        response = client.post("/api/filter/invert", json={"raster_id": bright_id})
        inverted_id = response.json()["raster_id"]

        response = client.post(
            "/api/filter/invert", json={"raster_id": inverted_id, "include_data": True}
        )
        twice = decode(response.json()["raster"])

        original = decode(client.get(f"/api/raster/{bright_id}").json()["raster"])
        assert np.array_equal(twice, original)

    def test_mode_case_insensitive(self, client, bright_id):
        response = client.post(
            "/api/filter/statistic", json={"raster_id": bright_id, "mode": "MEDIAN"}
        )

        assert response.status_code == 200
        assert response.json()["mode"] == "median"

    def test_even_kernel(self, client, bright_id):
        response = client.post(
            "/api/filter/statistic", json={"raster_id": bright_id, "kernel_size": 4}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidKernelSize"

    def test_kernel_too_large_for_raster(self, client, bright_id):
        response = client.post(
            "/api/filter/statistic", json={"raster_id": bright_id, "kernel_size": 5}
        )

        assert response.status_code == 400

    def test_kernel_above_configured_max(self, client, upload):
        raster_id = upload(np.zeros((20, 20, 4), dtype=np.uint8))
        response = client.post(
            "/api/filter/statistic", json={"raster_id": raster_id, "kernel_size": 11}
        )

        assert response.status_code == 400
        assert "maximum" in response.json()["detail"]

    def test_statistic_wrong_family(self, client, bright_id):
        response = client.post(
            "/api/filter/statistic", json={"raster_id": bright_id, "mode": "sobel"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "UnsupportedFilterMode"

    def test_unknown_mode(self, client, bright_id):
        response = client.post(
            "/api/filter/statistic", json={"raster_id": bright_id, "mode": "blur"}
        )
        assert response.status_code == 422

    def test_missing_raster(self, client):
        response = client.post("/api/filter/statistic", json={"raster_id": "raster_missing"})
        assert response.status_code == 404

    def test_convolution(self, client, decode, bright_id):
        response = client.post(
            "/api/filter/convolution",
            json={"raster_id": bright_id, "mode": "highpass_8_neighbor", "include_data": True},
        )

        assert response.status_code == 200
        pixels = decode(response.json()["raster"])
        assert tuple(pixels[2, 2, :3]) == (255, 255, 255)
        assert tuple(pixels[1, 1, :3]) == (0, 0, 0)

    def test_gradient(self, client, decode, bright_id):
        response = client.post(
            "/api/filter/gradient",
            json={"raster_id": bright_id, "operator": "sobel", "include_data": True},
        )

        assert response.status_code == 200
        assert response.json()["mode"] == "sobel"
        pixels = decode(response.json()["raster"])
        assert pixels[2, 2, 0] == 0
        assert pixels[1, 2, 0] == 255

    def test_combine_xor(self, client, decode, bright_id):
        response = client.post(
            "/api/filter/combine",
            json={
                "raster_id_a": bright_id,
                "raster_id_b": bright_id,
                "operation": "xor",
                "include_data": True,
            },
        )

        assert response.status_code == 200
        pixels = decode(response.json()["raster"])
        assert np.all(pixels[:, :, :3] == 0)
        assert np.all(pixels[:, :, 3] == 255)

    def test_combine_mismatch(self, client, upload, bright_id):
        other = upload(np.zeros((4, 6, 4), dtype=np.uint8))
        response = client.post(
            "/api/filter/combine",
            json={"raster_id_a": bright_id, "raster_id_b": other, "operation": "and"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "InvalidDimensions"

    def test_apply(self, client, decode, bright_id):
        response = client.post(
            "/api/filter/apply",
            json={"raster_id": bright_id, "mode": "mean_partial_5", "include_data": True},
        )

        assert response.status_code == 200
        pixels = decode(response.json()["raster"])
        assert pixels[2, 3, 0] == 51
        assert pixels[2, 2, 0] == 0

    def test_apply_combine_requires_other(self, client, bright_id):
        response = client.post("/api/filter/apply", json={"raster_id": bright_id, "mode": "and"})
        assert response.status_code == 422

    def test_unknown_field_rejected(self, client, bright_id):
        response = client.post(
            "/api/filter/invert", json={"raster_id": bright_id, "roi": {"x": 0}}
        )
        assert response.status_code == 422

    def test_modes(self, client):
        response = client.get("/api/filter/modes")

        assert response.status_code == 200
        modes = {m["mode"]: m["family"] for m in response.json()["modes"]}
        assert len(modes) == 14
        assert modes["roberts"] == "gradient"
        assert modes["highpass_4_neighbor_weak"] == "convolution"
