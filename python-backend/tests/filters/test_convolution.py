"""
Tests for high-pass and gradient filters
"""

import math

import numpy as np
import pytest

from core.enums import FilterMode, GradientOperator
from core.exceptions import UnsupportedFilterMode
from core.raster import Raster
from filters.convolution import (
    CONVOLUTION_MODES,
    apply_convolution_filter,
    apply_gradient_filter,
    as_kernel,
    convolve_plane,
)
from filters.neighborhood import sample_neighborhood

NEGATIVE_OFFSETS = {(0, -1), (-1, 0), (0, 1), (1, 1)}

# Weight of the sample at offset (kx, ky) for each high-pass mode
REFERENCE_HIGHPASS_WEIGHTS = {
    FilterMode.HIGHPASS_8_NEIGHBOR: lambda kx, ky: 8 if (kx, ky) == (0, 0) else -1,
    FilterMode.HIGHPASS_4_NEIGHBOR_WEAK: lambda kx, ky: (
        4 if (kx, ky) == (0, 0) else -1 if (kx, ky) in NEGATIVE_OFFSETS else 0
    ),
    FilterMode.HIGHPASS_4_NEIGHBOR_STRONG: lambda kx, ky: (
        4 if (kx, ky) == (0, 0) else -2 if (kx, ky) in NEGATIVE_OFFSETS else 1
    ),
}

# Row-major 3x3 weights, matching the sampler's window order
REFERENCE_GRADIENT_WEIGHTS = {
    GradientOperator.SOBEL: (
        [1, 0, -1, 2, 0, -2, 1, 0, -1],
        [1, 2, 1, 0, 0, 0, -1, -2, -1],
    ),
    GradientOperator.ROBERTS: (
        [0, 0, -1, 0, 1, 0, 0, 0, 0],
        [-1, 0, 0, 0, 1, 0, 0, 0, 0],
    ),
}


def assert_border_unchanged(source, result):
    """The one-pixel frame is copied verbatim."""
    for rows in (np.s_[0], np.s_[-1], np.s_[:, 0], np.s_[:, -1]):
        assert np.array_equal(result.pixels[rows], source.pixels[rows])


@pytest.fixture
def ramp_raster(make_raster):
    """6x5 raster whose red channel is 10 * x, other channels constant"""
    rgb = np.zeros((5, 6, 3), dtype=np.uint8)
    rgb[:, :, 0] = np.arange(6, dtype=np.uint8) * 10
    rgb[:, :, 1] = 100
    rgb[:, :, 2] = 7
    return make_raster(rgb, alpha=99)


class TestHighPass:
    """Test the three high-pass kernels"""

    @pytest.mark.parametrize("mode", CONVOLUTION_MODES)
    def test_flat_raster_interior_zero(self, flat_raster, mode):
        """Test coefficients summing to zero cancel a flat color"""
        result = apply_convolution_filter(flat_raster, mode)

        assert np.all(result.pixels[1:-1, 1:-1, :3] == 0)
        assert np.array_equal(result.pixels[0], flat_raster.pixels[0])
        assert np.array_equal(result.pixels[:, -1], flat_raster.pixels[:, -1])
        assert np.all(result.channel(3) == 255)

    def test_8_neighbor_clamps(self, bright_pixel_raster):
        """Test raw sums are clamped, not divided"""
        result = apply_convolution_filter(bright_pixel_raster, FilterMode.HIGHPASS_8_NEIGHBOR)

        # 8 * 255 clamps to 255, -255 clamps to 0
        assert result.pixel(2, 2)[:3] == (255, 255, 255)
        assert result.pixel(1, 1)[:3] == (0, 0, 0)
        assert result.pixel(3, 2)[:3] == (0, 0, 0)

    def test_4_neighbor_weak(self, make_raster):
        gray = np.full((5, 5), 50, dtype=np.uint8)
        gray[2, 2] = 60
        result = apply_convolution_filter(make_raster(gray), "highpass_4_neighbor_weak")

        # 4 * 60 - 4 * 50
        assert result.pixel(2, 2)[0] == 40
        # Axis neighbor: 4 * 50 - 60 - 3 * 50 = -10
        assert result.pixel(2, 1)[0] == 0

    @pytest.mark.parametrize(
        "mode, lit",
        [
            (FilterMode.HIGHPASS_4_NEIGHBOR_WEAK, {(2, 2)}),
            (FilterMode.HIGHPASS_4_NEIGHBOR_STRONG, {(2, 2), (1, 2), (1, 3), (3, 1), (3, 3)}),
        ],
    )
    def test_4_neighbor_bright_pixel(self, bright_pixel_raster, mode, lit):
        """Test only positive weights light up around a single white pixel"""
        result = apply_convolution_filter(bright_pixel_raster, mode)

        lit_now = {(x, y) for y in range(1, 4) for x in range(1, 4) if result.pixel(x, y)[0] > 0}
        assert lit_now == lit
        for x, y in lit:
            assert result.pixel(x, y)[:3] == (255, 255, 255)

    @pytest.mark.parametrize(
        "mode, offset, expected",
        [
            # center 60 over neighbors of 50 gives 40 before the raised neighbor
            (FilterMode.HIGHPASS_4_NEIGHBOR_WEAK, (1, 0), 40),
            (FilterMode.HIGHPASS_4_NEIGHBOR_WEAK, (1, 1), 30),
            (FilterMode.HIGHPASS_4_NEIGHBOR_WEAK, (-1, 0), 30),
            (FilterMode.HIGHPASS_4_NEIGHBOR_WEAK, (-1, 1), 40),
            (FilterMode.HIGHPASS_4_NEIGHBOR_STRONG, (1, 0), 50),
            (FilterMode.HIGHPASS_4_NEIGHBOR_STRONG, (1, 1), 20),
            (FilterMode.HIGHPASS_4_NEIGHBOR_STRONG, (0, -1), 20),
            (FilterMode.HIGHPASS_4_NEIGHBOR_STRONG, (-1, 1), 50),
        ],
    )
    def test_4_neighbor_single_offset_weight(self, make_raster, mode, offset, expected):
        """Test the weight of one neighbor by raising it by 10"""
        kx, ky = offset
        gray = np.full((3, 3), 50, dtype=np.uint8)
        gray[1, 1] = 60
        gray[1 + ky, 1 + kx] = 60

        result = apply_convolution_filter(make_raster(gray), mode)
        assert result.pixel(1, 1)[0] == expected

    def test_right_neighbor_not_subtracted(self, make_raster):
        """Test a dark right neighbor leaves both 4-neighbor sums at zero"""
        gray = np.full((3, 3), 50, dtype=np.uint8)
        gray[1, 2] = 0
        raster = make_raster(gray)

        # weak: 4 * 50 - 4 * 50; strong: 4 * 50 - 8 * 50 + 3 * 50 clamps
        assert apply_convolution_filter(raster, FilterMode.HIGHPASS_4_NEIGHBOR_WEAK).pixel(1, 1)[0] == 0
        assert apply_convolution_filter(raster, FilterMode.HIGHPASS_4_NEIGHBOR_STRONG).pixel(1, 1)[0] == 0
        assert apply_convolution_filter(raster, FilterMode.HIGHPASS_8_NEIGHBOR).pixel(1, 1)[0] == 50

    @pytest.mark.parametrize("mode", CONVOLUTION_MODES)
    def test_matches_reference(self, random_raster, mode):
        """Test against a per-pixel weighted sum over the sampler's window"""
        weights = [REFERENCE_HIGHPASS_WEIGHTS[mode](kx, ky) for ky in (-1, 0, 1) for kx in (-1, 0, 1)]
        result = apply_convolution_filter(random_raster, mode)

        for y in range(1, random_raster.height - 1):
            for x in range(1, random_raster.width - 1):
                for channel in range(3):
                    window = sample_neighborhood(random_raster, x, y, 1, channel)
                    total = sum(w * v for w, v in zip(weights, window))
                    assert result.pixels[y, x, channel] == min(255, max(0, total))

        assert_border_unchanged(random_raster, result)
        assert np.array_equal(result.channel(3), random_raster.channel(3))

    def test_wrong_family(self, flat_raster):
        with pytest.raises(UnsupportedFilterMode):
            apply_convolution_filter(flat_raster, FilterMode.MEDIAN)

    def test_narrow_raster_copied(self):
        """Test rasters without interior pixels come back unchanged"""
        raster = Raster.blank(2, 6, (1, 2, 3, 4))
        assert apply_convolution_filter(raster, FilterMode.HIGHPASS_8_NEIGHBOR) == raster


class TestGradient:
    """Test Sobel and Roberts magnitude"""

    @pytest.mark.parametrize("operator", list(GradientOperator))
    def test_flat_raster_interior_zero(self, flat_raster, operator):
        result = apply_gradient_filter(flat_raster, operator)

        assert np.all(result.pixels[1:-1, 1:-1, :3] == 0)
        assert np.array_equal(result.pixels[-1], flat_raster.pixels[-1])
        assert np.array_equal(result.pixels[:, 0], flat_raster.pixels[:, 0])

    def test_sobel_ramp(self, ramp_raster):
        """Test a horizontal ramp of step 10 gives (1 + 2 + 1) * 20"""
        result = apply_gradient_filter(ramp_raster, GradientOperator.SOBEL)

        assert np.all(result.pixels[1:-1, 1:-1, 0] == 80)
        assert np.all(result.pixels[1:-1, 1:-1, 1] == 0)
        assert np.all(result.channel(3) == 99)

    def test_roberts_ramp(self, ramp_raster):
        """Test gx = -10, gy = 10 rounds to 14"""
        result = apply_gradient_filter(ramp_raster, "roberts")
        assert np.all(result.pixels[1:-1, 1:-1, 0] == 14)

    def test_sobel_bright_pixel(self, bright_pixel_raster):
        result = apply_gradient_filter(bright_pixel_raster, GradientOperator.SOBEL)

        assert result.pixel(2, 2)[:3] == (0, 0, 0)
        for x, y in [(1, 1), (2, 1), (3, 1), (1, 2), (3, 2), (1, 3), (2, 3), (3, 3)]:
            assert result.pixel(x, y)[:3] == (255, 255, 255)

    def test_roberts_bright_pixel(self, bright_pixel_raster):
        """Test the 3x3 Roberts embedding reaches center, top-right and top-left"""
        result = apply_gradient_filter(bright_pixel_raster, GradientOperator.ROBERTS)

        lit = {(x, y) for y in range(1, 4) for x in range(1, 4) if result.pixel(x, y)[0] > 0}
        assert lit == {(2, 2), (1, 3), (3, 3)}

    @pytest.mark.parametrize("operator", list(GradientOperator))
    def test_matches_reference(self, random_raster, operator):
        """Test against per-pixel magnitudes over the sampler's window"""
        weights_x, weights_y = REFERENCE_GRADIENT_WEIGHTS[operator]
        result = apply_gradient_filter(random_raster, operator)

        for y in range(1, random_raster.height - 1):
            for x in range(1, random_raster.width - 1):
                for channel in range(3):
                    window = sample_neighborhood(random_raster, x, y, 1, channel)
                    gx = sum(w * v for w, v in zip(weights_x, window))
                    gy = sum(w * v for w, v in zip(weights_y, window))
                    expected = min(255, round(math.sqrt(gx * gx + gy * gy)))
                    assert result.pixels[y, x, channel] == expected

        assert_border_unchanged(random_raster, result)
        assert np.array_equal(result.channel(3), random_raster.channel(3))

    def test_unknown_operator(self, flat_raster):
        with pytest.raises(UnsupportedFilterMode):
            apply_gradient_filter(flat_raster, "prewitt")


class TestKernelHelpers:
    def test_as_kernel_rejects_even(self):
        with pytest.raises(ValueError):
            as_kernel([[1, 0], [0, 1]])

    def test_convolve_is_correlation(self):
        """Test the kernel is not flipped"""
        plane = np.zeros((3, 3), dtype=np.uint8)
        plane[1, 2] = 1
        kernel = [[0, 0, 0], [0, 0, 5], [0, 0, 0]]

        assert convolve_plane(plane, kernel)[1, 1] == 5
