# -*- coding: utf-8 -*-
"""
Smooth Filter Tests - Gaussian kernels, boundary renormalisation and geometry.

Author
------
Duane Smalley, PhD

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-17

Modified
--------
2026-10-17
"""

import pytest
import numpy as np
from scipy.ndimage import gaussian_filter

from volfilter.exceptions import ConfigurationError, GeometryError
from volfilter.filter import SmoothConfig, SmoothFilter
from volfilter.filter.smooth import default_extent, gaussian_kernel, gaussian_smooth
from volfilter.image import VolumeHeader

from conftest import make_image, run_filter


class TestKernel:
    """Test kernel construction helpers."""

    def test_default_extent(self):
        assert default_extent((1.0, 0.0, 2.0), (1.0, 1.0, 1.5)) == (5, 1, 7)

    def test_default_extent_never_below_one(self):
        assert default_extent((0.01,), (10.0,)) == (1,)

    def test_kernel_normalised_and_symmetric(self):
        kernel = gaussian_kernel(2.0, 1.0, 9)
        assert kernel.shape == (9,)
        assert kernel.sum() == pytest.approx(1.0)
        np.testing.assert_allclose(kernel, kernel[::-1])
        assert np.argmax(kernel) == 4

    def test_kernel_uses_physical_spacing(self):
        np.testing.assert_allclose(
            gaussian_kernel(2.0, 2.0, 5), gaussian_kernel(1.0, 1.0, 5)
        )


class TestGaussianSmooth:
    """Test separable smoothing values."""

    def test_matches_scipy_in_interior(self):
        rng = np.random.default_rng(11)
        volume = rng.random((12, 11, 10))
        result = gaussian_smooth(volume, (1.0, 1.0, 1.0), (1.0, 1.0, 1.0), (5, 5, 5))
        expected = gaussian_filter(volume, sigma=1.0, truncate=2.0)
        np.testing.assert_allclose(result[2:-2, 2:-2, 2:-2],
                                   expected[2:-2, 2:-2, 2:-2], atol=1e-12)

    def test_constant_preserved_at_boundaries(self):
        volume = np.full((5, 6, 7), 2.0)
        result = gaussian_smooth(volume, (2.0, 2.0, 2.0), (1.0, 1.0, 1.0), (9, 9, 9))
        np.testing.assert_allclose(result, 2.0)

    def test_zero_stdev_axis_untouched(self):
        rng = np.random.default_rng(2)
        volume = rng.random((6, 6, 6))
        result = gaussian_smooth(volume, (0.0, 0.0, 1.0), (1.0, 1.0, 1.0), (1, 1, 5))
        expected = gaussian_smooth(volume[0:1, 0:1, :], (0.0, 0.0, 1.0),
                                   (1.0, 1.0, 1.0), (1, 1, 5))
        np.testing.assert_allclose(result[0:1, 0:1, :], expected)


class TestSmoothFilter:
    """Test the smoothing filter on images."""

    def test_zero_stdev_identity(self, random_volume):
        f = SmoothFilter(random_volume, SmoothConfig(stdev=(0.0,)))
        np.testing.assert_array_equal(run_filter(f, random_volume), random_volume.data)

    def test_small_constant_volume(self):
        image = make_image(np.ones((2, 2, 2), dtype=np.float32))
        np.testing.assert_allclose(run_filter(SmoothFilter(image), image), 1.0)

    def test_constant_volume_unchanged(self, constant_volume):
        f = SmoothFilter(constant_volume, SmoothConfig(fwhm=(4.0,)))
        np.testing.assert_allclose(run_filter(f, constant_volume), 3.5, rtol=1e-6)

    def test_defaults_one_voxel(self, random_volume):
        f = SmoothFilter(random_volume)
        assert f.stdev == (1.0, 1.5, 2.0)
        assert f.extent == (5, 5, 5)

    def test_fwhm_resolved(self, random_volume):
        f = SmoothFilter(random_volume, SmoothConfig(fwhm=(2.3548, 0.0, 4.7096)))
        assert f.stdev == pytest.approx((1.0, 0.0, 2.0))
        assert f.extent == (5, 1, 5)

    def test_extent_override(self, random_volume):
        f = SmoothFilter(random_volume, SmoothConfig(stdev=(1.0,), extent=(1,)))
        assert f.extent == (1, 1, 1)
        np.testing.assert_array_equal(run_filter(f, random_volume), random_volume.data)

    def test_reduces_variance(self, random_volume):
        result = run_filter(SmoothFilter(random_volume), random_volume)
        assert result.dtype == np.float32
        assert result.std() < random_volume.data.std()

    def test_series_matches_per_volume(self, random_series):
        f = SmoothFilter(random_series, SmoothConfig(stdev=(1.5,)), workers=2)
        result = run_filter(f, random_series)
        for t in range(3):
            expected = gaussian_smooth(random_series.data[..., t], f.stdev,
                                       (1.0, 1.0, 1.0), f.extent)
            np.testing.assert_allclose(result[..., t], expected, rtol=1e-5)

    def test_stdev_and_fwhm_rejected_before_data(self):
        with pytest.raises(ConfigurationError, match="mutually exclusive"):
            SmoothFilter(VolumeHeader(dims=(4, 4, 4)),
                         SmoothConfig(stdev=(1.0,), fwhm=(1.0,)))

    def test_rank_two_rejected(self):
        with pytest.raises(GeometryError):
            SmoothFilter(VolumeHeader(dims=(4, 4)))
