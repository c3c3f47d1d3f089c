# -*- coding: utf-8 -*-
"""
FFT Filter Tests - Forward/inverse transforms, centring and magnitude output.

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

from volfilter.exceptions import ConfigurationError
from volfilter.filter import (
    FFTConfig,
    FFTFilter,
    centre_zero_shift,
    centre_zero_unshift,
)
from volfilter.image import ArrayImage, VolumeHeader

from conftest import make_image, run_filter


def _fft(image, **params):
    f = FFTFilter(image, FFTConfig(**params))
    return f, run_filter(f, image)


# ---------------------------------------------------------------------------
# Centring helpers
# ---------------------------------------------------------------------------

class TestCentreZero:
    """Test the circular shift helpers."""

    def test_zero_frequency_moves_to_centre(self):
        data = np.zeros(8)
        data[0] = 1.0
        assert np.argmax(centre_zero_shift(data, (0,))) == 4

    def test_double_shift_identity_even(self):
        data = np.arange(8)
        np.testing.assert_array_equal(
            centre_zero_shift(centre_zero_shift(data, (0,)), (0,)), data
        )

    @pytest.mark.parametrize('n', [5, 7])
    def test_shift_unshift_identity_odd(self, n):
        data = np.arange(n)
        np.testing.assert_array_equal(
            centre_zero_unshift(centre_zero_shift(data, (0,)), (0,)), data
        )

    def test_odd_shift_amount(self):
        assert np.argmax(centre_zero_shift(np.eye(1, 5).ravel(), (0,))) == 2


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

class TestFFTGeometry:
    """Test resolved axes and output datatype."""

    def test_default_axes_spatial(self, random_series):
        f = FFTFilter(random_series)
        assert f.axes == (0, 1, 2)
        assert f.datatype == np.dtype(np.complex128)
        assert f.dims == random_series.header.dims

    def test_default_axes_low_rank(self):
        f = FFTFilter(VolumeHeader(dims=(8,)))
        assert f.axes == (0,)

    def test_magnitude_datatype(self, random_volume):
        f = FFTFilter(random_volume, FFTConfig(magnitude=True))
        assert f.datatype == np.dtype(np.float32)

    def test_axis_out_of_range(self, random_volume):
        with pytest.raises(ConfigurationError, match="out of range"):
            FFTFilter(random_volume, FFTConfig(axes=(3,)))


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------

class TestFFTTransform:
    """Test transform values."""

    def test_matches_numpy(self, random_volume):
        _, result = _fft(random_volume)
        expected = np.fft.fftn(random_volume.data.astype(np.float64))
        np.testing.assert_allclose(result, expected, rtol=1e-10, atol=1e-10)

    def test_selected_axes(self, random_volume):
        _, result = _fft(random_volume, axes=(1,))
        np.testing.assert_allclose(
            result, np.fft.fft(random_volume.data.astype(np.float64), axis=1), atol=1e-10
        )

    def test_outer_axis(self, random_series):
        """Transforming along the series axis spans all volumes at once."""
        _, result = _fft(random_series, axes=(3,))
        np.testing.assert_allclose(
            result, np.fft.fft(random_series.data.astype(np.float64), axis=3), atol=1e-10
        )

    def test_one_dimensional_round_trip(self):
        signal = make_image(np.array(
            [0.5, 1.0, -2.0, 3.0, 0.0, 4.5, -1.0, 2.0], dtype=np.float64
        ))
        forward, spectrum = _fft(signal)
        inverse = FFTFilter(forward.header, FFTConfig(inverse=True))
        recovered = run_filter(inverse, ArrayImage(spectrum, forward.header))
        np.testing.assert_allclose(recovered.real, signal.data, atol=1e-6)
        np.testing.assert_allclose(recovered.imag, 0.0, atol=1e-6)

    @pytest.mark.parametrize('axes', [None, (0,), (1, 2), (2, 0, 3)])
    @pytest.mark.parametrize('centre', [False, True])
    def test_round_trip(self, random_series, axes, centre):
        forward, spectrum = _fft(random_series, axes=axes, centre_zero=centre)
        inverse = FFTFilter(
            forward.header,
            FFTConfig(axes=axes, inverse=True, centre_zero=centre),
        )
        recovered = run_filter(inverse, ArrayImage(spectrum, forward.header))
        np.testing.assert_allclose(recovered.real, random_series.data, atol=1e-6)

    def test_centred_spectrum(self):
        data = np.ones((4, 5, 6), dtype=np.float32)
        _, result = _fft(make_image(data), centre_zero=True)
        peak = np.unravel_index(np.argmax(np.abs(result)), result.shape)
        assert peak == (2, 2, 3)
        assert result[peak] == pytest.approx(data.size)

    def test_magnitude(self, random_volume):
        _, result = _fft(random_volume, magnitude=True)
        assert result.dtype == np.float32
        np.testing.assert_allclose(
            result, np.abs(np.fft.fftn(random_volume.data.astype(np.float64))),
            rtol=1e-5, atol=1e-5,
        )

    def test_magnitude_progress_spans_both_passes(self, random_series):
        f = FFTFilter(random_series, FFTConfig(magnitude=True))
        fractions = []
        f(random_series, ArrayImage.allocate(f.header),
          progress_callback=fractions.append)
        assert fractions == [pytest.approx(x) for x in
                             (1 / 6, 2 / 6, 0.5, 4 / 6, 5 / 6, 1.0)]

    def test_parallel_matches_serial(self, random_series):
        serial = run_filter(FFTFilter(random_series), random_series)
        parallel = run_filter(FFTFilter(random_series, workers=3), random_series)
        np.testing.assert_allclose(parallel, serial)
