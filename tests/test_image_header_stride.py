# -*- coding: utf-8 -*-
"""
Header and Stride Tests - VolumeHeader validation and stride selection.

Author
------
Steven Siebert

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

from volfilter.exceptions import ConfigurationError, GeometryError
from volfilter.image import ArrayImage, VolumeHeader
from volfilter.image import stride


# ---------------------------------------------------------------------------
# VolumeHeader
# ---------------------------------------------------------------------------

class TestVolumeHeader:
    """Test header defaults, validation and derivation."""

    def test_defaults(self):
        """Unit voxels, contiguous strides, float32 and diagonal transform."""
        header = VolumeHeader(dims=(4, 5, 6))
        assert header.voxel_size == (1.0, 1.0, 1.0)
        assert header.strides == (1, 2, 3)
        assert header.datatype == np.dtype(np.float32)
        np.testing.assert_array_equal(header.transform, np.eye(4))

    def test_default_transform_uses_voxel_size(self):
        header = VolumeHeader(dims=(4, 5, 6, 2), voxel_size=(1.0, 2.0, 3.0, 4.0))
        np.testing.assert_array_equal(
            np.diag(header.transform), [1.0, 2.0, 3.0, 1.0]
        )

    def test_strides_normalised(self):
        """Stride magnitudes are ranked to 1..N keeping signs."""
        header = VolumeHeader(dims=(4, 5, 6), strides=(-30, 6, 1))
        assert header.strides == (-3, 2, 1)

    def test_repeated_stride_raises(self):
        with pytest.raises(GeometryError, match="repeat"):
            VolumeHeader(dims=(4, 5, 6), strides=(1, 1, 2))

    def test_zero_stride_raises(self):
        with pytest.raises(GeometryError, match="non-zero"):
            VolumeHeader(dims=(4, 5, 6), strides=(1, 0, 2))

    def test_mismatched_voxel_size_raises(self):
        with pytest.raises(GeometryError, match="voxel_size"):
            VolumeHeader(dims=(4, 5, 6), voxel_size=(1.0, 1.0))

    def test_non_positive_dims_raise(self):
        with pytest.raises(GeometryError):
            VolumeHeader(dims=(4, 0, 6))
        with pytest.raises(GeometryError):
            VolumeHeader(dims=())

    def test_bad_transform_raises(self):
        with pytest.raises(GeometryError, match="4x4"):
            VolumeHeader(dims=(4, 5, 6), transform=np.eye(3))

    def test_transform_read_only(self):
        header = VolumeHeader(dims=(4, 5, 6))
        with pytest.raises(ValueError):
            header.transform[0, 0] = 2.0

    def test_replace_revalidates(self):
        header = VolumeHeader(dims=(4, 5, 6))
        complex_header = header.replace(datatype=np.complex128)
        assert complex_header.datatype == np.dtype(np.complex128)
        assert complex_header.dims == header.dims
        with pytest.raises(GeometryError):
            header.replace(strides=(1, 2))

    def test_from_array_c_order(self):
        """A C-ordered array has its last axis innermost."""
        header = VolumeHeader.from_array(np.zeros((4, 5, 6)))
        assert header.strides == (3, 2, 1)
        assert header.datatype == np.dtype(np.float64)

    def test_from_array_singleton_axes(self):
        """Equal byte strides on singleton axes still give unique strides."""
        header = VolumeHeader.from_array(np.zeros((4, 1, 1), dtype=np.float32))
        assert sorted(abs(s) for s in header.strides) == [1, 2, 3]

    def test_to_dict(self):
        header = VolumeHeader(dims=(2, 3, 4), voxel_size=(1.0, 1.0, 2.0))
        info = header.to_dict()
        assert info['dims'] == [2, 3, 4]
        assert info['voxel_size'] == [1.0, 1.0, 2.0]
        assert info['datatype'] == 'float32'
        assert len(info['transform']) == 4


# ---------------------------------------------------------------------------
# Stride helpers
# ---------------------------------------------------------------------------

class TestStride:
    """Test symbolic stride manipulation."""

    def test_symbolic(self):
        assert stride.symbolic((8, -2, 40)) == (2, -1, 3)
        assert stride.symbolic((0, 5, 0)) == (0, 1, 0)

    def test_sanitise_fills_unspecified(self):
        assert stride.sanitise((0, 1, 0)) == (2, 1, 3)
        assert stride.sanitise((-3, 2, 1)) == (-3, 2, 1)
        assert stride.sanitise((0, 0, 0)) == (1, 2, 3)

    def test_order(self):
        assert stride.order((3, 2, 1)) == (2, 1, 0)
        assert stride.order((1, -3, 2)) == (0, 2, 1)

    def test_actual(self):
        assert stride.actual((1, 2, 3), (4, 5, 6)) == (1, 4, 20)
        assert stride.actual((-1, 2, 3), (4, 5, 6)) == (-1, 4, 20)
        assert stride.actual((3, 2, 1), (4, 5, 6)) == (30, 6, 1)

    def test_actual_length_mismatch(self):
        with pytest.raises(GeometryError):
            stride.actual((1, 2), (4, 5, 6))

    def test_parse(self):
        assert stride.parse('-1,2,3') == (-1, 2, 3)
        assert stride.parse('0,0,0,1') == (0, 0, 0, 1)

    def test_parse_invalid(self):
        with pytest.raises(ConfigurationError, match="stride"):
            stride.parse('1,x,3')

    def test_apply_pads_and_sanitises(self):
        header = VolumeHeader(dims=(4, 5, 6, 3))
        result = stride.apply(header, (0, 0, 0, 1))
        assert result.strides == (2, 3, 4, 1)

    def test_apply_truncates(self):
        header = VolumeHeader(dims=(4, 5, 6))
        assert stride.apply(header, (3, 2, 1, 4)).strides == (3, 2, 1)

    def test_apply_repeated_raises(self):
        header = VolumeHeader(dims=(4, 5, 6))
        with pytest.raises(ConfigurationError, match="repeats"):
            stride.apply(header, (1, -1, 0))


# ---------------------------------------------------------------------------
# ArrayImage allocation
# ---------------------------------------------------------------------------

class TestArrayImageAllocate:
    """Test that allocation honours header strides."""

    def test_contiguous_is_fortran_order(self):
        image = ArrayImage.allocate(VolumeHeader(dims=(4, 5, 6)))
        assert image.data.flags.f_contiguous
        assert image.data.shape == (4, 5, 6)

    def test_reversed_strides_is_c_order(self):
        header = VolumeHeader(dims=(4, 5, 6), strides=(3, 2, 1))
        image = ArrayImage.allocate(header)
        assert image.data.flags.c_contiguous

    def test_negative_stride_reverses_axis(self):
        header = VolumeHeader(dims=(4, 5, 6), strides=(-1, 2, 3))
        image = ArrayImage.allocate(header)
        assert image.data.strides[0] < 0
        assert image.data.shape == (4, 5, 6)

    def test_fill_and_datatype(self):
        header = VolumeHeader(dims=(2, 2, 2), datatype=np.int16)
        image = ArrayImage.allocate(header, fill=7)
        assert image.data.dtype == np.int16
        assert np.all(image.data == 7)

    def test_shape_mismatch_raises(self):
        with pytest.raises(GeometryError):
            ArrayImage(np.zeros((2, 2, 2)), VolumeHeader(dims=(2, 2, 3)))

    def test_block_is_view(self):
        image = ArrayImage.allocate(VolumeHeader(dims=(2, 3, 4, 2)))
        image.set_index(3, 1)
        image.block()[...] = 5.0
        assert np.all(image.data[..., 1] == 5.0)
        assert np.all(image.data[..., 0] == 0.0)

    def test_duplicate_shares_data(self):
        image = ArrayImage.allocate(VolumeHeader(dims=(2, 2, 2)))
        twin = image.duplicate()
        twin.set_index(0, 1)
        twin.set_value(9.0)
        assert image.index(0) == 0
        assert image.data[1, 0, 0] == 9.0
