# -*- coding: utf-8 -*-
"""
Adapter Tests - Forwarding adapter and AllowEmpty substitution.

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

from volfilter.image import (
    Adapter,
    AllowEmpty,
    ArrayImage,
    ImageHandle,
    VolumeHeader,
    copy,
)


class _InvalidImage(ImageHandle):
    """Handle that reports itself invalid and fails on any other access."""

    @property
    def valid(self):
        return False

    @property
    def header(self):
        raise AssertionError("header accessed")

    def index(self, axis):
        raise AssertionError("index accessed")

    def set_index(self, axis, position):
        raise AssertionError("set_index called")

    def value(self):
        raise AssertionError("value accessed")

    def set_value(self, value):
        raise AssertionError("set_value called")

    def duplicate(self):
        raise AssertionError("duplicate called")


@pytest.fixture
def image():
    data = np.arange(24, dtype=np.float32).reshape(2, 3, 4)
    return ArrayImage(data, VolumeHeader.from_array(data, voxel_size=(1.0, 2.0, 3.0)))


class TestAdapter:
    """Test that the base adapter forwards every capability."""

    def test_forwards_geometry(self, image):
        adapter = Adapter(image)
        assert adapter.rank() == 3
        assert adapter.size(2) == 4
        assert adapter.voxsize(1) == 2.0
        assert adapter.header is image.header
        assert adapter.valid

    def test_forwards_cursor_and_values(self, image):
        adapter = Adapter(image)
        adapter.set_index(0, 1)
        adapter.move_index(2, 3)
        assert image.position() == (1, 0, 3)
        assert adapter.value() == image.data[1, 0, 3]
        adapter.set_value(-1.0)
        assert image.data[1, 0, 3] == -1.0
        adapter.reset()
        assert image.position() == (0, 0, 0)

    def test_duplicate_has_independent_cursor(self, image):
        adapter = Adapter(image)
        twin = adapter.duplicate()
        assert isinstance(twin, Adapter)
        twin.set_index(1, 2)
        assert adapter.index(1) == 0


class TestAllowEmpty:
    """Test AllowEmpty over valid, absent and invalid parents."""

    def test_valid_parent_forwards(self, image):
        wrapped = AllowEmpty(image, value_if_empty=99.0)
        assert wrapped.valid
        assert wrapped.size(0) == 2
        wrapped.set_index(2, 1)
        assert wrapped.index(2) == 1
        assert wrapped.value() == image.data[0, 0, 1]
        wrapped.set_value(5.0)
        assert image.data[0, 0, 1] == 5.0

    def test_none_parent(self):
        wrapped = AllowEmpty(None, value_if_empty=1.5)
        assert not wrapped.valid
        assert wrapped.header is None
        assert wrapped.rank() == 0
        assert wrapped.size(0) == 0
        assert wrapped.index(1) == 0
        assert wrapped.voxsize(0) == 0.0
        assert wrapped.value() == 1.5

    def test_default_value_is_zero(self):
        assert AllowEmpty(None).value() == 0.0

    def test_invalid_parent_never_touched(self):
        """Every operation on an invalid parent is absorbed by the adapter."""
        wrapped = AllowEmpty(_InvalidImage(), value_if_empty=2.0)
        assert wrapped.size(0) == 0
        assert wrapped.index(0) == 0
        assert wrapped.value() == 2.0
        wrapped.set_value(3.0)
        wrapped.set_index(0, 4)
        wrapped.move_index(1, 1)
        wrapped.reset()
        assert wrapped.value() == 2.0
        twin = wrapped.duplicate()
        assert twin.value() == 2.0

    def test_duplicate_keeps_default(self, image):
        twin = AllowEmpty(image, value_if_empty=4.0).duplicate()
        assert isinstance(twin, AllowEmpty)
        assert twin.value_if_empty == 4.0
        assert twin.valid

    def test_copy_from_empty_fills_default(self):
        destination = ArrayImage.allocate(VolumeHeader(dims=(3, 2, 2)))
        copy(AllowEmpty(None, value_if_empty=7.0), destination)
        assert np.all(destination.data == 7.0)

    def test_copy_from_valid_parent(self, image):
        header = image.header.replace(datatype=np.int32)
        destination = ArrayImage.allocate(header)
        copy(AllowEmpty(image), destination)
        np.testing.assert_array_equal(destination.data, image.data.astype(np.int32))
