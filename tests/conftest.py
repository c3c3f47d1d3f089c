# -*- coding: utf-8 -*-
"""
Shared fixtures for the volfilter test suite.

Provides small synthetic volumes wrapped in ``ArrayImage`` handles, plus a
helper that runs a filter end to end the way the command-line driver does.

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

from volfilter.image import ArrayImage, VolumeHeader


def run_filter(volume_filter, source):
    """Allocate the output from the filter header, run it, return the data."""
    destination = ArrayImage.allocate(volume_filter.header, name='output')
    volume_filter(source, destination)
    return destination.data


def make_image(data, voxel_size=None):
    """ArrayImage over *data* with optional voxel sizes."""
    header = VolumeHeader.from_array(data, voxel_size=voxel_size)
    return ArrayImage(data, header, name='input')


@pytest.fixture
def random_volume():
    """8x7x6 float32 volume of uniform noise, anisotropic voxels."""
    rng = np.random.default_rng(42)
    data = rng.random((8, 7, 6)).astype(np.float32)
    return make_image(data, voxel_size=(1.0, 1.5, 2.0))


@pytest.fixture
def constant_volume():
    """6x6x6 volume filled with 3.5."""
    return make_image(np.full((6, 6, 6), 3.5, dtype=np.float32))


@pytest.fixture
def random_series():
    """6x5x4x3 float32 series of three 3D volumes."""
    rng = np.random.default_rng(7)
    data = rng.random((6, 5, 4, 3)).astype(np.float32)
    return make_image(data, voxel_size=(1.0, 1.0, 1.0, 2.5))
