# -*- coding: utf-8 -*-
"""
Filter Validation Helpers - Shared extent, stdev and geometry validation.

Provides reusable validation functions for the spatial filters. Filter
configurations and constructors call these helpers to enforce consistent
constraints on neighbourhood extents (odd, positive), per-axis parameter
broadcasting and minimum input rank.

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

# Standard library
from typing import Sequence, Tuple

# volfilter internal
from volfilter.exceptions import ConfigurationError, GeometryError
from volfilter.image.header import VolumeHeader

#: Number of spatial axes the neighbourhood filters operate on.
SPATIAL_AXES = 3

#: Ratio between a Gaussian's full width at half maximum and its stdev.
FWHM_TO_STDEV = 2.3548


def validate_extent(extent: Sequence[int], name: str = 'extent') -> None:
    """Validate that every extent is an odd positive integer.

    Parameters
    ----------
    extent : Sequence[int]
        Extents to validate.
    name : str
        Parameter name for error messages. Default ``'extent'``.

    Raises
    ------
    ConfigurationError
        If any value is not an integer, is not positive, or is even.
    """
    for value in extent:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ConfigurationError(
                f"{name} must contain integers, got {type(value).__name__}"
            )
        if value < 1:
            raise ConfigurationError(f"{name} must be positive, got {value}")
        if value % 2 == 0:
            raise ConfigurationError(f"{name} must be odd, got {value}")


def broadcast_spatial(values: Sequence, name: str) -> Tuple:
    """Expand a 1- or 3-element sequence to one value per spatial axis.

    Raises
    ------
    ConfigurationError
        If *values* has neither 1 nor 3 elements.
    """
    values = tuple(values)
    if len(values) == 1:
        return values * SPATIAL_AXES
    if len(values) != SPATIAL_AXES:
        raise ConfigurationError(
            f"unexpected number of elements specified in {name}: expected "
            f"1 or {SPATIAL_AXES}, got {len(values)}"
        )
    return values


def require_spatial(header: VolumeHeader, filter_name: str) -> None:
    """Check that *header* has at least three spatial axes.

    Raises
    ------
    GeometryError
        If the volume has fewer than three axes.
    """
    if header.ndim < SPATIAL_AXES:
        raise GeometryError(
            f"{filter_name} filter requires at least {SPATIAL_AXES} axes, "
            f"input has {header.ndim}"
        )
