# -*- coding: utf-8 -*-
"""
Volume Filters - FFT, gradient, median and Gaussian smoothing.

All filters derive from ``VolumeFilter``: they are constructed from an input
image (or header) and a configuration object, report their output geometry
through ``filter.header`` before any output exists, and then fill a
caller-allocated output with ``filter(input, output)``.

Filters
    ``FFTFilter`` -- forward/inverse FFT along selected axes
    ``GradientFilter`` -- smoothed finite-difference gradient
    ``MedianFilter`` -- median over a truncated 3D neighbourhood
    ``SmoothFilter`` -- separable Gaussian smoothing

``FILTERS`` maps every ``FilterKind`` to its filter class and is checked
for completeness at import time.

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
from typing import Dict, Type, Union

# volfilter internal
from volfilter.exceptions import ConfigurationError
from volfilter.filter.base import VolumeFilter
from volfilter.filter.config import FilterConfig
from volfilter.filter.fft import (
    FFTConfig,
    FFTFilter,
    centre_zero_shift,
    centre_zero_unshift,
)
from volfilter.filter.gradient import GradientConfig, GradientFilter
from volfilter.filter.median import MedianConfig, MedianFilter
from volfilter.filter.smooth import SmoothConfig, SmoothFilter
from volfilter.vocabulary import FilterKind

FILTERS: Dict[FilterKind, Type[VolumeFilter]] = {
    cls.__processor_tags__['kind']: cls
    for cls in (FFTFilter, GradientFilter, MedianFilter, SmoothFilter)
}

_missing = set(FilterKind) - set(FILTERS)
if _missing:
    raise ImportError(
        f"no filter registered for {sorted(k.value for k in _missing)}"
    )


def filter_class(kind: Union[FilterKind, str]) -> Type[VolumeFilter]:
    """Filter class for a ``FilterKind`` or its command-line name.

    Raises
    ------
    ConfigurationError
        If *kind* names no known filter.
    """
    if not isinstance(kind, FilterKind):
        try:
            kind = FilterKind(kind)
        except ValueError:
            raise ConfigurationError(
                f"unknown filter {kind!r}; expected one of "
                f"{', '.join(FilterKind.names())}"
            ) from None
    return FILTERS[kind]


__all__ = [
    'FILTERS',
    'filter_class',
    'VolumeFilter',
    'FilterConfig',
    'FFTConfig',
    'FFTFilter',
    'centre_zero_shift',
    'centre_zero_unshift',
    'GradientConfig',
    'GradientFilter',
    'MedianConfig',
    'MedianFilter',
    'SmoothConfig',
    'SmoothFilter',
]
