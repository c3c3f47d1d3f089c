# -*- coding: utf-8 -*-
"""
volfilter - Spatial filtering of N-dimensional scientific volumes.

Applies FFT, gradient, median and Gaussian smoothing filters to 3D volumes
and to each 3D volume of 4D+ series. Every filter reports the geometry of
its output before any output storage exists, so the caller can choose the
output layout and allocate it once.

Dependencies
------------
numpy
scipy
nibabel

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

__version__ = "0.1.0"
__author__ = "Duane Smalley"

from volfilter.exceptions import (
    VolfilterError,
    ConfigurationError,
    GeometryError,
    ProcessorError,
)
from volfilter.vocabulary import FilterKind

__all__ = [
    'VolfilterError',
    'ConfigurationError',
    'GeometryError',
    'ProcessorError',
    'FilterKind',
    '__version__',
]
