# -*- coding: utf-8 -*-
"""
volfilter Exception Hierarchy - Domain-specific exceptions for volume filtering.

Provides a small exception hierarchy that lets callers (e.g., the
``volfilter`` command-line driver) catch volfilter-specific errors distinctly
from Python built-in exceptions. All volfilter exceptions subclass both
``VolfilterError`` and the appropriate built-in exception for compatibility
with code that catches ``ValueError`` or ``RuntimeError``.

Errors raised by the storage layer (missing files, unreadable headers) are
left as the built-in ``OSError`` family and propagated unchanged.

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


class VolfilterError(Exception):
    """Base exception for all volfilter errors."""


class ConfigurationError(VolfilterError, ValueError):
    """Invalid or contradictory filter parameters.

    Raised while a filter configuration is being built, before any image
    data is read: negative standard deviations, wrong list lengths, even
    extents, mutually exclusive options, out-of-range axes and unknown
    filter names.
    """


class GeometryError(VolfilterError, ValueError):
    """Volume geometry incompatible with the requested operation.

    Raised for malformed headers (mismatched dims/strides/voxel sizes),
    inputs with too few spatial axes, and destination images whose shape
    does not match the geometry computed by a filter.
    """


class ProcessorError(VolfilterError, RuntimeError):
    """Algorithm failure while a filter is executing.

    Raised when a filter encounters a non-recoverable error during
    execution (not an input validation issue), including failures
    reported by worker threads.
    """
