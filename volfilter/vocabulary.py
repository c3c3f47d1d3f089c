# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for the volfilter framework.

Defines the single source of truth for the closed set of filters the
framework provides. The command-line driver, the filter registry and the
``@processor_tags`` decorator all key on ``FilterKind`` so that filter names
are guaranteed consistent and typo-free.

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

from enum import Enum


class FilterKind(Enum):
    """Filters available to the volfilter driver.

    The value of each member is the name used on the command line.
    """

    FFT = "fft"
    GRADIENT = "gradient"
    MEDIAN = "median"
    SMOOTH = "smooth"

    @classmethod
    def names(cls):
        """Command-line names of all filters, in declaration order."""
        return tuple(member.value for member in cls)
