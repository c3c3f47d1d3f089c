# -*- coding: utf-8 -*-
"""
Filter Versioning - Version and capability tag decorators for filters.

Provides the ``@processor_version`` class decorator for stamping semantic
version strings on filter classes, and ``@processor_tags`` for recording
which ``FilterKind`` a class implements. The driver's filter registry is
built from these tags.

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

# Standard library
from typing import Optional, Type, TypeVar
import importlib.metadata

# volfilter vocabulary
from volfilter.vocabulary import FilterKind

T = TypeVar('T')


def processor_version(version: Optional[str] = None):
    """Class decorator that stamps a version on a filter class.

    Sets ``__processor_version__`` as a class attribute. If *version* is
    not provided it is taken from the installed package metadata.

    Parameters
    ----------
    version : str, optional
        Semantic version string (e.g., ``'1.0.0'``).

    Returns
    -------
    Callable
        Class decorator that sets ``__processor_version__`` on the class.

    Examples
    --------
    >>> @processor_version('1.0.0')
    ... class MyFilter(VolumeFilter):
    ...     ...
    >>> MyFilter.__processor_version__
    '1.0.0'
    """
    def decorator(cls: Type[T]) -> Type[T]:
        if version:
            cls.__processor_version__ = version
        else:
            try:
                cls.__processor_version__ = importlib.metadata.version('volfilter')
            except importlib.metadata.PackageNotFoundError:
                cls.__processor_version__ = "unknown"
        return cls
    return decorator


def processor_tags(kind: FilterKind, description: Optional[str] = None):
    """Class decorator recording which filter a class implements.

    Stamps ``__processor_tags__`` on the class.

    Parameters
    ----------
    kind : FilterKind
        The filter this class implements.
    description : str, optional
        Short human-readable description, shown in command-line help.

    Raises
    ------
    TypeError
        If *kind* is not a ``FilterKind`` member.
    """
    if not isinstance(kind, FilterKind):
        raise TypeError(f"kind must be a FilterKind member, got {kind!r}")

    def decorator(cls: Type[T]) -> Type[T]:
        cls.__processor_tags__ = {
            'kind': kind,
            'description': description,
        }
        return cls
    return decorator
