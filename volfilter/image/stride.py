# -*- coding: utf-8 -*-
"""
Strides - Symbolic axis strides and output stride selection.

Strides are stored symbolically: one signed integer per axis whose magnitude
ranks the axis from innermost (1) to outermost (N) in memory and whose sign
gives the traversal direction. This module normalises, validates and
resolves such stride tuples, and applies a user-requested stride override
to a header computed by a filter (the ``--strides`` option of the driver).

A zero entry means "unspecified": ``sanitise`` assigns those axes the next
free magnitudes, in axis order, after every specified axis.

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
from typing import TYPE_CHECKING, Iterable, Sequence, Tuple

# volfilter internal
from volfilter.exceptions import ConfigurationError, GeometryError

if TYPE_CHECKING:
    from volfilter.image.header import VolumeHeader


def contiguous(rank: int) -> Tuple[int, ...]:
    """Default strides for *rank* axes: axis 0 innermost, all ascending."""
    return tuple(range(1, rank + 1))


def symbolic(strides: Iterable[int]) -> Tuple[int, ...]:
    """Normalise stride magnitudes to ``1..N`` preserving sign and order.

    Zero entries are kept as zero. Equal magnitudes are ranked by axis
    index, so the result never contains duplicates.

    Parameters
    ----------
    strides : Iterable[int]
        Signed strides in any units (symbolic, elements or bytes).

    Returns
    -------
    Tuple[int, ...]
        Symbolic strides.
    """
    strides = [int(s) for s in strides]
    ranked = sorted(
        (abs(s), axis) for axis, s in enumerate(strides) if s != 0
    )
    result = [0] * len(strides)
    for rank, (_, axis) in enumerate(ranked, start=1):
        result[axis] = rank if strides[axis] > 0 else -rank
    return tuple(result)


def sanitise(strides: Iterable[int]) -> Tuple[int, ...]:
    """Resolve unspecified (zero) strides and normalise the rest.

    Specified axes keep their relative order; unspecified axes are placed
    outside them in axis order.

    Examples
    --------
    >>> sanitise((0, 1, 0))
    (2, 1, 3)
    >>> sanitise((-3, 2, 1))
    (-3, 2, 1)
    """
    current = symbolic(strides)
    next_rank = max((abs(s) for s in current), default=0) + 1
    result = list(current)
    for axis, s in enumerate(current):
        if s == 0:
            result[axis] = next_rank
            next_rank += 1
    return tuple(result)


def order(strides: Sequence[int]) -> Tuple[int, ...]:
    """Axis indices ordered from innermost to outermost.

    Parameters
    ----------
    strides : Sequence[int]
        Signed strides (zero entries are treated as unspecified).

    Returns
    -------
    Tuple[int, ...]
        Axes sorted by increasing stride magnitude.
    """
    resolved = sanitise(strides)
    return tuple(sorted(range(len(resolved)), key=lambda a: abs(resolved[a])))


def actual(strides: Sequence[int], dims: Sequence[int]) -> Tuple[int, ...]:
    """Element strides for a buffer laid out according to *strides*.

    Parameters
    ----------
    strides : Sequence[int]
        Symbolic strides.
    dims : Sequence[int]
        Axis sizes.

    Returns
    -------
    Tuple[int, ...]
        Signed distance in elements between neighbouring voxels along each
        axis.

    Raises
    ------
    GeometryError
        If *strides* and *dims* differ in length.
    """
    if len(strides) != len(dims):
        raise GeometryError(
            f"strides {tuple(strides)} and dims {tuple(dims)} "
            f"have different lengths"
        )
    resolved = sanitise(strides)
    result = [0] * len(dims)
    step = 1
    for axis in order(resolved):
        result[axis] = step if resolved[axis] > 0 else -step
        step *= int(dims[axis])
    return tuple(result)


def parse(text: str) -> Tuple[int, ...]:
    """Parse a comma-separated stride specification such as ``'-1,2,3'``.

    Raises
    ------
    ConfigurationError
        If any entry is not an integer.
    """
    try:
        return tuple(int(item) for item in text.split(',') if item.strip())
    except ValueError as exc:
        raise ConfigurationError(
            f"invalid stride specification {text!r}: expected a "
            f"comma-separated list of integers"
        ) from exc


def apply(header: 'VolumeHeader', strides: Sequence[int]) -> 'VolumeHeader':
    """Return *header* with its strides overridden by *strides*.

    The override is truncated or zero-padded to the header rank and then
    sanitised, so partial specifications such as ``(0, 0, 0, 1)`` (make
    the fourth axis contiguous) are accepted.

    Parameters
    ----------
    header : VolumeHeader
        Header computed by a filter.
    strides : Sequence[int]
        Requested strides.

    Returns
    -------
    VolumeHeader
        Header with the requested strides.

    Raises
    ------
    ConfigurationError
        If the requested strides repeat a magnitude.
    """
    requested = [int(s) for s in strides][:header.ndim]
    requested += [0] * (header.ndim - len(requested))
    magnitudes = [abs(s) for s in requested if s != 0]
    if len(set(magnitudes)) != len(magnitudes):
        raise ConfigurationError(
            f"stride specification {tuple(strides)} repeats a magnitude"
        )
    return header.replace(strides=sanitise(requested))
