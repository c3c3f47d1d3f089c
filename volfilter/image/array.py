# -*- coding: utf-8 -*-
"""
Array Image - NumPy-backed image handle.

``ArrayImage`` is the concrete image handle used throughout volfilter. It
wraps an ``numpy.ndarray`` (never copying it) together with a
``VolumeHeader`` and a cursor. Besides voxel-wise access it offers
``block()``, a writable view over selected axes at the current cursor
position on the remaining axes, which is how filters read and write whole
3D volumes at a time.

``ArrayImage.allocate`` lays the buffer out in memory according to the
header strides, so that the innermost axis of the header is the fastest
varying in memory and negative strides are stored reversed.

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
import logging
from typing import Any, Optional, Sequence

# Third-party
import numpy as np

# volfilter internal
from volfilter.exceptions import GeometryError
from volfilter.image import stride as _stride
from volfilter.image.base import ImageHandle
from volfilter.image.header import VolumeHeader

logger = logging.getLogger(__name__)


class ArrayImage(ImageHandle):
    """Image handle over an in-memory numpy array.

    Parameters
    ----------
    data : np.ndarray
        Voxel data; referenced, not copied.
    header : VolumeHeader, optional
        Geometry of *data*. If omitted it is derived from the array with
        ``VolumeHeader.from_array``.
    name : str, optional
        Label used in log messages and ``repr``.

    Raises
    ------
    GeometryError
        If ``header.dims`` does not match ``data.shape``.

    Examples
    --------
    >>> image = ArrayImage(np.zeros((4, 4, 4), dtype=np.float32))
    >>> image.set_index(2, 1)
    >>> image.set_value(3.0)
    >>> float(image.data[0, 0, 1])
    3.0
    """

    def __init__(
        self,
        data: np.ndarray,
        header: Optional[VolumeHeader] = None,
        name: str = '',
    ) -> None:
        if header is None:
            header = VolumeHeader.from_array(data)
        if tuple(data.shape) != header.dims:
            raise GeometryError(
                f"array shape {data.shape} does not match header dims "
                f"{header.dims}"
            )
        self._data = data
        self._header = header
        self._index = [0] * header.ndim
        self.name = name

    @classmethod
    def allocate(
        cls,
        header: VolumeHeader,
        name: str = '',
        fill: Any = 0,
    ) -> 'ArrayImage':
        """Allocate storage laid out according to *header*.

        Parameters
        ----------
        header : VolumeHeader
            Geometry, strides and datatype of the new image.
        name : str, optional
            Label for the image.
        fill : scalar
            Initial voxel value. Default 0.

        Returns
        -------
        ArrayImage
        """
        layout = _stride.order(header.strides)
        outer_first = layout[::-1]
        buffer = np.full(
            [header.dims[a] for a in outer_first], fill,
            dtype=header.datatype,
        )
        data = np.transpose(buffer, np.argsort(outer_first))
        reversed_axes = tuple(
            axis for axis, s in enumerate(header.strides) if s < 0
        )
        if reversed_axes:
            data = np.flip(data, axis=reversed_axes)
        logger.debug("Allocated %s %s image %r with strides %s",
                     header.dims, header.datatype, name, header.strides)
        return cls(data, header, name=name)

    @classmethod
    def scratch(cls, header: VolumeHeader, name: str = 'scratch') -> 'ArrayImage':
        """Allocate a zero-filled temporary image with *header* geometry."""
        return cls.allocate(header, name=name)

    @property
    def header(self) -> VolumeHeader:
        return self._header

    @property
    def data(self) -> np.ndarray:
        """The underlying array (shared, not a copy)."""
        return self._data

    def index(self, axis: int) -> int:
        return self._index[axis]

    def set_index(self, axis: int, position: int) -> None:
        self._index[axis] = int(position)

    def value(self) -> Any:
        return self._data[tuple(self._index)]

    def set_value(self, value: Any) -> None:
        self._data[tuple(self._index)] = value

    def block(self, axes: Sequence[int] = (0, 1, 2)) -> np.ndarray:
        """View spanning *axes* at the cursor position on all other axes.

        Parameters
        ----------
        axes : Sequence[int]
            Axes kept whole in the returned view. Default: the three
            spatial axes.

        Returns
        -------
        np.ndarray
            Writable view with ``len(axes)`` dimensions, in axis order.
        """
        keep = set(axes)
        selection = tuple(
            slice(None) if axis in keep else self._index[axis]
            for axis in range(self.rank())
        )
        return self._data[selection]

    def duplicate(self) -> 'ArrayImage':
        twin = ArrayImage(self._data, self._header, name=self.name)
        twin._index = list(self._index)
        return twin

    def __repr__(self) -> str:
        return (
            f"ArrayImage(name={self.name!r}, dims={self._header.dims}, "
            f"datatype={self._header.datatype})"
        )
