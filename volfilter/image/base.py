# -*- coding: utf-8 -*-
"""
Image Handle Base Class - Abstract cursor-bearing view over voxel storage.

Defines the capability set shared by every image-like object in volfilter:
concrete storage-backed images (``ArrayImage``), adapters wrapping another
handle (``Adapter``, ``AllowEmpty``) and anything else a caller wants to
pass through the iteration engine or a filter. A handle carries a cursor,
one index per axis; ``value()`` and ``set_value()`` read and write the voxel
under the cursor.

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

from abc import ABC, abstractmethod
from typing import Any, Tuple

from volfilter.image.header import VolumeHeader


class ImageHandle(ABC):
    """
    Abstract base class for cursor-bearing image views.

    Concrete implementations must provide the geometry (``header``), cursor
    access (``index``, ``set_index``) and voxel access (``value``,
    ``set_value``). ``rank``, ``size``, ``voxsize``, ``move_index`` and
    ``reset`` are derived from those and only need overriding when a
    handle alters their behaviour.

    Notes
    -----
    Handles are cheap views: ``duplicate()`` returns a handle over the same
    storage with an independent cursor, which is how worker threads obtain
    their own cursor state.
    """

    @property
    @abstractmethod
    def header(self) -> VolumeHeader:
        """Geometry and datatype of the image."""
        ...

    @property
    def valid(self) -> bool:
        """Whether the handle refers to real storage."""
        return True

    def rank(self) -> int:
        """Number of axes."""
        return self.header.ndim

    def size(self, axis: int) -> int:
        """Number of voxels along *axis*."""
        return self.header.dims[axis]

    def voxsize(self, axis: int) -> float:
        """Voxel size along *axis*, in mm."""
        return self.header.voxel_size[axis]

    @abstractmethod
    def index(self, axis: int) -> int:
        """Cursor position along *axis*."""
        ...

    @abstractmethod
    def set_index(self, axis: int, position: int) -> None:
        """Move the cursor to *position* along *axis*."""
        ...

    def move_index(self, axis: int, increment: int) -> None:
        """Move the cursor by *increment* voxels along *axis*."""
        self.set_index(axis, self.index(axis) + increment)

    @abstractmethod
    def value(self) -> Any:
        """Voxel value under the cursor."""
        ...

    @abstractmethod
    def set_value(self, value: Any) -> None:
        """Write *value* to the voxel under the cursor."""
        ...

    def reset(self) -> None:
        """Move the cursor to the origin on every axis."""
        for axis in range(self.rank()):
            self.set_index(axis, 0)

    def position(self) -> Tuple[int, ...]:
        """Cursor position on every axis."""
        return tuple(self.index(axis) for axis in range(self.rank()))

    @abstractmethod
    def duplicate(self) -> 'ImageHandle':
        """A handle over the same storage with an independent cursor."""
        ...
