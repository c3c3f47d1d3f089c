# -*- coding: utf-8 -*-
"""
Image Adapters - Non-copying wrappers over another image handle.

An adapter owns a reference to exactly one parent handle and presents the
same capability set, forwarding every operation it does not override.
Adapters compose by nesting (an adapter may wrap another adapter); they never
copy voxel storage.

- ``Adapter``: pure forwarding base.
- ``AllowEmpty``: substitutes a default value and degenerate geometry when
  the parent is absent or invalid, so algorithms can treat a missing
  optional image exactly like a present one.

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

from typing import Any, Optional

from volfilter.image.base import ImageHandle
from volfilter.image.header import VolumeHeader


class Adapter(ImageHandle):
    """Forward every capability to a parent image handle.

    Parameters
    ----------
    parent : ImageHandle
        The wrapped handle.
    """

    def __init__(self, parent: ImageHandle) -> None:
        self._parent = parent

    @property
    def parent(self) -> ImageHandle:
        """The wrapped handle."""
        return self._parent

    @property
    def header(self) -> VolumeHeader:
        return self._parent.header

    @property
    def valid(self) -> bool:
        return self._parent.valid

    def rank(self) -> int:
        return self._parent.rank()

    def size(self, axis: int) -> int:
        return self._parent.size(axis)

    def voxsize(self, axis: int) -> float:
        return self._parent.voxsize(axis)

    def index(self, axis: int) -> int:
        return self._parent.index(axis)

    def set_index(self, axis: int, position: int) -> None:
        self._parent.set_index(axis, position)

    def move_index(self, axis: int, increment: int) -> None:
        self._parent.move_index(axis, increment)

    def value(self) -> Any:
        return self._parent.value()

    def set_value(self, value: Any) -> None:
        self._parent.set_value(value)

    def reset(self) -> None:
        self._parent.reset()

    def duplicate(self) -> 'Adapter':
        return type(self)(self._parent.duplicate())


class AllowEmpty(Adapter):
    """Adapter that makes a missing image behave as a constant one.

    When the parent is ``None`` or reports ``valid == False``, every read
    returns *value_if_empty*, sizes and indices report 0, and writes and
    cursor moves are silently dropped. The parent is not touched at all in
    that state. A valid parent is forwarded unchanged.

    Parameters
    ----------
    parent : ImageHandle or None
        The wrapped handle, possibly absent.
    value_if_empty : scalar
        Value returned by ``value()`` when the parent is invalid.
        Default 0.0.

    Examples
    --------
    >>> mask = AllowEmpty(None, value_if_empty=1.0)
    >>> mask.size(0), mask.value()
    (0, 1.0)
    """

    def __init__(
        self,
        parent: Optional[ImageHandle],
        value_if_empty: Any = 0.0,
    ) -> None:
        super().__init__(parent)
        self.value_if_empty = value_if_empty

    @property
    def valid(self) -> bool:
        return self._parent is not None and self._parent.valid

    @property
    def header(self) -> Optional[VolumeHeader]:
        return self._parent.header if self.valid else None

    def rank(self) -> int:
        return self._parent.rank() if self.valid else 0

    def size(self, axis: int) -> int:
        return self._parent.size(axis) if self.valid else 0

    def voxsize(self, axis: int) -> float:
        return self._parent.voxsize(axis) if self.valid else 0.0

    def index(self, axis: int) -> int:
        return self._parent.index(axis) if self.valid else 0

    def set_index(self, axis: int, position: int) -> None:
        if self.valid:
            self._parent.set_index(axis, position)

    def move_index(self, axis: int, increment: int) -> None:
        if self.valid:
            self._parent.move_index(axis, increment)

    def value(self) -> Any:
        return self._parent.value() if self.valid else self.value_if_empty

    def set_value(self, value: Any) -> None:
        if self.valid:
            self._parent.set_value(value)

    def reset(self) -> None:
        if self.valid:
            self._parent.reset()

    def duplicate(self) -> 'AllowEmpty':
        parent = self._parent.duplicate() if self.valid else self._parent
        return AllowEmpty(parent, self.value_if_empty)
