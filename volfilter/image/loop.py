# -*- coding: utf-8 -*-
"""
Iteration Engine - Lock-step N-dimensional traversal over image handles.

``Loop`` walks the Cartesian product of a set of axes, advancing the cursor of
every image it is given in lock-step, so that a loop body can be written
once against ``value()`` / ``set_value()`` and reused for any number of
images. Axes are listed innermost first. A ``Loop`` is a reusable
description: calling it with images returns a fresh lazy generator, so the
same loop can be restarted any number of times.

``LoopInOrder`` derives the axis order from an image's strides so that the
traversal follows memory order. ``copy`` and ``volumes`` are the two
traversals the filters need: voxel-wise copy/cast between images, and
iteration over the outer (non-spatial) axes of a 4D+ volume.

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
from typing import Iterator, List, Optional, Sequence, Tuple

# Third-party
import numpy as np

# volfilter internal
from volfilter.exceptions import GeometryError
from volfilter.image import stride as _stride
from volfilter.image.base import ImageHandle


def _extents(image: ImageHandle, axes: Sequence[int]) -> List[int]:
    """Sizes of *image* along *axes*; axes past its rank count as 1."""
    rank = image.rank()
    return [image.size(axis) if axis < rank else 1 for axis in axes]


class Loop:
    """Traversal over the Cartesian product of *axes*, innermost first.

    Sizes are taken from the first valid image; every other valid image
    must agree on those axes. Images may differ in rank: an axis an image
    does not have counts as size 1 for it, and its cursor is not moved
    along that axis. Invalid images (e.g. an ``AllowEmpty`` over a missing
    parent) are carried along and never moved.

    Parameters
    ----------
    axes : Sequence[int]
        Axes to traverse. ``axes[0]`` varies fastest. An empty sequence
        yields a single step.

    Examples
    --------
    >>> loop = Loop((0, 1))
    >>> for position in loop(source, destination):
    ...     destination.set_value(2 * source.value())

    The yielded tuple is the cursor position along *axes*, in the order
    they were given.
    """

    def __init__(self, axes: Sequence[int]) -> None:
        self.axes: Tuple[int, ...] = tuple(int(a) for a in axes)
        if len(set(self.axes)) != len(self.axes):
            raise GeometryError(f"loop axes {self.axes} repeat an axis")

    def __call__(self, *images: ImageHandle) -> Iterator[Tuple[int, ...]]:
        return self._run(images)

    def _run(
        self, images: Sequence[ImageHandle]
    ) -> Iterator[Tuple[int, ...]]:
        valid = [image for image in images if image.valid]
        if not valid:
            return
        sizes = _extents(valid[0], self.axes)
        for image in valid[1:]:
            other = _extents(image, self.axes)
            if other != sizes:
                raise GeometryError(
                    f"images disagree along loop axes {self.axes}: "
                    f"{sizes} vs {other}"
                )
        if any(size == 0 for size in sizes):
            return

        # Per axis, the images that actually have it; the rest stay put.
        movers = [
            [image for image in valid if axis < image.rank()]
            for axis in self.axes
        ]
        for axis, group in zip(self.axes, movers):
            for image in group:
                image.set_index(axis, 0)

        position = [0] * len(self.axes)
        while True:
            yield tuple(position)
            for k, axis in enumerate(self.axes):
                if position[k] + 1 < sizes[k]:
                    position[k] += 1
                    for image in movers[k]:
                        image.move_index(axis, 1)
                    break
                for image in movers[k]:
                    image.move_index(axis, -position[k])
                position[k] = 0
            else:
                return

    def __repr__(self) -> str:
        return f"Loop(axes={self.axes})"


class LoopInOrder(Loop):
    """``Loop`` over a range of axes in the memory order of *image*.

    Parameters
    ----------
    image : ImageHandle
        Image whose strides define the traversal order (smallest stride
        magnitude innermost).
    from_axis : int
        First axis included. Default 0.
    to_axis : int, optional
        One past the last axis included. Default: the image rank.
    """

    def __init__(
        self,
        image: ImageHandle,
        from_axis: int = 0,
        to_axis: Optional[int] = None,
    ) -> None:
        if to_axis is None:
            to_axis = image.rank()
        axes = [
            axis for axis in _stride.order(image.header.strides)
            if from_axis <= axis < to_axis
        ]
        super().__init__(axes)


def volumes(*images: ImageHandle, spatial: int = 3) -> Iterator[Tuple[int, ...]]:
    """Iterate over the outer axes (``>= spatial``) of *images* in lock-step.

    The first valid image defines the rank. For a volume with no outer axes
    a single step is produced.
    """
    reference = next((image for image in images if image.valid), None)
    rank = reference.rank() if reference is not None else 0
    return Loop(range(spatial, rank))(*images)


def copy(
    source: ImageHandle,
    destination: ImageHandle,
    from_axis: int = 0,
    to_axis: Optional[int] = None,
) -> None:
    """Copy voxel values from *source* into *destination*.

    Values are cast to the destination datatype on assignment. An invalid
    source wrapped in ``AllowEmpty`` fills the destination with its
    default value.

    Parameters
    ----------
    source : ImageHandle
        Image read from.
    destination : ImageHandle
        Image written to; its strides define the traversal order.
    from_axis, to_axis : int
        Range of axes traversed. Axes outside the range keep their
        current cursor positions.
    """
    for _ in LoopInOrder(destination, from_axis, to_axis)(source, destination):
        destination.set_value(source.value())


def read_block(image: ImageHandle, axes: Sequence[int]) -> np.ndarray:
    """Voxel values spanning *axes* at the cursor position on other axes.

    Handles providing ``block()`` (e.g. ``ArrayImage``) return a view of
    their storage; any other handle is gathered voxel by voxel.
    """
    block = getattr(image, 'block', None)
    if block is not None:
        return block(axes)
    out = np.empty(
        [image.size(axis) for axis in axes], dtype=image.header.datatype,
    )
    for position in Loop(axes)(image):
        out[position] = image.value()
    return out


def write_block(
    image: ImageHandle, axes: Sequence[int], values: np.ndarray,
) -> None:
    """Write *values* over *axes* at the cursor position on other axes.

    Values are cast to the image datatype.
    """
    block = getattr(image, 'block', None)
    if block is not None:
        block(axes)[...] = values
        return
    for position in Loop(axes)(image):
        image.set_value(values[position])
