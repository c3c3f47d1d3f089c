# -*- coding: utf-8 -*-
"""
Image Module - Volume headers, image handles, adapters and iteration.

Provides the data model every filter is written against:

header.py
    ``VolumeHeader`` -- dims, strides, voxel sizes, datatype, transform.
base.py
    ``ImageHandle`` -- abstract cursor-bearing capability set.
array.py
    ``ArrayImage`` -- numpy-backed handle with stride-aware allocation.
adapter.py
    ``Adapter``, ``AllowEmpty`` -- non-copying wrappers.
loop.py
    ``Loop``, ``LoopInOrder``, ``volumes``, ``copy``, ``read_block``,
    ``write_block`` -- lock-step traversal and block access.
stride.py
    Symbolic stride normalisation and output stride selection.

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

from volfilter.image.header import VolumeHeader
from volfilter.image.base import ImageHandle
from volfilter.image.array import ArrayImage
from volfilter.image.adapter import Adapter, AllowEmpty
from volfilter.image.loop import (
    Loop,
    LoopInOrder,
    copy,
    read_block,
    volumes,
    write_block,
)

__all__ = [
    'VolumeHeader',
    'ImageHandle',
    'ArrayImage',
    'Adapter',
    'AllowEmpty',
    'Loop',
    'LoopInOrder',
    'copy',
    'volumes',
    'read_block',
    'write_block',
]
