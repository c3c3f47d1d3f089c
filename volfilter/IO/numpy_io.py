# -*- coding: utf-8 -*-
"""
NumPy IO - Read and write volumes as NumPy .npy files.

Voxel data is stored in a ``.npy`` file. Geometry that ``.npy`` cannot
carry (voxel sizes, scanner transform, symbolic strides) is stored in a
JSON sidecar next to it (``volume.npy.json``). A ``.npy`` file without
sidecar is read with unit voxel sizes and strides derived from the array
layout.

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
import json
import logging
from pathlib import Path
from typing import Any, Dict

# Third-party
import numpy as np

# volfilter internal
from volfilter.IO.base import VolumeReader, VolumeWriter
from volfilter.image.header import VolumeHeader

logger = logging.getLogger(__name__)


def sidecar_path(filepath: Path) -> Path:
    """Path of the JSON sidecar belonging to *filepath*."""
    return filepath.with_suffix(filepath.suffix + '.json')


class NumpyReader(VolumeReader):
    """Read a volume from a ``.npy`` file and optional JSON sidecar.

    Examples
    --------
    >>> with NumpyReader('dwi.npy') as reader:
    ...     image = reader.read_image()
    """

    def _load_metadata(self) -> None:
        self._data = np.load(str(self.filepath), allow_pickle=False)
        sidecar = sidecar_path(self.filepath)
        if not sidecar.exists():
            logger.debug("No sidecar for %s; using array layout", self.filepath)
            self.header = VolumeHeader.from_array(self._data)
            return

        with open(sidecar, 'r') as f:
            meta: Dict[str, Any] = json.load(f)
        dims = tuple(meta.get('dims', self._data.shape))
        if dims != self._data.shape:
            raise ValueError(
                f"sidecar {sidecar} describes dims {dims}, but the array "
                f"has shape {self._data.shape}"
            )
        self.header = VolumeHeader(
            dims=dims,
            voxel_size=meta.get('voxel_size'),
            strides=meta.get('strides'),
            datatype=self._data.dtype,
            transform=meta.get('transform'),
        )

    def read_full(self) -> np.ndarray:
        return self._data


class NumpyWriter(VolumeWriter):
    """Write a volume to a ``.npy`` file with a JSON geometry sidecar.

    Examples
    --------
    >>> with NumpyWriter('smoothed.npy') as writer:
    ...     writer.write_image(output)
    """

    def write(self, data: np.ndarray, header: VolumeHeader) -> None:
        np.save(str(self.filepath), np.asarray(data, dtype=header.datatype))
        with open(sidecar_path(self.filepath), 'w') as f:
            json.dump(header.to_dict(), f, indent=2, default=str)
        logger.debug("Wrote %s %s to %s", header.dims, header.datatype,
                     self.filepath)
