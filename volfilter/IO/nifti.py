# -*- coding: utf-8 -*-
"""
NIfTI IO - Read and write volumes in NIfTI-1 format via nibabel.

The NIfTI affine is the voxel-to-scanner transform of the header and the
``pixdim`` zooms are the voxel sizes. Voxel data in NIfTI files is stored
with the first axis varying fastest, so volumes read from NIfTI have
contiguous strides ``(1, 2, ..., N)``.

Dependencies
------------
nibabel

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
import logging

# Third-party
import nibabel as nib
from nibabel.filebasedimages import ImageFileError
from nibabel.spatialimages import HeaderDataError
import numpy as np

# volfilter internal
from volfilter.IO.base import VolumeReader, VolumeWriter
from volfilter.image import stride as _stride
from volfilter.image.header import VolumeHeader

logger = logging.getLogger(__name__)


class NiftiReader(VolumeReader):
    """Read a ``.nii`` / ``.nii.gz`` volume.

    Examples
    --------
    >>> with NiftiReader('t1.nii.gz') as reader:
    ...     print(reader.header.voxel_size)
    """

    def _load_metadata(self) -> None:
        try:
            self._img = nib.load(str(self.filepath))
        except (ImageFileError, HeaderDataError) as exc:
            raise ValueError(
                f"{self.filepath} is not a readable NIfTI volume: {exc}"
            ) from exc
        dims = tuple(int(d) for d in self._img.shape)
        zooms = [float(z) for z in self._img.header.get_zooms()[:len(dims)]]
        zooms += [1.0] * (len(dims) - len(zooms))
        # Unset pixdim entries are stored as zero.
        voxel_size = tuple(z if z > 0.0 else 1.0 for z in zooms)
        self.header = VolumeHeader(
            dims=dims,
            voxel_size=voxel_size,
            strides=_stride.contiguous(len(dims)),
            datatype=self._img.get_data_dtype(),
            transform=self._img.affine,
        )
        logger.debug("Opened NIfTI %s: %s", self.filepath, self.header)

    def read_full(self) -> np.ndarray:
        data = np.asarray(self._img.dataobj)
        if data.dtype != self.header.datatype:
            # Scaled integer data comes back as float; record that.
            self.header = self.header.replace(datatype=data.dtype)
        return data


class NiftiWriter(VolumeWriter):
    """Write a volume as NIfTI-1.

    Examples
    --------
    >>> with NiftiWriter('gradient.nii.gz') as writer:
    ...     writer.write_image(output)
    """

    def write(self, data: np.ndarray, header: VolumeHeader) -> None:
        data = np.asarray(data, dtype=header.datatype)
        img = nib.Nifti1Image(data, np.asarray(header.transform))
        img.header.set_data_dtype(header.datatype)
        img.header.set_zooms(header.voxel_size)
        nib.save(img, str(self.filepath))
        logger.debug("Wrote %s %s to %s", header.dims, header.datatype,
                     self.filepath)
