# -*- coding: utf-8 -*-
"""
IO Module - Volume readers and writers.

Provides reading and writing of volumes in the supported file formats.
Readers produce ``ArrayImage`` handles with a complete ``VolumeHeader``;
writers store an image handle together with its geometry.

Formats
    NIfTI-1 (``.nii``, ``.nii.gz``) via nibabel
    NumPy (``.npy``) with a JSON geometry sidecar

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
import importlib
from pathlib import Path
from typing import Dict, Optional, Union

# volfilter internal
from volfilter.IO.base import VolumeReader, VolumeWriter
from volfilter.image.array import ArrayImage
from volfilter.image.base import ImageHandle

_READER_REGISTRY: Dict[str, tuple] = {
    'nifti': ('volfilter.IO.nifti', 'NiftiReader'),
    'numpy': ('volfilter.IO.numpy_io', 'NumpyReader'),
}

_WRITER_REGISTRY: Dict[str, tuple] = {
    'nifti': ('volfilter.IO.nifti', 'NiftiWriter'),
    'numpy': ('volfilter.IO.numpy_io', 'NumpyWriter'),
}

# Extension-to-format mapping for auto-detection
_EXTENSION_MAP: Dict[str, str] = {
    '.nii': 'nifti',
    '.nii.gz': 'nifti',
    '.npy': 'numpy',
}


def detect_format(filepath: Union[str, Path]) -> str:
    """Format name for *filepath* from its extension.

    Raises
    ------
    ValueError
        If the extension is not recognized.
    """
    name = Path(filepath).name.lower()
    for ext in sorted(_EXTENSION_MAP, key=len, reverse=True):
        if name.endswith(ext):
            return _EXTENSION_MAP[ext]
    raise ValueError(
        f"Cannot determine format of '{filepath}'. "
        f"Supported extensions: {sorted(_EXTENSION_MAP.keys())}."
    )


def _load(registry: Dict[str, tuple], format: str, kind: str) -> type:
    key = format.lower()
    if key not in registry:
        raise ValueError(
            f"Unknown {kind} format: {format!r}. "
            f"Supported formats: {sorted(registry.keys())}"
        )
    module_path, class_name = registry[key]
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def get_reader(
    format: str,
    filepath: Union[str, Path],
) -> VolumeReader:
    """Create a VolumeReader for the given format.

    Parameters
    ----------
    format : str
        ``'nifti'`` or ``'numpy'``.
    filepath : str or Path
        Input file path.

    Raises
    ------
    ValueError
        If *format* is not a recognized format string.
    FileNotFoundError
        If *filepath* does not exist.
    """
    return _load(_READER_REGISTRY, format, 'reader')(filepath)


def get_writer(
    format: str,
    filepath: Union[str, Path],
) -> VolumeWriter:
    """Create a VolumeWriter for the given format.

    Factory function that maps format strings to concrete writer
    classes.

    Parameters
    ----------
    format : str
        Output format. One of ``'nifti'``, ``'numpy'``.
    filepath : str or Path
        Output file path.

    Returns
    -------
    VolumeWriter
        Concrete writer instance for the requested format.

    Raises
    ------
    ValueError
        If *format* is not a recognized format string.

    Examples
    --------
    >>> from volfilter.IO import get_writer
    >>> with get_writer('numpy', 'output.npy') as writer:
    ...     writer.write_image(image)
    """
    return _load(_WRITER_REGISTRY, format, 'writer')(filepath)


def open_volume(filepath: Union[str, Path]) -> ArrayImage:
    """Read a supported volume file into memory.

    Parameters
    ----------
    filepath : str or Path
        Path to a ``.nii``, ``.nii.gz`` or ``.npy`` file.

    Returns
    -------
    ArrayImage
        Image with the stored geometry.

    Raises
    ------
    FileNotFoundError
        If *filepath* does not exist.
    ValueError
        If the format cannot be determined or the file is malformed.

    Examples
    --------
    >>> from volfilter.IO import open_volume
    >>> image = open_volume('dwi.nii.gz')
    >>> image.header.dims
    (96, 96, 60, 65)
    """
    with get_reader(detect_format(filepath), filepath) as reader:
        return reader.read_image()


def write_volume(
    image: ImageHandle,
    filepath: Union[str, Path],
    format: Optional[str] = None,
) -> None:
    """Write an image to a file, auto-detecting format from extension.

    Parameters
    ----------
    image : ImageHandle
        Image to write.
    filepath : str or Path
        Output file path.
    format : str, optional
        Output format override. If ``None``, auto-detected from the file
        extension.

    Raises
    ------
    ValueError
        If *format* is ``None`` and the extension is not recognized.
    """
    if format is None:
        format = detect_format(filepath)
    with get_writer(format, filepath) as writer:
        writer.write_image(image)


__all__ = [
    'VolumeReader',
    'VolumeWriter',
    'detect_format',
    'get_reader',
    'get_writer',
    'open_volume',
    'write_volume',
]
