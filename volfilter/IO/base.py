# -*- coding: utf-8 -*-
"""
IO Base Classes - Abstract interfaces for volume readers and writers.

Defines abstract base classes for reading and writing volumes. A reader
turns a file into a ``VolumeHeader`` plus voxel array; a writer stores an
image handle (its voxel data and header) to a file. All concrete formats
inherit from these classes.

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
from pathlib import Path
from typing import Optional, Union

import numpy as np

from volfilter.image.array import ArrayImage
from volfilter.image.base import ImageHandle
from volfilter.image.header import VolumeHeader
from volfilter.image.loop import read_block


class VolumeReader(ABC):
    """
    Abstract base class for all volume readers.

    Attributes
    ----------
    filepath : Path
        Path to the volume file.
    header : VolumeHeader
        Geometry of the stored volume, populated by ``_load_metadata``.
    """

    def __init__(self, filepath: Union[str, Path]) -> None:
        """
        Initialize the volume reader.

        Parameters
        ----------
        filepath : Union[str, Path]
            Path to the volume file.

        Raises
        ------
        FileNotFoundError
            If the specified filepath does not exist.
        """
        self.filepath = Path(filepath)
        if not self.filepath.exists():
            raise FileNotFoundError(f"File not found: {self.filepath}")
        self.header: Optional[VolumeHeader] = None
        self._load_metadata()

    @abstractmethod
    def _load_metadata(self) -> None:
        """
        Load volume geometry and set ``self.header``.

        Raises
        ------
        ValueError
            If the file content is not a valid volume.
        """
        pass

    @abstractmethod
    def read_full(self) -> np.ndarray:
        """
        Read the whole voxel array.

        Returns
        -------
        np.ndarray
            Array with shape ``self.header.dims``.
        """
        pass

    def read_image(self, name: str = '') -> ArrayImage:
        """
        Read the volume into an in-memory image handle.

        Parameters
        ----------
        name : str, optional
            Label for the image. Defaults to the file name.

        Returns
        -------
        ArrayImage
        """
        return ArrayImage(
            self.read_full(), self.header, name=name or self.filepath.name,
        )

    def close(self) -> None:
        """
        Close the reader and release resources.

        Default implementation does nothing. Override if the reader
        maintains open file handles or other resources.
        """
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False


class VolumeWriter(ABC):
    """
    Abstract base class for all volume writers.

    Attributes
    ----------
    filepath : Path
        Path where the volume will be written.
    """

    def __init__(self, filepath: Union[str, Path]) -> None:
        """
        Initialize the volume writer.

        Parameters
        ----------
        filepath : Union[str, Path]
            Path where the volume will be written.
        """
        self.filepath = Path(filepath)

    @abstractmethod
    def write(self, data: np.ndarray, header: VolumeHeader) -> None:
        """
        Write voxel data described by *header* to file.

        Parameters
        ----------
        data : np.ndarray
            Voxel array with shape ``header.dims``.
        header : VolumeHeader
            Geometry stored alongside the data.

        Raises
        ------
        ValueError
            If the datatype or rank is not supported by the format.
        OSError
            If writing fails.
        """
        pass

    def write_image(self, image: ImageHandle) -> None:
        """
        Write an image handle, gathering its voxels if it is not array-backed.

        Parameters
        ----------
        image : ImageHandle
            Image to store.
        """
        if isinstance(image, ArrayImage):
            data = image.data
        else:
            data = read_block(image.duplicate(), range(image.rank()))
        self.write(data, image.header)

    def close(self) -> None:
        """
        Close the writer and release resources.

        Default implementation does nothing. Override if the writer
        maintains open file handles or other resources.
        """
        pass

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False
