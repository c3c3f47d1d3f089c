# -*- coding: utf-8 -*-
"""
Volume Header - Geometry and datatype description of an N-dimensional grid.

``VolumeHeader`` is the leaf data type shared by every other component: image
handles expose one, filters compute one for their output before any storage
exists, and the storage layer reads and writes one alongside the voxel data.

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
import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

# Third-party
import numpy as np

# volfilter internal
from volfilter.exceptions import GeometryError
from volfilter.image import stride as _stride


def _default_transform(voxel_size: Sequence[float]) -> np.ndarray:
    """Axis-aligned voxel-to-scanner mapping with the given voxel sizes."""
    spatial = list(voxel_size[:3]) + [1.0] * (3 - min(3, len(voxel_size)))
    return np.diag(spatial + [1.0])


@dataclass(frozen=True)
class VolumeHeader:
    """Shape, strides, voxel sizes and datatype of a volume.

    Parameters
    ----------
    dims : Sequence[int]
        Size of each axis. At least one axis; every size >= 1.
    voxel_size : Sequence[float], optional
        Physical extent of a voxel along each axis, in mm. Defaults to 1.0
        for every axis.
    strides : Sequence[int], optional
        Signed symbolic strides, one per axis. Defaults to contiguous
        strides ``(1, 2, ..., N)``. Normalised on construction.
    datatype : numpy.dtype, optional
        Voxel datatype. Default ``float32``.
    transform : numpy.ndarray, optional
        4x4 voxel-to-scanner affine for the first three axes. Defaults to
        an axis-aligned scaling by the voxel sizes.

    Raises
    ------
    GeometryError
        If the per-axis sequences differ in length, a size or voxel size is
        not positive, strides repeat a magnitude or contain zeros, or the
        transform is not 4x4.

    Examples
    --------
    >>> header = VolumeHeader(dims=(64, 64, 32), voxel_size=(1.0, 1.0, 2.5))
    >>> header.strides
    (1, 2, 3)
    >>> header.replace(datatype=np.complex128).datatype
    dtype('complex128')
    """

    dims: Tuple[int, ...]
    voxel_size: Optional[Tuple[float, ...]] = None
    strides: Optional[Tuple[int, ...]] = None
    datatype: Any = np.float32
    transform: Optional[np.ndarray] = field(
        default=None, compare=False, repr=False,
    )

    def __post_init__(self) -> None:
        dims = tuple(int(d) for d in self.dims)
        if not dims:
            raise GeometryError("a volume needs at least one axis")
        if any(d < 1 for d in dims):
            raise GeometryError(f"axis sizes must be positive, got {dims}")

        if self.voxel_size is None:
            voxel_size = (1.0,) * len(dims)
        else:
            voxel_size = tuple(float(v) for v in self.voxel_size)
        if len(voxel_size) != len(dims):
            raise GeometryError(
                f"voxel_size {voxel_size} does not match rank {len(dims)}"
            )
        if any(not v > 0.0 for v in voxel_size):
            raise GeometryError(
                f"voxel sizes must be positive, got {voxel_size}"
            )

        if self.strides is None:
            strides = _stride.contiguous(len(dims))
        else:
            strides = tuple(int(s) for s in self.strides)
        if len(strides) != len(dims):
            raise GeometryError(
                f"strides {strides} do not match rank {len(dims)}"
            )
        if any(s == 0 for s in strides):
            raise GeometryError(f"strides must be non-zero, got {strides}")
        magnitudes = [abs(s) for s in strides]
        if len(set(magnitudes)) != len(magnitudes):
            raise GeometryError(f"strides {strides} repeat a magnitude")

        if self.transform is None:
            transform = _default_transform(voxel_size)
        else:
            transform = np.array(self.transform, dtype=np.float64)
        if transform.shape != (4, 4):
            raise GeometryError(
                f"transform must be 4x4, got shape {transform.shape}"
            )
        transform.setflags(write=False)

        object.__setattr__(self, 'dims', dims)
        object.__setattr__(self, 'voxel_size', voxel_size)
        object.__setattr__(self, 'strides', _stride.symbolic(strides))
        object.__setattr__(self, 'datatype', np.dtype(self.datatype))
        object.__setattr__(self, 'transform', transform)

    @classmethod
    def from_array(
        cls,
        data: np.ndarray,
        voxel_size: Optional[Sequence[float]] = None,
        transform: Optional[np.ndarray] = None,
    ) -> 'VolumeHeader':
        """Describe an existing array, deriving strides from its memory layout.

        Parameters
        ----------
        data : np.ndarray
            Voxel array.
        voxel_size : Sequence[float], optional
            Voxel sizes in mm. Default 1.0 per axis.
        transform : np.ndarray, optional
            4x4 voxel-to-scanner affine.

        Returns
        -------
        VolumeHeader
        """
        return cls(
            dims=data.shape,
            voxel_size=voxel_size,
            strides=_stride.sanitise(data.strides),
            datatype=data.dtype,
            transform=transform,
        )

    @property
    def ndim(self) -> int:
        """Number of axes."""
        return len(self.dims)

    @property
    def spatial_dims(self) -> Tuple[int, ...]:
        """Sizes of the (up to) three spatial axes."""
        return self.dims[:3]

    def size(self, axis: int) -> int:
        """Size of *axis*."""
        return self.dims[axis]

    def voxsize(self, axis: int) -> float:
        """Voxel size along *axis*, in mm."""
        return self.voxel_size[axis]

    def replace(self, **changes: Any) -> 'VolumeHeader':
        """Return a copy with the given fields replaced and re-validated."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable representation used by sidecar files."""
        return {
            'dims': list(self.dims),
            'voxel_size': list(self.voxel_size),
            'strides': list(self.strides),
            'datatype': str(self.datatype),
            'transform': self.transform.tolist(),
        }
