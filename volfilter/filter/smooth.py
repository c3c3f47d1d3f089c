# -*- coding: utf-8 -*-
"""
Gaussian Smoothing Filter - Separable Gaussian convolution in physical units.

Smooths each 3D volume with a Gaussian kernel applied separably along the
three spatial axes. The standard deviation is given in mm (or as a full width
at half maximum) and converted to voxels with the input voxel sizes, so
anisotropic voxels are smoothed isotropically in physical space.

Kernels are truncated to ``extent`` taps per axis. At the volume boundary
the kernel is truncated further and renormalised over the taps that fall
inside the volume, so a constant volume stays constant right up to its
edges.

Dependencies
------------
scipy

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
import math
from typing import Annotated, Any, Optional, Sequence, Tuple

# Third-party
import numpy as np
from scipy.ndimage import correlate1d

# volfilter internal
from volfilter.exceptions import ConfigurationError
from volfilter.filter._validation import (
    FWHM_TO_STDEV,
    SPATIAL_AXES,
    broadcast_spatial,
    require_spatial,
    validate_extent,
)
from volfilter.filter.base import VolumeFilter
from volfilter.filter.config import FilterConfig
from volfilter.filter.params import Desc, Length, Range
from volfilter.filter.versioning import processor_tags, processor_version
from volfilter.image.base import ImageHandle
from volfilter.image.header import VolumeHeader
from volfilter.vocabulary import FilterKind


class SmoothConfig(FilterConfig):
    """Parameters of the Gaussian smoothing filter.

    ``stdev`` and ``fwhm`` are mutually exclusive; ``fwhm`` is converted to
    ``stdev`` on construction (``stdev = fwhm / 2.3548``) and reset to
    ``None``, so only ``stdev`` and ``extent`` are ever consulted.

    Parameters
    ----------
    stdev : tuple of float, optional
        Standard deviation in mm, one value for all spatial axes or one per
        axis. Default: one voxel along each axis.
    fwhm : tuple of float, optional
        Full width at half maximum in mm, alternative to *stdev*.
    extent : tuple of int, optional
        Kernel size in voxels (odd). Default
        ``2 * ceil(2.5 * stdev / voxel_size) - 1``.

    Raises
    ------
    ConfigurationError
        If both *stdev* and *fwhm* are given, a value is negative, a list
        has other than 1 or 3 values, or an extent is even.
    """

    stdev: Annotated[Optional[Tuple[float, ...]], Range(min=0.0), Length(1, 3),
                     Desc('apply Gaussian smoothing with the specified '
                          'standard deviation, in mm (default: 1 voxel); '
                          'a single value for all axes or one per axis')] = None
    fwhm: Annotated[Optional[Tuple[float, ...]], Range(min=0.0), Length(1, 3),
                    Desc('apply Gaussian smoothing with the specified full '
                         'width at half maximum, in mm; mutually exclusive '
                         'with stdev')] = None
    extent: Annotated[Optional[Tuple[int, ...]], Range(min=1), Length(1, 3),
                      Desc('kernel extent in voxels (odd); default '
                           '2 * ceil(2.5 * stdev / voxel_size) - 1')] = None

    def __post_init__(self) -> None:
        if self.stdev is not None and self.fwhm is not None:
            raise ConfigurationError(
                "the stdev and FWHM options are mutually exclusive"
            )
        if self.fwhm is not None:
            self._normalise(
                'stdev', tuple(f / FWHM_TO_STDEV for f in self.fwhm),
            )
            self._normalise('fwhm', None)
        if self.extent is not None:
            validate_extent(self.extent)


def default_extent(
    stdev: Sequence[float], voxel_size: Sequence[float],
) -> Tuple[int, ...]:
    """Kernel taps per axis: ``2 * ceil(2.5 * stdev / voxel_size) - 1``.

    Never less than one tap.
    """
    return tuple(
        max(1, 2 * int(math.ceil(2.5 * s / v)) - 1)
        for s, v in zip(stdev, voxel_size)
    )


def gaussian_kernel(stdev: float, voxel_size: float, extent: int) -> np.ndarray:
    """Normalised 1D Gaussian kernel of *extent* taps.

    Parameters
    ----------
    stdev : float
        Standard deviation in mm (> 0).
    voxel_size : float
        Tap spacing in mm.
    extent : int
        Number of taps (odd).

    Returns
    -------
    np.ndarray
        Kernel weights summing to one.
    """
    radius = (extent - 1) // 2
    x = np.arange(-radius, radius + 1) * voxel_size
    weights = np.exp(-0.5 * (x / stdev) ** 2)
    return weights / weights.sum()


def gaussian_smooth(
    volume: np.ndarray,
    stdev: Sequence[float],
    voxel_size: Sequence[float],
    extent: Sequence[int],
) -> np.ndarray:
    """Separable Gaussian smoothing of the first three axes of *volume*.

    Axes with zero stdev or a single tap are left untouched. Near the
    boundary the kernel is renormalised over in-bounds taps.

    Parameters
    ----------
    volume : np.ndarray
        Array whose first three axes are spatial.
    stdev, voxel_size : Sequence[float]
        Per-axis standard deviation and voxel size, in mm.
    extent : Sequence[int]
        Per-axis kernel taps.

    Returns
    -------
    np.ndarray
        Smoothed float64 array, same shape.
    """
    data = np.asarray(volume, dtype=np.float64)
    for axis in range(SPATIAL_AXES):
        if stdev[axis] == 0.0 or extent[axis] == 1:
            continue
        kernel = gaussian_kernel(stdev[axis], voxel_size[axis], extent[axis])
        numerator = correlate1d(data, kernel, axis=axis, mode='constant', cval=0.0)
        weight = correlate1d(
            np.ones(data.shape[axis]), kernel, mode='constant', cval=0.0,
        )
        shape = [1] * data.ndim
        shape[axis] = -1
        data = numerator / weight.reshape(shape)
    return data


@processor_version('1.0.0')
@processor_tags(kind=FilterKind.SMOOTH,
                description='separable Gaussian smoothing')
class SmoothFilter(VolumeFilter):
    """Gaussian smoothing of each 3D volume.

    Output has the input geometry and a ``float32`` datatype.

    Examples
    --------
    >>> smooth = SmoothFilter(image, SmoothConfig(fwhm=(4.0,)))
    >>> smooth.stdev
    (1.698..., 1.698..., 1.698...)
    """

    config_class = SmoothConfig

    def _compute_header(self, header: VolumeHeader) -> VolumeHeader:
        require_spatial(header, 'smooth')
        voxel_size = header.voxel_size[:SPATIAL_AXES]
        if self.config.stdev is None:
            self._stdev = tuple(voxel_size)
        else:
            self._stdev = broadcast_spatial(self.config.stdev, 'Gaussian stdev')
        if self.config.extent is None:
            self._extent = default_extent(self._stdev, voxel_size)
        else:
            self._extent = broadcast_spatial(self.config.extent, 'extent')
        self._voxel_size = tuple(voxel_size)
        return header.replace(datatype=np.float32)

    @property
    def stdev(self) -> Tuple[float, ...]:
        """Resolved standard deviation per spatial axis, in mm."""
        return self._stdev

    @property
    def extent(self) -> Tuple[int, ...]:
        """Resolved kernel taps per spatial axis."""
        return self._extent

    def _smooth(self, block: np.ndarray) -> np.ndarray:
        return gaussian_smooth(block, self._stdev, self._voxel_size, self._extent)

    def _execute(
        self,
        source: ImageHandle,
        destination: ImageHandle,
        **kwargs: Any,
    ) -> None:
        self._for_each_block(
            source, destination, range(SPATIAL_AXES), self._smooth, **kwargs,
        )
