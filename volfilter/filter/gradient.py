# -*- coding: utf-8 -*-
"""
Gradient Filter - Smoothed finite-difference gradient of real-valued volumes.

Estimates the spatial gradient of each 3D volume. Finite differences amplify
noise, so every volume is first smoothed with the Gaussian kernels of the
smoothing filter (default stdev: one voxel along each axis). Centred
differences are then taken along each spatial axis in physical units
(intensity per mm); one-sided differences are used on the first and last
slice of each axis.

Algorithm
---------
For each 3D volume ``I``:

1. ``S = gaussian_smooth(I, stdev)``
2. ``g_d = dS/dx_d`` along voxel axis ``d``, scaled by the voxel size
3. Scanner frame (optional): ``g = inv(A).T @ g``, ``A`` the linear part of
   the voxel-to-scanner transform, giving derivatives with respect to
   scanner coordinates.
4. Output the three components on an extra trailing axis, or their
   Euclidean norm.

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
from typing import Annotated, Any, Optional, Tuple

# Third-party
import numpy as np

# volfilter internal
from volfilter.exceptions import GeometryError
from volfilter.filter._validation import (
    SPATIAL_AXES,
    broadcast_spatial,
    require_spatial,
)
from volfilter.filter.base import VolumeFilter
from volfilter.filter.config import FilterConfig
from volfilter.filter.params import Desc, Length, Range
from volfilter.filter.smooth import default_extent, gaussian_smooth
from volfilter.filter.versioning import processor_tags, processor_version
from volfilter.image.base import ImageHandle
from volfilter.image.header import VolumeHeader
from volfilter.vocabulary import FilterKind


class GradientConfig(FilterConfig):
    """Parameters of the gradient filter.

    Parameters
    ----------
    stdev : tuple of float, optional
        Standard deviation of the pre-smoothing Gaussian, in mm; a single
        value for all three axes or one per axis. Zero disables smoothing
        along an axis. Default: one voxel along each axis.
    magnitude : bool
        Output the gradient magnitude rather than its three components.
    scanner : bool
        Express the gradient with respect to the scanner coordinate frame
        rather than the voxel axes.
    """

    stdev: Annotated[Optional[Tuple[float, ...]], Range(min=0.0), Length(1, 3),
                     Desc('the standard deviation of the Gaussian kernel used '
                          'to smooth the input image, in mm (default: 1 '
                          'voxel); a single value for all 3 axes or one per '
                          'axis')] = None
    magnitude: Annotated[bool, Desc('output the gradient magnitude, rather '
                                    'than the default x,y,z components')] = False
    scanner: Annotated[bool, Desc('define the gradient with respect to the '
                                  'scanner coordinate frame of '
                                  'reference')] = False


def finite_difference(volume: np.ndarray, voxel_size) -> np.ndarray:
    """Centred differences along the first three axes, in units per mm.

    Returns an array with a trailing axis of length 3 holding the
    derivative along each axis. Axes of length 1 have zero derivative.
    """
    components = []
    for axis in range(SPATIAL_AXES):
        if volume.shape[axis] < 2:
            components.append(np.zeros(volume.shape))
        else:
            components.append(np.gradient(volume, voxel_size[axis], axis=axis))
    return np.stack(components, axis=-1)


@processor_version('1.0.0')
@processor_tags(kind=FilterKind.GRADIENT,
                description='smoothed finite-difference gradient')
class GradientFilter(VolumeFilter):
    """Gradient (or gradient magnitude) of each 3D volume.

    Without ``magnitude`` the output gains one trailing axis of length 3,
    stored innermost, holding the gradient components; with ``magnitude``
    the output has the input geometry. The output datatype is ``float32``.

    Examples
    --------
    >>> grad = GradientFilter(image, GradientConfig(stdev=(0.0,)))
    >>> grad.dims
    (32, 32, 16, 3)
    """

    config_class = GradientConfig

    def _compute_header(self, header: VolumeHeader) -> VolumeHeader:
        require_spatial(header, 'gradient')
        voxel_size = header.voxel_size[:SPATIAL_AXES]
        if self.config.stdev is None:
            self._stdev = tuple(voxel_size)
        else:
            self._stdev = broadcast_spatial(self.config.stdev, 'Gaussian stdev')
        self._extent = default_extent(self._stdev, voxel_size)
        self._voxel_size = tuple(voxel_size)

        self._to_scanner = None
        if self.config.scanner:
            try:
                self._to_scanner = np.linalg.inv(header.transform[:3, :3]).T
            except np.linalg.LinAlgError as exc:
                raise GeometryError(
                    "scanner-frame gradient needs an invertible transform; "
                    f"{exc}"
                ) from exc

        if self.config.magnitude:
            return header.replace(datatype=np.float32)
        strides = tuple(s + 1 if s > 0 else s - 1 for s in header.strides)
        return VolumeHeader(
            dims=header.dims + (SPATIAL_AXES,),
            voxel_size=header.voxel_size + (1.0,),
            strides=strides + (1,),
            datatype=np.float32,
            transform=header.transform,
        )

    @property
    def stdev(self) -> Tuple[float, ...]:
        """Resolved smoothing stdev per spatial axis, in mm."""
        return self._stdev

    def _gradient(self, block: np.ndarray) -> np.ndarray:
        smoothed = gaussian_smooth(block, self._stdev, self._voxel_size, self._extent)
        gradient = finite_difference(smoothed, self._voxel_size)
        # Scanner derivatives are inv(A).T applied to per-index derivatives.
        if self.config.scanner:
            per_voxel = gradient * np.asarray(self._voxel_size)
            gradient = per_voxel @ self._to_scanner.T
        if self.config.magnitude:
            return np.linalg.norm(gradient, axis=-1)
        return gradient

    def _execute(
        self,
        source: ImageHandle,
        destination: ImageHandle,
        **kwargs: Any,
    ) -> None:
        axes = tuple(range(SPATIAL_AXES))
        if self.config.magnitude:
            destination_axes = axes
        else:
            destination_axes = axes + (destination.rank() - 1,)
        self._for_each_block(
            source, destination, axes, self._gradient,
            destination_axes=destination_axes, **kwargs,
        )
