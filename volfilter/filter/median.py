# -*- coding: utf-8 -*-
"""
Median Filter - Rank filtering over a rectangular 3D neighbourhood.

Replaces each voxel with the median of the voxels in an ``extent[0] x
extent[1] x extent[2]`` window centred on it. The window is truncated at
the volume boundary rather than padded, so edge voxels see fewer samples;
when the truncated window holds an even number of samples the median is the
mean of the two middle values. NaN samples are ignored.

Each 3D volume is processed in slabs along the third axis to bound the
memory used by the windowed view.

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
import warnings
from typing import Annotated, Any, Sequence, Tuple

# Third-party
import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

# volfilter internal
from volfilter.filter._validation import (
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

#: Upper bound on window samples gathered per slab.
_SLAB_SAMPLES = 1 << 24


class MedianConfig(FilterConfig):
    """Parameters of the median filter.

    Parameters
    ----------
    extent : tuple of int
        Neighbourhood size in voxels, one odd value for all three axes or
        one per axis. Default ``(3,)``.
    """

    extent: Annotated[Tuple[int, ...], Range(min=1), Length(1, 3),
                      Desc('specify extent of median filtering neighbourhood '
                           'in voxels; a single value for all 3 axes or one '
                           'per axis (default: 3x3x3)')] = (3,)

    def __post_init__(self) -> None:
        validate_extent(self.extent)


def truncated_median(volume: np.ndarray, extent: Sequence[int]) -> np.ndarray:
    """Median over a boundary-truncated window of the first three axes.

    Parameters
    ----------
    volume : np.ndarray
        3D array.
    extent : Sequence[int]
        Odd window size per axis.

    Returns
    -------
    np.ndarray
        float64 array of the same shape. Voxels whose window holds only
        NaN are NaN.
    """
    data = np.asarray(volume, dtype=np.float64)
    radius = [(e - 1) // 2 for e in extent]
    padded = np.pad(
        data, [(r, r) for r in radius], mode='constant',
        constant_values=np.nan,
    )
    out = np.empty(data.shape, dtype=np.float64)

    plane = data.shape[0] * data.shape[1] * int(np.prod(extent))
    slab = max(1, min(data.shape[2], _SLAB_SAMPLES // max(plane, 1)))
    with warnings.catch_warnings():
        # All-NaN windows produce NaN; numpy warns about them.
        warnings.simplefilter('ignore', category=RuntimeWarning)
        for start in range(0, data.shape[2], slab):
            stop = min(start + slab, data.shape[2])
            chunk = padded[:, :, start:stop + 2 * radius[2]]
            windows = sliding_window_view(chunk, tuple(extent))
            out[:, :, start:stop] = np.nanmedian(windows, axis=(-3, -2, -1))
    return out


@processor_version('1.0.0')
@processor_tags(kind=FilterKind.MEDIAN,
                description='median over a truncated 3D neighbourhood')
class MedianFilter(VolumeFilter):
    """Median filtering of each 3D volume.

    Output has the input geometry and a ``float32`` datatype.

    Examples
    --------
    >>> median = MedianFilter(image, MedianConfig(extent=(3, 3, 1)))
    >>> median.extent
    (3, 3, 1)
    """

    config_class = MedianConfig

    def _compute_header(self, header: VolumeHeader) -> VolumeHeader:
        require_spatial(header, 'median')
        self._extent = broadcast_spatial(self.config.extent, 'median extent')
        return header.replace(datatype=np.float32)

    @property
    def extent(self) -> Tuple[int, ...]:
        """Resolved neighbourhood size per spatial axis."""
        return self._extent

    def _median(self, block: np.ndarray) -> np.ndarray:
        return truncated_median(block, self._extent)

    def _execute(
        self,
        source: ImageHandle,
        destination: ImageHandle,
        **kwargs: Any,
    ) -> None:
        self._for_each_block(
            source, destination, range(SPATIAL_AXES), self._median, **kwargs,
        )
