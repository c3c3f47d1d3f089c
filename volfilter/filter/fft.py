# -*- coding: utf-8 -*-
"""
FFT Filter - Discrete Fourier transform of volumes along selected axes.

Applies a forward or inverse complex FFT along any subset of image axes
(default: the spatial axes). Computation is always carried out in complex
double precision, whatever the input datatype. Two optional post-steps:

- ``centre_zero``: move the zero-frequency sample to the centre of each
  transformed axis (``n // 2``). For inverse transforms the input is taken
  to be centred and is un-shifted before transforming.
- ``magnitude``: output the modulus of the complex result as ``float32``.
  The complex result is first written to a scratch image and a second pass
  converts it into the real output.

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
import logging
from typing import Annotated, Any, Optional, Sequence, Tuple

# Third-party
import numpy as np

# volfilter internal
from volfilter.exceptions import ConfigurationError
from volfilter.filter._validation import SPATIAL_AXES
from volfilter.filter.base import VolumeFilter
from volfilter.filter.config import FilterConfig
from volfilter.filter.params import Desc, Length, Range
from volfilter.filter.versioning import processor_tags, processor_version
from volfilter.image.array import ArrayImage
from volfilter.image.base import ImageHandle
from volfilter.image.header import VolumeHeader
from volfilter.vocabulary import FilterKind

logger = logging.getLogger(__name__)


class FFTConfig(FilterConfig):
    """Parameters of the FFT filter.

    Parameters
    ----------
    axes : tuple of int, optional
        Axes to transform. Default: the first three axes (or all axes of
        a lower-rank image).
    inverse : bool
        Perform the inverse transform.
    magnitude : bool
        Output the modulus of the complex result.
    centre_zero : bool
        Place the zero frequency at the centre of each transformed axis.

    Raises
    ------
    ConfigurationError
        If an axis is negative or listed twice.
    """

    axes: Annotated[Optional[Tuple[int, ...]], Range(min=0), Length(min=1),
                    Desc('the axes along which to apply the Fourier '
                         'Transform (default: 0,1,2)')] = None
    inverse: Annotated[bool, Desc('apply the inverse FFT')] = False
    magnitude: Annotated[bool, Desc('output a magnitude image rather than '
                                    'a complex-valued image')] = False
    centre_zero: Annotated[bool, Desc('re-arrange the FFT results so that '
                                      'the zero-frequency component appears '
                                      'in the centre of the image, rather '
                                      'than at the edges')] = False

    def __post_init__(self) -> None:
        if self.axes is not None and len(set(self.axes)) != len(self.axes):
            raise ConfigurationError(
                f"FFT axes {self.axes} contain duplicates"
            )


def centre_zero_shift(data: np.ndarray, axes: Sequence[int]) -> np.ndarray:
    """Circularly shift *data* by ``n // 2`` along each of *axes*.

    Moves the zero-frequency sample of a forward transform to the centre.
    """
    return np.fft.fftshift(data, axes=tuple(axes))


def centre_zero_unshift(data: np.ndarray, axes: Sequence[int]) -> np.ndarray:
    """Undo :func:`centre_zero_shift` (shift by ``-(n // 2)``).

    Applied to centred input before an inverse transform.
    """
    return np.fft.ifftshift(data, axes=tuple(axes))


@processor_version('1.0.0')
@processor_tags(kind=FilterKind.FFT,
                description='forward or inverse FFT along selected axes')
class FFTFilter(VolumeFilter):
    """Forward or inverse FFT along the configured axes.

    Output geometry equals the input geometry. The datatype is
    ``complex128``, or ``float32`` with ``magnitude``.

    Examples
    --------
    >>> fft = FFTFilter(image, FFTConfig(axes=(0, 1), centre_zero=True))
    >>> fft.axes
    (0, 1)
    >>> fft.datatype
    dtype('complex128')
    """

    config_class = FFTConfig

    def _compute_header(self, header: VolumeHeader) -> VolumeHeader:
        rank = header.ndim
        axes = self.config.axes
        if axes is None:
            axes = tuple(range(min(SPATIAL_AXES, rank)))
        for axis in axes:
            if axis >= rank:
                raise ConfigurationError(
                    f"FFT axis {axis} out of range for {rank}-D input"
                )
        self._axes = tuple(axes)
        # Block spans the spatial axes plus any transformed outer axis.
        self._block_axes = tuple(
            sorted(set(self._axes) | set(range(min(SPATIAL_AXES, rank))))
        )
        self._local_axes = tuple(
            self._block_axes.index(axis) for axis in self._axes
        )
        logger.debug("FFT axes %s, block axes %s", self._axes, self._block_axes)

        self._complex_header = header.replace(datatype=np.complex128)
        if self.config.magnitude:
            return header.replace(datatype=np.float32)
        return self._complex_header

    @property
    def axes(self) -> Tuple[int, ...]:
        """Resolved transform axes."""
        return self._axes

    def _transform(self, block: np.ndarray) -> np.ndarray:
        data = np.asarray(block, dtype=np.complex128)
        if self.config.inverse:
            if self.config.centre_zero:
                data = centre_zero_unshift(data, self._local_axes)
            return np.fft.ifftn(data, axes=self._local_axes)
        data = np.fft.fftn(data, axes=self._local_axes)
        if self.config.centre_zero:
            data = centre_zero_shift(data, self._local_axes)
        return data

    def _execute(
        self,
        source: ImageHandle,
        destination: ImageHandle,
        **kwargs: Any,
    ) -> None:
        if not self.config.magnitude:
            self._for_each_block(
                source, destination, self._block_axes, self._transform,
                **kwargs,
            )
            return

        scratch = ArrayImage.scratch(self._complex_header, name='fft scratch')
        callback = kwargs.pop('progress_callback', None)

        def first_half(fraction: float) -> None:
            if callback is not None:
                callback(0.5 * fraction)

        def second_half(fraction: float) -> None:
            if callback is not None:
                callback(0.5 + 0.5 * fraction)

        self._for_each_block(
            source, scratch, self._block_axes, self._transform,
            progress_callback=first_half, **kwargs,
        )
        self._for_each_block(
            scratch, destination, self._block_axes, np.abs,
            progress_callback=second_half, **kwargs,
        )
