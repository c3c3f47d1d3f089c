# -*- coding: utf-8 -*-
"""
Filter Base Class - Common contract for all volume filters.

Defines ``VolumeFilter``, the abstract base every concrete filter derives
from. A filter is constructed from an input image (or its header) and a
configuration object, and must answer the geometry of its output --
dimensions, strides, datatype -- before any output storage exists. The
caller allocates the output from ``filter.header`` (optionally after a
stride override with ``set_strides``) and then runs ``filter(input,
output)``.

Execution is block-wise: each concrete filter transforms one block (usually
one 3D volume) at a time through ``_for_each_block``, which dispatches the
blocks of 4D+ inputs across a thread pool. Blocks partition the outer axes,
so workers never write to the same voxels.

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
import warnings
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Type, Union

# Third-party
import numpy as np

# volfilter internal
from volfilter.exceptions import (
    ConfigurationError,
    GeometryError,
    ProcessorError,
    VolfilterError,
)
from volfilter.filter.config import FilterConfig
from volfilter.image import stride as _stride
from volfilter.image.base import ImageHandle
from volfilter.image.header import VolumeHeader
from volfilter.image.loop import Loop, read_block, write_block

logger = logging.getLogger(__name__)


class VolumeFilter(ABC):
    """
    Abstract base class for volume filters.

    Subclasses set ``config_class`` and implement ``_compute_header``
    (output geometry from the input header and configuration, called once
    at construction) and ``_execute`` (the transform itself).

    Parameters
    ----------
    image : ImageHandle or VolumeHeader
        The input image, or just its header.
    config : FilterConfig, optional
        Filter configuration; an instance of ``config_class``. Defaults to
        ``config_class()``.
    workers : int
        Number of threads used to process independent volumes of 4D+
        inputs. Default 1.

    Raises
    ------
    ConfigurationError
        If *config* is of the wrong type, *workers* is not positive, or
        the configuration is incompatible with the input.
    GeometryError
        If the input geometry is unsuitable for the filter.

    Examples
    --------
    >>> from volfilter.filter import SmoothFilter, SmoothConfig
    >>> smooth = SmoothFilter(image, SmoothConfig(stdev=(2.0,)))
    >>> output = ArrayImage.allocate(smooth.header)
    >>> smooth(image, output)
    """

    # Track which classes have been checked to warn only once per class.
    _version_warned_classes: set = set()

    #: Configuration class accepted by the filter.
    config_class: Type[FilterConfig] = FilterConfig

    def __new__(cls, *args: Any, **kwargs: Any) -> 'VolumeFilter':
        if cls not in VolumeFilter._version_warned_classes:
            VolumeFilter._version_warned_classes.add(cls)
            if (
                not getattr(cls, '__processor_version__', None)
                and not getattr(cls, '__abstractmethods__', None)
            ):
                warnings.warn(
                    f"{cls.__qualname__} does not declare a processor version. "
                    f"Use @processor_version('x.y.z') to declare one.",
                    UserWarning,
                    stacklevel=2,
                )
        logger.debug("Instantiating %s", cls.__qualname__)
        return super().__new__(cls)

    def __init__(
        self,
        image: Union[ImageHandle, VolumeHeader],
        config: Optional[FilterConfig] = None,
        workers: int = 1,
    ) -> None:
        header = image if isinstance(image, VolumeHeader) else image.header
        if config is None:
            config = self.config_class()
        elif not isinstance(config, self.config_class):
            raise ConfigurationError(
                f"{type(self).__name__} expects a "
                f"{self.config_class.__name__}, got {type(config).__name__}"
            )
        if not isinstance(workers, int) or workers < 1:
            raise ConfigurationError(
                f"workers must be a positive integer, got {workers!r}"
            )
        self._input_header = header
        self._config = config
        self._workers = workers
        self._message = ''
        self._header = self._compute_header(header)
        logger.debug("%s output header: %s", type(self).__name__, self._header)

    @abstractmethod
    def _compute_header(self, header: VolumeHeader) -> VolumeHeader:
        """Compute the output header for an input with *header*.

        Called once from ``__init__``; any state derived from the
        configuration (resolved axes, kernel sizes) is fixed here.
        """
        ...

    @abstractmethod
    def _execute(
        self,
        source: ImageHandle,
        destination: ImageHandle,
        **kwargs: Any,
    ) -> None:
        """Transform *source* into the pre-allocated *destination*."""
        ...

    # -----------------------------------------------------------------
    # Output geometry
    # -----------------------------------------------------------------
    @property
    def config(self) -> FilterConfig:
        """The filter configuration."""
        return self._config

    @property
    def input_header(self) -> VolumeHeader:
        """Header of the input the filter was constructed for."""
        return self._input_header

    @property
    def header(self) -> VolumeHeader:
        """Header the output image must be created with."""
        return self._header

    @property
    def ndim(self) -> int:
        """Number of axes of the output."""
        return self._header.ndim

    @property
    def dims(self) -> Tuple[int, ...]:
        """Output axis sizes."""
        return self._header.dims

    @property
    def strides(self) -> Tuple[int, ...]:
        """Output strides."""
        return self._header.strides

    @property
    def datatype(self) -> np.dtype:
        """Output datatype."""
        return self._header.datatype

    def size(self, axis: int) -> int:
        """Output size along *axis*."""
        return self._header.dims[axis]

    def voxsize(self, axis: int) -> float:
        """Output voxel size along *axis*, in mm."""
        return self._header.voxel_size[axis]

    def set_strides(self, strides: Sequence[int]) -> None:
        """Override the output strides, e.g. from a ``--strides`` option.

        Parameters
        ----------
        strides : Sequence[int]
            Requested symbolic strides; zero entries are left to the
            filter's choice. See :func:`volfilter.image.stride.apply`.
        """
        self._header = _stride.apply(self._header, strides)

    @property
    def workers(self) -> int:
        """Number of threads used for independent volumes."""
        return self._workers

    # -----------------------------------------------------------------
    # Progress reporting
    # -----------------------------------------------------------------
    @property
    def message(self) -> str:
        """Human-readable progress message, logged when the filter runs."""
        return self._message

    @message.setter
    def message(self, text: str) -> None:
        self._message = str(text)

    def set_message(self, text: str) -> None:
        """Set the progress message."""
        self.message = text

    def _report_progress(
        self, kwargs: Dict[str, Any], fraction: float
    ) -> None:
        """Report progress to an optional callback.

        If the caller provided a ``progress_callback`` keyword argument, it
        is called with the current fraction (0.0 to 1.0). Otherwise this is
        a no-op.
        """
        cb = kwargs.get('progress_callback')
        if cb is not None:
            cb(float(fraction))

    # -----------------------------------------------------------------
    # Execution
    # -----------------------------------------------------------------
    def __call__(
        self,
        source: ImageHandle,
        destination: ImageHandle,
        **kwargs: Any,
    ) -> None:
        """Run the filter.

        Parameters
        ----------
        source : ImageHandle
            Input image; must match the geometry the filter was built for.
        destination : ImageHandle
            Output image, allocated from ``self.header``.
        **kwargs
            ``progress_callback``: optional callable receiving the completed
            fraction.

        Raises
        ------
        GeometryError
            If either image does not match the expected dimensions.
        ProcessorError
            If a worker thread fails.
        """
        self._check_dims(source, self._input_header.dims, 'input')
        self._check_dims(destination, self._header.dims, 'output')
        if self._message:
            logger.info(self._message)
        self._execute(source, destination, **kwargs)

    @staticmethod
    def _check_dims(
        image: ImageHandle, expected: Tuple[int, ...], role: str,
    ) -> None:
        actual = tuple(image.size(axis) for axis in range(image.rank()))
        if actual != tuple(expected):
            raise GeometryError(
                f"{role} image has dimensions {actual}, expected {expected}"
            )

    def _for_each_block(
        self,
        source: ImageHandle,
        destination: ImageHandle,
        axes: Sequence[int],
        process: Callable[[np.ndarray], np.ndarray],
        destination_axes: Optional[Sequence[int]] = None,
        **kwargs: Any,
    ) -> None:
        """Apply *process* to every block of *source* spanning *axes*.

        The remaining axes of *source* are iterated with the loop engine;
        for each position the block read from *source* is passed to
        *process* and its result written to the same position of
        *destination*, spanning *destination_axes* (default *axes*).

        With more than one block and ``workers > 1``, blocks are processed
        concurrently. Each task uses its own duplicated cursors.
        """
        axes = tuple(axes)
        destination_axes = axes if destination_axes is None else tuple(destination_axes)
        outer = tuple(a for a in range(source.rank()) if a not in axes)
        positions = list(Loop(outer)(source.duplicate()))
        total = len(positions)

        def run(position: Tuple[int, ...]) -> None:
            src = source.duplicate()
            dst = destination.duplicate()
            for axis, index in zip(outer, position):
                src.set_index(axis, index)
                dst.set_index(axis, index)
            write_block(dst, destination_axes, process(read_block(src, axes)))

        if self._workers == 1 or total == 1:
            for done, position in enumerate(positions, start=1):
                logger.debug("%s block %d/%d at %s", type(self).__name__,
                             done, total, position)
                run(position)
                self._report_progress(kwargs, done / total)
            return

        logger.debug("%s dispatching %d blocks to %d workers",
                     type(self).__name__, total, self._workers)
        with ThreadPoolExecutor(max_workers=self._workers) as executor:
            futures = {
                executor.submit(run, position): position
                for position in positions
            }
            for done, future in enumerate(as_completed(futures), start=1):
                try:
                    future.result()
                except VolfilterError:
                    raise
                except Exception as exc:
                    raise ProcessorError(
                        f"{type(self).__name__} failed on volume "
                        f"{futures[future]}: {exc}"
                    ) from exc
                self._report_progress(kwargs, done / total)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._config!r})"
