# -*- coding: utf-8 -*-
"""
Filter Configuration Base - Immutable, eagerly validated filter parameters.

``FilterConfig`` subclasses declare their parameters as ``typing.Annotated``
class-body fields (see :mod:`volfilter.filter.params`). At class definition
``__init_subclass__`` collects them into ``__param_specs__`` and generates a
keyword-only ``__init__`` that validates every value. Subclasses normalise
derived or mutually exclusive parameters into one canonical form in
``__post_init__``. Instances are frozen once constructed.

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
from typing import Any, Dict, Tuple

# volfilter internal
from volfilter.filter.params import ParamSpec, collect_param_specs, _make_init


class FilterConfig:
    """
    Common base class for per-filter configuration objects.

    Examples
    --------
    >>> from volfilter.filter.median import MedianConfig
    >>> MedianConfig(extent=[5]).extent
    (5,)
    >>> [spec.name for spec in MedianConfig.__param_specs__]
    ['extent']
    """

    #: Tuple of :class:`~volfilter.filter.params.ParamSpec` built
    #: automatically by ``__init_subclass__`` from ``Annotated`` fields.
    __param_specs__: Tuple[ParamSpec, ...] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.__param_specs__ = collect_param_specs(cls)
        if cls.__param_specs__ and '__init__' not in cls.__dict__:
            cls.__init__ = _make_init(cls.__param_specs__)

    def _normalise(self, name: str, value: Any) -> None:
        """Replace a parameter value during ``__post_init__``."""
        object.__setattr__(self, name, value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(
            f"{type(self).__name__} is immutable; cannot set {name!r}"
        )

    def __delattr__(self, name: str) -> None:
        raise AttributeError(
            f"{type(self).__name__} is immutable; cannot delete {name!r}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Parameter values keyed by name."""
        return {
            spec.name: getattr(self, spec.name)
            for spec in type(self).__param_specs__
        }

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((type(self), tuple(self.to_dict().items())))

    def __repr__(self) -> str:
        fields = ', '.join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"{type(self).__name__}({fields})"
