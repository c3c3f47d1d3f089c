# -*- coding: utf-8 -*-
"""
Filter Parameter Annotations - Declarative parameter constraints via typing.Annotated.

Provides constraint marker types (``Range``, ``Length``, ``Desc``) for use
inside ``typing.Annotated`` annotations on ``FilterConfig`` subclasses, plus
the ``ParamSpec`` introspection class and collection/init-generation
utilities consumed by ``FilterConfig.__init_subclass__``.

The resulting ``ParamSpec`` tuples are the configuration schema of each
filter: the command-line driver builds its options from them, and the
generated ``__init__`` validates every value eagerly.

Usage
-----
Declare parameters as class-body annotations::

    from typing import Annotated, Optional, Tuple
    from volfilter.filter.params import Range, Length, Desc

    class MyConfig(FilterConfig):
        stdev: Annotated[Optional[Tuple[float, ...]], Range(min=0.0),
                         Length(1, 3), Desc('Gaussian stdev (mm)')] = None
        magnitude: Annotated[bool, Desc('Output the magnitude')] = False

For sequence parameters, ``Range`` applies to every item and ``Length``
restricts the number of items.

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
import inspect
from typing import (
    Annotated,
    Any,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

# volfilter internal
from volfilter.exceptions import ConfigurationError


# =====================================================================
# Constraint markers  (used inside Annotated[...])
# =====================================================================

class ParamMeta:
    """Marker base: ``Annotated`` fields carrying one of these are parameters."""


class Range(ParamMeta):
    """Inclusive numeric bounds; either side may be left open.

    Parameters
    ----------
    min : int or float, optional
    max : int or float, optional
    """

    __slots__ = ('min', 'max')

    def __init__(
        self,
        min: Optional[Union[int, float]] = None,
        max: Optional[Union[int, float]] = None,
    ) -> None:
        self.min = min
        self.max = max


class Length(ParamMeta):
    """Allowed item counts for a sequence parameter.

    ``Length(1, 3)`` accepts exactly one or three items; ``Length(min=2)``
    accepts two or more.
    """

    __slots__ = ('allowed', 'min')

    def __init__(self, *allowed: int, min: int = 1) -> None:
        self.allowed = tuple(allowed)
        self.min = min

    def accepts(self, count: int) -> bool:
        """Whether a sequence of *count* items satisfies the constraint."""
        return count in self.allowed if self.allowed else count >= self.min

    def __str__(self) -> str:
        if self.allowed:
            return ' or '.join(str(n) for n in self.allowed)
        return f"at least {self.min}"


class Desc(ParamMeta):
    """Help text for a parameter."""

    __slots__ = ('text',)

    def __init__(self, text: str) -> None:
        self.text = text


# =====================================================================
# ParamSpec
# =====================================================================

_MISSING = object()

# Accepted Python types per declared scalar type. bool is an int subclass,
# so it is excluded explicitly for numbers.
_ACCEPTED = {
    float: (int, float),
    int: (int,),
}


class ParamSpec:
    """One configuration field, resolved from its ``Annotated`` declaration.

    Attributes
    ----------
    name : str
        Keyword name, also the ``--<name>`` command-line option.
    param_type : type
        ``bool``, ``int``, ``float``, ``str`` or ``tuple`` for sequences.
    item_type : type or None
        Element type of a sequence parameter.
    optional : bool
        ``None`` means "not specified" and is accepted.
    default : Any
        Default value; ``None`` for required parameters.
    description : str
        Help text from ``Desc``.
    min_value, max_value : int, float, or None
        Inclusive bounds from ``Range``, applied per item for sequences.
    length : Length or None
        Item-count constraint of a sequence parameter.
    """

    __slots__ = (
        'name', 'param_type', 'item_type', 'optional', 'default',
        'required', 'description', 'min_value', 'max_value', 'length',
    )

    def __init__(
        self,
        name: str,
        param_type: type,
        default: Any = _MISSING,
        description: str = '',
        bounds: Optional[Range] = None,
        item_type: Optional[type] = None,
        optional: bool = False,
        length: Optional[Length] = None,
    ) -> None:
        self.name = name
        self.param_type = param_type
        self.item_type = item_type
        self.optional = optional
        self.required = default is _MISSING
        self.default = None if self.required else default
        self.description = description
        self.min_value = bounds.min if bounds is not None else None
        self.max_value = bounds.max if bounds is not None else None
        self.length = length

    @property
    def is_sequence(self) -> bool:
        """Whether this parameter takes a sequence of values."""
        return self.param_type is tuple

    def _check_item(self, value: Any, kind: type) -> None:
        accepted = _ACCEPTED.get(kind, (kind,))
        if kind is not object and (
            not isinstance(value, accepted)
            or (kind is not bool and isinstance(value, bool))
        ):
            raise ConfigurationError(
                f"Parameter '{self.name}' must be {kind.__name__}, "
                f"got {type(value).__name__}"
            )
        low, high = self.min_value, self.max_value
        if low is not None and value < low:
            raise ConfigurationError(
                f"Parameter '{self.name}' value {value!r} is below "
                f"minimum {low!r}"
            )
        if high is not None and value > high:
            raise ConfigurationError(
                f"Parameter '{self.name}' value {value!r} is above "
                f"maximum {high!r}"
            )

    def validate(self, value: Any) -> None:
        """Check *value* against type, bounds and item count.

        ``int`` is accepted for ``float`` fields; ``bool`` never counts as
        a number.

        Raises
        ------
        ConfigurationError
        """
        if value is None and self.optional:
            return
        if not self.is_sequence:
            self._check_item(value, self.param_type)
            return
        if not isinstance(value, (tuple, list)):
            raise ConfigurationError(
                f"Parameter '{self.name}' must be a sequence of "
                f"{self.item_type.__name__}, got {type(value).__name__}"
            )
        if self.length is not None and not self.length.accepts(len(value)):
            raise ConfigurationError(
                f"Parameter '{self.name}' has {len(value)} values; "
                f"expected {self.length}"
            )
        for item in value:
            self._check_item(item, self.item_type)

    def coerce(self, value: Any) -> Any:
        """Stored form of a validated *value*: sequences become tuples."""
        if self.is_sequence and value is not None:
            return tuple(self.item_type(item) for item in value)
        return value

    def __repr__(self) -> str:
        return f"ParamSpec({self.name!r}, default={self.default!r})"


# =====================================================================
# Collection and __init__ generation
# =====================================================================

def _split_type(hint: Any) -> Tuple[type, Optional[type], bool]:
    """``Optional[Tuple[float, ...]]`` -> ``(tuple, float, True)``."""
    args = get_args(hint)
    optional = get_origin(hint) is Union and type(None) in args
    if optional:
        hint = next(a for a in args if a is not type(None))
    if get_origin(hint) in (tuple, list):
        return tuple, get_args(hint)[0], optional
    return hint, None, optional


def collect_param_specs(cls: type) -> Tuple[ParamSpec, ...]:
    """Schema of *cls*: one ``ParamSpec`` per ``Annotated`` parameter field.

    Fields are returned base classes first, in declaration order.

    Raises
    ------
    TypeError
        If a ``Length`` constraint is attached to a non-sequence field.
    """
    hints = get_type_hints(cls, include_extras=True)
    names = {}
    for klass in reversed(cls.__mro__):
        names.update(dict.fromkeys(vars(klass).get('__annotations__', {})))

    specs = []
    for name in names:
        hint = hints.get(name)
        if get_origin(hint) is not Annotated:
            continue
        markers = {type(m): m for m in hint.__metadata__
                   if isinstance(m, ParamMeta)}
        if not markers:
            continue
        param_type, item_type, optional = _split_type(get_args(hint)[0])
        if Length in markers and param_type is not tuple:
            raise TypeError(
                f"Parameter '{name}' on {cls.__qualname__}: Length applies "
                f"to sequence parameters only"
            )
        desc = markers.get(Desc)
        specs.append(ParamSpec(
            name,
            param_type,
            default=getattr(cls, name, _MISSING),
            description=desc.text if desc is not None else '',
            bounds=markers.get(Range),
            item_type=item_type,
            optional=optional,
            length=markers.get(Length),
        ))
    return tuple(specs)


def _make_init(param_specs: Tuple[ParamSpec, ...]):
    """Keyword-only ``__init__`` validating and storing each parameter.

    Absent keywords take their default. ``__post_init__`` runs last when
    the class defines it.
    """
    by_name = {spec.name: spec for spec in param_specs}

    def __init__(self, **kwargs):
        unknown = sorted(set(kwargs) - set(by_name))
        if unknown:
            raise TypeError(
                f"{type(self).__name__}() got unexpected keyword "
                f"arguments: {', '.join(unknown)}"
            )
        for name, spec in by_name.items():
            if name not in kwargs and spec.required:
                raise TypeError(
                    f"{type(self).__name__}() missing required keyword "
                    f"argument: '{name}'"
                )
            value = kwargs.get(name, spec.default)
            spec.validate(value)
            object.__setattr__(self, name, spec.coerce(value))
        if hasattr(self, '__post_init__'):
            self.__post_init__()

    __init__.__signature__ = inspect.Signature(
        [inspect.Parameter('self', inspect.Parameter.POSITIONAL_OR_KEYWORD)]
        + [
            inspect.Parameter(
                spec.name, inspect.Parameter.KEYWORD_ONLY,
                default=(inspect.Parameter.empty if spec.required
                         else spec.default),
            )
            for spec in param_specs
        ]
    )
    return __init__
