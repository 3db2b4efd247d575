"""
Key extractors and value selectors.

A converter maps one source element to a derived value: a key for one
level of a lookup table, or the value stored at the leaf level. Anything
callable can act as a converter; property paths given as strings are
turned into PropertyConverter instances.

Example:
    >>> name = as_converter("address.state")
    >>> name({"address": {"state": "MS"}})
    'MS'
"""

from __future__ import annotations

import abc as _abc
import collections.abc as _collections_abc
import dataclasses as _dataclasses
import typing as _typing

import lookups.errors as errors

_MISSING = object()


class Converter(_abc.ABC):
    """
    Base class for key extractors and value selectors.

    Subclasses implement convert(). Instances are also callable, so a
    Converter can be passed anywhere a plain function is accepted.
    """

    @_abc.abstractmethod
    def convert(self, element: _typing.Any) -> _typing.Any:
        """Derive a value from a source element."""
        ...

    @property
    @_abc.abstractmethod
    def label(self) -> str:
        """Short human-readable description used in messages and logs."""
        ...

    def __call__(self, element: _typing.Any) -> _typing.Any:
        return self.convert(element)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.label})"


class IdentityConverter(Converter):
    """Returns the element itself. The default value selector."""

    def convert(self, element: _typing.Any) -> _typing.Any:
        return element

    @property
    def label(self) -> str:
        return "<element>"


identity = IdentityConverter()


class CallableConverter(Converter):
    """
    Adapts an arbitrary callable to the Converter interface.

    Exceptions raised by the callable are re-raised as ConversionError
    with the original exception chained. Errors that already belong to
    this library pass through unchanged.
    """

    def __init__(
        self,
        func: _typing.Callable[[_typing.Any], _typing.Any],
        label: str | None = None,
    ) -> None:
        self._func = func
        self._label = label or getattr(func, "__qualname__", None) or repr(func)

    @property
    def label(self) -> str:
        return self._label

    def convert(self, element: _typing.Any) -> _typing.Any:
        try:
            return self._func(element)
        except errors.LookupsError:
            raise
        except Exception as e:
            raise errors.ConversionError(
                f"Converter {self._label} failed for element "
                f"{errors.short_repr(element)}: {e}",
                element=element,
                converter=self._label,
            ) from e


class PropertyConverter(Converter):
    """
    Reads a (possibly dotted) property path off an element.

    Each path segment is read as an attribute, or as an item when the
    current value is a mapping. That lets the same path work for
    dataclasses, pydantic models, plain objects and dicts loaded from
    YAML or JSON.

    Args:
        path: Property name or dotted path, e.g. "county" or "address.state".
        cls: Optional element class. When given, the first path segment
            is checked against it up front.

    Raises:
        InvalidArgumentError: If the path is empty or the first segment is
            unknown to ``cls``.
    """

    __slots__ = ("_path", "_segments")

    def __init__(self, path: str, cls: type | None = None) -> None:
        segments = tuple(path.split(".")) if path else ()
        if not segments or not all(segments):
            raise errors.InvalidArgumentError(f"Invalid property path: {path!r}")
        if cls is not None and not has_property(cls, segments[0]):
            raise errors.InvalidArgumentError(
                f"Property {segments[0]!r} not found on {cls.__name__}"
            )
        self._path = path
        self._segments = segments

    @property
    def path(self) -> str:
        """The property path this converter reads."""
        return self._path

    @property
    def label(self) -> str:
        return self._path

    def convert(self, element: _typing.Any) -> _typing.Any:
        value = element
        for segment in self._segments:
            value = self._read(value, segment, element)
        return value

    def _read(self, value: _typing.Any, segment: str, element: _typing.Any) -> _typing.Any:
        if isinstance(value, _collections_abc.Mapping):
            result = value.get(segment, _MISSING)
            if result is _MISSING:
                raise errors.ConversionError(
                    f"Cannot read {self._path!r}: key {segment!r} missing "
                    f"in element {errors.short_repr(element)}",
                    element=element,
                    converter=self._path,
                )
            return result
        try:
            return getattr(value, segment)
        except AttributeError as e:
            raise errors.ConversionError(
                f"Cannot read {self._path!r}: {type(value).__name__} has no "
                f"property {segment!r} (element {errors.short_repr(element)})",
                element=element,
                converter=self._path,
            ) from e
        except Exception as e:
            raise errors.ConversionError(
                f"Cannot read {self._path!r} from element "
                f"{errors.short_repr(element)}: {e}",
                element=element,
                converter=self._path,
            ) from e


def has_property(cls: type, name: str) -> bool:
    """
    Check whether instances of ``cls`` expose ``name``.

    Dataclass fields, pydantic model fields, class annotations and class
    attributes (including properties) all count. Mapping classes accept
    any name since their keys are only known per instance.
    """
    if issubclass(cls, _collections_abc.Mapping):
        return True
    if hasattr(cls, name):
        return True
    model_fields = getattr(cls, "model_fields", None)
    if isinstance(model_fields, dict) and name in model_fields:
        return True
    for klass in cls.__mro__:
        if name in getattr(klass, "__annotations__", {}):
            return True
    # Plain classes that assign attributes in __init__ cannot be inspected
    return not (
        _dataclasses.is_dataclass(cls)
        or isinstance(model_fields, dict)
        or hasattr(cls, "__slots__")
        or any(getattr(klass, "__annotations__", None) for klass in cls.__mro__)
    )


def as_converter(
    candidate: _typing.Any,
    *,
    cls: type | None = None,
    position: int | None = None,
    role: str = "converter",
) -> Converter:
    """
    Normalize a converter argument.

    Args:
        candidate: A Converter, a property path string, an object with a
            ``convert`` method, or any callable.
        cls: Element class used to check property paths early.
        position: 1-based position of this converter among its siblings,
            used only to make error messages point at the right argument.
        role: What the converter is used for ("extractor", "selector", ...).

    Returns:
        A Converter instance.

    Raises:
        InvalidArgumentError: If ``candidate`` is None or cannot be used as a
            converter.
    """
    name = f"{errors.ordinal(position)} {role}" if position else role
    if candidate is None:
        raise errors.InvalidArgumentError(errors.not_null(name))
    if isinstance(candidate, Converter):
        return candidate
    if isinstance(candidate, str):
        return PropertyConverter(candidate, cls=cls)
    convert = getattr(candidate, "convert", None)
    if callable(convert):
        return CallableConverter(convert, label=type(candidate).__name__)
    if callable(candidate):
        return CallableConverter(candidate)
    raise errors.InvalidArgumentError(
        f"Argument {name} must be a property path or a callable, "
        f"got {type(candidate).__name__}"
    )


def describe(converter: _typing.Any) -> str:
    """Human-readable label for any converter argument."""
    if isinstance(converter, Converter):
        return converter.label
    if isinstance(converter, str):
        return converter
    return getattr(converter, "__qualname__", None) or repr(converter)
