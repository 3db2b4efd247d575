"""
Exceptions raised while building and querying lookup tables.

Build-time errors (InvalidArgumentError, ConversionError, DuplicateKeyError)
abort the whole build: no partially built table is ever returned.
Query-time errors (NotFoundError) are local to a single lookup.
"""

from __future__ import annotations

import typing as _typing

import lookups.constants as constants


def ordinal(number: int) -> str:
    """
    Format a 1-based position as an English ordinal.

    Example:
        >>> [ordinal(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22)]
        ['1st', '2nd', '3rd', '4th', '11th', '12th', '13th', '21st', '22nd']
    """
    if 10 <= number % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")
    return f"{number}{suffix}"


def not_null(argument: str) -> str:
    """Message for a required argument that was None."""
    return f"Argument {argument} must not be None."


def short_repr(value: _typing.Any) -> str:
    """repr() of a value, truncated for use in messages."""
    text = repr(value)
    limit = constants.DEFAULT_VALUE_TRUNCATE_LENGTH
    if len(text) > limit:
        return text[: limit - 3] + "..."
    return text


class LookupsError(Exception):
    """Base class for all errors raised by lookups."""

    pass


class InvalidArgumentError(LookupsError, ValueError):
    """Raised when a build is requested with missing or out-of-range arguments."""

    pass


class ConversionError(LookupsError):
    """
    Raised when a key extractor or value selector fails for an element.

    The underlying exception, if any, is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        *,
        element: _typing.Any = None,
        converter: str | None = None,
    ) -> None:
        self.element = element
        self.converter = converter
        super().__init__(message)


class DuplicateKeyError(LookupsError):
    """
    Raised under the fail policy when two elements share a full key path.

    Attributes:
        key_path: Keys at every level, outermost first.
        existing: Value already stored for the key path.
        incoming: Value that collided with it.
    """

    def __init__(
        self,
        key_path: tuple[_typing.Any, ...],
        existing: _typing.Any,
        incoming: _typing.Any,
    ) -> None:
        self.key_path = key_path
        self.existing = existing
        self.incoming = incoming
        keys = ", ".join(
            f"{ordinal(i)} key {short_repr(key)}" for i, key in enumerate(key_path, start=1)
        )
        super().__init__(
            f"Duplicate key found at {keys}: "
            f"existing value {short_repr(existing)}, "
            f"incoming value {short_repr(incoming)}"
        )


class NotFoundError(LookupsError, KeyError):
    """Raised by LookupTable.hunt() when the key is absent."""

    def __init__(self, key: _typing.Any) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the whole args tuple
        return f"Key not found: {short_repr(self.key)}"
