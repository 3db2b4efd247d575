"""
Type aliases, policies and sentinels shared by the table modules.

- KeyPath: tuple of keys, one per level, outermost first
- Duplication: what to do when two elements share a leaf key
- MISSING: marks "no default configured", distinct from a None default
"""

from __future__ import annotations

import enum as _enum
import typing as _typing

import lookups.errors as errors

# Keys recorded level by level while partitioning; used for diagnostics only
KeyPath: _typing.TypeAlias = tuple[_typing.Any, ...]


class Duplication(str, _enum.Enum):
    """Policy applied when two elements map to the same leaf key."""

    FIRST = "first"
    """Keep the element seen first in source order."""

    LAST = "last"
    """Keep the element seen last in source order."""

    FAIL = "fail"
    """Raise DuplicateKeyError."""

    @classmethod
    def parse(cls, value: Duplication | str) -> Duplication:
        """Accept an enum member or its case-insensitive name/value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise errors.InvalidArgumentError(
                f"Unknown duplication policy {value!r} (expected one of: {choices})"
            ) from None


# Helper function to reconstruct the MISSING singleton during unpickle
def _get_missing_singleton() -> _MissingType:
    """Return the MISSING singleton. Called by pickle to reconstruct."""
    return MISSING


class _MissingType:
    """Sentinel type marking an unset default value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple[_typing.Callable[[], _MissingType], tuple[()]]:
        """Pickle support: ensure singleton is preserved."""
        return (_get_missing_singleton, ())


MISSING: _typing.Final = _MissingType()
