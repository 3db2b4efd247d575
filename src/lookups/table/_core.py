"""
LookupTable: an immutable mapping with three lookup modes.

Every table answers three kinds of lookups:

- hunt(key): the value, or NotFoundError
- find(key): the value, or None
- get_or_default(key): the value, else the table's default, else whatever
  its fallback table answers, else None

Values at the innermost level are whatever the value selector produced;
values at outer levels are LookupTables themselves, so a multi-level
table is queried one key at a time:

    >>> table.hunt("MS").hunt("Greene")

Thread safety: tables are never modified after construction, so any
number of threads may read the same table concurrently without locking.
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import lookups.errors as errors
import lookups.table._types as _types


def _restore(
    cls: type[LookupTable],
    entries: dict[_typing.Any, _typing.Any],
    default: _typing.Any,
    fallback: LookupTable | None,
    levels: int,
) -> LookupTable:
    """Rebuild a table from its state. Used by pickle and copy."""
    table = cls.__new__(cls)
    LookupTable._init_state(table, entries, default, fallback, levels)
    return table


class LookupTable(_abc.Mapping[_typing.Any, _typing.Any]):
    """
    Read-only keyed table with default and fallback handling.

    LookupTable is a full ``collections.abc.Mapping``: ``len()``, iteration,
    ``in``, ``keys()``/``items()``/``values()`` and ``Mapping.get()`` all
    behave like a frozen dict. ``table[key]`` is the same as ``hunt(key)``
    and raises NotFoundError (a KeyError) for absent keys.

    Args:
        entries: Initial key/value pairs. Copied, so later changes to the
            argument are not visible through the table.
        default: Value returned by get_or_default() for absent keys.
            Leave as MISSING for no default; None is a valid "no value"
            answer but does not count as a default.
        fallback: Table consulted by get_or_default() when no default is set.
        levels: Number of key levels this table indexes (1 for a table
            whose values are final values).

    Example:
        >>> table = LookupTable({1: "A", 2: "B"}, default="Z")
        >>> table.hunt(2), table.find(3), table.get_or_default(3)
        ('B', None, 'Z')
    """

    __slots__ = ("_entries", "_default", "_fallback", "_levels")

    _entries: dict[_typing.Any, _typing.Any]
    _default: _typing.Any
    _fallback: LookupTable | None
    _levels: int

    def __init__(
        self,
        entries: _abc.Mapping[_typing.Any, _typing.Any]
        | _typing.Iterable[tuple[_typing.Any, _typing.Any]]
        | None = None,
        *,
        default: _typing.Any = _types.MISSING,
        fallback: LookupTable | None = None,
        levels: int = 1,
    ) -> None:
        if fallback is not None and not isinstance(fallback, LookupTable):
            raise errors.InvalidArgumentError(
                f"Argument fallback must be a LookupTable, got {type(fallback).__name__}"
            )
        if levels < 1:
            raise errors.InvalidArgumentError(f"Argument levels must be >= 1, got {levels}")
        data = dict(entries) if entries is not None else {}
        self._init_state(data, default, fallback, levels)

    def _init_state(
        self,
        entries: dict[_typing.Any, _typing.Any],
        default: _typing.Any,
        fallback: LookupTable | None,
        levels: int,
    ) -> None:
        object.__setattr__(self, "_entries", entries)
        object.__setattr__(self, "_default", default)
        object.__setattr__(self, "_fallback", fallback)
        object.__setattr__(self, "_levels", levels)

    # -------------------------------------------------------------------------
    # Lookup modes
    # -------------------------------------------------------------------------

    def hunt(self, key: _typing.Any) -> _typing.Any:
        """
        Return the value for ``key``.

        Defaults and fallbacks are not consulted.

        Raises:
            NotFoundError: If the key is absent or unhashable.
        """
        try:
            return self._entries[key]
        except (KeyError, TypeError):
            raise errors.NotFoundError(key) from None

    def find(self, key: _typing.Any) -> _typing.Any:
        """Return the value for ``key``, or None if absent (no defaults)."""
        try:
            return self._entries.get(key)
        except TypeError:
            return None

    def get_or_default(self, key: _typing.Any) -> _typing.Any:
        """
        Return the value for ``key``, falling back to defaults.

        Resolution order for an absent key: this table's default if one
        is set, then the fallback table's get_or_default(), then None.
        An unhashable key is treated as absent.
        """
        try:
            value = self._entries.get(key, _types.MISSING)
        except TypeError:
            value = _types.MISSING
        if value is not _types.MISSING:
            return value
        if self._default is not _types.MISSING:
            return self._default
        if self._fallback is not None:
            return self._fallback.get_or_default(key)
        return None

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def default(self) -> _typing.Any:
        """The table's own default, or None if none is set."""
        return None if self._default is _types.MISSING else self._default

    @property
    def has_default(self) -> bool:
        """Whether the table carries a default of its own."""
        return self._default is not _types.MISSING

    @property
    def fallback(self) -> LookupTable | None:
        """The table consulted when no default is set, if any."""
        return self._fallback

    @property
    def levels(self) -> int:
        """Number of key levels indexed by this table."""
        return self._levels

    @property
    def is_leaf(self) -> bool:
        """Whether values are final values rather than nested tables."""
        return self._levels == 1

    def to_dict(self) -> dict[_typing.Any, _typing.Any]:
        """
        Return a plain dict copy, converting nested tables recursively.

        Defaults and fallbacks are not part of the result.
        """
        if self.is_leaf:
            return dict(self._entries)
        return {key: child.to_dict() for key, child in self._entries.items()}

    # -------------------------------------------------------------------------
    # Mapping protocol
    # -------------------------------------------------------------------------

    def __getitem__(self, key: _typing.Any) -> _typing.Any:
        return self.hunt(key)

    def __contains__(self, key: object) -> bool:
        try:
            return key in self._entries
        except TypeError:
            return False

    def __iter__(self) -> _typing.Iterator[_typing.Any]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        """Compare equal to any Mapping with same content."""
        if isinstance(other, _abc.Mapping):
            return dict(self) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        """LookupTable is not hashable (values may be mutable)."""
        raise TypeError(f"unhashable type: '{type(self).__name__}'")

    def __repr__(self) -> str:
        parts = [repr(self._entries)]
        if self._default is not _types.MISSING:
            parts.append(f"default={self._default!r}")
        if self._levels != 1:
            parts.append(f"levels={self._levels}")
        return f"{type(self).__name__}({', '.join(parts)})"

    # -------------------------------------------------------------------------
    # Immutability
    # -------------------------------------------------------------------------

    def __setattr__(self, name: str, value: _typing.Any) -> None:
        raise AttributeError(f"'{type(self).__name__}' object is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"'{type(self).__name__}' object is read-only")

    def __reduce__(self) -> tuple[_typing.Any, ...]:
        """Pickle/copy support: rebuild through _restore, not __setattr__."""
        return (
            _restore,
            (type(self), self._entries, self._default, self._fallback, self._levels),
        )


class EmptyLookup(LookupTable):
    """
    A table without entries that only answers get_or_default().

    Empty lookups stand in for tables that do not exist: the builder
    creates one per level so a miss at an outer level still returns
    something that can be queried for the next key.

    Args:
        default: Value returned for every get_or_default() call.
        fallback: Table to delegate to instead. Mutually exclusive with
            ``default``.
        levels: Key levels of the table this one stands in for.
    """

    __slots__ = ()

    def __init__(
        self,
        default: _typing.Any = _types.MISSING,
        *,
        fallback: LookupTable | None = None,
        levels: int = 1,
    ) -> None:
        if default is not _types.MISSING and fallback is not None:
            raise errors.InvalidArgumentError(
                "An empty lookup carries either a default or a fallback, not both"
            )
        super().__init__(None, default=default, fallback=fallback, levels=levels)

    def __repr__(self) -> str:
        if self._default is not _types.MISSING:
            return f"{type(self).__name__}(default={self._default!r})"
        if self._fallback is not None:
            return f"{type(self).__name__}(fallback={self._fallback!r})"
        return f"{type(self).__name__}()"
