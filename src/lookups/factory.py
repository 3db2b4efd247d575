"""
Convenience constructors for the common cases.

- from_mapping(): wrap an existing mapping as a one-level table
- create(): index a collection by one or more property paths
- from_source(): start the fluent builder (re-exported from lookups.table)
"""

from __future__ import annotations

import collections.abc as _abc
import typing as _typing

import lookups.errors as errors
import lookups.table as table

if _typing.TYPE_CHECKING:
    import lookups.config as _config

from_source = table.from_source


def from_mapping(
    mapping: _abc.Mapping[_typing.Any, _typing.Any] | None,
    default: _typing.Any = None,
) -> table.LookupTable:
    """
    Create a one-level lookup backed by a copy of ``mapping``.

    Args:
        mapping: Keys and values of the table.
        default: Value returned by get_or_default() for absent keys.
            None means no default.

    Raises:
        InvalidArgumentError: If ``mapping`` is None.
    """
    if mapping is None:
        raise errors.InvalidArgumentError(errors.not_null("map"))
    return table.LookupTable(
        mapping,
        default=table.MISSING if default is None else default,
    )


def create(
    values: _abc.Collection[_typing.Any] | None,
    *properties: str,
    default: _typing.Any = None,
    cls: type | None = None,
    select: _typing.Any = None,
    duplication: table.Duplication | str | None = None,
    settings: _config.Settings | None = None,
) -> table.LookupTable:
    """
    Index ``values`` by one property path per level.

    The element class used to check property names is ``cls`` if given,
    otherwise the class of the first non-None element.

    Args:
        values: Elements to index.
        *properties: Property paths, outermost level first.
        default: Leaf default for get_or_default(); None means no default.
        cls: Element class to check property names against.
        select: Optional selector; the element itself is stored otherwise.
        duplication: Policy for shared leaf keys; defaults to the settings
            value, or "fail" without settings.
        settings: Optional settings supplying policy defaults and limits.

    Returns:
        The root LookupTable.

    Raises:
        InvalidArgumentError: On a None/empty source, a source of only
            None elements, no properties, or a None/unknown property.
    """
    if not properties:
        raise errors.InvalidArgumentError("At least one property must be supplied")
    for i, prop in enumerate(properties, start=1):
        if prop is None:
            raise errors.InvalidArgumentError(errors.not_null(f"{errors.ordinal(i)} property"))

    if cls is None and values:
        cls = _element_class(values)

    builder = table.from_source(values, settings=settings).by(*properties)
    if cls is not None:
        builder.of(cls)
    if select is not None:
        builder.select(select)
    if default is not None:
        builder.default_to(default)
    if duplication is not None:
        builder.on_duplicate(duplication)
    return builder.index()


def _element_class(values: _abc.Iterable[_typing.Any]) -> type:
    """Class of the first non-None element."""
    for value in values:
        if value is not None:
            return type(value)
    raise errors.InvalidArgumentError("Argument source collection must contain a non-None element")
