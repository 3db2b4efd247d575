"""
Multi-level index builder.

Turns a flat collection plus an ordered list of key extractors into a
tree of LookupTables, one level per extractor:

    >>> table = from_source(counties).by("state", "county").index()
    >>> table.hunt("MS").hunt("Greene").code
    28041

Build steps:
1. Validate the configuration (nothing is partitioned on bad input)
2. Pre-build one EmptyLookup per level: the default chain
3. Partition recursively by each extractor in turn, keeping source order
   inside every group
4. At the last level, store selector(element) under the leaf key, applying
   the duplication policy

The build is synchronous and all-or-nothing: any error aborts it and no
partially built table escapes.
"""

from __future__ import annotations

import collections.abc as _abc
import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import lookups.constants as constants
import lookups.converters as converters
import lookups.errors as errors
import lookups.table._core as _core
import lookups.table._types as _types

if _typing.TYPE_CHECKING:
    import lookups.config as _config

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass(frozen=True)
class BuildConfig:
    """
    Everything build() needs to produce a lookup table.

    Attributes:
        source: Elements to index. Read once during build().
        extractors: One key extractor per level, outermost first.
        selector: Derives the stored value from an element.
        duplication: Policy for elements that share a leaf key.
        default: Leaf default value, or MISSING for none.
        max_levels: Upper bound on len(extractors); never above LEVEL_LIMIT.
        element_type: Optional element class; property paths are checked
            against it before anything is partitioned.
    """

    source: _abc.Collection[_typing.Any] | None
    extractors: tuple[_typing.Any, ...]
    selector: _typing.Any = converters.identity
    duplication: _types.Duplication | str = _types.Duplication.FAIL
    default: _typing.Any = _types.MISSING
    max_levels: int = constants.LEVEL_LIMIT
    element_type: type | None = None


def validate(config: BuildConfig) -> tuple[list[converters.Converter], converters.Converter]:
    """
    Check a configuration and normalize its converters.

    Returns:
        Tuple of (extractors, selector) as Converter instances.

    Raises:
        InvalidArgumentError: On a None or empty source, a missing or
            unusable converter, or an extractor count outside
            1..max_levels.
    """
    if config.source is None:
        raise errors.InvalidArgumentError(errors.not_null("source"))
    # Strings are collections of characters, never of records
    if not isinstance(config.source, _abc.Collection) or isinstance(
        config.source, (str, bytes, bytearray)
    ):
        raise errors.InvalidArgumentError(
            f"Argument source must be a collection, got {type(config.source).__name__}"
        )
    if len(config.source) == 0:
        raise errors.InvalidArgumentError("Argument source collection must not be empty")
    if config.extractors is None:
        raise errors.InvalidArgumentError(errors.not_null("extractors"))
    if len(config.extractors) == 0:
        raise errors.InvalidArgumentError("At least one key extractor must be supplied")

    limit = min(config.max_levels, constants.LEVEL_LIMIT)
    if len(config.extractors) > limit:
        raise errors.InvalidArgumentError(
            f"Lookup supports no more than {limit} levels, "
            f"got {len(config.extractors)} key extractors"
        )

    extractors = [
        converters.as_converter(candidate, cls=config.element_type, position=i, role="extractor")
        for i, candidate in enumerate(config.extractors, start=1)
    ]
    selector = converters.as_converter(config.selector, cls=config.element_type, role="selector")
    return extractors, selector


def build(config: BuildConfig) -> _core.LookupTable:
    """
    Build a lookup table from a configuration.

    Returns:
        The root table. With N extractors it has N levels: the first
        N-1 levels map keys to nested tables, the last maps keys to
        selected values.

    Raises:
        InvalidArgumentError: If the configuration is invalid.
        ConversionError: If an extractor or the selector fails on an element.
        DuplicateKeyError: Under the fail policy, if two elements share a
            full key path.
    """
    extractors, selector = validate(config)
    duplication = _types.Duplication.parse(config.duplication)

    _logger.debug(
        "Building %d-level lookup over %d elements by %s (duplication=%s)",
        len(extractors),
        len(config.source),  # type: ignore[arg-type]
        ", ".join(converters.describe(e) for e in extractors),
        duplication.value,
    )
    builder = _IndexBuilder(extractors, selector, duplication, config.default)
    table = builder.build(config.source)  # type: ignore[arg-type]
    _logger.debug("Built lookup with %d top-level keys", len(table))
    return table


class _IndexBuilder:
    """
    Recursive partitioner for a single build() call.

    Holds the per-build state that the recursion shares: the default
    chain (read-only once built) and the key path buffer used for error
    messages. A new instance is used for every build.
    """

    def __init__(
        self,
        extractors: list[converters.Converter],
        selector: converters.Converter,
        duplication: _types.Duplication,
        default: _typing.Any,
    ) -> None:
        self._extractors = extractors
        self._selector = selector
        self._duplication = duplication
        self._default = default
        self._level_count = len(extractors)
        self._key_path: list[_typing.Any] = [None] * self._level_count
        self._chain = self._build_chain()

    def build(self, source: _typing.Iterable[_typing.Any]) -> _core.LookupTable:
        return self._build_level(list(source), 0)

    def _build_chain(self) -> list[_core.EmptyLookup]:
        """
        Create the stand-in tables for missing keys, innermost first.

        chain[d] stands in for an absent table at depth d. The innermost
        one carries the configured default; every outer one returns the
        next inner stand-in, so chained get_or_default() calls on a miss
        keep walking until they reach the default.
        """
        last = self._level_count - 1
        chain: list[_core.EmptyLookup] = [None] * self._level_count  # type: ignore[list-item]
        chain[last] = _core.EmptyLookup(self._default)
        for depth in range(last - 1, -1, -1):
            chain[depth] = _core.EmptyLookup(chain[depth + 1], levels=self._level_count - depth)
        return chain

    def _build_level(self, elements: list[_typing.Any], depth: int) -> _core.LookupTable:
        if depth == self._level_count - 1:
            return self._build_leaf(elements, depth)

        extractor = self._extractors[depth]
        groups: dict[_typing.Any, list[_typing.Any]] = {}
        for element in elements:
            key = _checked_key(extractor, element)
            groups.setdefault(key, []).append(element)

        children: dict[_typing.Any, _core.LookupTable] = {}
        for key, group in groups.items():
            self._key_path[depth] = key
            children[key] = self._build_level(group, depth + 1)

        return _core.LookupTable(
            children,
            fallback=self._chain[depth],
            levels=self._level_count - depth,
        )

    def _build_leaf(self, elements: list[_typing.Any], depth: int) -> _core.LookupTable:
        extractor = self._extractors[depth]
        entries: dict[_typing.Any, _typing.Any] = {}
        for element in elements:
            key = _checked_key(extractor, element)
            value = _converted(self._selector, element)
            if key not in entries:
                entries[key] = value
                continue

            if self._duplication is _types.Duplication.FAIL:
                self._key_path[depth] = key
                raise errors.DuplicateKeyError(self._current_path(), entries[key], value)
            if self._duplication is _types.Duplication.LAST:
                entries[key] = value
            _logger.debug(
                "Duplicate key %r at level %d resolved by keeping the %s value",
                key,
                depth + 1,
                self._duplication.value,
            )

        return _core.LookupTable(entries, default=self._default, levels=1)

    def _current_path(self) -> _types.KeyPath:
        return tuple(self._key_path)


def _converted(converter: converters.Converter, element: _typing.Any) -> _typing.Any:
    """Apply a converter, reporting any foreign exception as ConversionError."""
    try:
        return converter.convert(element)
    except errors.LookupsError:
        raise
    except Exception as e:
        raise errors.ConversionError(
            f"Converter {converter.label} failed for element {errors.short_repr(element)}: {e}",
            element=element,
            converter=converter.label,
        ) from e


def _checked_key(extractor: converters.Converter, element: _typing.Any) -> _typing.Any:
    """Extract a key and make sure it can be used in a dict."""
    key = _converted(extractor, element)
    try:
        hash(key)
    except TypeError as e:
        raise errors.ConversionError(
            f"Key {errors.short_repr(key)} from {extractor.label} is not hashable",
            element=element,
            converter=extractor.label,
        ) from e
    return key


class LookupBuilder:
    """
    Fluent front end that accumulates a BuildConfig.

    Calls may come in any order. None arguments are rejected right away;
    the configuration as a whole is checked by index().

    Example:
        >>> (LookupBuilder(counties)
        ...     .select("code")
        ...     .default_to(0)
        ...     .use_last_on_duplicate()
        ...     .by("state", "county")
        ...     .index())

    Args:
        source: Elements to index.
        settings: Optional settings; supplies the initial duplication
            policy and the level cap.
    """

    def __init__(
        self,
        source: _abc.Collection[_typing.Any] | None,
        settings: _config.Settings | None = None,
    ) -> None:
        self._source = source
        self._extractors: list[_typing.Any] = []
        self._selector: _typing.Any = converters.identity
        self._default: _typing.Any = _types.MISSING
        self._cls: type | None = None
        if settings is not None:
            self._duplication = _types.Duplication.parse(settings.duplication)
            self._max_levels = settings.max_levels
        else:
            self._duplication = _types.Duplication.parse(constants.DEFAULT_DUPLICATION)
            self._max_levels = constants.LEVEL_LIMIT

    def of(self, cls: type) -> LookupBuilder:
        """Check property paths given to select()/by() against ``cls``."""
        self._cls = cls
        return self

    def select(self, selector: _typing.Any) -> LookupBuilder:
        """Store selector(element) instead of the element itself."""
        if selector is None:
            raise errors.InvalidArgumentError(errors.not_null("selector"))
        self._selector = selector
        return self

    def default_to(self, default: _typing.Any) -> LookupBuilder:
        """
        Set the leaf default returned by get_or_default() on a miss.

        None clears the default.
        """
        self._default = _types.MISSING if default is None else default
        return self

    def use_first_on_duplicate(self) -> LookupBuilder:
        """Keep the first element when two share a leaf key."""
        self._duplication = _types.Duplication.FIRST
        return self

    def use_last_on_duplicate(self) -> LookupBuilder:
        """Keep the last element when two share a leaf key."""
        self._duplication = _types.Duplication.LAST
        return self

    def fail_on_duplicate(self) -> LookupBuilder:
        """Raise DuplicateKeyError when two elements share a leaf key."""
        self._duplication = _types.Duplication.FAIL
        return self

    def on_duplicate(self, policy: _types.Duplication | str) -> LookupBuilder:
        """Set the duplication policy by name ("first", "last" or "fail")."""
        self._duplication = _types.Duplication.parse(policy)
        return self

    def by(self, *extractors: _typing.Any) -> LookupBuilder:
        """
        Add one level per extractor, outermost first.

        Extractors may be property paths or callables.
        """
        offset = len(self._extractors)
        for i, extractor in enumerate(extractors, start=offset + 1):
            if extractor is None:
                raise errors.InvalidArgumentError(errors.not_null(f"{errors.ordinal(i)} extractor"))
            self._extractors.append(extractor)
        return self

    def to_config(self) -> BuildConfig:
        """Snapshot the accumulated settings as a BuildConfig."""
        return BuildConfig(
            source=self._source,
            extractors=tuple(self._extractors),
            selector=self._selector,
            duplication=self._duplication,
            default=self._default,
            max_levels=self._max_levels,
            element_type=self._cls,
        )

    def index(self) -> _core.LookupTable:
        """Validate and build the table."""
        return build(self.to_config())


def from_source(
    source: _abc.Collection[_typing.Any] | None,
    settings: _config.Settings | None = None,
) -> LookupBuilder:
    """Start a fluent lookup definition over ``source``."""
    return LookupBuilder(source, settings=settings)
