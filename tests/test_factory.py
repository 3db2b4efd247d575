"""Tests for the convenience constructors."""

import typing as _typing

import pytest as _pytest

import lookups
import lookups.errors as errors
import lookups.factory as factory


class TestFromMapping:
    """Wrapping an existing mapping."""

    def test_wraps_copy(self) -> None:
        """The table holds a copy of the mapping."""
        source = {"MS": 28, "AL": 1}
        lookup = factory.from_mapping(source, default=0)
        source["GA"] = 13

        assert lookup.hunt("MS") == 28
        assert lookup.find("GA") is None
        assert lookup.get_or_default("GA") == 0

    def test_none_default_means_no_default(self) -> None:
        """Without a default a miss yields None."""
        lookup = factory.from_mapping({"a": 1})

        assert lookup.has_default is False
        assert lookup.get_or_default("b") is None

    def test_none_mapping(self) -> None:
        """None is rejected with the argument name."""
        with _pytest.raises(errors.InvalidArgumentError, match="Argument map must not be None."):
            factory.from_mapping(None)


class TestCreate:
    """Property-name based construction."""

    def test_two_levels(self, counties: list[_typing.Any]) -> None:
        """create() indexes by each property in turn."""
        lookup = factory.create(counties, "state", "county")

        assert lookup.hunt("Mississippi").hunt("Greene").code == 28041
        assert lookup.get_or_default("No State").find("Greene") is None

    def test_single_level_with_default(self, counties: list[_typing.Any]) -> None:
        """One property gives a leaf table; the default applies to misses."""
        lookup = factory.create(counties, "code", select="county", default="?")

        assert lookup.hunt(28067) == "Jones"
        assert lookup.get_or_default(1) == "?"

    def test_element_class_inferred(self, counties: list[_typing.Any]) -> None:
        """Unknown properties are caught using the first element's class."""
        with _pytest.raises(errors.InvalidArgumentError, match="'zip' not found on CountyCode"):
            factory.create(counties, "zip")

    def test_leading_none_elements_skipped_for_inference(self, counties: list[_typing.Any]) -> None:
        """The class comes from the first non-None element."""
        with _pytest.raises(errors.InvalidArgumentError, match="not found on CountyCode"):
            factory.create([None, *counties], "zip")

    def test_only_none_elements(self) -> None:
        """A source of only None values cannot be inspected."""
        with _pytest.raises(errors.InvalidArgumentError, match="non-None element"):
            factory.create([None, None], "state")

    def test_no_properties(self, counties: list[_typing.Any]) -> None:
        """At least one property is required."""
        with _pytest.raises(errors.InvalidArgumentError, match="At least one property"):
            factory.create(counties)

    def test_none_property(self, counties: list[_typing.Any]) -> None:
        """None properties are named by position."""
        with _pytest.raises(errors.InvalidArgumentError, match="Argument 2nd property must not be None."):
            factory.create(counties, "state", None)  # type: ignore[arg-type]

    def test_empty_source(self) -> None:
        """Empty sources are rejected by the builder."""
        with _pytest.raises(errors.InvalidArgumentError, match="must not be empty"):
            factory.create([], "state")

    def test_duplication_policy(self, dup_codes: list[_typing.Any]) -> None:
        """The duplication argument selects the policy."""
        lookup = factory.create(dup_codes, "state", select="code", duplication="first")

        assert lookup.hunt("Texas") == 100

    def test_dict_records(self, county_dicts: list[dict[str, _typing.Any]]) -> None:
        """Dict records accept any property name up front."""
        lookup = factory.create(county_dicts, "state", "county", select="code")

        assert lookup.hunt("Alabama").hunt("Jefferson") == 1073


class TestPackageExports:
    """Top-level names exported by the lookups package."""

    def test_top_level_api(self, counties: list[_typing.Any]) -> None:
        """The fluent API is reachable from the package root."""
        lookup = lookups.from_source(counties).select("code").by("state", "county").index()

        assert isinstance(lookup, lookups.LookupTable)
        assert lookups.LEVEL_LIMIT == 10
        assert lookups.create is factory.create

    def test_version(self) -> None:
        """The version string comes from package metadata."""
        assert lookups.__version__ == "0.1.0"
        assert lookups.__version_info__ == (0, 1, 0)
