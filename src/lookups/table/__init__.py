"""
Immutable multi-level lookup tables.

Example:
    >>> from lookups.table import from_source
    >>> counties = [
    ...     {"state": "MS", "county": "Greene", "code": 28041},
    ...     {"state": "MS", "county": "Jones", "code": 28067},
    ... ]
    >>> table = from_source(counties).select("code").by("state", "county").index()
    >>> table.hunt("MS").hunt("Greene")
    28041
    >>> table.get_or_default("MS").find("Nowhere") is None
    True
"""

from lookups.table._builder import BuildConfig, LookupBuilder, build, from_source, validate
from lookups.table._core import EmptyLookup, LookupTable
from lookups.table._types import MISSING, Duplication, KeyPath

__all__ = [
    "MISSING",
    "BuildConfig",
    "Duplication",
    "EmptyLookup",
    "KeyPath",
    "LookupBuilder",
    "LookupTable",
    "build",
    "from_source",
    "validate",
]
