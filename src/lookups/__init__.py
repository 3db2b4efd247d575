"""
Lookups - immutable multi-level lookup tables.

Index a collection by one or more keys and query the result one key at a
time, with strict, optional and default-returning lookup modes.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("lookups")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from lookups import errors  # noqa: E402
from lookups.config import Settings  # noqa: E402
from lookups.constants import LEVEL_LIMIT  # noqa: E402
from lookups.factory import create, from_mapping  # noqa: E402
from lookups.table import (  # noqa: E402
    MISSING,
    BuildConfig,
    Duplication,
    EmptyLookup,
    LookupBuilder,
    LookupTable,
    build,
    from_source,
)

__all__ = [
    "__version__",
    "__version_info__",
    "LEVEL_LIMIT",
    "MISSING",
    "BuildConfig",
    "Duplication",
    "EmptyLookup",
    "LookupBuilder",
    "LookupTable",
    "Settings",
    "build",
    "create",
    "errors",
    "from_mapping",
    "from_source",
]
