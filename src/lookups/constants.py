"""
Shared constants for lookups.

This module provides a single source of truth for limits and default
values that are used across multiple modules.
"""

LEVEL_LIMIT = 10
"""Hard cap on the number of key levels a lookup table may have."""

DEFAULT_DUPLICATION = "fail"
"""Default policy when two elements produce the same leaf key."""

# Display defaults
DEFAULT_OUTPUT_FORMAT = "yaml"
"""Default output format for CLI results."""

DEFAULT_VALUE_TRUNCATE_LENGTH = 80
"""Length at which values are truncated in error messages and tree views."""
