"""
Configuration module for lookups.

Uses pydantic-settings for environment variable and YAML file loading.
"""

from lookups.config.settings import Settings
from lookups.config.sources import ConfigFileError
from lookups.config.types import OutputConfig

__all__ = ["ConfigFileError", "OutputConfig", "Settings"]
