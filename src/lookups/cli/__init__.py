"""
CLI module for lookups.

Provides the command-line interface using Click.
"""

from lookups.cli.main import cli, main

__all__ = ["main", "cli"]
