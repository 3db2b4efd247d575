"""
Loading source records from YAML or JSON files.

A record file is either a list of mappings:

    - {state: MS, county: Greene, code: 28041}
    - {state: MS, county: Jones, code: 28067}

or a mapping with a ``records`` list. JSON files are read with the same
loader, since JSON is a subset of YAML.
"""

from __future__ import annotations

import pathlib as _pathlib
import typing as _typing

import yaml as _yaml


class RecordFileError(Exception):
    """Error loading or parsing a record file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in record file {path}: {message}")


def load_records(path: _pathlib.Path | str) -> list[dict[str, _typing.Any]]:
    """
    Load records from a YAML or JSON file.

    Args:
        path: File to read.

    Returns:
        The records, in file order.

    Raises:
        RecordFileError: If the file cannot be read or parsed, or does not
            contain a list of mappings.
    """
    path = _pathlib.Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RecordFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise RecordFileError(path, f"invalid YAML/JSON: {e}") from e

    if isinstance(parsed, dict) and "records" in parsed:
        parsed = parsed["records"]
    if not isinstance(parsed, list):
        raise RecordFileError(
            path,
            f"expected a list of records, got {type(parsed).__name__}",
        )

    for index, record in enumerate(parsed, start=1):
        if not isinstance(record, dict):
            raise RecordFileError(
                path,
                f"record {index} is a {type(record).__name__}, expected a mapping",
            )
    return parsed


def parse_scalar(text: str) -> _typing.Any:
    """
    Parse a command-line key or value the way YAML would.

    "28041" becomes an int, "true" a bool, "MS" stays a string. Text that
    is not valid YAML is returned unchanged.
    """
    try:
        value = _yaml.safe_load(text)
    except _yaml.YAMLError:
        return text
    # Keys must stay hashable; collections are treated as literal text
    if isinstance(value, (dict, list)):
        return text
    return value
