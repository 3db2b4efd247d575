"""
Tests that enforce coding standards.

These tests verify that the codebase follows our import conventions:
modules are imported whole ('import X as _x' for external packages,
'import lookups.mod as mod' for our own) and 'from X import Y' is kept
to package __init__.py re-exports.
"""

import pathlib as _pathlib
import re as _re

import pytest as _pytest

# Directories to check
SRC_DIR = _pathlib.Path(__file__).parent.parent / "src" / "lookups"
TESTS_DIR = _pathlib.Path(__file__).parent

# 'import yaml' without an alias; stdlib and third-party modules get '_x' names
_BARE_EXTERNAL_IMPORT = _re.compile(r"^import (?!lookups\b)[\w.]+\s*$")


def _get_python_files(directory: _pathlib.Path) -> list[_pathlib.Path]:
    """Get all Python files in a directory, recursively."""
    return sorted(directory.rglob("*.py"))


def _extract_from_imports(content: str) -> list[tuple[int, str]]:
    """
    Extract 'from X import Y' statements from file content.

    Returns list of (line_number, line_content) tuples.
    Excludes:
    - 'from __future__ import' (allowed)
    - Lines inside TYPE_CHECKING blocks (allowed)
    """
    imports: list[tuple[int, str]] = []
    in_type_checking = False

    for i, line in enumerate(content.split("\n"), start=1):
        stripped = line.strip()

        if "if TYPE_CHECKING:" in line or "if _typing.TYPE_CHECKING:" in line:
            in_type_checking = True
            continue

        # A non-indented statement ends the block
        if in_type_checking and stripped and not stripped.startswith("#") and not line[:1].isspace():
            in_type_checking = False

        if in_type_checking:
            continue

        if stripped.startswith("from ") and " import " in stripped:
            if stripped.startswith("from __future__ import"):
                continue
            imports.append((i, stripped))

    return imports


def _extract_bare_imports(content: str) -> list[tuple[int, str]]:
    """Extract top-level 'import X' lines for non-lookups modules without an alias."""
    return [
        (i, line)
        for i, line in enumerate(content.split("\n"), start=1)
        if _BARE_EXTERNAL_IMPORT.match(line)
    ]


def _violations(paths: list[_pathlib.Path]) -> list[str]:
    found: list[str] = []
    for path in paths:
        content = path.read_text()
        lines = _extract_bare_imports(content)
        # __init__.py files may re-export with 'from X import Y'
        if path.name != "__init__.py":
            lines += _extract_from_imports(content)
        found.extend(f"{path}:{num}: {line}" for num, line in sorted(lines))
    return found


class TestImportStyle:
    """Tests for import style compliance."""

    def test_src_import_style(self) -> None:
        """Source files import whole modules under an alias."""
        violations = _violations(_get_python_files(SRC_DIR))

        if violations:
            msg = "Found forbidden imports:\n"
            msg += "\n".join(f"  {v}" for v in violations)
            msg += "\n\nUse 'import X as _x' (external) or 'import X as x' (internal) instead."
            _pytest.fail(msg)

    def test_tests_import_style(self) -> None:
        """Test files follow the same conventions."""
        paths = [p for p in _get_python_files(TESTS_DIR) if p.name != "test_coding_standards.py"]
        violations = _violations(paths)

        if violations:
            msg = "Found forbidden imports:\n"
            msg += "\n".join(f"  {v}" for v in violations)
            _pytest.fail(msg)

    def test_no_print_in_src(self) -> None:
        """Library code logs or echoes instead of printing."""
        offenders = [
            f"{path}:{i}"
            for path in _get_python_files(SRC_DIR)
            for i, line in enumerate(path.read_text().split("\n"), start=1)
            if _re.match(r"\s*print\(", line)
        ]

        assert offenders == []


class TestImportExtraction:
    """Tests for the import extraction logic itself."""

    def test_detects_from_import(self) -> None:
        """Should detect basic from imports."""
        imports = _extract_from_imports("from pathlib import Path")

        assert imports == [(1, "from pathlib import Path")]

    def test_allows_future_imports(self) -> None:
        """Should allow __future__ imports."""
        assert _extract_from_imports("from __future__ import annotations") == []

    def test_ignores_type_checking_block(self) -> None:
        """Should ignore imports inside TYPE_CHECKING blocks."""
        content = """
import typing as _typing

if _typing.TYPE_CHECKING:
    from some_module import SomeType

def foo():
    pass
"""
        assert _extract_from_imports(content) == []

    def test_detects_import_after_type_checking(self) -> None:
        """Should still detect imports after TYPE_CHECKING block ends."""
        content = """
import typing as _typing

if _typing.TYPE_CHECKING:
    from allowed import Type

from forbidden import Other
"""
        imports = _extract_from_imports(content)

        assert len(imports) == 1
        assert "from forbidden import Other" in imports[0][1]

    def test_bare_external_import(self) -> None:
        """Unaliased external imports are flagged; package imports are not."""
        content = "import yaml\nimport yaml as _yaml\nimport lookups\n"

        assert _extract_bare_imports(content) == [(1, "import yaml")]
