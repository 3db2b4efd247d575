"""
Shared pytest fixtures for lookups tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import dataclasses as _dataclasses
import os as _os
import pathlib as _pathlib
import unittest.mock as _mock

import pytest as _pytest
import yaml as _yaml

import lookups.config as config


@_dataclasses.dataclass(frozen=True)
class CountyCode:
    """County record used as sample data throughout the tests."""

    state: str
    county: str
    code: int


COUNTY_CODES = [
    CountyCode("Mississippi", "Greene", 28041),
    CountyCode("Mississippi", "Jones", 28067),
    CountyCode("Alabama", "Greene", 1063),
    CountyCode("Alabama", "Jefferson", 1073),
    CountyCode("Georgia", "Greene", 13133),
]

# Two records sharing the state "Texas"; used for duplication policy tests
CODE_100 = CountyCode("Texas", "Anderson", 100)
CODE_200 = CountyCode("Texas", "Andrews", 200)
DUP_CODES = [CODE_100, CODE_200]


@_pytest.fixture
def counties() -> list[CountyCode]:
    """Sample county records as dataclass instances."""
    return list(COUNTY_CODES)


@_pytest.fixture
def county_dicts() -> list[dict[str, object]]:
    """Sample county records as plain dicts, as loaded from YAML."""
    return [_dataclasses.asdict(c) for c in COUNTY_CODES]


@_pytest.fixture
def record_file(tmp_path: _pathlib.Path, county_dicts: list[dict[str, object]]) -> _pathlib.Path:
    """YAML record file containing the sample counties."""
    path = tmp_path / "counties.yaml"
    path.write_text(_yaml.safe_dump(county_dicts, sort_keys=False))
    return path


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """
    Return environment dict with LOOKUPS_* keys removed.

    Use with mock.patch.dict to isolate tests from the actual environment.
    """
    return {k: v for k, v in _os.environ.items() if not k.startswith("LOOKUPS_")}


@_pytest.fixture
def isolated_env(
    clean_env: dict[str, str],
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
):
    """
    Context manager that isolates tests from environment and config files.

    The user config directory points at an empty temp directory and the
    working directory has no project config.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                settings = config.Settings.construct_without_dotenv()
    """
    config_dir = tmp_path / "user-config"
    config_dir.mkdir()
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.chdir(work_dir)
    env = dict(clean_env, LOOKUPS_CONFIG_DIR=str(config_dir))
    return _mock.patch.dict(_os.environ, env, clear=True)


@_pytest.fixture
def clean_settings(isolated_env) -> config.Settings:
    """
    Settings instance isolated from environment and config files.

    This fixture ensures tests get predictable default settings.
    """
    with isolated_env:
        return config.Settings.construct_without_dotenv()


@_pytest.fixture
def dup_codes() -> list[CountyCode]:
    """Two records that share the state key."""
    return list(DUP_CODES)
