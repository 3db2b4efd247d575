"""Custom pydantic-settings source for lookups configuration files.

Configuration layers handled here (highest precedence first):
1. Project config: .lookups.yaml in the project directory
2. User config: ~/.config/lookups/config.yaml (or LOOKUPS_CONFIG_DIR)

Environment variables and constructor arguments take precedence over both;
they are handled by pydantic-settings itself.

Environment variables:
- LOOKUPS_CONFIG_DIR: Override user config directory (default: ~/.config/lookups)
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

# Environment variable for overriding user config directory
ENV_CONFIG_DIR = "LOOKUPS_CONFIG_DIR"

PROJECT_CONFIG_NAME = ".lookups.yaml"


class ConfigFileError(Exception):
    """Error loading or parsing a configuration file."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def merge_layers(
    base: dict[str, _typing.Any],
    override: dict[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """
    Merge two config layers; nested dicts merge, other values replace.

    Neither argument is modified.
    """
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_layers(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Load a YAML config file.

    Returns:
        Parsed contents, or None if the file is empty.

    Raises:
        ConfigFileError: If the file cannot be read, is malformed YAML,
            or its top level is not a mapping.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigFileError(path, f"permission denied: {e}") from e
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return None
    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )
    return parsed


class YamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Settings source that merges the user and project YAML config files.

    Both files are optional. Project values override user values; nested
    sections (e.g. ``output``) are merged key by key.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Initialize the settings source.

        Args:
            settings_cls: The Settings class being populated.
            project_root: Directory searched for the project config file.
            user_config_path: Override path for the user config file (for
                testing). Defaults to LOOKUPS_CONFIG_DIR or the XDG path.
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._data = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        merged: dict[str, _typing.Any] = {}

        user_path = self._user_config_path or get_user_config_path()
        if user_path.exists():
            content = load_yaml_file(user_path)
            if content:
                merged = merge_layers(merged, content)
                self._loaded_layers.append(("user", user_path))

        if self._project_root is not None:
            project_path = get_project_config_path(self._project_root)
            if project_path.exists():
                content = load_yaml_file(project_path)
                if content:
                    merged = merge_layers(merged, content)
                    self._loaded_layers.append(("project", project_path))

        return merged

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """Layers actually loaded, lowest precedence first."""
        return list(self._loaded_layers)

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """
        Return merged config as a plain dict for Pydantic validation.

        Unknown keys are kept; Settings preserves them in model_extra.
        """
        return dict(self._data)


def get_user_config_dir() -> _pathlib.Path:
    """
    Get the user config directory.

    Respects LOOKUPS_CONFIG_DIR if set, otherwise uses the XDG path.
    """
    config_dir_env = _os.environ.get(ENV_CONFIG_DIR)
    if config_dir_env:
        return _pathlib.Path(config_dir_env)
    return _pathlib.Path.home() / ".config" / "lookups"


def get_user_config_path() -> _pathlib.Path:
    """Get the path to the user config file."""
    return get_user_config_dir() / "config.yaml"


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """Get the path to the project config file inside ``project_root``."""
    return project_root / PROJECT_CONFIG_NAME
