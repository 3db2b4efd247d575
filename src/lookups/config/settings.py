"""
Settings configuration using pydantic-settings.

Loads configuration from (highest precedence first):
1. Constructor arguments
2. Environment variables with LOOKUPS_ prefix
3. .env file named by LOOKUPS_ENV_FILE (if set and present)
4. Project config: .lookups.yaml in the current directory
5. User config: ~/.config/lookups/config.yaml
6. Field defaults

Nested config uses double underscore delimiter:
  LOOKUPS_OUTPUT__FORMAT=json
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import lookups.config.sources as sources
import lookups.config.types as types
import lookups.constants as constants


def _get_env_file() -> str | None:
    """Return LOOKUPS_ENV_FILE if it names an existing file."""
    env_file = _os.environ.get("LOOKUPS_ENV_FILE")
    if env_file and _pathlib.Path(env_file).exists():
        return env_file
    return None


class Settings(_pydantic_settings.BaseSettings):
    """
    Lookups configuration settings.

    Only defaults live here: an explicit call such as
    ``builder.use_last_on_duplicate()`` always wins over ``duplication``.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="LOOKUPS_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # LOOKUPS_OUTPUT__FORMAT
        extra="allow",  # Preserve unknown fields so they can be reported
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlSettingsSource(settings_cls, _pathlib.Path.cwd()),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Create Settings without loading any .env file (useful in tests)."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    duplication: _typing.Literal["first", "last", "fail"] = _pydantic.Field(
        default=constants.DEFAULT_DUPLICATION,
        description="Policy for elements sharing a leaf key",
    )

    max_levels: int = _pydantic.Field(
        default=constants.LEVEL_LIMIT,
        ge=1,
        le=constants.LEVEL_LIMIT,
        description="Maximum number of key levels a build may request",
    )

    output: types.OutputConfig = _pydantic.Field(default_factory=types.OutputConfig)
    """CLI output settings."""

    @_pydantic.field_validator("duplication", mode="before")
    @classmethod
    def _lowercase_duplication(cls, value: _typing.Any) -> _typing.Any:
        return value.lower() if isinstance(value, str) else value

    def collect_all_extra_fields(self) -> dict[str, _typing.Any]:
        """Unknown keys from every source, as dotted path → value."""
        result = dict(self.model_extra) if self.model_extra else {}
        result.update(self.output.collect_all_extra_fields("output"))
        return result
