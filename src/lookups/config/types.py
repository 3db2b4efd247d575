"""Configuration section types for lookups settings.

- ConfigBase: base class that keeps unknown keys for auditing
- OutputConfig: how the CLI prints results

All types use `extra="allow"` so that typos in config files are preserved
and can be reported instead of being silently dropped.
"""

import typing as _typing

import pydantic as _pydantic

import lookups.constants as constants


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config section types.

    Unknown fields are preserved rather than dropped, so they can be
    reported by ``lookups config``.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this section and nested ones.

        Returns:
            Flat dict of dotted path → value, e.g. {"output.fromat": "json"}.
        """
        result: dict[str, _typing.Any] = {}
        for key, value in self.get_extra_fields().items():
            result[f"{prefix}.{key}" if prefix else key] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))
        return result


class OutputConfig(ConfigBase):
    """
    CLI output settings.

    YAML section: output.*
    """

    format: _typing.Literal["yaml", "json"] = constants.DEFAULT_OUTPUT_FORMAT
    """Serialization used by ``lookups query`` and ``lookups config``."""

    color: bool | None = None
    """Force color on or off; None auto-detects a terminal."""
