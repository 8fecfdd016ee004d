"""
Platform models - named output targets and the build configuration.

A platform pairs an ordered transform list with a format and a
destination. Keys accept both snake_case and the camelCase spelling used
by Style Dictionary configs (transformGroup, buildPath).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from chuk_mcp_tokens.constants import ErrorMessages
from chuk_mcp_tokens.errors import ConfigurationError


class Platform(BaseModel):
    """A named output target with its own transforms, format and destination."""

    name: str = Field(..., min_length=1, description="Platform identifier")
    transforms: list[str] = Field(
        default_factory=list,
        description="Ordered transform names (applied after the group)",
    )
    transform_group: str | None = Field(
        None,
        alias="transformGroup",
        description="Named transform group expanded before `transforms`",
    )
    format: str = Field(..., min_length=1, description="Format name")
    destination: str = Field(..., min_length=1, description="Output identifier")
    build_path: str = Field("", alias="buildPath", description="Output directory")
    options: dict[str, Any] = Field(default_factory=dict, description="Format options")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("transforms")
    @classmethod
    def _no_blank_transforms(cls, value: list[str]) -> list[str]:
        if any(not name.strip() for name in value):
            raise ValueError("Transform names must not be blank")
        return value

    @classmethod
    def from_config(cls, name: str, data: dict[str, Any]) -> Platform:
        """
        Build a platform from a config mapping.

        Raises:
            ConfigurationError: If the mapping is not a valid platform
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"Platform '{name}' must be a mapping", platform=name)
        try:
            return cls.model_validate({**data, "name": name})
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid platform '{name}': {_describe(exc)}", platform=name
            ) from exc

    def option(self, key: str, default: Any = None) -> Any:
        """Get a format option."""
        return self.options.get(key, default)


class BuildConfig(BaseModel):
    """A complete build: token sources plus the platforms to emit."""

    source: list[str] = Field(default_factory=list, description="Glob patterns of token files")
    platforms: list[Platform] = Field(default_factory=list)
    stop_on_error: bool = Field(
        True,
        alias="stopOnError",
        description="Abort the build on the first failing platform",
    )

    model_config = {"frozen": True, "populate_by_name": True}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BuildConfig:
        """
        Build a config from a parsed YAML/JSON mapping.

        `platforms` may be a mapping of name -> platform (Style Dictionary
        layout) or a list of platforms with explicit names.

        Raises:
            ConfigurationError: If the mapping is not a valid config
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Build config must be a mapping")

        raw_platforms = data.get("platforms", {})
        if isinstance(raw_platforms, dict):
            platforms = [Platform.from_config(name, pdata) for name, pdata in raw_platforms.items()]
        elif isinstance(raw_platforms, list):
            platforms = []
            for index, pdata in enumerate(raw_platforms):
                name = pdata.get("name") if isinstance(pdata, dict) else None
                name = name or f"platform-{index}"
                if any(p.name == name for p in platforms):
                    raise ConfigurationError(
                        ErrorMessages.DUPLICATE_PLATFORM.format(name=name), platform=name
                    )
                platforms.append(Platform.from_config(name, pdata))
        else:
            raise ConfigurationError("'platforms' must be a mapping or a list")

        if not platforms:
            raise ConfigurationError(ErrorMessages.NO_PLATFORMS)

        source = data.get("source", [])
        if isinstance(source, str):
            source = [source]

        try:
            return cls(
                source=source,
                platforms=platforms,
                stop_on_error=data.get("stop_on_error", data.get("stopOnError", True)),
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid build config: {_describe(exc)}") from exc


def _describe(exc: ValidationError) -> str:
    """Compact one-line summary of a pydantic validation error."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(loc) for loc in error["loc"]) or "<root>"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)
