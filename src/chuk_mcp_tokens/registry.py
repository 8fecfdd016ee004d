"""
Token Registry - transforms, transform groups and formats by name.

The registry is an explicit value the caller constructs and passes to
the builder; there is no module-level registry. `default_registry()`
returns a fresh registry pre-populated with the built-ins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from chuk_mcp_tokens.constants import ErrorMessages, TransformKind
from chuk_mcp_tokens.errors import ConfigurationError, FormatError, TokenBuildError

if TYPE_CHECKING:
    from chuk_mcp_tokens.models.platform import Platform
    from chuk_mcp_tokens.models.token import Token

logger = logging.getLogger(__name__)

Matcher = Callable[["Token"], bool]
Renderer = Callable[[list["Token"], "Platform"], "FormattedOutput"]


@dataclass(frozen=True)
class Transform:
    """A named, matcher-gated rewrite of one part of a token."""

    name: str
    apply: Callable[[Token], Any]
    matcher: Matcher | None = None  # None matches every token
    kind: TransformKind = TransformKind.VALUE
    description: str = ""

    def matches(self, token: Token) -> bool:
        """Check whether this transform applies to a token."""
        return self.matcher is None or bool(self.matcher(token))


@dataclass(frozen=True)
class FormattedOutput:
    """A rendered platform artifact: structured object plus its text form."""

    structured_output: Any
    serialized_text: str


@dataclass(frozen=True)
class Format:
    """A named renderer from resolved tokens to a target-shaped artifact."""

    name: str
    render: Renderer
    description: str = ""


class TokenRegistry:
    """
    Holds transforms, transform groups and formats.

    Names are unique per kind: registering a name twice raises
    ConfigurationError instead of silently overriding.
    """

    def __init__(self) -> None:
        self._transforms: dict[str, Transform] = {}
        self._groups: dict[str, tuple[str, ...]] = {}
        self._formats: dict[str, Format] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_transform(
        self,
        name: str,
        apply: Callable[[Token], Any],
        matcher: Matcher | None = None,
        kind: TransformKind | str = TransformKind.VALUE,
        description: str = "",
    ) -> Transform:
        """
        Register a transform.

        Args:
            name: Unique transform name (e.g. 'size/strip-unit')
            apply: Token -> new value (or name, or attribute mapping)
            matcher: Token -> bool; None matches every token
            kind: Which part of the token the transform rewrites
            description: Human-readable description

        Returns:
            The registered Transform

        Raises:
            ConfigurationError: If the name is already registered
        """
        if name in self._transforms:
            raise ConfigurationError(ErrorMessages.DUPLICATE_TRANSFORM.format(name=name))

        transform = Transform(
            name=name,
            apply=apply,
            matcher=matcher,
            kind=TransformKind(kind),
            description=description,
        )
        self._transforms[name] = transform
        return transform

    def register_transform_group(self, name: str, transforms: Iterable[str]) -> tuple[str, ...]:
        """
        Register a named, ordered list of transforms.

        Members are checked when a pipeline uses the group, so a group
        may be registered before its transforms.

        Raises:
            ConfigurationError: If the name is already registered
        """
        if name in self._groups:
            raise ConfigurationError(ErrorMessages.DUPLICATE_TRANSFORM_GROUP.format(name=name))

        members = tuple(transforms)
        self._groups[name] = members
        return members

    def register_format(self, name: str, render: Renderer, description: str = "") -> Format:
        """
        Register a format.

        Args:
            name: Unique format name (e.g. 'tailwind/theme')
            render: (tokens, platform) -> FormattedOutput
            description: Human-readable description

        Raises:
            ConfigurationError: If the name is already registered
        """
        if name in self._formats:
            raise ConfigurationError(ErrorMessages.DUPLICATE_FORMAT.format(name=name))

        fmt = Format(name=name, render=render, description=description)
        self._formats[name] = fmt
        return fmt

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_transform(self, name: str) -> Transform:
        """Get a transform by name, or raise ConfigurationError."""
        try:
            return self._transforms[name]
        except KeyError:
            raise ConfigurationError(ErrorMessages.UNKNOWN_TRANSFORM.format(name=name)) from None

    def get_transform_group(self, name: str) -> tuple[str, ...]:
        """Get the member names of a transform group, or raise ConfigurationError."""
        try:
            return self._groups[name]
        except KeyError:
            raise ConfigurationError(
                ErrorMessages.UNKNOWN_TRANSFORM_GROUP.format(name=name)
            ) from None

    def get_format(self, name: str) -> Format:
        """Get a format by name, or raise ConfigurationError."""
        try:
            return self._formats[name]
        except KeyError:
            raise ConfigurationError(ErrorMessages.UNKNOWN_FORMAT.format(name=name)) from None

    def resolve_transforms(
        self,
        names: Iterable[str] = (),
        group: str | None = None,
    ) -> list[Transform]:
        """
        Expand a group plus explicit names into an ordered transform list.

        The group's members come first, then the explicit names.

        Raises:
            ConfigurationError: If any group or transform name is unknown
        """
        ordered: list[str] = []
        if group is not None:
            ordered.extend(self.get_transform_group(group))
        ordered.extend(names)
        return [self.get_transform(name) for name in ordered]

    def render(self, format_name: str, tokens: list[Token], platform: Platform) -> FormattedOutput:
        """
        Render tokens with a named format.

        Raises:
            ConfigurationError: If the format is unknown
            FormatError: If the format fails to render
        """
        fmt = self.get_format(format_name)
        try:
            output = fmt.render(tokens, platform)
        except TokenBuildError:
            raise
        except Exception as exc:
            raise FormatError(
                f"Format '{format_name}' failed: {exc}", format_name=format_name
            ) from exc

        if not isinstance(output, FormattedOutput):
            raise FormatError(
                f"Format '{format_name}' returned {type(output).__name__}, "
                "expected FormattedOutput",
                format_name=format_name,
            )
        return output

    def has_transform(self, name: str) -> bool:
        """Check if a transform is registered."""
        return name in self._transforms

    def has_format(self, name: str) -> bool:
        """Check if a format is registered."""
        return name in self._formats

    def list_transforms(self) -> list[Transform]:
        """All transforms in registration order."""
        return list(self._transforms.values())

    def list_transform_groups(self) -> dict[str, tuple[str, ...]]:
        """All transform groups in registration order."""
        return dict(self._groups)

    def list_formats(self) -> list[Format]:
        """All formats in registration order."""
        return list(self._formats.values())

    def copy(self) -> TokenRegistry:
        """Independent copy that can be extended without touching this one."""
        clone = TokenRegistry()
        clone._transforms = dict(self._transforms)
        clone._groups = dict(self._groups)
        clone._formats = dict(self._formats)
        return clone


def default_registry() -> TokenRegistry:
    """Create a new registry with the built-in transforms, groups and formats."""
    from chuk_mcp_tokens.formats.builtin import register_builtin_formats
    from chuk_mcp_tokens.transforms.builtin import register_builtin_transforms

    registry = TokenRegistry()
    register_builtin_transforms(registry)
    register_builtin_formats(registry)
    logger.debug(
        f"Default registry: {len(registry.list_transforms())} transforms, "
        f"{len(registry.list_formats())} formats"
    )
    return registry
