"""
Error taxonomy for token builds.

Every error carries enough context (token path, platform, stage) to
locate the fault without re-running the build.
"""

from __future__ import annotations

from collections.abc import Sequence


class TokenBuildError(Exception):
    """Base class for all token build errors."""

    def __init__(
        self,
        message: str,
        *,
        path: Sequence[str] | None = None,
        platform: str | None = None,
        stage: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.path: tuple[str, ...] | None = tuple(path) if path is not None else None
        self.platform = platform
        self.stage = stage

    @property
    def dotted_path(self) -> str | None:
        """Token path as a dotted string."""
        return ".".join(self.path) if self.path is not None else None

    def with_context(self, platform: str | None = None, stage: str | None = None) -> TokenBuildError:
        """Attach platform/stage context, keeping any already set."""
        if self.platform is None:
            self.platform = platform
        if self.stage is None:
            self.stage = stage
        return self

    def __str__(self) -> str:
        context = []
        if self.platform is not None:
            context.append(f"platform={self.platform}")
        if self.stage is not None:
            context.append(f"stage={self.stage}")
        if self.path is not None:
            context.append(f"path={self.dotted_path}")
        if not context:
            return self.message
        return f"{self.message} [{', '.join(context)}]"


class MalformedTokenError(TokenBuildError):
    """Ambiguous or invalid token tree shape, or an unresolvable alias."""


class ConfigurationError(TokenBuildError):
    """Unknown transform/format name, or an empty or invalid platform spec."""


class TransformError(TokenBuildError):
    """A transform failed on a specific token."""

    def __init__(self, message: str, *, transform: str, **kwargs):
        super().__init__(message, **kwargs)
        self.transform = transform

    def __str__(self) -> str:
        return f"{super().__str__()} (transform={self.transform})"


class FormatError(TokenBuildError):
    """A format could not render the token set."""

    def __init__(self, message: str, *, format_name: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.format_name = format_name


class EmitError(TokenBuildError):
    """A built artifact could not be written."""
