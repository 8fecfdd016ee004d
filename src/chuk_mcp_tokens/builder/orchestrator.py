"""
Token Builder - the per-platform build pipeline.

    TokenTree -> resolve -> transform -> format -> emit

Each platform runs independently from the shared, immutable tree:
tokens are resolved afresh per platform, so one platform's transforms
are never visible to another.

Failure policy:
- stop_on_error=True (default): every platform is validated before any
  token is resolved; the first failure is raised with platform and stage
  attached.
- stop_on_error=False: failures are collected in BuildResult.failures and
  the remaining platforms still build.

A failed platform never produces an artifact.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from chuk_mcp_tokens.constants import ErrorMessages
from chuk_mcp_tokens.errors import ConfigurationError, TokenBuildError
from chuk_mcp_tokens.loader.sources import TokenLoader
from chuk_mcp_tokens.loader.tree import parse_tree
from chuk_mcp_tokens.models.platform import BuildConfig, Platform
from chuk_mcp_tokens.models.token import TokenTree
from chuk_mcp_tokens.registry import Format, FormattedOutput, TokenRegistry
from chuk_mcp_tokens.resolver.attributes import resolve
from chuk_mcp_tokens.transforms.pipeline import TransformPipeline

logger = logging.getLogger(__name__)


class PlatformState(str, Enum):
    """Lifecycle of one platform within a build."""

    LOADED = "loaded"
    RESOLVED = "resolved"
    TRANSFORMED = "transformed"
    FORMATTED = "formatted"
    EMITTED = "emitted"
    FAILED = "failed"


@dataclass(frozen=True)
class PlatformArtifact:
    """A successfully built platform output."""

    platform: str
    destination: str
    structured_output: Any
    serialized_text: str
    token_count: int
    state: PlatformState = PlatformState.FORMATTED

    @property
    def output(self) -> FormattedOutput:
        """The artifact as a FormattedOutput."""
        return FormattedOutput(self.structured_output, self.serialized_text)


@dataclass(frozen=True)
class PlatformFailure:
    """A platform that failed, and the stage it failed in."""

    platform: str
    destination: str
    stage: PlatformState
    error: TokenBuildError

    def __str__(self) -> str:
        return f"{self.platform} ({self.stage.value}): {self.error}"


@dataclass
class BuildResult:
    """Artifacts keyed by destination, plus any failures."""

    artifacts: dict[str, PlatformArtifact] = field(default_factory=dict)
    failures: list[PlatformFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """True when no platform failed."""
        return not self.failures

    def outputs(self) -> dict[str, FormattedOutput]:
        """Destination -> {structured_output, serialized_text}."""
        return {dest: artifact.output for dest, artifact in self.artifacts.items()}

    def __getitem__(self, destination: str) -> PlatformArtifact:
        return self.artifacts[destination]

    def __contains__(self, destination: object) -> bool:
        return destination in self.artifacts

    def __len__(self) -> int:
        return len(self.artifacts)


@dataclass(frozen=True)
class _PreparedPlatform:
    platform: Platform
    pipeline: TransformPipeline
    fmt: Format


class _PlatformStageError(Exception):
    """Carries the stage a platform failed in out of a worker."""

    def __init__(self, stage: PlatformState, error: TokenBuildError):
        super().__init__(str(error))
        self.stage = stage
        self.error = error


class Emitter(Protocol):
    """Writes finished artifacts somewhere outside the build."""

    def check(self, platform: Platform) -> Any:
        """Validate where a platform's artifact would go; raise TokenBuildError if invalid."""

    def emit(self, platform: Platform, artifact: PlatformArtifact) -> Any:
        """Write one artifact; raise TokenBuildError on failure."""


class TokenBuilder:
    """
    Builds token trees for one or more platforms.

    The builder holds no state between builds; the registry is the only
    thing it keeps, and it is only read.
    """

    def __init__(self, registry: TokenRegistry, stop_on_error: bool = True):
        """
        Initialize the builder.

        Args:
            registry: Transforms and formats available to platforms
            stop_on_error: Fail fast on the first platform error
        """
        self.registry = registry
        self.stop_on_error = stop_on_error

    def build(
        self,
        tree: TokenTree | Mapping[str, Any],
        platforms: Iterable[Platform | Mapping[str, Any]],
        emitter: Emitter | None = None,
    ) -> BuildResult:
        """
        Build every platform from a token tree.

        Args:
            tree: TokenTree or raw nested mapping
            platforms: Platforms (or platform mappings with a `name`)
            emitter: Writes each artifact as part of its platform's run

        Returns:
            BuildResult keyed by destination

        Raises:
            MalformedTokenError: If the tree itself is malformed
            TokenBuildError: First platform failure, when stop_on_error
        """
        source, prepared, result = self._prepare(tree, platforms, emitter)

        for item in prepared:
            try:
                artifact = self._run_platform(source, item, emitter)
            except _PlatformStageError as exc:
                self._record_failure(result, item.platform, exc.stage, exc.error)
                continue
            result.artifacts[artifact.destination] = artifact

        return result

    async def build_async(
        self,
        tree: TokenTree | Mapping[str, Any],
        platforms: Iterable[Platform | Mapping[str, Any]],
    ) -> BuildResult:
        """
        Build platforms as concurrent tasks.

        Same policy and result as build(); results are collected in
        platform order regardless of completion order.
        """
        source, prepared, result = self._prepare(tree, platforms)

        outcomes = await asyncio.gather(
            *(asyncio.to_thread(self._run_platform, source, item) for item in prepared),
            return_exceptions=True,
        )

        for item, outcome in zip(prepared, outcomes, strict=True):
            if isinstance(outcome, _PlatformStageError):
                self._record_failure(result, item.platform, outcome.stage, outcome.error)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                result.artifacts[outcome.destination] = outcome

        return result

    def build_project(
        self,
        config: BuildConfig,
        base_path: Path | None = None,
        emitter: Emitter | None = None,
    ) -> BuildResult:
        """
        Load sources from a build config, build, and emit each artifact.

        Emission is the last stage of each platform, so a platform that
        cannot be written fails on its own under the config's policy.

        Args:
            config: Build configuration (sources + platforms)
            base_path: Directory sources are resolved against
            emitter: Writes each successful artifact

        Returns:
            BuildResult; emitted artifacts are marked EMITTED
        """
        tree = TokenLoader(base_path).load_sources(config.source)
        builder = TokenBuilder(self.registry, stop_on_error=config.stop_on_error)
        return builder.build(tree, config.platforms, emitter=emitter)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _prepare(
        self,
        tree: TokenTree | Mapping[str, Any],
        platforms: Iterable[Platform | Mapping[str, Any]],
        emitter: Emitter | None = None,
    ) -> tuple[TokenTree, list[_PreparedPlatform], BuildResult]:
        """Parse the tree and validate every platform before any resolution."""
        source = parse_tree(tree)
        platform_list = [self._coerce_platform(p, index) for index, p in enumerate(platforms)]
        if not platform_list:
            raise ConfigurationError(ErrorMessages.NO_PLATFORMS)

        names: set[str] = set()
        destinations: set[str] = set()
        for platform in platform_list:
            if platform.name in names:
                raise ConfigurationError(
                    ErrorMessages.DUPLICATE_PLATFORM.format(name=platform.name),
                    platform=platform.name,
                )
            if platform.destination in destinations:
                raise ConfigurationError(
                    ErrorMessages.DUPLICATE_DESTINATION.format(destination=platform.destination),
                    platform=platform.name,
                )
            names.add(platform.name)
            destinations.add(platform.destination)

        result = BuildResult()
        prepared: list[_PreparedPlatform] = []
        for platform in platform_list:
            try:
                pipeline = TransformPipeline(
                    self.registry, platform.transforms, platform.transform_group
                )
                fmt = self.registry.get_format(platform.format)
                if emitter is not None:
                    emitter.check(platform)
            except TokenBuildError as exc:
                self._record_failure(result, platform, PlatformState.LOADED, exc)
                continue
            prepared.append(_PreparedPlatform(platform, pipeline, fmt))

        return source, prepared, result

    def _run_platform(
        self,
        source: TokenTree,
        item: _PreparedPlatform,
        emitter: Emitter | None = None,
    ) -> PlatformArtifact:
        """resolve -> transform -> format (-> emit) for one platform."""
        platform = item.platform
        logger.debug(f"Building platform {platform.name} -> {platform.destination}")

        state = PlatformState.LOADED
        try:
            tokens = resolve(source)
            state = PlatformState.RESOLVED
            tokens = item.pipeline.apply(tokens)
            state = PlatformState.TRANSFORMED
            output = self.registry.render(item.fmt.name, tokens, platform)
            state = PlatformState.FORMATTED
            artifact = PlatformArtifact(
                platform=platform.name,
                destination=platform.destination,
                structured_output=output.structured_output,
                serialized_text=output.serialized_text,
                token_count=len(tokens),
            )
            if emitter is not None:
                emitter.emit(platform, artifact)
                artifact = replace(artifact, state=PlatformState.EMITTED)
                logger.info(f"Emitted {platform.name} -> {platform.destination}")
        except TokenBuildError as exc:
            raise _PlatformStageError(state, exc) from exc

        logger.debug(f"Built platform {platform.name}: {len(tokens)} tokens")
        return artifact

    def _record_failure(
        self,
        result: BuildResult,
        platform: Platform,
        stage: PlatformState,
        error: TokenBuildError,
    ) -> None:
        error.with_context(platform=platform.name, stage=stage.value)
        if self.stop_on_error:
            raise error
        logger.warning(f"Platform {platform.name} failed during {stage.value}: {error}")
        result.failures.append(
            PlatformFailure(
                platform=platform.name,
                destination=platform.destination,
                stage=stage,
                error=error,
            )
        )

    def _coerce_platform(self, platform: Platform | Mapping[str, Any], index: int) -> Platform:
        if isinstance(platform, Platform):
            return platform
        if isinstance(platform, Mapping):
            data = dict(platform)
            name = data.pop("name", None) or f"platform-{index}"
            return Platform.from_config(name, data)
        raise ConfigurationError(f"Invalid platform spec: {platform!r}")


def build(
    tree: TokenTree | Mapping[str, Any],
    platforms: Iterable[Platform | Mapping[str, Any]],
    registry: TokenRegistry,
    stop_on_error: bool = True,
) -> BuildResult:
    """
    Convenience function to build platforms from a tree.

    Args:
        tree: TokenTree or raw nested mapping
        platforms: Platforms to build
        registry: Transforms and formats
        stop_on_error: Fail fast on the first platform error

    Returns:
        BuildResult keyed by destination
    """
    return TokenBuilder(registry, stop_on_error=stop_on_error).build(tree, platforms)
