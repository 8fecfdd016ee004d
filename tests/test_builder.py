"""
Tests for the build orchestrator.

Tests cover:
- Per-platform isolation over a shared tree
- Fail-fast vs continue failure policy
- Stage reporting on failures
- Async builds
- Project builds from a config file, with file emission
"""

import json
from pathlib import Path

import pytest
import yaml

from chuk_mcp_tokens.builder import (
    BuildResult,
    FileEmitter,
    PlatformArtifact,
    PlatformState,
    TokenBuilder,
    build,
)
from chuk_mcp_tokens.errors import (
    ConfigurationError,
    EmitError,
    FormatError,
    MalformedTokenError,
    TransformError,
)
from chuk_mcp_tokens.loader import load_config, parse_tree
from chuk_mcp_tokens.models import BuildConfig, Platform
from chuk_mcp_tokens.registry import TokenRegistry


def _tailwind(**kwargs) -> Platform:
    data = {"name": "tailwind", "format": "tailwind/theme", "destination": "tailwind.js"}
    data.update(kwargs)
    return Platform(**data)


class TestBuild:
    """Tests for successful builds."""

    def test_single_platform(self, registry: TokenRegistry):
        """The color scenario end to end."""
        result = build({"color": {"primary": {"base": "#1D4ED8"}}}, [_tailwind()], registry)
        assert result.succeeded
        artifact = result["tailwind.js"]
        assert artifact.structured_output == {"colors": {"primary": {"base": "#1D4ED8"}}}
        assert artifact.state == PlatformState.FORMATTED
        assert artifact.token_count == 1

    def test_platforms_are_isolated(self, registry: TokenRegistry, sample_tree: dict):
        """One platform's transforms never leak into another's output."""
        tree = parse_tree(sample_tree)
        result = build(
            tree,
            [
                _tailwind(transforms=["size/strip-unit"]),
                _tailwind(name="css", transform_group="css", format="css/variables",
                          destination="tokens.css"),
                _tailwind(name="raw", format="json/nested", destination="tokens.json"),
            ],
            registry,
        )
        assert result["tailwind.js"].structured_output["spacing"]["small"] == 8
        assert result["tokens.css"].structured_output["--spacing-small"] == "0.5rem"
        assert result["tokens.json"].structured_output["spacing"]["small"] == "8px"
        assert tree == parse_tree(sample_tree)

    def test_platform_mappings(self, registry: TokenRegistry):
        """Platforms may be given as mappings, with camelCase keys."""
        result = build(
            {"spacing": {"small": "8px"}},
            [
                {
                    "name": "tw",
                    "transformGroup": "tailwind",
                    "transforms": ["size/strip-unit"],
                    "format": "tailwind/theme",
                    "destination": "tw.js",
                }
            ],
            registry,
        )
        assert result["tw.js"].platform == "tw"
        assert result["tw.js"].structured_output == {"spacing": {"small": 8}}

    def test_deterministic(self, registry: TokenRegistry, sample_tree: dict):
        """Same inputs, same bytes."""
        platforms = [_tailwind(transform_group="tailwind")]
        first = build(sample_tree, platforms, registry)
        second = build(sample_tree, platforms, registry)
        assert first.outputs() == second.outputs()

    def test_result_container(self, registry: TokenRegistry):
        """BuildResult behaves like a mapping of destinations."""
        result = build({"spacing": {"small": "8px"}}, [_tailwind()], registry)
        assert "tailwind.js" in result
        assert "other.js" not in result
        assert len(result) == 1
        assert isinstance(result.outputs()["tailwind.js"].serialized_text, str)


class TestBuildValidation:
    """Tests for errors raised before any platform runs."""

    def test_no_platforms(self, registry: TokenRegistry):
        """An empty platform list is a configuration error."""
        with pytest.raises(ConfigurationError):
            build({"spacing": {"small": "8px"}}, [], registry)

    def test_duplicate_destination(self, registry: TokenRegistry):
        """Two platforms cannot write the same destination."""
        with pytest.raises(ConfigurationError, match="tailwind.js"):
            build({"spacing": {"small": "8px"}}, [_tailwind(), _tailwind(name="b")], registry)

    def test_malformed_tree(self, registry: TokenRegistry):
        """A malformed tree fails the whole build."""
        with pytest.raises(MalformedTokenError):
            build({"color": {}}, [_tailwind()], registry)

    def test_invalid_platform_mapping(self, registry: TokenRegistry):
        """Mappings missing required keys are configuration errors."""
        with pytest.raises(ConfigurationError, match="broken"):
            build({"spacing": {"small": "8px"}}, [{"name": "broken", "format": "json/flat"}],
                  registry)


class TestFailFast:
    """Tests for stop_on_error=True."""

    def test_unknown_format_before_resolution(self, registry: TokenRegistry):
        """An unknown format aborts before any token is processed."""
        seen: list[str] = []
        registry.register_transform(
            "spy/value",
            lambda t: t.resolved_value,
            matcher=lambda t: seen.append(t.dotted_path) or True,
        )
        platforms = [
            _tailwind(transforms=["spy/value"]),
            _tailwind(name="broken", format="xml", destination="tokens.xml"),
        ]
        with pytest.raises(ConfigurationError) as exc_info:
            TokenBuilder(registry).build({"spacing": {"small": "8px"}}, platforms)
        assert exc_info.value.platform == "broken"
        assert exc_info.value.stage == PlatformState.LOADED.value
        assert seen == []

    def test_unknown_transform(self, registry: TokenRegistry):
        """Unknown transforms are caught with the platform attached."""
        with pytest.raises(ConfigurationError) as exc_info:
            build({"spacing": {"small": "8px"}}, [_tailwind(transforms=["size/nope"])], registry)
        assert exc_info.value.platform == "tailwind"

    def test_transform_error_context(self, registry: TokenRegistry):
        """Transform failures carry platform, stage, path and transform."""
        platform = _tailwind(transforms=["size/double", "size/strip-unit"])
        with pytest.raises(TransformError) as exc_info:
            build({"spacing": {"small": "8px"}}, [platform], registry)
        error = exc_info.value
        assert error.platform == "tailwind"
        assert error.stage == PlatformState.RESOLVED.value
        assert error.path == ("spacing", "small")
        assert error.transform == "size/double"
        assert "platform=tailwind" in str(error)

    def test_format_error_stage(self, registry: TokenRegistry):
        """Format failures report the transformed stage."""
        platform = _tailwind(options={"strict_categories": True})
        with pytest.raises(FormatError) as exc_info:
            build({"duration": {"fast": "100ms"}}, [platform], registry)
        assert exc_info.value.stage == PlatformState.TRANSFORMED.value


class TestContinueOnError:
    """Tests for stop_on_error=False."""

    def test_failures_collected(self, registry: TokenRegistry, sample_tree: dict):
        """Healthy platforms still build next to failing ones."""
        platforms = [
            _tailwind(transform_group="tailwind"),
            _tailwind(name="broken", format="xml", destination="tokens.xml"),
            _tailwind(name="bad-math", transforms=["size/double"], destination="math.js"),
        ]
        result = build(sample_tree, platforms, registry, stop_on_error=False)

        assert not result.succeeded
        assert list(result.artifacts) == ["tailwind.js"]
        stages = {f.platform: f.stage for f in result.failures}
        assert stages == {"broken": PlatformState.LOADED, "bad-math": PlatformState.RESOLVED}
        failure = result.failures[1]
        assert isinstance(failure.error, TransformError)
        assert failure.destination == "math.js"
        assert "bad-math (resolved)" in str(failure)

    def test_failed_platform_has_no_artifact(self, registry: TokenRegistry):
        """A failed platform never appears in the artifacts."""
        result = build(
            {"duration": {"fast": "100ms"}},
            [_tailwind(options={"strict_categories": True})],
            registry,
            stop_on_error=False,
        )
        assert len(result) == 0
        assert result.failures[0].stage == PlatformState.TRANSFORMED

    def test_malformed_tree_still_raises(self, registry: TokenRegistry):
        """Tree shape errors are shared by all platforms and always raise."""
        with pytest.raises(MalformedTokenError):
            build({"color": {}}, [_tailwind()], registry, stop_on_error=False)

    def test_resolution_failure_recorded(self, registry: TokenRegistry):
        """Resolution errors are recorded per platform at the loaded stage."""
        result = build(
            {"color": {"action": "{color.missing}"}},
            [_tailwind()],
            registry,
            stop_on_error=False,
        )
        failure = result.failures[0]
        assert failure.stage == PlatformState.LOADED
        assert isinstance(failure.error, MalformedTokenError)
        assert failure.error.path == ("color", "action")


class TestBuildAsync:
    """Tests for build_async."""

    @pytest.mark.asyncio
    async def test_matches_sync(self, registry: TokenRegistry, sample_tree: dict):
        """Async builds produce the same result as sync builds."""
        platforms = [
            _tailwind(transform_group="tailwind"),
            _tailwind(name="css", transform_group="css", format="css/variables",
                      destination="tokens.css"),
        ]
        builder = TokenBuilder(registry)
        expected = builder.build(sample_tree, platforms)
        result = await builder.build_async(sample_tree, platforms)
        assert result.outputs() == expected.outputs()
        assert list(result.artifacts) == ["tailwind.js", "tokens.css"]

    @pytest.mark.asyncio
    async def test_async_continue(self, registry: TokenRegistry):
        """Async builds honor the continue policy."""
        platforms = [
            _tailwind(transforms=["size/double"]),
            _tailwind(name="ok", format="json/nested", destination="tokens.json"),
        ]
        builder = TokenBuilder(registry, stop_on_error=False)
        result = await builder.build_async({"spacing": {"small": "8px"}}, platforms)
        assert list(result.artifacts) == ["tokens.json"]
        assert result.failures[0].platform == "tailwind"

    @pytest.mark.asyncio
    async def test_async_fail_fast(self, registry: TokenRegistry):
        """Async builds raise in fail-fast mode."""
        builder = TokenBuilder(registry)
        with pytest.raises(TransformError):
            await builder.build_async(
                {"spacing": {"small": "8px"}}, [_tailwind(transforms=["size/double"])]
            )


class TestBuildProject:
    """Tests for config-driven project builds."""

    @staticmethod
    def _write_project(root: Path, sample_tree: dict) -> Path:
        tokens_dir = root / "tokens"
        tokens_dir.mkdir()
        colors = {"color": sample_tree["color"]}
        rest = {key: value for key, value in sample_tree.items() if key != "color"}
        (tokens_dir / "color.yaml").write_text(yaml.safe_dump(colors, sort_keys=False))
        (tokens_dir / "base.yaml").write_text(yaml.safe_dump(rest, sort_keys=False))

        config = {
            "source": ["tokens/*.yaml"],
            "platforms": {
                "tailwind": {
                    "transformGroup": "tailwind",
                    "transforms": ["size/strip-unit"],
                    "format": "tailwind/theme",
                    "buildPath": "build/",
                    "destination": "tailwind.tokens.js",
                },
                "css": {
                    "transformGroup": "css",
                    "format": "css/variables",
                    "buildPath": "build/css/",
                    "destination": "tokens.css",
                },
            },
        }
        config_path = root / "tokens.config.yaml"
        config_path.write_text(yaml.safe_dump(config, sort_keys=False))
        return config_path

    def test_build_and_emit(self, registry: TokenRegistry, temp_dir: Path, sample_tree: dict):
        """Artifacts are written under buildPath and marked emitted."""
        config = load_config(self._write_project(temp_dir, sample_tree))
        emitter = FileEmitter(temp_dir)
        result = TokenBuilder(registry).build_project(config, temp_dir, emitter)

        assert result.succeeded
        assert all(a.state == PlatformState.EMITTED for a in result.artifacts.values())
        tailwind_file = temp_dir / "build" / "tailwind.tokens.js"
        css_file = temp_dir / "build" / "css" / "tokens.css"
        assert emitter.written == [tailwind_file.resolve(), css_file.resolve()]
        assert tailwind_file.read_text() == result["tailwind.tokens.js"].serialized_text
        assert "--spacing-small: 0.5rem;" in css_file.read_text()

    def test_build_without_emitter(
        self, registry: TokenRegistry, temp_dir: Path, sample_tree: dict
    ):
        """Without an emitter nothing is written."""
        config = load_config(self._write_project(temp_dir, sample_tree))
        result = TokenBuilder(registry).build_project(config, temp_dir)
        assert result["tokens.css"].state == PlatformState.FORMATTED
        assert not (temp_dir / "build").exists()

    def test_emitter_rejects_escape(self, temp_dir: Path):
        """Destinations may not leave the base directory."""
        platform = Platform(name="evil", format="json/flat", destination="../../evil.json")
        artifact = PlatformArtifact(
            platform="evil",
            destination="../../evil.json",
            structured_output={},
            serialized_text="{}",
            token_count=0,
        )
        with pytest.raises(ConfigurationError):
            FileEmitter(temp_dir).emit(platform, artifact)

    @staticmethod
    def _json(name: str, destination: str, build_path: str = "") -> Platform:
        return Platform(
            name=name, format="json/nested", destination=destination, build_path=build_path
        )

    def test_bad_destination_does_not_stop_others(
        self, registry: TokenRegistry, temp_dir: Path, sample_tree: dict
    ):
        """An escaping destination fails alone; later platforms are still written."""
        base = temp_dir / "project"
        base.mkdir()
        platforms = [
            self._json("ok", "ok.json"),
            self._json("evil", "../../evil.json"),
            self._json("ok2", "ok2.json"),
        ]
        emitter = FileEmitter(base)
        result = TokenBuilder(registry, stop_on_error=False).build(
            sample_tree, platforms, emitter=emitter
        )

        assert sorted(result.artifacts) == ["ok.json", "ok2.json"]
        assert (base / "ok.json").exists()
        assert (base / "ok2.json").exists()
        (failure,) = result.failures
        assert failure.platform == "evil"
        assert failure.stage == PlatformState.LOADED
        assert isinstance(failure.error, ConfigurationError)

    def test_bad_destination_fails_before_writing(
        self, registry: TokenRegistry, temp_dir: Path, sample_tree: dict
    ):
        """Fail-fast rejects an escaping destination before any file is written."""
        platforms = [self._json("ok", "ok.json"), self._json("evil", "../../evil.json")]
        with pytest.raises(ConfigurationError) as exc_info:
            TokenBuilder(registry).build(sample_tree, platforms, emitter=FileEmitter(temp_dir))
        assert exc_info.value.platform == "evil"
        assert exc_info.value.stage == PlatformState.LOADED.value
        assert list(temp_dir.iterdir()) == []

    def test_write_failure_is_per_platform(
        self, registry: TokenRegistry, temp_dir: Path, sample_tree: dict
    ):
        """A file that cannot be written fails its platform at the formatted stage."""
        (temp_dir / "blocker").write_text("not a directory")
        (temp_dir / "tokens.json").write_text(json.dumps(sample_tree))
        config = BuildConfig(
            source=["tokens.json"],
            platforms=[
                self._json("first", "a.json"),
                self._json("blocked", "b.json", build_path="blocker"),
                self._json("last", "c.json"),
            ],
            stop_on_error=False,
        )
        result = TokenBuilder(registry).build_project(config, temp_dir, FileEmitter(temp_dir))

        assert sorted(result.artifacts) == ["a.json", "c.json"]
        assert (temp_dir / "c.json").exists()
        (failure,) = result.failures
        assert failure.platform == "blocked"
        assert failure.stage == PlatformState.FORMATTED
        assert isinstance(failure.error, EmitError)

    def test_write_failure_fail_fast(
        self, registry: TokenRegistry, temp_dir: Path, sample_tree: dict
    ):
        """Fail-fast raises the write error with platform and stage attached."""
        (temp_dir / "blocker").write_text("not a directory")
        platforms = [self._json("blocked", "b.json", build_path="blocker")]
        with pytest.raises(EmitError) as exc_info:
            TokenBuilder(registry).build(sample_tree, platforms, emitter=FileEmitter(temp_dir))
        assert exc_info.value.platform == "blocked"
        assert exc_info.value.stage == PlatformState.FORMATTED.value

    def test_duplicate_platform_names(self, registry: TokenRegistry, sample_tree: dict):
        """Two platforms with one name are rejected before anything builds."""
        platforms = [
            self._json("web", "a.json", build_path="one"),
            self._json("web", "b.json", build_path="two"),
        ]
        with pytest.raises(ConfigurationError, match="defined more than once"):
            TokenBuilder(registry, stop_on_error=False).build(sample_tree, platforms)

    def test_empty_result(self):
        """A new result has succeeded and holds nothing."""
        result = BuildResult()
        assert result.succeeded
        assert result.outputs() == {}
