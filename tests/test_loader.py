"""
Tests for token source loading and build configs.
"""

import json
import logging
from pathlib import Path

import pytest

from chuk_mcp_tokens.errors import ConfigurationError, MalformedTokenError
from chuk_mcp_tokens.loader import TokenLoader, load_config, merge_sources
from chuk_mcp_tokens.models import BuildConfig


@pytest.fixture
def token_files(temp_dir: Path) -> Path:
    """A token directory with YAML and JSON sources."""
    tokens = temp_dir / "tokens"
    tokens.mkdir()
    (tokens / "color.yaml").write_text(
        "color:\n"
        "  primary:\n"
        "    base: '#1D4ED8'\n"
        "  gray:\n"
        "    50: '#f9fafb'\n"
    )
    (tokens / "spacing.json").write_text(json.dumps({"spacing": {"small": "8px"}}))
    return temp_dir


class TestTokenLoader:
    """Tests for TokenLoader."""

    def test_load_yaml_and_json(self, token_files: Path):
        """Explicit files merge in order."""
        loader = TokenLoader(token_files)
        tree = loader.load("tokens/color.yaml", "tokens/spacing.json")
        paths = [".".join(path) for path, _ in tree.iter_leaves()]
        assert paths == ["color.primary.base", "color.gray.50", "spacing.small"]

    def test_load_sources_glob(self, token_files: Path):
        """Glob patterns pick up files in sorted order."""
        tree = TokenLoader(token_files).load_sources(["tokens/*.yaml", "tokens/*.json"])
        assert tree.leaf_count() == 3

    def test_load_sources_none_found(self, temp_dir: Path, caplog):
        """Patterns that match nothing warn; no files at all is an error."""
        with caplog.at_level(logging.WARNING):
            with pytest.raises(ConfigurationError):
                TokenLoader(temp_dir).load_sources(["tokens/*.yaml"])
        assert "matched no files" in caplog.text

    def test_unsupported_suffix(self, temp_dir: Path):
        """Only YAML and JSON sources are read."""
        path = temp_dir / "tokens.toml"
        path.write_text("[color]\n")
        with pytest.raises(ConfigurationError):
            TokenLoader(temp_dir).load(path)

    def test_unparseable_file(self, temp_dir: Path):
        """Syntax errors become MalformedTokenError."""
        path = temp_dir / "tokens.json"
        path.write_text("{not json")
        with pytest.raises(MalformedTokenError) as exc_info:
            TokenLoader(temp_dir).load(path)
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_non_mapping_file(self, temp_dir: Path):
        """A token file must hold a mapping."""
        path = temp_dir / "tokens.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(MalformedTokenError):
            TokenLoader(temp_dir).load(path)


class TestMergeSources:
    """Tests for merge_sources."""

    def test_deep_merge(self):
        """Groups merge key by key."""
        merged: dict = {}
        merge_sources(merged, {"color": {"primary": {"base": "#000"}}})
        merge_sources(merged, {"color": {"primary": {"light": "#fff"}}})
        assert merged == {"color": {"primary": {"base": "#000", "light": "#fff"}}}

    def test_collision_logged(self, caplog):
        """A later leaf overrides an earlier one with a warning."""
        merged: dict = {}
        merge_sources(merged, {"color": {"ink": "#000"}}, source="a.yaml")
        with caplog.at_level(logging.WARNING):
            merge_sources(merged, {"color": {"ink": {"value": "#111"}}}, source="b.yaml")
        assert merged["color"]["ink"] == {"value": "#111"}
        assert "color.ink" in caplog.text
        assert "b.yaml" in caplog.text

    def test_inputs_untouched(self):
        """Merging never writes into the source mappings."""
        first = {"color": {"primary": {"base": "#000"}}}
        merged: dict = {}
        merge_sources(merged, first)
        merge_sources(merged, {"color": {"primary": {"light": "#fff"}}})
        assert first == {"color": {"primary": {"base": "#000"}}}


class TestLoadConfig:
    """Tests for build config files."""

    def test_style_dictionary_layout(self, temp_dir: Path):
        """Platforms keyed by name with camelCase options."""
        path = temp_dir / "config.yaml"
        path.write_text(
            "source: tokens/**/*.yaml\n"
            "stopOnError: false\n"
            "platforms:\n"
            "  tailwind:\n"
            "    transformGroup: tailwind\n"
            "    transforms: [size/strip-unit]\n"
            "    format: tailwind/theme\n"
            "    buildPath: build/\n"
            "    destination: tailwind.tokens.js\n"
            "    options:\n"
            "      extend: false\n"
        )
        config = load_config(path)
        assert config.source == ["tokens/**/*.yaml"]
        assert config.stop_on_error is False
        (platform,) = config.platforms
        assert platform.name == "tailwind"
        assert platform.transform_group == "tailwind"
        assert platform.transforms == ["size/strip-unit"]
        assert platform.build_path == "build/"
        assert platform.option("extend") is False

    def test_platform_list(self):
        """Platforms may also be a list with explicit names."""
        config = BuildConfig.from_dict(
            {
                "source": ["tokens/*.json"],
                "platforms": [
                    {"name": "js", "format": "json/flat", "destination": "tokens.json"},
                    {"format": "json/nested", "destination": "nested.json"},
                ],
            }
        )
        assert [p.name for p in config.platforms] == ["js", "platform-1"]
        assert config.stop_on_error is True

    def test_duplicate_platform_names(self):
        """Two list entries with the same name are rejected."""
        with pytest.raises(ConfigurationError, match="'web' is defined more than once"):
            BuildConfig.from_dict(
                {
                    "platforms": [
                        {"name": "web", "format": "json/flat", "destination": "a.json",
                         "buildPath": "one"},
                        {"name": "web", "format": "json/flat", "destination": "a.json",
                         "buildPath": "two"},
                    ]
                }
            )

    def test_missing_file(self, temp_dir: Path):
        """A missing config is a configuration error."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(temp_dir / "missing.yaml")

    def test_no_platforms(self):
        """A config without platforms is rejected."""
        with pytest.raises(ConfigurationError, match="No platforms"):
            BuildConfig.from_dict({"source": ["tokens/*.yaml"], "platforms": {}})

    def test_invalid_platform(self):
        """Platform validation errors name the platform."""
        with pytest.raises(ConfigurationError, match="Invalid platform 'web'"):
            BuildConfig.from_dict({"platforms": {"web": {"format": "css/variables"}}})

    def test_blank_transform_name(self):
        """Blank transform names are rejected."""
        with pytest.raises(ConfigurationError):
            BuildConfig.from_dict(
                {
                    "platforms": {
                        "web": {"format": "css/variables", "destination": "a.css",
                                "transforms": [" "]}
                    }
                }
            )
