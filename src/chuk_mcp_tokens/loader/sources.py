"""
Token loader - discovers and loads token source files.

Sources can be YAML or JSON. When several sources are loaded they are
deep-merged in order; a later source overriding an existing token is
logged as a collision.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from chuk_mcp_tokens.errors import ConfigurationError, MalformedTokenError
from chuk_mcp_tokens.loader.tree import is_leaf_shape, parse_tree
from chuk_mcp_tokens.models.token import TokenTree

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)


class TokenLoader:
    """
    Loads token trees from files.

    Relative paths and glob patterns are resolved against `base_path`.
    """

    def __init__(self, base_path: Path | None = None):
        """
        Initialize the loader.

        Args:
            base_path: Directory that relative sources are resolved against
        """
        self.base_path = base_path or Path.cwd()

    def load(self, *paths: Path | str) -> TokenTree:
        """
        Load and merge explicit source files.

        Args:
            paths: Token files, merged in order

        Returns:
            The merged token tree
        """
        merged: dict[str, Any] = {}
        for path in paths:
            resolved = self._resolve(Path(path))
            merge_sources(merged, self.load_file(resolved), source=str(resolved))
        return parse_tree(merged)

    def load_sources(self, patterns: Iterable[str]) -> TokenTree:
        """
        Load every file matching the glob patterns.

        Files within one pattern are taken in sorted order so the merge
        is deterministic.

        Args:
            patterns: Glob patterns relative to base_path

        Returns:
            The merged token tree
        """
        files: list[Path] = []
        for pattern in patterns:
            matches = sorted(self.base_path.glob(pattern))
            if not matches:
                logger.warning(f"Token source pattern matched no files: {pattern}")
            for match in matches:
                if match.is_file() and match not in files:
                    files.append(match)

        if not files:
            raise ConfigurationError("No token source files found")

        return self.load(*files)

    def load_file(self, path: Path) -> dict[str, Any]:
        """
        Parse one YAML or JSON token file.

        Raises:
            ConfigurationError: If the file type is not supported
            MalformedTokenError: If the file cannot be parsed
        """
        data = read_structured_file(path)
        if data is None:
            return {}
        if not isinstance(data, Mapping):
            raise MalformedTokenError(f"Token file {path} must contain a mapping", path=())
        logger.debug(f"Loaded token source {path}")
        return dict(data)

    def _resolve(self, path: Path) -> Path:
        return path if path.is_absolute() else self.base_path / path


def read_structured_file(path: Path) -> Any:
    """
    Read a YAML or JSON file by suffix.

    Raises:
        ConfigurationError: If the suffix is not YAML or JSON
        MalformedTokenError: If the content cannot be parsed
    """
    suffix = path.suffix.lower()
    if suffix not in YAML_SUFFIXES + JSON_SUFFIXES:
        raise ConfigurationError(f"Unsupported source file type: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if suffix in JSON_SUFFIXES:
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise MalformedTokenError(f"Cannot parse {path}: {exc}", path=()) from exc


def merge_sources(
    target: dict[str, Any],
    data: Mapping[Any, Any],
    source: str = "<memory>",
    prefix: tuple[str, ...] = (),
) -> dict[str, Any]:
    """
    Deep-merge raw token data into target, in place.

    Groups merge key by key; a leaf replaces whatever was there before,
    and the override is logged as a collision.

    Args:
        target: Accumulated raw data
        data: Raw data from the next source
        source: Source name for log messages
        prefix: Path of `target` within the whole tree

    Returns:
        The target mapping
    """
    for raw_key, value in data.items():
        key = str(raw_key)
        path = (*prefix, key)
        existing = target.get(key)

        if existing is None:
            target[key] = _copy_raw(value)
        elif is_leaf_shape(existing) or is_leaf_shape(value):
            logger.warning(f"Token collision at {'.'.join(path)}: overridden by {source}")
            target[key] = _copy_raw(value)
        else:
            merge_sources(existing, value, source, path)

    return target


def _copy_raw(value: Any) -> Any:
    # Copy groups so later merges never write into a caller's data
    if isinstance(value, Mapping) and not is_leaf_shape(value):
        return {str(k): _copy_raw(v) for k, v in value.items()}
    return value
