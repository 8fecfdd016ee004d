"""
File emitter - writes platform artifacts to disk.

Each artifact is written to a temporary sibling and renamed into place,
so a destination is either fully written or left as it was.
"""

from __future__ import annotations

import logging
from pathlib import Path

from chuk_mcp_tokens.builder.orchestrator import PlatformArtifact
from chuk_mcp_tokens.errors import ConfigurationError, EmitError
from chuk_mcp_tokens.models.platform import Platform

logger = logging.getLogger(__name__)


class FileEmitter:
    """Writes artifacts to base_path / build_path / destination."""

    def __init__(self, base_path: Path):
        """
        Initialize the emitter.

        Args:
            base_path: Root directory for all outputs
        """
        self.base_path = base_path
        self.written: list[Path] = []

    def target_path(self, platform: Platform) -> Path:
        """
        Where a platform's artifact will be written.

        Raises:
            ConfigurationError: If the destination escapes base_path
        """
        root = self.base_path.resolve()
        target = (root / platform.build_path / platform.destination).resolve()
        if root != target and root not in target.parents:
            raise ConfigurationError(
                f"Destination '{platform.destination}' is outside {root}",
                platform=platform.name,
            )
        return target

    def check(self, platform: Platform) -> Path:
        """Validate a platform's destination before anything is built."""
        return self.target_path(platform)

    def emit(self, platform: Platform, artifact: PlatformArtifact) -> Path:
        """
        Write one artifact and return its path.

        Raises:
            ConfigurationError: If the destination escapes base_path
            EmitError: If the file cannot be written
        """
        target = self.target_path(platform)
        tmp = target.with_name(f".{target.name}.tmp")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(artifact.serialized_text, encoding="utf-8")
            tmp.replace(target)
        except OSError as exc:
            if tmp.exists():
                tmp.unlink()
            raise EmitError(f"Cannot write {target}: {exc}", platform=platform.name) from exc

        self.written.append(target)
        logger.debug(f"Wrote {target}")
        return target
