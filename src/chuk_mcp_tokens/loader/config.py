"""
Build config loader - reads a YAML or JSON build configuration.

The layout follows Style Dictionary's config file:

    source:
      - tokens/**/*.yaml
    stop_on_error: true
    platforms:
      tailwind:
        transformGroup: tailwind
        transforms: [size/strip-unit]
        format: tailwind/theme
        buildPath: build/
        destination: tailwind.tokens.js
"""

from __future__ import annotations

import logging
from pathlib import Path

from chuk_mcp_tokens.errors import ConfigurationError
from chuk_mcp_tokens.loader.sources import read_structured_file
from chuk_mcp_tokens.models.platform import BuildConfig

logger = logging.getLogger(__name__)


def load_config(path: Path | str) -> BuildConfig:
    """
    Load a build configuration file.

    Args:
        path: Path to a .yaml/.yml/.json config

    Returns:
        The validated BuildConfig

    Raises:
        ConfigurationError: If the file is missing or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Build config not found: {path}")

    data = read_structured_file(path)
    config = BuildConfig.from_dict(data or {})
    logger.debug(f"Loaded build config {path} with {len(config.platforms)} platform(s)")
    return config
