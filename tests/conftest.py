"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_mcp_tokens.registry import TokenRegistry, default_registry


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def registry() -> TokenRegistry:
    """A fresh registry with the built-ins."""
    return default_registry()


@pytest.fixture
def sample_tree() -> dict:
    """A small but representative token tree."""
    return {
        "color": {
            "primary": {
                "base": "#1D4ED8",
                "light": "#93C5FD",
            },
            "neutral": {
                "ink": {"value": "#111827", "comment": "Body text"},
            },
        },
        "spacing": {
            "small": "8px",
            "medium": "16px",
        },
        "font": {
            "family": {
                "sans": ["Inter var", "sans-serif"],
            },
            "size": {
                "base": "16px",
            },
        },
    }
