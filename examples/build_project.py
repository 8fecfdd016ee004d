#!/usr/bin/env python3
"""
Example: Building a token project from its config file.

Loads tokens/*.yaml as listed in tokens.config.yaml and writes the
Tailwind, CSS and JSON artifacts into a temporary directory.

Usage:
    python examples/build_project.py
"""

import shutil
import tempfile
from pathlib import Path

from chuk_mcp_tokens.builder import FileEmitter, TokenBuilder
from chuk_mcp_tokens.loader import load_config
from chuk_mcp_tokens.registry import default_registry

EXAMPLE_DIR = Path(__file__).parent


def main() -> None:
    """Build the example project."""
    with tempfile.TemporaryDirectory() as tmp:
        project = Path(tmp).resolve()
        shutil.copytree(EXAMPLE_DIR / "tokens", project / "tokens")
        shutil.copy(EXAMPLE_DIR / "tokens.config.yaml", project / "tokens.config.yaml")

        config = load_config(project / "tokens.config.yaml")
        print(f"Sources: {', '.join(config.source)}")
        print(f"Platforms: {', '.join(p.name for p in config.platforms)}")
        print()

        emitter = FileEmitter(project)
        result = TokenBuilder(default_registry()).build_project(config, project, emitter)
        print(f"Built {len(result)} artifact(s)")
        print()

        for path in emitter.written:
            print(f"=== {path.relative_to(project)} ===")
            print(path.read_text())


if __name__ == "__main__":
    main()
