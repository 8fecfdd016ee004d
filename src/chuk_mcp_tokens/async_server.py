#!/usr/bin/env python3
"""
Async Design Tokens MCP Server using chuk-mcp-server

This server exposes a design-token build engine as MCP tools. Token trees
are resolved into flat tokens, run through per-platform transform
pipelines, and rendered by formats such as a Tailwind theme config.

The server provides tools for:
- Discovering registered transforms, transform groups and formats
- Resolving token trees into addressable tokens
- Building token trees for one or more platforms
- Building a project from its config file and writing the artifacts
"""

import logging
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_tokens.registry import default_registry
from chuk_mcp_tokens.tools import register_build_tools, register_catalog_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-tokens")

# Project configs and token sources are resolved from the working directory
BASE_PATH = Path.cwd()

registry = default_registry()

# Register all tools
catalog_tools = register_catalog_tools(mcp, registry)
build_tools = register_build_tools(mcp, registry, BASE_PATH)

# Export tool functions for direct access
tokens_list_transforms = catalog_tools["tokens_list_transforms"]
tokens_list_formats = catalog_tools["tokens_list_formats"]

tokens_resolve = build_tools["tokens_resolve"]
tokens_build = build_tools["tokens_build"]
tokens_build_project = build_tools["tokens_build_project"]

logger.info("CHUK Design Tokens MCP Server initialized")
logger.info(f"  Base path: {BASE_PATH}")
logger.info(
    f"  Registry: {len(registry.list_transforms())} transforms, "
    f"{len(registry.list_formats())} formats"
)
