"""
MCP tool implementations.

Tools are organized by domain:
- catalog - Transform and format discovery
- build - Resolving and building token trees
"""

from chuk_mcp_tokens.tools.build import register_build_tools
from chuk_mcp_tokens.tools.catalog import register_catalog_tools

__all__ = [
    "register_build_tools",
    "register_catalog_tools",
]
