"""
Catalog tools - MCP tools for discovering transforms and formats.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_tokens.registry import TokenRegistry

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_catalog_tools(mcp: ChukMCPServer, registry: TokenRegistry) -> dict[str, Any]:
    """
    Register catalog tools with the MCP server.

    Args:
        mcp: The MCP server instance
        registry: The token registry

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_list_transforms() -> str:
        """
        List registered transforms and transform groups.

        Returns:
            JSON string with transforms (name, kind, description) and groups

        Example:
            tokens_list_transforms()
        """
        try:
            transforms = registry.list_transforms()
            return json.dumps(
                {
                    "status": "success",
                    "transforms": [
                        {
                            "name": t.name,
                            "kind": t.kind.value,
                            "description": t.description,
                        }
                        for t in transforms
                    ],
                    "groups": {
                        name: list(members)
                        for name, members in registry.list_transform_groups().items()
                    },
                    "count": len(transforms),
                }
            )
        except Exception as e:
            logger.exception("Failed to list transforms")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_list_transforms"] = tokens_list_transforms

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_list_formats() -> str:
        """
        List registered formats.

        Returns:
            JSON string with format names and descriptions

        Example:
            tokens_list_formats()
        """
        try:
            formats = registry.list_formats()
            return json.dumps(
                {
                    "status": "success",
                    "formats": [{"name": f.name, "description": f.description} for f in formats],
                    "count": len(formats),
                }
            )
        except Exception as e:
            logger.exception("Failed to list formats")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_list_formats"] = tokens_list_formats

    return tools
