"""
Build tools - MCP tools for resolving and building design tokens.

Token trees and platform lists are passed as JSON (or YAML) text.
Build errors come back as a JSON error payload carrying the token path,
platform and stage.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from chuk_mcp_tokens.builder import FileEmitter, TokenBuilder
from chuk_mcp_tokens.errors import TokenBuildError
from chuk_mcp_tokens.loader import load_config
from chuk_mcp_tokens.registry import TokenRegistry
from chuk_mcp_tokens.resolver import resolve

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

    from chuk_mcp_tokens.builder import BuildResult

logger = logging.getLogger(__name__)


def _error_payload(error: TokenBuildError) -> dict[str, Any]:
    return {
        "status": "error",
        "error_type": type(error).__name__,
        "message": error.message,
        "path": error.dotted_path,
        "platform": error.platform,
        "stage": error.stage,
    }


def _result_payload(result: BuildResult) -> dict[str, Any]:
    return {
        "status": "success" if result.succeeded else "partial",
        "artifacts": {
            destination: {
                "platform": artifact.platform,
                "state": artifact.state.value,
                "token_count": artifact.token_count,
                "structured_output": artifact.structured_output,
                "serialized_text": artifact.serialized_text,
            }
            for destination, artifact in result.artifacts.items()
        },
        "failures": [
            {
                "platform": failure.platform,
                "destination": failure.destination,
                "stage": failure.stage.value,
                "error_type": type(failure.error).__name__,
                "message": failure.error.message,
                "path": failure.error.dotted_path,
            }
            for failure in result.failures
        ],
    }


def register_build_tools(
    mcp: ChukMCPServer,
    registry: TokenRegistry,
    base_path: Path,
) -> dict[str, Any]:
    """
    Register build tools with the MCP server.

    Args:
        mcp: The MCP server instance
        registry: The token registry
        base_path: Directory project configs and sources are resolved against

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_resolve(tokens: str) -> str:
        """
        Flatten a token tree into addressable tokens.

        Args:
            tokens: Token tree as JSON or YAML text

        Returns:
            JSON string with the resolved tokens in tree order

        Example:
            tokens_resolve(tokens='{"color": {"primary": {"base": "#1D4ED8"}}}')
        """
        try:
            resolved = resolve(yaml.safe_load(tokens) or {})
            return json.dumps(
                {
                    "status": "success",
                    "tokens": [
                        {
                            "path": token.dotted_path,
                            "category": token.category,
                            "type": token.type,
                            "item": token.item,
                            "name": token.name,
                            "value": token.resolved_value,
                        }
                        for token in resolved
                    ],
                    "count": len(resolved),
                }
            )
        except TokenBuildError as e:
            return json.dumps(_error_payload(e))
        except Exception as e:
            logger.exception("Failed to resolve tokens")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_resolve"] = tokens_resolve

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_build(tokens: str, platforms: str, stop_on_error: bool = True) -> str:
        """
        Build a token tree for one or more platforms.

        Args:
            tokens: Token tree as JSON or YAML text
            platforms: Platforms as JSON/YAML: a list of
                {name, transforms, transform_group, format, destination, options}
                or a mapping of name -> platform
            stop_on_error: Abort on the first failing platform (default True)

        Returns:
            JSON string with artifacts keyed by destination, plus failures

        Example:
            tokens_build(
                tokens='{"spacing": {"small": "8px"}}',
                platforms='[{"name": "tw", "transforms": ["size/strip-unit"],
                            "format": "tailwind/theme", "destination": "tw.js"}]',
            )
        """
        try:
            tree = yaml.safe_load(tokens) or {}
            raw_platforms = yaml.safe_load(platforms) or []
            if isinstance(raw_platforms, dict):
                raw_platforms = [{**data, "name": name} for name, data in raw_platforms.items()]

            builder = TokenBuilder(registry, stop_on_error=stop_on_error)
            result = await builder.build_async(tree, raw_platforms)
            return json.dumps(_result_payload(result))
        except TokenBuildError as e:
            return json.dumps(_error_payload(e))
        except Exception as e:
            logger.exception("Failed to build tokens")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_build"] = tokens_build

    @mcp.tool  # type: ignore[arg-type]
    async def tokens_build_project(config_path: str, write: bool = True) -> str:
        """
        Build a project from its build config file.

        Sources and outputs are resolved relative to the config file.

        Args:
            config_path: Path to a YAML/JSON build config
            write: Write artifacts to disk (default True)

        Returns:
            JSON string with artifacts, failures and written files

        Example:
            tokens_build_project(config_path="tokens.config.yaml")
        """
        try:
            path = Path(config_path)
            if not path.is_absolute():
                path = base_path / path
            config = load_config(path)

            emitter = FileEmitter(path.parent) if write else None
            builder = TokenBuilder(registry, stop_on_error=config.stop_on_error)
            result = builder.build_project(config, base_path=path.parent, emitter=emitter)

            payload = _result_payload(result)
            payload["written"] = [str(p) for p in emitter.written] if emitter else []
            return json.dumps(payload)
        except TokenBuildError as e:
            return json.dumps(_error_payload(e))
        except Exception as e:
            logger.exception("Failed to build project")
            return json.dumps({"status": "error", "message": str(e)})

    tools["tokens_build_project"] = tokens_build_project

    return tools
