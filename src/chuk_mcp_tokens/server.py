#!/usr/bin/env python3
"""
Entry point for the CHUK Design Tokens MCP Server.

Selects the transport (stdio or http) and the project directory that
build configs and token sources are resolved against.
"""

import argparse
import asyncio
import logging
import os
from pathlib import Path

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point with transport detection."""
    parser = argparse.ArgumentParser(description="CHUK Design Tokens MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport mode (default: stdio)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="HTTP port (only for http transport)",
    )
    parser.add_argument(
        "--base-path",
        type=Path,
        default=None,
        help="Project directory for token configs (default: current directory)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args()

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    # The server module resolves paths from the working directory at import
    if args.base_path is not None:
        os.chdir(args.base_path)

    from chuk_mcp_tokens.async_server import mcp

    if args.transport == "stdio":
        logger.info("Starting CHUK Design Tokens MCP Server (stdio)")
        asyncio.run(mcp.run_stdio())
    else:
        logger.info(f"Starting CHUK Design Tokens MCP Server (http:{args.port})")
        asyncio.run(mcp.run_http(port=args.port))


if __name__ == "__main__":
    main()
