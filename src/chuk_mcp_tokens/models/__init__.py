"""
Pydantic models for the token system.

This module provides:
- TokenTree / TokenGroup / TokenLeaf: the loaded tree as a tagged union
- Token: a flattened, resolved leaf
- Platform: an output target (transforms + format + destination)
- BuildConfig: token sources plus platforms
"""

from chuk_mcp_tokens.models.platform import BuildConfig, Platform
from chuk_mcp_tokens.models.token import (
    Token,
    TokenGroup,
    TokenLeaf,
    TokenNode,
    TokenTree,
    TokenValue,
)

__all__ = [
    "BuildConfig",
    "Platform",
    "Token",
    "TokenGroup",
    "TokenLeaf",
    "TokenNode",
    "TokenTree",
    "TokenValue",
]
