"""
Token tree loading - the boundary between files and the pure core.

The core only needs a well-formed TokenTree; this package builds one from
in-memory mappings or YAML/JSON files, and loads build configs.
"""

from chuk_mcp_tokens.loader.config import load_config
from chuk_mcp_tokens.loader.sources import TokenLoader, merge_sources
from chuk_mcp_tokens.loader.tree import is_leaf_shape, parse_tree

__all__ = [
    "TokenLoader",
    "is_leaf_shape",
    "load_config",
    "merge_sources",
    "parse_tree",
]
