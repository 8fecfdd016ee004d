"""
Tree parser - turns raw nested mappings into the TokenLeaf | TokenGroup union.

Leaf detection happens exactly once, here:
- a scalar (str, int, float) or a list of strings is a leaf value
- a mapping with a `value` (or `$value`) key is a leaf; its other keys
  are scalar metadata
- any other mapping is a group

Ambiguous or empty shapes are rejected, never guessed.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from chuk_mcp_tokens.constants import VALUE_KEYS, ErrorMessages
from chuk_mcp_tokens.errors import MalformedTokenError
from chuk_mcp_tokens.models.token import TokenGroup, TokenLeaf, TokenTree, TokenValue


def parse_tree(data: Mapping[str, Any] | TokenTree) -> TokenTree:
    """
    Parse a raw nested mapping into a TokenTree.

    Args:
        data: Parsed YAML/JSON data (or an already-built tree)

    Returns:
        The immutable token tree

    Raises:
        MalformedTokenError: If any node is ambiguous or invalid
    """
    if isinstance(data, TokenTree):
        return data
    if not isinstance(data, Mapping):
        raise MalformedTokenError(
            f"Token tree must be a mapping, got {type(data).__name__}", path=()
        )
    return TokenTree(root=_parse_group(data, ()))


def is_leaf_shape(node: Any) -> bool:
    """Whether a raw node would parse as a leaf."""
    if isinstance(node, Mapping):
        return any(key in node for key in VALUE_KEYS)
    return True


def _parse_node(node: Any, path: tuple[str, ...]) -> TokenLeaf | TokenGroup:
    if isinstance(node, Mapping):
        if any(key in node for key in VALUE_KEYS):
            return _parse_leaf_mapping(node, path)
        return _parse_group(node, path)
    return TokenLeaf(value=_parse_value(node, path))


def _parse_group(node: Mapping[Any, Any], path: tuple[str, ...]) -> TokenGroup:
    if not node:
        raise MalformedTokenError(ErrorMessages.EMPTY_GROUP, path=path)

    children: dict[str, TokenLeaf | TokenGroup] = {}
    for key, child in node.items():
        # YAML happily produces int keys (e.g. gray: {50: ...})
        name = str(key)
        if not name:
            raise MalformedTokenError("Token names must not be empty", path=(*path, name))
        if name in children:
            raise MalformedTokenError("Duplicate token name", path=(*path, name))
        children[name] = _parse_node(child, (*path, name))

    return TokenGroup(children=children)


def _parse_leaf_mapping(node: Mapping[Any, Any], path: tuple[str, ...]) -> TokenLeaf:
    value_keys = [key for key in VALUE_KEYS if key in node]
    if len(value_keys) > 1:
        raise MalformedTokenError("Token has both 'value' and '$value'", path=path)
    value_key = value_keys[0]

    metadata: dict[str, Any] = {}
    comment: str | None = None
    for key, extra in node.items():
        if key == value_key:
            continue
        if isinstance(extra, Mapping):
            raise MalformedTokenError(ErrorMessages.MIXED_NODE, path=path)
        if key in ("comment", "$description", "description") and comment is None:
            comment = str(extra)
        else:
            metadata[str(key)] = extra

    return TokenLeaf(
        value=_parse_value(node[value_key], path),
        comment=comment,
        metadata=metadata,
    )


def _parse_value(value: Any, path: tuple[str, ...]) -> TokenValue:
    if value is None:
        raise MalformedTokenError(ErrorMessages.MISSING_VALUE, path=path)
    if isinstance(value, bool):
        raise MalformedTokenError(f"Unsupported token value {value!r}", path=path)
    if isinstance(value, (str, int, float)):
        return value
    if isinstance(value, (list, tuple)):
        if not value or not all(isinstance(item, str) for item in value):
            raise MalformedTokenError(
                "Composite token values must be non-empty lists of strings", path=path
            )
        return tuple(value)
    raise MalformedTokenError(
        f"Unsupported token value of type {type(value).__name__}", path=path
    )
