"""
Attribute resolver - flattens a token tree into addressable tokens.

Naming follows the Category / Type / Item convention:

    color.primary.base   -> category=color, type=primary, item=base, name=base
    color.primary.dark.2 -> category=color, type=primary, item=dark, name=dark-2
    spacing.small        -> category=spacing, type=None, item=None, name=small

Segments after the type are kebab-joined into the name.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from chuk_mcp_tokens.constants import ErrorMessages
from chuk_mcp_tokens.errors import MalformedTokenError
from chuk_mcp_tokens.loader.tree import parse_tree
from chuk_mcp_tokens.models.token import Token, TokenTree
from chuk_mcp_tokens.resolver.aliases import AliasResolver, has_reference

NAME_SEPARATOR = "-"


def derive_attributes(path: tuple[str, ...]) -> dict[str, Any]:
    """
    Derive category/type/item/name from a token path.

    Args:
        path: Keys from root to leaf

    Returns:
        Mapping with category, type, item and name

    Raises:
        MalformedTokenError: If the path has no category (a root-level leaf)
    """
    if len(path) < 2:
        raise MalformedTokenError(ErrorMessages.ROOT_LEAF, path=path)

    if len(path) == 2:
        return {"category": path[0], "type": None, "item": None, "name": path[1]}

    return {
        "category": path[0],
        "type": path[1],
        "item": path[2],
        "name": NAME_SEPARATOR.join(path[2:]),
    }


def resolve(tree: TokenTree | Mapping[str, Any]) -> list[Token]:
    """
    Resolve a token tree into an ordered list of tokens.

    Tokens come out in depth-first insertion order of the tree. raw_value
    keeps the value as written; resolved_value starts as the same value
    with alias references substituted.

    Args:
        tree: A TokenTree, or a raw mapping that is parsed first

    Returns:
        Fresh Token objects (never shared between calls)

    Raises:
        MalformedTokenError: On invalid shapes, root-level leaves, or bad aliases
    """
    tree = parse_tree(tree)
    aliases = AliasResolver(tree)
    tokens: list[Token] = []

    for path, leaf in tree.iter_leaves():
        attributes = derive_attributes(path)
        value = aliases.resolve(path, leaf.value) if has_reference(leaf.value) else leaf.value
        tokens.append(
            Token(
                path=path,
                raw_value=leaf.value,
                resolved_value=value,
                comment=leaf.comment,
                **attributes,
            )
        )

    return tokens
