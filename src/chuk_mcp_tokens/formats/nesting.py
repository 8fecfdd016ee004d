"""
Nesting helpers shared by formats.

Formats receive flat tokens and rebuild a hierarchy from their
attributes. Keys are inserted in token order, so output order follows
the resolver rather than any sorting.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from chuk_mcp_tokens.errors import FormatError
from chuk_mcp_tokens.models.token import Token

KeyFunction = Callable[[Token], Sequence[str]]


def plain_value(value: Any) -> Any:
    """Convert tuples to lists so JSON/YAML emit sequences."""
    if isinstance(value, tuple):
        return [plain_value(item) for item in value]
    if isinstance(value, dict):
        return {key: plain_value(item) for key, item in value.items()}
    return value


def category_type_name(token: Token) -> tuple[str, ...]:
    """category -> type -> name (type omitted for two-level tokens)."""
    if token.type is None:
        return (token.category, token.name)
    return (token.category, token.type, token.name)


def nest_tokens(
    tokens: Iterable[Token],
    key_fn: KeyFunction = category_type_name,
    format_name: str | None = None,
) -> dict[str, Any]:
    """
    Group flat tokens into nested mappings of resolved values.

    Args:
        tokens: Tokens in resolver order
        key_fn: Token -> key sequence (outermost first)
        format_name: Format name for error context

    Returns:
        Nested dict with resolved values at the leaves

    Raises:
        FormatError: If two tokens land on the same key, or a token's key
            is both a value and a group
    """
    result: dict[str, Any] = {}
    owners: dict[tuple[str, ...], Token] = {}

    for token in tokens:
        keys = tuple(key_fn(token))
        if not keys:
            raise FormatError("Token has no output key", path=token.path, format_name=format_name)

        node = result
        for depth, key in enumerate(keys[:-1]):
            prefix = keys[: depth + 1]
            if key not in node:
                node[key] = {}
            elif prefix in owners:
                raise _collision(token, owners[prefix], prefix, format_name)
            node = node[key]

        if keys in owners or keys[-1] in node:
            other = owners.get(keys)
            raise _collision(token, other, keys, format_name)

        node[keys[-1]] = plain_value(token.resolved_value)
        owners[keys] = token

    return result


def flat_tokens(
    tokens: Iterable[Token],
    format_name: str | None = None,
) -> dict[str, Any]:
    """Map token name -> resolved value, rejecting duplicate names."""
    result: dict[str, Any] = {}
    owners: dict[str, Token] = {}
    for token in tokens:
        if token.name in owners:
            raise _collision(token, owners[token.name], (token.name,), format_name)
        result[token.name] = plain_value(token.resolved_value)
        owners[token.name] = token
    return result


def _collision(
    token: Token,
    other: Token | None,
    keys: Sequence[str],
    format_name: str | None,
) -> FormatError:
    where = ".".join(keys)
    if other is not None:
        message = f"Tokens {other.dotted_path} and {token.dotted_path} both render to '{where}'"
    else:
        message = f"Token {token.dotted_path} renders into '{where}', which is already a group"
    return FormatError(message, path=token.path, format_name=format_name)
