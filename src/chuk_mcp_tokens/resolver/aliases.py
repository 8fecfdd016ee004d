"""
Alias resolution - tokens that reference other tokens by dotted path.

A value of exactly "{color.primary.base}" takes the referenced value,
keeping its type. A reference embedded in a longer string is
interpolated as text. References resolve transitively against the
immutable source tree, so the result never depends on walk order.
"""

from __future__ import annotations

import re

from chuk_mcp_tokens.errors import MalformedTokenError
from chuk_mcp_tokens.models.token import TokenLeaf, TokenTree, TokenValue

REFERENCE_PATTERN = re.compile(r"\{([^{}]+)\}")


def has_reference(value: TokenValue) -> bool:
    """Whether a raw value contains any alias reference."""
    if isinstance(value, str):
        return REFERENCE_PATTERN.search(value) is not None
    if isinstance(value, tuple):
        return any(REFERENCE_PATTERN.search(item) for item in value)
    return False


class AliasResolver:
    """
    Resolves alias references against a token tree.

    Results are memoized per resolver instance; create one per resolve
    pass rather than sharing it between platforms.
    """

    def __init__(self, tree: TokenTree):
        self.tree = tree
        self._resolved: dict[tuple[str, ...], TokenValue] = {}

    def resolve(self, path: tuple[str, ...], value: TokenValue) -> TokenValue:
        """
        Resolve every reference in a token's raw value.

        Args:
            path: Path of the token owning the value
            value: Raw value

        Returns:
            The value with all references substituted

        Raises:
            MalformedTokenError: On unknown targets, group targets, or cycles
        """
        return self._resolve_value(path, value, (path,))

    def _resolve_value(
        self,
        path: tuple[str, ...],
        value: TokenValue,
        chain: tuple[tuple[str, ...], ...],
    ) -> TokenValue:
        if isinstance(value, tuple):
            return tuple(self._interpolate(path, item, chain) for item in value)
        if not isinstance(value, str):
            return value

        match = REFERENCE_PATTERN.fullmatch(value.strip())
        if match:
            return self._lookup(path, match.group(1), chain)
        return self._interpolate(path, value, chain)

    def _interpolate(
        self,
        path: tuple[str, ...],
        text: str,
        chain: tuple[tuple[str, ...], ...],
    ) -> str:
        def substitute(match: re.Match[str]) -> str:
            target = self._lookup(path, match.group(1), chain)
            if isinstance(target, tuple):
                return ", ".join(target)
            return str(target)

        return REFERENCE_PATTERN.sub(substitute, text)

    def _lookup(
        self,
        path: tuple[str, ...],
        reference: str,
        chain: tuple[tuple[str, ...], ...],
    ) -> TokenValue:
        target_path = tuple(segment.strip() for segment in reference.split("."))
        if target_path in self._resolved:
            return self._resolved[target_path]

        if target_path in chain:
            cycle = " -> ".join(".".join(p) for p in (*chain, target_path))
            raise MalformedTokenError(f"Circular reference: {cycle}", path=path)

        node = self.tree.get(target_path)
        if node is None:
            raise MalformedTokenError(f"Reference to unknown token '{reference}'", path=path)
        if not isinstance(node, TokenLeaf):
            raise MalformedTokenError(f"Reference to a group '{reference}'", path=path)

        resolved = self._resolve_value(target_path, node.value, (*chain, target_path))
        self._resolved[target_path] = resolved
        return resolved
