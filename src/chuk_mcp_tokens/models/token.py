"""
Token models - the tree as loaded and the flat tokens derived from it.

The tree is a strict tagged union (TokenLeaf | TokenGroup) built once at
load time, so nothing downstream re-inspects raw shapes. Tokens are the
flattened, addressable leaves a platform pipeline operates on.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

# Raw values as loaded: strings, numbers, or ordered string sequences (font stacks)
TokenValue = Union[str, int, float, tuple[str, ...]]


class TokenLeaf(BaseModel):
    """A leaf node: carries a raw value and no nested groups."""

    kind: Literal["leaf"] = "leaf"
    value: TokenValue = Field(..., description="Raw value as loaded")
    comment: str | None = Field(None, description="Optional source comment")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Other scalar keys from the source ($type, description, ...)",
    )

    model_config = {"frozen": True}


class TokenGroup(BaseModel):
    """A group node: named children, each a leaf or another group."""

    kind: Literal["group"] = "group"
    children: dict[str, TokenNode] = Field(default_factory=dict)

    model_config = {"frozen": True}


TokenNode = Annotated[Union[TokenLeaf, TokenGroup], Field(discriminator="kind")]

TokenGroup.model_rebuild()


def _walk(
    group: TokenGroup, prefix: tuple[str, ...]
) -> Iterator[tuple[tuple[str, ...], TokenLeaf]]:
    for name, node in group.children.items():
        path = (*prefix, name)
        if isinstance(node, TokenLeaf):
            yield path, node
        else:
            yield from _walk(node, path)


class TokenTree(BaseModel):
    """The full, immutable token tree for one build."""

    root: TokenGroup = Field(default_factory=TokenGroup)

    model_config = {"frozen": True}

    def iter_leaves(self) -> Iterator[tuple[tuple[str, ...], TokenLeaf]]:
        """Yield (path, leaf) pairs depth-first in insertion order."""
        yield from _walk(self.root, ())

    def get(self, path: tuple[str, ...] | list[str]) -> TokenLeaf | TokenGroup | None:
        """Look up a node by path, or None if absent."""
        node: TokenLeaf | TokenGroup = self.root
        for segment in path:
            if not isinstance(node, TokenGroup) or segment not in node.children:
                return None
            node = node.children[segment]
        return node

    def leaf_count(self) -> int:
        """Number of leaf tokens in the tree."""
        return sum(1 for _ in self.iter_leaves())


class Token(BaseModel):
    """
    A resolved leaf token.

    Identity is the path; category/type/item/name are derived from it.
    resolved_value starts as the raw value with aliases substituted and is
    replaced only by transforms.
    """

    path: tuple[str, ...] = Field(..., description="Keys from root to leaf")
    category: str = Field(..., description="First path segment")
    type: str | None = Field(None, description="Second segment for 3+ level paths")
    item: str | None = Field(None, description="Third segment for 3+ level paths")
    name: str = Field(..., description="Normalized token name")
    raw_value: TokenValue = Field(..., description="Value as loaded")
    resolved_value: Any = Field(..., description="Value after transforms")
    comment: str | None = Field(None, description="Source comment")
    attributes: dict[str, Any] = Field(
        default_factory=dict,
        description="Attributes written by attribute transforms",
    )

    model_config = {"frozen": True}

    @property
    def dotted_path(self) -> str:
        """Path as a dotted string (e.g. 'color.primary.base')."""
        return ".".join(self.path)
