"""
Transform Pipeline - applies an ordered transform list to tokens.

The pipeline is built once per platform. Every transform name is looked
up at construction time, so a misconfigured platform fails before any
token is touched. Application never mutates its inputs: each matching
transform produces a new Token.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from chuk_mcp_tokens.constants import TransformKind
from chuk_mcp_tokens.errors import TransformError
from chuk_mcp_tokens.models.token import Token
from chuk_mcp_tokens.registry import TokenRegistry, Transform


class TransformPipeline:
    """
    An ordered, validated sequence of transforms.

    Transforms run strictly in order per token: transform i+1 sees the
    output of transform i.
    """

    def __init__(
        self,
        registry: TokenRegistry,
        names: Iterable[str] = (),
        group: str | None = None,
    ):
        """
        Build the pipeline.

        Args:
            registry: Registry to look transforms up in
            names: Transform names, applied after the group's members
            group: Optional transform group name

        Raises:
            ConfigurationError: If any transform or group name is unknown
        """
        self.transforms: list[Transform] = registry.resolve_transforms(names, group)

    @property
    def names(self) -> list[str]:
        """Transform names in application order."""
        return [t.name for t in self.transforms]

    def apply(self, tokens: Iterable[Token]) -> list[Token]:
        """
        Apply every transform to every token.

        Args:
            tokens: Resolved tokens (left untouched)

        Returns:
            New tokens in the same order

        Raises:
            TransformError: If a matcher or transform raises
        """
        return [self.apply_token(token) for token in tokens]

    def apply_token(self, token: Token) -> Token:
        """Run the pipeline over a single token."""
        for transform in self.transforms:
            try:
                if not transform.matches(token):
                    continue
                result = transform.apply(token)
            except Exception as exc:
                raise TransformError(
                    f"Transform '{transform.name}' failed: {exc}",
                    transform=transform.name,
                    path=token.path,
                ) from exc

            token = _update(token, transform, result)
        return token


def _update(token: Token, transform: Transform, result: object) -> Token:
    if transform.kind == TransformKind.VALUE:
        return token.model_copy(update={"resolved_value": result})

    if transform.kind == TransformKind.NAME:
        if not isinstance(result, str) or not result:
            raise TransformError(
                f"Name transform '{transform.name}' must return a non-empty string",
                transform=transform.name,
                path=token.path,
            )
        return token.model_copy(update={"name": result})

    if not isinstance(result, Mapping):
        raise TransformError(
            f"Attribute transform '{transform.name}' must return a mapping",
            transform=transform.name,
            path=token.path,
        )
    return token.model_copy(update={"attributes": {**token.attributes, **result}})


def apply_transforms(
    tokens: Iterable[Token],
    names: Iterable[str],
    registry: TokenRegistry,
) -> list[Token]:
    """
    Convenience function to build a pipeline and apply it.

    Args:
        tokens: Resolved tokens
        names: Transform names in order
        registry: Registry holding the transforms

    Returns:
        New transformed tokens
    """
    return TransformPipeline(registry, names).apply(tokens)
