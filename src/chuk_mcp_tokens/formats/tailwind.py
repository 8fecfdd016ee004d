"""
Tailwind theme format - renders tokens as a Tailwind `theme` object.

Known categories map onto theme keys (color -> colors, font.family ->
fontFamily, ...). Unknown categories are open: they keep their own name
as the theme key unless the platform sets `strict_categories`.

Platform options:
    extend (bool, default True): nest under theme.extend
    strict_categories (bool, default False): reject unknown categories
"""

from __future__ import annotations

import json

from chuk_mcp_tokens.constants import (
    GENERATED_HEADER,
    TAILWIND_CATEGORY_KEYS,
    TAILWIND_TYPED_KEYS,
)
from chuk_mcp_tokens.errors import FormatError
from chuk_mcp_tokens.formats.nesting import nest_tokens
from chuk_mcp_tokens.models.platform import Platform
from chuk_mcp_tokens.models.token import Token
from chuk_mcp_tokens.registry import FormattedOutput

FORMAT_NAME = "tailwind/theme"


def theme_keys(token: Token, strict: bool = False) -> tuple[str, ...]:
    """
    Where a token lives in the Tailwind theme.

    Args:
        token: Resolved token
        strict: Raise for categories with no theme key

    Returns:
        Key sequence, outermost first

    Raises:
        FormatError: If strict and the category is unknown
    """
    if token.type is not None:
        typed_key = TAILWIND_TYPED_KEYS.get((token.category, token.type))
        if typed_key is not None:
            return (typed_key.value, token.name)

    theme_key = TAILWIND_CATEGORY_KEYS.get(token.category)
    if theme_key is not None:
        key = theme_key.value
    elif strict:
        raise FormatError(
            f"Category '{token.category}' has no Tailwind theme key",
            path=token.path,
            format_name=FORMAT_NAME,
        )
    else:
        key = token.category

    if token.type is None:
        return (key, token.name)
    return (key, token.type, token.name)


def render_tailwind_theme(tokens: list[Token], platform: Platform) -> FormattedOutput:
    """Render tokens as a Tailwind theme and a CommonJS config module."""
    strict = bool(platform.option("strict_categories", False))
    theme = nest_tokens(
        tokens,
        key_fn=lambda token: theme_keys(token, strict),
        format_name=FORMAT_NAME,
    )

    if platform.option("extend", True):
        config = {"theme": {"extend": theme}}
    else:
        config = {"theme": theme}

    text = (
        f"/**\n * {GENERATED_HEADER}\n */\n\n"
        f"module.exports = {json.dumps(config, indent=2, ensure_ascii=False)};\n"
    )
    return FormattedOutput(structured_output=theme, serialized_text=text)
