"""
Formats - render resolved tokens into target-shaped artifacts.
"""

from chuk_mcp_tokens.formats.builtin import register_builtin_formats
from chuk_mcp_tokens.formats.nesting import flat_tokens, nest_tokens, plain_value
from chuk_mcp_tokens.formats.tailwind import render_tailwind_theme, theme_keys

__all__ = [
    "flat_tokens",
    "nest_tokens",
    "plain_value",
    "register_builtin_formats",
    "render_tailwind_theme",
    "theme_keys",
]
