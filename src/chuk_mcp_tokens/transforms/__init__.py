"""
Transforms - matcher-gated rewrites of token values, names and attributes.
"""

from chuk_mcp_tokens.transforms.builtin import BUILTIN_GROUPS, register_builtin_transforms
from chuk_mcp_tokens.transforms.color import RGBA, parse_color
from chuk_mcp_tokens.transforms.pipeline import TransformPipeline, apply_transforms

__all__ = [
    "BUILTIN_GROUPS",
    "RGBA",
    "TransformPipeline",
    "apply_transforms",
    "parse_color",
    "register_builtin_transforms",
]
