"""
Attribute resolution - from nested tree to flat, addressable tokens.
"""

from chuk_mcp_tokens.resolver.aliases import AliasResolver, has_reference
from chuk_mcp_tokens.resolver.attributes import derive_attributes, resolve

__all__ = [
    "AliasResolver",
    "derive_attributes",
    "has_reference",
    "resolve",
]
