"""
Built-in transforms and transform groups.

Value transforms raise on input they match but cannot handle; the
pipeline turns that into a TransformError carrying the token path.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from chuk_mcp_tokens.constants import (
    GENERIC_FONT_FAMILIES,
    REM_BASE_PX,
    SIZE_CATEGORIES,
    TokenCategory,
    TransformKind,
)
from chuk_mcp_tokens.models.token import Token
from chuk_mcp_tokens.transforms.color import COLOR_SYNTAX, parse_color

if TYPE_CHECKING:
    from chuk_mcp_tokens.registry import TokenRegistry

_LENGTH = re.compile(r"^(-?(?:\d+\.?\d*|\.\d+))([a-z%]*)$", re.IGNORECASE)
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_WORD_SPLIT = re.compile(r"[^A-Za-z0-9]+")


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _to_number(text: str) -> int | float:
    """'8' -> 8, '1.5' -> 1.5."""
    number = float(text)
    return int(number) if number.is_integer() else number


def _format_number(number: float) -> str:
    return f"{round(number, 4):g}"


def _words(segments: tuple[str, ...]) -> list[str]:
    """Split path segments into lowercase words (camelCase, kebab, snake aware)."""
    words: list[str] = []
    for segment in segments:
        spaced = _CAMEL_BOUNDARY.sub(r"\1 \2", segment)
        words.extend(word.lower() for word in _WORD_SPLIT.split(spaced) if word)
    return words


def _split_length(value: Any) -> tuple[int | float, str]:
    """Split a length into (number, unit); bare numbers have unit ''."""
    if isinstance(value, bool):
        raise TypeError(f"Expected a length, got {value!r}")
    if isinstance(value, (int, float)):
        return value, ""
    if not isinstance(value, str):
        raise TypeError(f"Expected a length, got {type(value).__name__}")

    match = _LENGTH.match(value.strip())
    if not match:
        raise ValueError(f"Cannot parse length {value!r}")
    return _to_number(match.group(1)), match.group(2).lower()


# ----------------------------------------------------------------------
# Matchers
# ----------------------------------------------------------------------


def is_size(token: Token) -> bool:
    """Length-valued tokens: size-like categories plus font sizes."""
    if token.category in SIZE_CATEGORIES:
        return True
    return token.category == TokenCategory.FONT and token.type == "size"


def is_color(token: Token) -> bool:
    """Color tokens written as hex, rgb() or hsl(); keywords and named colors pass through."""
    if token.category != TokenCategory.COLOR:
        return False
    value = token.resolved_value
    return isinstance(value, str) and COLOR_SYNTAX.match(value) is not None


def is_font_stack(token: Token) -> bool:
    """Font family tokens whose value is still a list of families."""
    if not isinstance(token.resolved_value, tuple):
        return False
    return token.type == "family" or token.category == "font-family"


def is_content(token: Token) -> bool:
    """String tokens in the content category."""
    return token.category == TokenCategory.CONTENT and isinstance(token.resolved_value, str)


def is_string(token: Token) -> bool:
    """Any token whose current value is a string."""
    return isinstance(token.resolved_value, str)


# ----------------------------------------------------------------------
# Transforms
# ----------------------------------------------------------------------


def attribute_cti(token: Token) -> dict[str, str]:
    """Expose category/type/item as attributes."""
    cti = {"category": token.category, "type": token.type, "item": token.item}
    return {key: value for key, value in cti.items() if value is not None}


def name_kebab(token: Token) -> str:
    """color.primary.base -> color-primary-base."""
    return "-".join(_words(token.path))


def name_camel(token: Token) -> str:
    """color.primary.base -> colorPrimaryBase."""
    words = _words(token.path)
    if not words:
        return ""
    return words[0] + "".join(word.capitalize() for word in words[1:])


def name_snake(token: Token) -> str:
    """color.primary.base -> color_primary_base."""
    return "_".join(_words(token.path))


def strip_unit(token: Token) -> int | float:
    """'8px' -> 8, '1.5rem' -> 1.5; numbers pass through."""
    number, _ = _split_length(token.resolved_value)
    return number


def px_to_rem(token: Token) -> str:
    """'16px' -> '1rem'; bare numbers are pixels; other units are kept."""
    number, unit = _split_length(token.resolved_value)
    if unit in ("", "px"):
        return f"{_format_number(number / REM_BASE_PX)}rem"
    return token.resolved_value


def double(token: Token) -> int | float:
    """Multiply a numeric value by two."""
    value = token.resolved_value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected a number, got {value!r}")
    return value * 2


def color_hex(token: Token) -> str:
    """Any supported color -> #rrggbb, or #rrggbbaa when translucent."""
    rgba = parse_color(_color_text(token))
    return rgba.to_hex() if rgba.opaque else rgba.to_hex8()


def color_hex8(token: Token) -> str:
    """Any supported color -> #rrggbbaa."""
    return parse_color(_color_text(token)).to_hex8()


def color_rgb(token: Token) -> str:
    """Any supported color -> rgb()/rgba()."""
    return parse_color(_color_text(token)).to_rgb()


def _color_text(token: Token) -> str:
    value = token.resolved_value
    if not isinstance(value, str):
        raise TypeError(f"Expected a color string, got {type(value).__name__}")
    return value


def font_stack(token: Token) -> str:
    """('Inter var', 'sans-serif') -> '"Inter var", sans-serif'."""
    families = []
    for family in token.resolved_value:
        name = family.strip()
        needs_quotes = (
            " " in name
            and name.lower() not in GENERIC_FONT_FAMILIES
            and not (name.startswith(("'", '"')))
        )
        families.append(f'"{name}"' if needs_quotes else name)
    return ", ".join(families)


def quote_content(token: Token) -> str:
    """Wrap content strings in single quotes for CSS `content`."""
    escaped = token.resolved_value.replace("'", "\\'")
    return f"'{escaped}'"


def lowercase(token: Token) -> str:
    """Lowercase string values."""
    return token.resolved_value.lower()


BUILTIN_GROUPS: dict[str, tuple[str, ...]] = {
    "tailwind": ("attribute/cti", "color/hex"),
    "css": ("attribute/cti", "name/cti/kebab", "size/px-to-rem", "color/hex", "font/stack"),
    "js": ("attribute/cti", "name/cti/camel", "color/hex"),
}


def register_builtin_transforms(registry: TokenRegistry) -> None:
    """Register the built-in transforms and transform groups."""
    registry.register_transform(
        "attribute/cti",
        attribute_cti,
        kind=TransformKind.ATTRIBUTE,
        description="Adds category/type/item attributes",
    )
    registry.register_transform(
        "name/cti/kebab",
        name_kebab,
        kind=TransformKind.NAME,
        description="Names tokens by full path in kebab-case",
    )
    registry.register_transform(
        "name/cti/camel",
        name_camel,
        kind=TransformKind.NAME,
        description="Names tokens by full path in camelCase",
    )
    registry.register_transform(
        "name/cti/snake",
        name_snake,
        kind=TransformKind.NAME,
        description="Names tokens by full path in snake_case",
    )
    registry.register_transform(
        "size/strip-unit",
        strip_unit,
        matcher=is_size,
        description="Strips the unit from sizes ('8px' -> 8)",
    )
    registry.register_transform(
        "size/px-to-rem",
        px_to_rem,
        matcher=is_size,
        description=f"Converts pixel sizes to rem (base {REM_BASE_PX}px)",
    )
    registry.register_transform(
        "size/double",
        double,
        matcher=is_size,
        description="Doubles numeric sizes",
    )
    registry.register_transform(
        "color/hex",
        color_hex,
        matcher=is_color,
        description="Converts colors to #rrggbb (#rrggbbaa when translucent)",
    )
    registry.register_transform(
        "color/hex8",
        color_hex8,
        matcher=is_color,
        description="Converts colors to #rrggbbaa",
    )
    registry.register_transform(
        "color/rgb",
        color_rgb,
        matcher=is_color,
        description="Converts colors to rgb()/rgba()",
    )
    registry.register_transform(
        "font/stack",
        font_stack,
        matcher=is_font_stack,
        description="Joins font family lists into a CSS font stack",
    )
    registry.register_transform(
        "content/quote",
        quote_content,
        matcher=is_content,
        description="Quotes content strings",
    )
    registry.register_transform(
        "value/lowercase",
        lowercase,
        matcher=is_string,
        description="Lowercases string values",
    )

    for name, members in BUILTIN_GROUPS.items():
        registry.register_transform_group(name, members)
