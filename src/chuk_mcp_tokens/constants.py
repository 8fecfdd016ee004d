"""
Constants and enums for the token system.

No magic strings - use enums for constrained values.
"""

from enum import Enum


class TokenCategory(str, Enum):
    """
    Closed set of token categories the built-in transforms and formats know.

    A token's category is whatever its first path segment says; categories
    outside this enum are open and pass through formats under their own name.
    """

    COLOR = "color"
    SPACING = "spacing"
    SIZE = "size"
    RADIUS = "radius"
    SHADOW = "shadow"
    OPACITY = "opacity"
    BREAKPOINT = "breakpoint"
    Z_INDEX = "z-index"
    BORDER_WIDTH = "border-width"
    FONT = "font"
    CONTENT = "content"


class TransformKind(str, Enum):
    """What part of a token a transform rewrites."""

    VALUE = "value"  # resolved_value
    NAME = "name"  # name
    ATTRIBUTE = "attribute"  # attributes (merged mapping)


class TailwindThemeKey(str, Enum):
    """Keys of a Tailwind `theme` object."""

    COLORS = "colors"
    SPACING = "spacing"
    BORDER_RADIUS = "borderRadius"
    BOX_SHADOW = "boxShadow"
    OPACITY = "opacity"
    SCREENS = "screens"
    Z_INDEX = "zIndex"
    BORDER_WIDTH = "borderWidth"
    FONT_FAMILY = "fontFamily"
    FONT_SIZE = "fontSize"
    FONT_WEIGHT = "fontWeight"
    LINE_HEIGHT = "lineHeight"
    LETTER_SPACING = "letterSpacing"


# Category -> theme key, for categories that map one-to-one
TAILWIND_CATEGORY_KEYS: dict[str, TailwindThemeKey] = {
    TokenCategory.COLOR.value: TailwindThemeKey.COLORS,
    TokenCategory.SPACING.value: TailwindThemeKey.SPACING,
    TokenCategory.RADIUS.value: TailwindThemeKey.BORDER_RADIUS,
    TokenCategory.SHADOW.value: TailwindThemeKey.BOX_SHADOW,
    TokenCategory.OPACITY.value: TailwindThemeKey.OPACITY,
    TokenCategory.BREAKPOINT.value: TailwindThemeKey.SCREENS,
    TokenCategory.Z_INDEX.value: TailwindThemeKey.Z_INDEX,
    TokenCategory.BORDER_WIDTH.value: TailwindThemeKey.BORDER_WIDTH,
}

# (category, type) -> theme key; the type segment is consumed by the key
TAILWIND_TYPED_KEYS: dict[tuple[str, str], TailwindThemeKey] = {
    (TokenCategory.FONT.value, "family"): TailwindThemeKey.FONT_FAMILY,
    (TokenCategory.FONT.value, "size"): TailwindThemeKey.FONT_SIZE,
    (TokenCategory.FONT.value, "weight"): TailwindThemeKey.FONT_WEIGHT,
    (TokenCategory.FONT.value, "line-height"): TailwindThemeKey.LINE_HEIGHT,
    (TokenCategory.FONT.value, "letter-spacing"): TailwindThemeKey.LETTER_SPACING,
}

# Categories whose values are lengths
SIZE_CATEGORIES: frozenset[str] = frozenset(
    {
        TokenCategory.SIZE.value,
        TokenCategory.SPACING.value,
        TokenCategory.RADIUS.value,
        TokenCategory.BORDER_WIDTH.value,
    }
)

# Generic CSS font families are never quoted in a font stack
GENERIC_FONT_FAMILIES: frozenset[str] = frozenset(
    {
        "serif",
        "sans-serif",
        "monospace",
        "cursive",
        "fantasy",
        "system-ui",
        "ui-serif",
        "ui-sans-serif",
        "ui-monospace",
        "ui-rounded",
        "emoji",
        "math",
        "fangsong",
    }
)

REM_BASE_PX = 16

# Keys that mark a mapping as a leaf token
VALUE_KEYS: tuple[str, ...] = ("value", "$value")

GENERATED_HEADER = "Do not edit directly, this file was generated from design tokens."


class ErrorMessages:
    """Standardized error messages."""

    UNKNOWN_TRANSFORM = "Unknown transform '{name}'."
    UNKNOWN_TRANSFORM_GROUP = "Unknown transform group '{name}'."
    UNKNOWN_FORMAT = "Unknown format '{name}'."
    DUPLICATE_TRANSFORM = "Transform '{name}' is already registered."
    DUPLICATE_TRANSFORM_GROUP = "Transform group '{name}' is already registered."
    DUPLICATE_FORMAT = "Format '{name}' is already registered."
    DUPLICATE_DESTINATION = "Destination '{destination}' is used by more than one platform."
    DUPLICATE_PLATFORM = "Platform '{name}' is defined more than once."
    NO_PLATFORMS = "No platforms configured."
    MIXED_NODE = "Node mixes a token value with nested groups."
    EMPTY_GROUP = "Group has no tokens."
    MISSING_VALUE = "Token has no value."
    ROOT_LEAF = "Token at the root has no category; nest it under a category group."
