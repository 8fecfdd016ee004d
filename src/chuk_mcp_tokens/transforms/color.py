"""
Color parsing and formatting for color transforms.

Accepted inputs: #rgb, #rgba, #rrggbb, #rrggbbaa, rgb(r, g, b),
rgba(r, g, b, a), hsl(h, s%, l%) and hsla(h, s%, l%, a), with alpha as
0-1 or a percentage.
"""

from __future__ import annotations

import colorsys
import re
from dataclasses import dataclass

_ALPHA = r"(?:[,/]\s*([\d.]+%?)\s*)?"

_FUNCTIONAL = re.compile(
    r"^rgba?\(\s*(\d{1,3})\s*[, ]\s*(\d{1,3})\s*[, ]\s*(\d{1,3})\s*" + _ALPHA + r"\)$",
    re.IGNORECASE,
)

_HSL = re.compile(
    r"^hsla?\(\s*(-?[\d.]+)(?:deg)?\s*[, ]\s*([\d.]+)%\s*[, ]\s*([\d.]+)%\s*" + _ALPHA + r"\)$",
    re.IGNORECASE,
)

# Leading syntax of every form parse_color accepts
COLOR_SYNTAX = re.compile(r"^\s*(?:#|(?:rgba?|hsla?)\()", re.IGNORECASE)


@dataclass(frozen=True)
class RGBA:
    """An sRGB color with 8-bit channels and 0-1 alpha."""

    r: int
    g: int
    b: int
    a: float = 1.0

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel must be 0-255, got {channel}")
        if not 0.0 <= self.a <= 1.0:
            raise ValueError(f"Alpha must be 0-1, got {self.a}")

    @property
    def opaque(self) -> bool:
        return self.a >= 1.0

    def to_hex(self) -> str:
        """#rrggbb (alpha dropped)."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    def to_hex8(self) -> str:
        """#rrggbbaa."""
        return f"{self.to_hex()}{round(self.a * 255):02x}"

    def to_rgb(self) -> str:
        """rgb(r, g, b) when opaque, otherwise rgba(r, g, b, a)."""
        if self.opaque:
            return f"rgb({self.r}, {self.g}, {self.b})"
        return f"rgba({self.r}, {self.g}, {self.b}, {self.a:g})"


def _alpha(text: str | None) -> float:
    if text is None:
        return 1.0
    return float(text[:-1]) / 100 if text.endswith("%") else float(text)


def _from_hsl(hue: str, saturation: str, lightness: str, alpha: str | None) -> RGBA:
    s, l = float(saturation), float(lightness)
    if s > 100 or l > 100:
        raise ValueError(f"Saturation and lightness must be 0-100%, got {s}% and {l}%")
    r, g, b = colorsys.hls_to_rgb(float(hue) % 360 / 360, l / 100, s / 100)
    return RGBA(round(r * 255), round(g * 255), round(b * 255), _alpha(alpha))


def parse_color(value: str) -> RGBA:
    """
    Parse a hex, rgb()/rgba() or hsl()/hsla() color string.

    Raises:
        ValueError: If the string is not a supported color
    """
    text = value.strip()

    if text.startswith("#"):
        hx = text[1:]
        if len(hx) in (3, 4):
            hx = "".join(c * 2 for c in hx)
        if len(hx) not in (6, 8) or not re.fullmatch(r"[0-9a-fA-F]+", hx):
            raise ValueError(f"Invalid hex color: {value!r}")
        alpha = int(hx[6:8], 16) / 255 if len(hx) == 8 else 1.0
        return RGBA(int(hx[0:2], 16), int(hx[2:4], 16), int(hx[4:6], 16), round(alpha, 4))

    match = _FUNCTIONAL.match(text)
    if match:
        r, g, b, a = match.groups()
        return RGBA(int(r), int(g), int(b), _alpha(a))

    match = _HSL.match(text)
    if match:
        return _from_hsl(*match.groups())

    raise ValueError(f"Unsupported color: {value!r}")
