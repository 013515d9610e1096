from __future__ import annotations

import re
from dataclasses import dataclass

NAMED_COLORS = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
    "purple": (128, 0, 128),
    "orange": (255, 165, 0),
    "pink": (255, 192, 203),
    "brown": (165, 42, 42),
}


@dataclass(frozen=True)
class Color:
    """RGBA color with 8-bit channels."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            v = getattr(self, name)
            if not isinstance(v, int) or not 0 <= v <= 255:
                raise ValueError(f"color channel {name} must be an int in 0..255, got {v!r}")

    @property
    def packed(self) -> int:
        """32-bit id with red in the low byte and alpha in the high byte."""
        return self.r | (self.g << 8) | (self.b << 16) | (self.a << 24)

    @classmethod
    def from_packed(cls, value: int) -> Color:
        return cls(value & 0xFF, (value >> 8) & 0xFF, (value >> 16) & 0xFF, (value >> 24) & 0xFF)

    def blend(self, other: Color) -> Color:
        """Average the RGB channels with `other`, keeping this color's alpha."""
        return Color(
            (self.r + other.r) // 2,
            (self.g + other.g) // 2,
            (self.b + other.b) // 2,
            self.a,
        )

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


def parse_color(value: str) -> Color:
    """Parse a named color or a #RGB / #RRGGBB / #RRGGBBAA literal.

    Raises ValueError for anything else.
    """
    if not isinstance(value, str):
        raise ValueError(f"color must be a string, got {type(value).__name__}")
    text = value.strip().lower()
    if text in NAMED_COLORS:
        return Color(*NAMED_COLORS[text])

    m = re.fullmatch(r"#([0-9a-f]{3})", text)
    if m:
        r, g, b = (int(c * 2, 16) for c in m.group(1))
        return Color(r, g, b)

    m = re.fullmatch(r"#([0-9a-f]{6})([0-9a-f]{2})?", text)
    if m:
        rgb = m.group(1)
        alpha = int(m.group(2), 16) if m.group(2) else 255
        return Color(int(rgb[0:2], 16), int(rgb[2:4], 16), int(rgb[4:6], 16), alpha)

    raise ValueError(f"Invalid color '{value}'. Use a named color or hex #RGB/#RRGGBB/#RRGGBBAA.")


DEFAULT_HIGHLIGHT_COLOR = Color(255, 127, 255, 150)
DEFAULT_NOTE_COLOR = Color(255, 200, 0, 255)
