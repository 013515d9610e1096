from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Palette:
    accent: str
    # grid
    address_fg: str
    byte_fg: str
    zero_fg: str
    ascii_fg: str
    ascii_dim_fg: str
    cursor_bg: str
    cursor_fg: str
    filled_fg: str  # text drawn over a highlight fill
    edit_bg: str
    edit_fg: str
    # side panels
    preview_label: str
    preview_value: str
    preview_dim: str
    preview_header: str
    converter_error: str


DEFAULT = Palette(
    accent="#5ea1ff",
    address_fg="#8892a0",
    byte_fg="#d8dee9",
    zero_fg="#6b7280",
    ascii_fg="#d7ba7d",
    ascii_dim_fg="#6b7280",
    cursor_bg="#b36b00",
    cursor_fg="#ffffff",
    filled_fg="#000000",
    edit_bg="#5ea1ff",
    edit_fg="#000000",
    preview_label="#8892a0",
    preview_value="#ffffff",
    preview_dim="#6b7280",
    preview_header="#4c75c6",
    converter_error="#ff5555",
)

# Selected palette for now
PALETTE = DEFAULT
