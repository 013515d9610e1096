from __future__ import annotations

import pytest

from memview.core.color import Color, parse_color


def test_packed_layout() -> None:
    c = Color(0x11, 0x22, 0x33, 0x44)
    assert c.packed == 0x44332211
    assert Color.from_packed(c.packed) == c


def test_blend_averages_rgb_and_keeps_alpha() -> None:
    blended = Color(255, 127, 255, 150).blend(Color(0, 0, 255))
    assert blended == Color(127, 63, 255, 150)


def test_hex() -> None:
    assert Color(255, 0, 16).hex == "#ff0010"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("red", Color(255, 0, 0)),
        (" Blue ", Color(0, 0, 255)),
        ("#abc", Color(0xAA, 0xBB, 0xCC)),
        ("#102030", Color(0x10, 0x20, 0x30)),
        ("#11223344", Color(0x11, 0x22, 0x33, 0x44)),
    ],
)
def test_parse_color(text: str, expected: Color) -> None:
    assert parse_color(text) == expected


@pytest.mark.parametrize("text", ["", "#12", "#gggggg", "chartreuse-ish", "#1234567"])
def test_parse_color_rejects(text: str) -> None:
    with pytest.raises(ValueError):
        parse_color(text)


def test_channel_range_checked() -> None:
    with pytest.raises(ValueError):
        Color(256, 0, 0)
    with pytest.raises(ValueError):
        Color(0, 0, 0, -1)
