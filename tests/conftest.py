from __future__ import annotations

import pytest

from memview.core.color import Color
from memview.core.ranges import ByteRange

RED = Color(255, 0, 0)
BLUE = Color(0, 0, 255)
YELLOW = Color(255, 200, 0)


def build_ranges(count: int, *, inactive_every: int = 7) -> list[ByteRange]:
    """Sorted, non-overlapping ranges of varying length with gaps between them.

    Every `inactive_every`-th range (offset by 3) is inactive.
    """
    out = []
    for i in range(count):
        start = i * 10
        length = 1 + (i % 6)
        color = Color(i % 256, (i * 7) % 256, (i * 13) % 256)
        active = inactive_every == 0 or i % inactive_every != 3
        out.append(ByteRange(start, start + length, color, active))
    return out


@pytest.fixture
def small_ranges() -> list[ByteRange]:
    return build_ranges(12)


@pytest.fixture
def large_ranges() -> list[ByteRange]:
    return build_ranges(150)
