"""Classification of addresses against ordered collections of labeled ranges.

A collection is a sequence of half-open ``[start, end)`` ranges sorted by
``start`` and mutually non-overlapping. Results for collections that break
this are unspecified; `validate_ranges` reports such problems.

Two search strategies answer the same question and must agree: a linear
scan for small collections and a binary search once the collection reaches
`LINEAR_SCAN_THRESHOLD` entries. In both, a covering range that is inactive
ends the lookup with no match.
"""

from __future__ import annotations

from bisect import bisect_right, insort
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace
from enum import Enum

from memview.core.color import Color

LINEAR_SCAN_THRESHOLD = 100


class RangeError(ValueError):
    """Invalid range bounds, or a mutation that would overlap an existing range."""


class RangePosition(Enum):
    NOT_IN_RANGE = "not_in_range"
    START = "start"
    MIDDLE = "middle"
    END = "end"


class SearchStrategy(Enum):
    AUTO = "auto"
    LINEAR = "linear"
    BINARY = "binary"


@dataclass(frozen=True)
class ByteRange:
    start: int  # inclusive
    end: int  # exclusive
    color: Color
    active: bool = True

    def __post_init__(self) -> None:
        if self.start < 0:
            raise RangeError(f"range start must be >= 0, got {self.start}")
        if self.end <= self.start:
            raise RangeError(f"range end must be greater than start: [{self.start}, {self.end})")

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def last(self) -> int:
        return self.end - 1

    def contains(self, addr: int) -> bool:
        return self.start <= addr < self.end

    def position_of(self, addr: int) -> RangePosition:
        if not self.contains(addr):
            return RangePosition.NOT_IN_RANGE
        if addr == self.start:
            return RangePosition.START
        if addr == self.end - 1:
            return RangePosition.END
        return RangePosition.MIDDLE


@dataclass(frozen=True)
class NoteRange(ByteRange):
    description: str = ""


@dataclass(frozen=True)
class RangeMatch:
    position: RangePosition
    color: Color | None = None
    index: int | None = None

    @property
    def matched(self) -> bool:
        return self.position is not RangePosition.NOT_IN_RANGE


NO_MATCH = RangeMatch(RangePosition.NOT_IN_RANGE)


def _linear_find(ranges: Sequence[ByteRange], addr: int) -> int | None:
    for idx, r in enumerate(ranges):
        if r.start <= addr < r.end:
            return idx if r.active else None
    return None


def _binary_find(ranges: Sequence[ByteRange], addr: int) -> int | None:
    lo, hi = 0, len(ranges) - 1
    while lo <= hi:
        mid = (lo + hi) // 2
        r = ranges[mid]
        if addr < r.start:
            hi = mid - 1
        elif addr >= r.end:
            lo = mid + 1
        elif r.active:
            return mid
        else:
            return None
    return None


def classify(
    ranges: Sequence[ByteRange],
    addr: int,
    *,
    strategy: SearchStrategy = SearchStrategy.AUTO,
) -> RangeMatch:
    """Find the active range covering `addr` and where `addr` sits in it."""
    if not ranges:
        return NO_MATCH
    if addr < ranges[0].start or addr >= ranges[-1].end:
        return NO_MATCH

    if strategy is SearchStrategy.AUTO:
        strategy = (
            SearchStrategy.LINEAR if len(ranges) < LINEAR_SCAN_THRESHOLD else SearchStrategy.BINARY
        )
    if strategy is SearchStrategy.LINEAR:
        idx = _linear_find(ranges, addr)
    else:
        idx = _binary_find(ranges, addr)

    if idx is None:
        return NO_MATCH
    r = ranges[idx]
    return RangeMatch(r.position_of(addr), r.color, idx)


def continues_at(ranges: Sequence[ByteRange], index: int | None, addr: int) -> bool:
    """Whether `addr + 1` is still inside the range matched at `index`."""
    if index is None or not 0 <= index < len(ranges):
        return False
    return ranges[index].contains(addr + 1)


def continues_into_next_row(
    ranges: Sequence[ByteRange],
    index: int | None,
    next_row_first: int,
    column: int,
) -> bool:
    """Whether the cell below (same column, next row) is covered by an active range.

    Scans forward from the matched range and stops at the first range that
    starts past the cell below.
    """
    if index is None or not 0 <= index < len(ranges):
        return False
    below = next_row_first + column
    for r in ranges[index:]:
        if r.start > below:
            break
        if below < r.end:
            return r.active
    return False


def validate_ranges(ranges: Sequence[ByteRange]) -> list[str]:
    """List violations of the sorted, non-overlapping precondition."""
    errors: list[str] = []
    for i in range(1, len(ranges)):
        prev, cur = ranges[i - 1], ranges[i]
        if cur.start < prev.start:
            errors.append(f"ranges[{i}] starts at {cur.start:#x}, before ranges[{i - 1}]")
        elif cur.start < prev.end:
            errors.append(
                f"ranges[{i}] [{cur.start:#x}, {cur.end:#x}) overlaps "
                f"ranges[{i - 1}] [{prev.start:#x}, {prev.end:#x})"
            )
    return errors


class RangeCollection:
    """Mutable owner of a range list that keeps it sorted and non-overlapping."""

    def __init__(self, ranges: Sequence[ByteRange] | None = None) -> None:
        self._ranges: list[ByteRange] = []
        for r in ranges or ():
            self.add(r)

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[ByteRange]:
        return iter(self._ranges)

    def __getitem__(self, index: int) -> ByteRange:
        return self._ranges[index]

    @property
    def ranges(self) -> Sequence[ByteRange]:
        return tuple(self._ranges)

    def _overlapping(self, candidate: ByteRange, skip: int | None = None) -> int | None:
        i = bisect_right(self._ranges, candidate.start, key=lambda r: r.start)
        if i > 0 and i - 1 != skip and candidate.start < self._ranges[i - 1].end:
            return i - 1
        for j in range(i, len(self._ranges)):
            if j == skip:
                continue
            if self._ranges[j].start >= candidate.end:
                break
            return j
        return None

    def add(self, r: ByteRange) -> int:
        """Insert `r` in start order and return its index."""
        clash = self._overlapping(r)
        if clash is not None:
            other = self._ranges[clash]
            raise RangeError(
                f"[{r.start:#x}, {r.end:#x}) overlaps [{other.start:#x}, {other.end:#x})"
            )
        insort(self._ranges, r, key=lambda x: x.start)
        return self._ranges.index(r)

    def remove(self, index: int) -> ByteRange:
        return self._ranges.pop(index)

    def replace(self, index: int, r: ByteRange) -> int:
        clash = self._overlapping(r, skip=index)
        if clash is not None:
            raise RangeError(f"[{r.start:#x}, {r.end:#x}) overlaps ranges[{clash}]")
        del self._ranges[index]
        insort(self._ranges, r, key=lambda x: x.start)
        return self._ranges.index(r)

    def set_active(self, index: int, active: bool) -> None:
        self._ranges[index] = replace(self._ranges[index], active=active)

    def toggle(self, index: int) -> bool:
        active = not self._ranges[index].active
        self.set_active(index, active)
        return active

    def find_covering(self, addr: int) -> int | None:
        """Index of the range containing `addr`, active or not."""
        i = bisect_right(self._ranges, addr, key=lambda r: r.start) - 1
        if i >= 0 and self._ranges[i].contains(addr):
            return i
        return None

    def classify(
        self, addr: int, *, strategy: SearchStrategy = SearchStrategy.AUTO
    ) -> RangeMatch:
        return classify(self._ranges, addr, strategy=strategy)

    def continues_at(self, index: int | None, addr: int) -> bool:
        return continues_at(self._ranges, index, addr)

    def continues_into_next_row(self, index: int | None, next_row_first: int, column: int) -> bool:
        return continues_into_next_row(self._ranges, index, next_row_first, column)
