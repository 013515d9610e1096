"""How a grid cell combines every highlight source.

Precedence: cells flagged by the fixed interval, the source's own
predicate or the preview span get the highlight color, blended 50/50 with
the color of an active highlight range covering them. Otherwise a covering
highlight range paints the cell in its own color. Note ranges never fill a
cell; they add a border on top of whatever fill it has.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from memview.core.color import DEFAULT_HIGHLIGHT_COLOR, Color
from memview.core.grid import GridGeometry
from memview.core.io import ByteSource
from memview.core.ranges import (
    ByteRange,
    NoteRange,
    RangePosition,
    SearchStrategy,
    classify,
    continues_at,
    continues_into_next_row,
)


@dataclass(frozen=True)
class NoteBorder:
    color: Color
    position: RangePosition
    top: bool
    bottom: bool
    left: bool
    right: bool


@dataclass(frozen=True)
class CellHighlight:
    background: Color | None = None
    joins_next: bool = False  # fill continues over the gap to the next cell
    note: NoteBorder | None = None


PLAIN = CellHighlight()


@dataclass
class HighlightSources:
    ranges: Sequence[ByteRange] = ()
    notes: Sequence[NoteRange] = ()
    highlight_min: int | None = None
    highlight_max: int | None = None
    preview_addr: int | None = None
    preview_width: int = 0
    highlight_color: Color = DEFAULT_HIGHLIGHT_COLOR
    strategy: SearchStrategy = SearchStrategy.AUTO


def is_flagged(source: ByteSource, addr: int, sources: HighlightSources) -> bool:
    if (
        sources.highlight_min is not None
        and sources.highlight_max is not None
        and sources.highlight_min <= addr < sources.highlight_max
    ):
        return True
    if source.is_highlighted(addr):
        return True
    return (
        sources.preview_addr is not None
        and sources.preview_addr <= addr < sources.preview_addr + sources.preview_width
    )


def _note_border(
    addr: int,
    geometry: GridGeometry,
    sources: HighlightSources,
    *,
    last_row: bool,
) -> NoteBorder | None:
    match = classify(sources.notes, addr, strategy=sources.strategy)
    if not match.matched or match.color is None:
        return None
    column = geometry.column_of(addr)
    below = not last_row and continues_into_next_row(
        sources.notes, match.index, geometry.next_row_first(addr), column
    )
    return NoteBorder(
        color=match.color,
        position=match.position,
        top=True,
        bottom=not below,
        left=match.position is RangePosition.START or column == 0,
        right=match.position is RangePosition.END or geometry.is_last_column(column),
    )


def compose_cell(
    source: ByteSource,
    addr: int,
    geometry: GridGeometry,
    sources: HighlightSources,
    *,
    last_row: bool = False,
) -> CellHighlight:
    """Resolve fill, fill continuation and note border for the cell at `addr`.

    `last_row` marks the last visible row, where notes always close their
    bottom border.
    """
    match = classify(sources.ranges, addr, strategy=sources.strategy)
    if is_flagged(source, addr, sources):
        background = sources.highlight_color
        if match.matched and match.color is not None:
            background = background.blend(match.color)
    elif match.matched:
        background = match.color
    else:
        background = None

    joins_next = False
    if background is not None and addr + 1 < source.size:
        joins_next = is_flagged(source, addr + 1, sources) or continues_at(
            sources.ranges, match.index, addr
        )

    note = _note_border(addr, geometry, sources, last_row=last_row)
    if background is None and note is None:
        return PLAIN
    return CellHighlight(background=background, joins_next=joins_next, note=note)
