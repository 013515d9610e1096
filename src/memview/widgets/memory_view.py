from __future__ import annotations

from contextlib import suppress

from rich.style import Style
from rich.text import Text
from textual import events
from textual.reactive import reactive
from textual.widget import Widget

from memview.core.config import EditorConfig
from memview.core.editing import ByteEditor
from memview.core.grid import GridGeometry
from memview.core.highlight import CellHighlight, HighlightSources, compose_cell, is_flagged
from memview.core.io import ByteSource
from memview.ui.palette import PALETTE


class MemoryView(Widget):
    """Grid view of a byte source with range fills and note borders.

    - Renders only the visible rows based on widget height.
    - The cursor doubles as the data-preview address.
    - Enter starts hex editing at the cursor on writable sources.
    """

    can_focus = True

    BINDINGS = [
        ("left", "cursor_left", "Left"),
        ("right", "cursor_right", "Right"),
        ("h", "cursor_left", "Left"),
        ("l", "cursor_right", "Right"),
        ("up", "cursor_up", "Up"),
        ("down", "cursor_down", "Down"),
        ("k", "cursor_up", "Up"),
        ("j", "cursor_down", "Down"),
        ("pageup", "page_up", "PgUp"),
        ("pagedown", "page_down", "PgDn"),
        ("G", "go_end", "End"),
        ("enter", "edit_byte", "Edit"),
    ]

    scroll_rows: int = reactive(0)
    cursor_offset: int = reactive(0)

    def __init__(
        self,
        source: ByteSource,
        *,
        config: EditorConfig | None = None,
        sources: HighlightSources | None = None,
    ) -> None:
        super().__init__()
        self.source = source
        self.config = config or EditorConfig()
        self.geometry = GridGeometry(
            columns=self.config.columns, mid_columns=self.config.mid_columns
        )
        self.sources = sources or HighlightSources(highlight_color=self.config.highlight_color)
        self.sources.preview_addr = 0 if source.size else None
        self.editor = ByteEditor(source)

    # ---- Scrolling helpers ----
    def total_rows(self) -> int:
        return max(1, self.geometry.row_count(self.source.size))

    def visible_rows(self) -> int:
        # Fallback to 16 rows if height is unknown yet.
        h = self.size.height or 0
        return h if h > 0 else 16

    def set_top_row(self, row: int) -> None:
        max_top = max(0, self.total_rows() - 1)
        self.scroll_rows = max(0, min(row, max_top))
        self.refresh()

    def scroll_by(self, delta_rows: int) -> None:
        self.set_top_row(self.scroll_rows + delta_rows)

    def ensure_cursor_visible(self) -> None:
        row = self.geometry.row_of(self.cursor_offset)
        if row < self.scroll_rows:
            self.set_top_row(row)
        elif row >= self.scroll_rows + self.visible_rows():
            self.set_top_row(row - self.visible_rows() + 1)

    # ---- Rendering ----
    def _address_text(self, addr: int) -> str:
        digits = self.config.address_digits or self.geometry.address_digits(self.source.size)
        shown = self.geometry.base_address + addr
        return f"{shown:0{digits}X}: " if self.config.uppercase_hex else f"{shown:0{digits}x}: "

    def _cell_style(self, addr: int, value: int, cell: CellHighlight) -> Style:
        if addr == self.cursor_offset:
            return Style(bgcolor=PALETTE.cursor_bg, color=PALETTE.cursor_fg)
        color = PALETTE.byte_fg
        if value == 0 and self.config.grey_out_zeroes:
            color = PALETTE.zero_fg
        bgcolor = None
        if cell.background is not None:
            bgcolor = cell.background.hex
            color = PALETTE.filled_fg
        note = cell.note
        if note is None:
            return Style(color=color, bgcolor=bgcolor)
        if bgcolor is None:
            color = note.color.hex
        return Style(color=color, bgcolor=bgcolor, overline=note.top, underline=note.bottom)

    def _separator(self, column: int, cell: CellHighlight, nxt: CellHighlight | None) -> Text:
        gap = " " + (" " if self.geometry.is_mid_boundary(column) else "")
        bgcolor = cell.background.hex if cell.background is not None and cell.joins_next else None
        edge = None
        if cell.note is not None and cell.note.right:
            edge = cell.note.color
        elif nxt is not None and nxt.note is not None and nxt.note.left:
            edge = nxt.note.color
        if edge is not None:
            gap = gap[:-1] + "│"
            return Text(gap, style=Style(color=edge.hex, bgcolor=bgcolor))
        return Text(gap, style=Style(bgcolor=bgcolor) if bgcolor else "")

    def render_row(self, row: int, *, last_row: bool = False) -> Text:
        geo = self.geometry
        start = geo.address_at(row, 0)
        chunk = self.source.read(start, geo.columns)
        cells = [
            compose_cell(self.source, start + i, geo, self.sources, last_row=last_row)
            for i in range(len(chunk))
        ]

        line = Text(self._address_text(start), style=PALETTE.address_fg)
        fmt = "{:02X}" if self.config.uppercase_hex else "{:02x}"
        for i, b in enumerate(chunk):
            addr = start + i
            if addr == self.editor.address:
                line.append(
                    self.editor.buffer.ljust(2, "_"),
                    style=Style(bgcolor=PALETTE.edit_bg, color=PALETTE.edit_fg),
                )
            else:
                line.append(fmt.format(b), style=self._cell_style(addr, b, cells[i]))
            if i < geo.columns - 1:
                nxt = cells[i + 1] if i + 1 < len(cells) else None
                line.append_text(self._separator(i, cells[i], nxt))
        # Pad short final row so the ASCII column lines up
        for i in range(len(chunk), geo.columns):
            line.append("  ")
            if i < geo.columns - 1:
                line.append("  " if geo.is_mid_boundary(i) else " ")

        if self.config.show_ascii:
            line.append("  ")
            for i, b in enumerate(chunk):
                addr = start + i
                ch = chr(b) if 32 <= b < 128 else "."
                color = PALETTE.ascii_fg if ch == chr(b) else PALETTE.ascii_dim_fg
                if addr == self.cursor_offset:
                    style = Style(bgcolor=PALETTE.cursor_bg, color=PALETTE.cursor_fg)
                elif is_flagged(self.source, addr, self.sources):
                    style = Style(bgcolor=self.sources.highlight_color.hex, color=PALETTE.filled_fg)
                else:
                    style = Style(color=color)
                line.append(ch, style=style)
        return line

    def render(self) -> Text:
        if self.source.size == 0:
            return Text("<empty>")
        rows = self.visible_rows()
        last = min(self.total_rows(), self.scroll_rows + rows) - 1
        text = Text()
        for row in range(self.scroll_rows, last + 1):
            text.append_text(self.render_row(row, last_row=row == last))
            if row != last:
                text.append("\n")
        return text

    # ---- Cursor movement ----
    def set_cursor(self, offset: int) -> None:
        if self.source.size == 0:
            self.cursor_offset = 0
            return
        self.cursor_offset = max(0, min(offset, self.source.size - 1))
        if self.editor.active and self.editor.address != self.cursor_offset:
            self.editor.begin(self.cursor_offset)
        self.sources.preview_addr = self.cursor_offset
        self.ensure_cursor_visible()
        self.refresh()
        # no active app when the widget is driven directly
        with suppress(Exception):
            if hasattr(self.app, "on_memory_cursor_moved"):
                self.app.on_memory_cursor_moved(self.cursor_offset)  # type: ignore[attr-defined]

    def move_cursor(self, delta: int) -> None:
        self.set_cursor(self.cursor_offset + delta)

    def set_preview_width(self, width: int) -> None:
        self.sources.preview_width = width
        self.refresh()

    def goto_and_highlight(self, addr_min: int, addr_max: int) -> None:
        """Jump to `addr_min` and highlight [addr_min, addr_max)."""
        self.sources.highlight_min = addr_min
        self.sources.highlight_max = addr_max
        self.set_cursor(addr_min)

    def clear_fixed_highlight(self) -> None:
        self.sources.highlight_min = None
        self.sources.highlight_max = None
        self.refresh()

    def action_cursor_left(self) -> None:
        self.move_cursor(-1)

    def action_cursor_right(self) -> None:
        self.move_cursor(1)

    def action_cursor_up(self) -> None:
        self.move_cursor(-self.geometry.columns)

    def action_cursor_down(self) -> None:
        self.move_cursor(self.geometry.columns)

    def action_page_up(self) -> None:
        self.move_cursor(-self.geometry.columns * self.visible_rows())

    def action_page_down(self) -> None:
        self.move_cursor(self.geometry.columns * self.visible_rows())

    def action_go_end(self) -> None:
        self.set_cursor(self.source.size - 1)

    # ---- Editing ----
    def action_edit_byte(self) -> None:
        if self.editor.active and not self.editor.buffer:
            self.editor.cancel()
        elif self.editor.active:
            self.editor.commit()
            self._after_edit()
        elif not self.editor.begin(self.cursor_offset):
            self.app.bell()
        self.refresh()

    def _after_edit(self) -> None:
        target = self.editor.address
        self.set_cursor(self.cursor_offset if target is None else target)

    def on_key(self, event: events.Key) -> None:
        if not self.editor.active:
            return
        if event.key == "escape":
            self.editor.cancel()
        elif event.character is None or not self.editor.feed(event.character):
            return
        elif not self.editor.buffer:
            # second digit wrote the byte
            self._after_edit()
        event.stop()
        event.prevent_default()
        self.refresh()
