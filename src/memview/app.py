from __future__ import annotations

import logging
import os

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Header, Input, Static

from memview.core.config import EditorConfig
from memview.core.converter import Converter
from memview.core.highlight import HighlightSources
from memview.core.io import ByteSource, PagedReader, save_to_file
from memview.core.ranges import ByteRange, NoteRange, RangeCollection
from memview.core.types import next_numeric_type
from memview.widgets.converter_panel import ConverterPanel
from memview.widgets.memory_view import MemoryView
from memview.widgets.notes_panel import NotesPanel
from memview.widgets.preview_panel import PreviewPanel

logger = logging.getLogger("memview.app")


class MemviewApp(App):
    """Textual application shell for memview."""

    CSS = """
    #side { width: 60; }
    #goto { height: 3; }
    #status { height: 1; }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("t", "cycle_preview_type", "Preview Type"),
        ("e", "toggle_endian", "Endian"),
        ("f2", "cycle_converter_type", "Conv Type"),
        ("f3", "cycle_converter_format", "Conv Format"),
        ("a", "toggle_note", "Toggle Note"),
        ("g", "focus_goto", "Goto"),
        ("escape", "clear_highlight", "Clear"),
        ("ctrl+s", "save", "Save"),
    ]

    def __init__(
        self,
        path: str | None = None,
        *,
        source: ByteSource | None = None,
        config: EditorConfig | None = None,
        highlights: list[ByteRange] | None = None,
        notes: list[NoteRange] | None = None,
    ) -> None:
        super().__init__()
        if source is None and path is None:
            raise ValueError("either path or source is required")
        self._path = path
        self._source = source
        self.config = config or EditorConfig()
        self.highlights = RangeCollection(highlights)
        self.notes = RangeCollection(notes)
        self.memory_view: MemoryView | None = None
        self.preview_panel = PreviewPanel(self.config.preview_type, self.config.preview_endian)
        self.converter_panel = ConverterPanel(
            Converter(self.config.converter_type, self.config.converter_format)
        )
        self.notes_panel = NotesPanel(self.notes)
        self.status = Static(id="status")
        self.title = f"memview — {os.path.basename(path)}" if path else "memview"

    @property
    def source(self) -> ByteSource:
        if self._source is None:
            self._source = PagedReader(str(self._path))
        return self._source

    def compose(self) -> ComposeResult:
        sources = HighlightSources(
            ranges=self.highlights.ranges,
            notes=self.notes.ranges,
            highlight_color=self.config.highlight_color,
        )
        self.memory_view = MemoryView(self.source, config=self.config, sources=sources)
        yield Header()
        with Horizontal():
            yield self.memory_view
            with Vertical(id="side"):
                yield self.preview_panel
                yield self.converter_panel
                yield self.notes_panel
        yield Input(placeholder="Goto address (hex), optionally START..END", id="goto")
        yield self.status
        yield Footer()

    def on_mount(self) -> None:
        if self.memory_view is not None:
            self.memory_view.set_preview_width(self.preview_panel.numeric_type.width)
            self.memory_view.focus()
        self.on_memory_cursor_moved(0)

    def on_unmount(self) -> None:
        if isinstance(self._source, PagedReader):
            self._source.close()

    # ---- Cursor / preview ----
    def on_memory_cursor_moved(self, offset: int) -> None:
        if self.source.size == 0:
            self.preview_panel.update_for(self.source, None)
        else:
            self.preview_panel.update_for(self.source, offset)
        self.notes_panel.refresh_notes(offset)
        self.status.update(f"0x{offset:X} ({offset}) of {self.source.size} bytes")

    def _refresh_sources(self) -> None:
        if self.memory_view is None:
            return
        self.memory_view.sources.ranges = self.highlights.ranges
        self.memory_view.sources.notes = self.notes.ranges
        self.memory_view.set_preview_width(self.preview_panel.numeric_type.width)
        self.on_memory_cursor_moved(self.memory_view.cursor_offset)

    def action_cycle_preview_type(self) -> None:
        self.preview_panel.numeric_type = next_numeric_type(self.preview_panel.numeric_type)
        self._refresh_sources()

    def action_toggle_endian(self) -> None:
        self.preview_panel.endian = "big" if self.preview_panel.endian == "little" else "little"
        self._refresh_sources()

    def action_cycle_converter_type(self) -> None:
        self.converter_panel.cycle_type()

    def action_cycle_converter_format(self) -> None:
        self.converter_panel.cycle_format()

    def action_toggle_note(self) -> None:
        if self.memory_view is None:
            return
        idx = self.notes.find_covering(self.memory_view.cursor_offset)
        if idx is None:
            self.bell()
            return
        active = self.notes.toggle(idx)
        logger.debug("note %d is now %s", idx, "active" if active else "inactive")
        self._refresh_sources()

    def action_save(self) -> None:
        if self._path is None or self.source.read_only:
            self.bell()
            self.status.update("read-only: start with --edit to save changes")
            return
        try:
            count = save_to_file(self.source, self._path)
        except OSError as e:
            logger.error("save failed: %s", e)
            self.status.update(f"save failed: {e.strerror or e}")
            return
        self.status.update(f"saved {count} bytes to {self._path}")

    def action_focus_goto(self) -> None:
        self.query_one("#goto", Input).focus()

    def action_clear_highlight(self) -> None:
        if self.memory_view is not None:
            self.memory_view.clear_fixed_highlight()
            self.memory_view.focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "goto" or self.memory_view is None:
            return
        target = parse_goto(event.value)
        if target is None:
            self.status.update(f"not an address: {event.value!r}")
            return
        lo, hi = target
        if lo >= self.source.size:
            self.status.update(f"0x{lo:X} is past the end of the buffer")
            return
        if hi is None:
            self.memory_view.clear_fixed_highlight()
            self.memory_view.set_cursor(lo)
        else:
            self.memory_view.goto_and_highlight(lo, hi)
        event.input.value = ""
        self.memory_view.focus()


def parse_goto(text: str) -> tuple[int, int | None] | None:
    """Parse ``ADDR`` or ``START..END`` (hexadecimal, optional 0x)."""
    parts = [p.strip() for p in text.strip().split("..")]
    if not parts[0] or len(parts) > 2:
        return None
    try:
        values = [int(p, 16) for p in parts]
    except ValueError:
        return None
    if any(v < 0 for v in values):
        return None
    if len(values) == 1:
        return values[0], None
    if values[1] <= values[0]:
        return None
    return values[0], values[1]
