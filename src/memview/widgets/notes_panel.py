from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from memview.core.ranges import NoteRange, RangeCollection
from memview.ui.palette import PALETTE


class NotesPanel(Static):
    """Read-only listing of annotated ranges."""

    def __init__(self, notes: RangeCollection) -> None:
        super().__init__(Text("Notes"))
        self.notes = notes

    def render_notes(self, cursor: int | None = None) -> Text:
        t = Text()
        t.append("Notes\n", style=PALETTE.preview_header)
        if len(self.notes) == 0:
            t.append("  (none)\n", style=PALETTE.preview_dim)
            return t
        for note in self.notes:
            mark = "x" if note.active else " "
            here = cursor is not None and note.contains(cursor)
            t.append("> " if here else "  ", style=PALETTE.accent)
            t.append(f"[{mark}] ", style=PALETTE.preview_label)
            t.append("■ ", style=note.color.hex)
            t.append(f"0x{note.start:X}..0x{note.end:X}", style=PALETTE.preview_value)
            desc = note.description if isinstance(note, NoteRange) else ""
            if desc:
                t.append(f"  {desc}", style=PALETTE.preview_dim if not note.active else PALETTE.preview_value)
            t.append("\n")
        return t

    def refresh_notes(self, cursor: int | None = None) -> None:
        self.update(self.render_notes(cursor))
