from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Input, Static

from memview.core.converter import Converter
from memview.core.types import next_numeric_format, next_numeric_type
from memview.ui.palette import PALETTE


class ConverterPanel(Vertical):
    """Free-standing value converter: edit a value, see it in every format."""

    def __init__(self, converter: Converter | None = None) -> None:
        super().__init__(id="converter")
        self.converter = converter or Converter()
        self._accepted = True
        self._input = Input(value=self.converter.text, id="converter-input")
        self._output = Static(id="converter-output")

    def compose(self) -> ComposeResult:
        yield self._input
        yield self._output

    def on_mount(self) -> None:
        self.refresh_output()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input is not self._input:
            return
        self._accepted = self.converter.set_text(event.value)
        self.refresh_output()

    def cycle_type(self) -> None:
        self.converter.set_type(next_numeric_type(self.converter.numeric_type))
        self._sync_input()

    def cycle_format(self) -> None:
        self.converter.set_format(next_numeric_format(self.converter.numeric_format))
        self._sync_input()

    def _sync_input(self) -> None:
        self._accepted = True
        with self._input.prevent(Input.Changed):
            self._input.value = self.converter.text
        self.refresh_output()

    def render_output(self) -> Text:
        view = self.converter.render()
        t = Text()
        t.append("From: ", style=PALETTE.preview_label)
        t.append(f"{self.converter.numeric_format.label} ", style=PALETTE.preview_value)
        t.append("Value: ", style=PALETTE.preview_label)
        t.append(self.converter.numeric_type.label, style=PALETTE.preview_value)
        if not self._accepted:
            t.append("   (not a valid value, keeping previous)", style=PALETTE.converter_error)
        t.append("\n")
        for label, value in (("Dec", view.decimal), ("Hex", view.hexadecimal), ("Bin", view.binary)):
            t.append(f"{label:<6}", style=PALETTE.preview_label)
            t.append(value + "\n", style=PALETTE.preview_value)
        return t

    def refresh_output(self) -> None:
        self._output.update(self.render_output())
