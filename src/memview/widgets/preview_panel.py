from __future__ import annotations

from rich.text import Text
from textual.widgets import Static

from memview.core.codec import PreviewValues, preview
from memview.core.endian import Endian
from memview.core.io import ByteSource
from memview.core.types import NumericType
from memview.ui.palette import PALETTE


class PreviewPanel(Static):
    """Typed preview of the bytes under the cursor."""

    def __init__(self, numeric_type: NumericType = NumericType.I32, endian: Endian = "little") -> None:
        super().__init__(Text("Preview"))
        self.numeric_type = numeric_type
        self.endian: Endian = endian
        self._offset: int | None = None
        self._values: PreviewValues | None = None

    @property
    def values(self) -> PreviewValues | None:
        return self._values

    def update_for(self, source: ByteSource, offset: int | None) -> None:
        self._offset = offset
        if offset is None or not 0 <= offset < source.size:
            self._values = None
        else:
            self._values = preview(source, offset, self.numeric_type, self.endian)
        self._refresh_view()

    def _refresh_view(self) -> None:
        t = Text()
        t.append("Preview as: ", style=PALETTE.preview_label)
        t.append(f"{self.numeric_type.label} ", style=PALETTE.preview_value)
        t.append("LE" if self.endian == "little" else "BE", style=PALETTE.preview_header)
        if self._offset is not None:
            t.append(f"   @0x{self._offset:08X}", style=PALETTE.preview_dim)
        t.append("\n")
        v = self._values
        rows = (
            ("Dec", v.decimal if v else "N/A"),
            ("Hex", v.hexadecimal if v else "N/A"),
            ("Bin", v.binary if v else "N/A"),
        )
        for label, value in rows:
            t.append(f"{label:<6}", style=PALETTE.preview_label)
            t.append(value + "\n", style=PALETTE.preview_value if v else PALETTE.preview_dim)
        self.update(t)
