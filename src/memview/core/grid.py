from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GridGeometry:
    """Address <-> (row, column) arithmetic for a fixed-width byte grid."""

    columns: int = 16
    mid_columns: int = 8  # extra spacing every N columns; 0 disables
    base_address: int = 0  # only affects displayed addresses

    def __post_init__(self) -> None:
        if self.columns < 1:
            raise ValueError("columns must be >= 1")
        if self.mid_columns < 0:
            raise ValueError("mid_columns must be >= 0")

    def row_of(self, addr: int) -> int:
        return addr // self.columns

    def column_of(self, addr: int) -> int:
        return addr % self.columns

    def locate(self, addr: int) -> tuple[int, int]:
        return divmod(addr, self.columns)

    def address_at(self, row: int, column: int) -> int:
        if not 0 <= column < self.columns:
            raise ValueError(f"column {column} outside 0..{self.columns - 1}")
        return row * self.columns + column

    def first_in_row(self, addr: int) -> int:
        return addr - addr % self.columns

    def last_in_row(self, addr: int) -> int:
        return self.first_in_row(addr) + self.columns - 1

    def next_row_first(self, addr: int) -> int:
        return self.first_in_row(addr) + self.columns

    def row_count(self, size: int) -> int:
        return (size + self.columns - 1) // self.columns

    def address_digits(self, size: int) -> int:
        """Hex digits needed for the highest displayed address."""
        n = self.base_address + size - 1
        digits = 0
        while n > 0:
            digits += 1
            n >>= 4
        return max(1, digits)

    def is_last_column(self, column: int) -> bool:
        return column + 1 == self.columns

    def is_mid_boundary(self, column: int) -> bool:
        """True after the last column of a mid-column group (not the row's last)."""
        return (
            self.mid_columns > 0
            and 0 < column
            and column + 1 < self.columns
            and (column + 1) % self.mid_columns == 0
        )
