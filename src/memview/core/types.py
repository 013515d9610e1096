"""Numeric types and display formats understood by the preview and converter."""

from __future__ import annotations

from enum import Enum


class NumericType(Enum):
    """Primary data type of a previewed or converted value."""

    I8 = "i8"
    U8 = "u8"
    I16 = "i16"
    U16 = "u16"
    I32 = "i32"
    U32 = "u32"
    I64 = "i64"
    U64 = "u64"
    F16 = "f16"
    F32 = "f32"
    F64 = "f64"

    @property
    def width(self) -> int:
        """Size in bytes."""
        return _WIDTHS[self]

    @property
    def bits(self) -> int:
        return _WIDTHS[self] * 8

    @property
    def is_float(self) -> bool:
        return self.value.startswith("f")

    @property
    def is_integer(self) -> bool:
        return not self.is_float

    @property
    def signed(self) -> bool:
        # floats carry a sign bit too
        return not self.value.startswith("u")

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def min_value(self) -> int:
        if self.is_float:
            raise ValueError(f"{self.label} has no integer range")
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        if self.is_float:
            raise ValueError(f"{self.label} has no integer range")
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1


class NumericFormat(Enum):
    """Textual representation of a value."""

    BINARY = "bin"
    DECIMAL = "dec"
    HEXADECIMAL = "hex"

    @property
    def label(self) -> str:
        return self.value.capitalize()


_WIDTHS = {
    NumericType.I8: 1,
    NumericType.U8: 1,
    NumericType.I16: 2,
    NumericType.U16: 2,
    NumericType.I32: 4,
    NumericType.U32: 4,
    NumericType.I64: 8,
    NumericType.U64: 8,
    NumericType.F16: 2,
    NumericType.F32: 4,
    NumericType.F64: 8,
}

_LABELS = {
    NumericType.I8: "Int8",
    NumericType.U8: "Uint8",
    NumericType.I16: "Int16",
    NumericType.U16: "Uint16",
    NumericType.I32: "Int32",
    NumericType.U32: "Uint32",
    NumericType.I64: "Int64",
    NumericType.U64: "Uint64",
    NumericType.F16: "HalfFloat",
    NumericType.F32: "Float",
    NumericType.F64: "Double",
}

_TYPE_ALIASES = {
    "s8": NumericType.I8,
    "s16": NumericType.I16,
    "s32": NumericType.I32,
    "s64": NumericType.I64,
    "half": NumericType.F16,
    "float16": NumericType.F16,
    "float": NumericType.F32,
    "single": NumericType.F32,
    "float32": NumericType.F32,
    "double": NumericType.F64,
    "float64": NumericType.F64,
}

_FORMAT_ALIASES = {
    "binary": NumericFormat.BINARY,
    "b": NumericFormat.BINARY,
    "decimal": NumericFormat.DECIMAL,
    "d": NumericFormat.DECIMAL,
    "hexadecimal": NumericFormat.HEXADECIMAL,
    "x": NumericFormat.HEXADECIMAL,
}


def parse_numeric_type(name: str) -> NumericType:
    """Resolve a type name such as ``u16``, ``Int32`` or ``double``."""
    key = str(name).strip().lower()
    for t in NumericType:
        if key in (t.value, t.label.lower()):
            return t
    if key in _TYPE_ALIASES:
        return _TYPE_ALIASES[key]
    raise ValueError(f"Unknown numeric type '{name}'")


def parse_numeric_format(name: str) -> NumericFormat:
    key = str(name).strip().lower()
    for f in NumericFormat:
        if key == f.value:
            return f
    if key in _FORMAT_ALIASES:
        return _FORMAT_ALIASES[key]
    raise ValueError(f"Unknown numeric format '{name}'. Expected bin, dec or hex.")


def next_numeric_type(current: NumericType) -> NumericType:
    members = list(NumericType)
    return members[(members.index(current) + 1) % len(members)]


def next_numeric_format(current: NumericFormat) -> NumericFormat:
    members = list(NumericFormat)
    return members[(members.index(current) + 1) % len(members)]
