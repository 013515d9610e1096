from __future__ import annotations

import pytest

from memview.core.types import (
    NumericFormat,
    NumericType,
    next_numeric_format,
    next_numeric_type,
    parse_numeric_format,
    parse_numeric_type,
)


def test_widths() -> None:
    assert [t.width for t in NumericType] == [1, 1, 2, 2, 4, 4, 8, 8, 2, 4, 8]


def test_signedness_and_ranges() -> None:
    assert NumericType.I8.signed and not NumericType.U8.signed
    assert NumericType.I8.min_value == -128
    assert NumericType.U16.max_value == 65535
    assert NumericType.I64.max_value == 2**63 - 1
    with pytest.raises(ValueError):
        NumericType.F32.min_value


def test_labels() -> None:
    assert NumericType.F16.label == "HalfFloat"
    assert NumericType.U32.label == "Uint32"
    assert NumericFormat.HEXADECIMAL.label == "Hex"


@pytest.mark.parametrize(
    "name,expected",
    [
        ("u16", NumericType.U16),
        ("Int32", NumericType.I32),
        ("double", NumericType.F64),
        ("half", NumericType.F16),
        (" S8 ", NumericType.I8),
    ],
)
def test_parse_numeric_type(name: str, expected: NumericType) -> None:
    assert parse_numeric_type(name) is expected


def test_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        parse_numeric_type("u128")
    with pytest.raises(ValueError):
        parse_numeric_format("octal")
    assert parse_numeric_format("Decimal") is NumericFormat.DECIMAL


def test_cycling_wraps() -> None:
    assert next_numeric_type(NumericType.I8) is NumericType.U8
    assert next_numeric_type(NumericType.F64) is NumericType.I8
    assert next_numeric_format(NumericFormat.HEXADECIMAL) is NumericFormat.BINARY
