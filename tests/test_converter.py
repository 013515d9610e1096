from __future__ import annotations

import math

from memview.core.converter import Converter
from memview.core.types import NumericFormat, NumericType

DEC = NumericFormat.DECIMAL
HEX = NumericFormat.HEXADECIMAL


def test_defaults() -> None:
    c = Converter()
    assert c.numeric_type is NumericType.U32
    assert c.numeric_format is HEX
    assert c.text == "0x00000000"
    assert c.render().decimal == "0"


def test_value_survives_hex_detour_unsigned() -> None:
    c = Converter(NumericType.U8, DEC)
    assert c.set_text("200")
    c.set_format(HEX)
    assert c.text == "0xc8"
    c.set_type(NumericType.U32)
    assert c.text == "0x000000c8"
    assert c.render().hexadecimal == "0x000000c8"
    c.set_format(DEC)
    assert c.text == "200"
    c.set_type(NumericType.U8)
    assert c.render().decimal == "200"


def test_value_survives_hex_detour_signed() -> None:
    c = Converter(NumericType.I8, DEC)
    assert c.set_text("-56")
    c.set_format(HEX)
    assert c.text == "0xc8"
    c.set_type(NumericType.I32)
    assert c.render().hexadecimal == "0x000000c8"
    c.set_format(DEC)
    c.set_type(NumericType.I8)
    assert c.render().decimal == "-56"


def test_hex_narrowing_truncates_and_keeps_raw() -> None:
    c = Converter(NumericType.U32, HEX)
    assert c.set_text("0x12345678")
    c.set_type(NumericType.U8)
    assert c.text == "0x78"
    assert c.render().hexadecimal == "0x78"
    c.set_type(NumericType.U32)
    assert c.text == "0x12345678"


def test_hex_widening_after_edit_zero_extends() -> None:
    c = Converter(NumericType.U32, HEX)
    c.set_text("0x12345678")
    c.set_type(NumericType.U8)
    assert c.set_text("0xff")
    c.set_type(NumericType.U32)
    assert c.text == "0x000000ff"


def test_float_to_integer_truncates_and_saturates() -> None:
    c = Converter(NumericType.F32, DEC)
    c.set_text("-3.75")
    c.set_type(NumericType.I16)
    assert c.text == "-3"
    assert c.value == -3

    c = Converter(NumericType.F64, DEC)
    c.set_text("1e10")
    c.set_type(NumericType.I16)
    assert c.value == 32767

    c = Converter(NumericType.F64, DEC)
    c.set_text("-1e10")
    c.set_type(NumericType.U8)
    assert c.value == 0

    c = Converter(NumericType.F64, DEC)
    c.set_text("nan")
    c.set_type(NumericType.I32)
    assert c.value == 0


def test_signed_to_unsigned_wraps() -> None:
    c = Converter(NumericType.I8, DEC)
    c.set_text("-1")
    c.set_type(NumericType.U8)
    assert c.text == "255"

    c = Converter(NumericType.I8, DEC)
    c.set_text("-1")
    c.set_type(NumericType.U32)
    assert c.text == "4294967295"

    c = Converter(NumericType.I16, DEC)
    c.set_text("42")
    c.set_type(NumericType.U16)
    assert c.text == "42"


def test_integer_to_float_casts() -> None:
    c = Converter(NumericType.I32, DEC)
    c.set_text("7")
    c.set_type(NumericType.F32)
    assert c.text == "7.0"
    assert c.value == 7.0

    c = Converter(NumericType.U64, DEC)
    c.set_text(str(2**64 - 1))
    c.set_type(NumericType.F16)
    assert c.text == "inf"
    assert math.isinf(c.value)


def test_other_changes_reparse_text() -> None:
    c = Converter(NumericType.U8, DEC)
    c.set_text("200")
    c.set_type(NumericType.I8)
    # "200" does not fit Int8, so the raw byte is kept
    assert c.text == "200"
    assert c.render().decimal == "-56"

    c = Converter(NumericType.U8, DEC)
    c.set_text("100")
    c.set_type(NumericType.U16)
    assert c.value == 100

    c = Converter(NumericType.F32, DEC)
    c.set_text("1.5")
    c.set_type(NumericType.F64)
    assert c.value == 1.5


def test_rejected_text_keeps_value() -> None:
    c = Converter(NumericType.U8, DEC)
    c.set_text("12")
    assert c.set_text("12x") is False
    assert c.text == "12x"
    assert c.value == 12


def test_binary_input() -> None:
    c = Converter(NumericType.U8, NumericFormat.BINARY)
    assert c.set_text("0000 0101")
    assert c.value == 5
    assert c.render().binary == "00000101 "


def test_format_change_is_lossless_for_doubles() -> None:
    c = Converter(NumericType.F64, DEC)
    c.set_text("0.1")
    c.set_format(HEX)
    assert c.text == "0x1.999999999999ap-4"
    c.set_format(DEC)
    assert c.text == "0.1"
