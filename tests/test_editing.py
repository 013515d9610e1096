from __future__ import annotations

from memview.core.editing import ByteEditor
from memview.core.io import BufferSource


def test_two_digits_write_and_advance() -> None:
    data = bytearray(4)
    ed = ByteEditor(BufferSource(data))
    assert ed.begin(1)
    assert ed.feed("a")
    assert data[1] == 0
    assert ed.feed("5")
    assert data[1] == 0xA5
    assert ed.address == 2
    assert ed.buffer == ""


def test_non_hex_input_is_not_consumed() -> None:
    ed = ByteEditor(BufferSource(bytearray(4)))
    ed.begin(0)
    assert not ed.feed("g")
    assert not ed.feed("\r")
    assert not ed.feed("12")
    assert ed.buffer == ""


def test_commit_single_digit() -> None:
    data = bytearray(b"\xff\xff")
    ed = ByteEditor(BufferSource(data))
    ed.begin(0)
    ed.feed("7")
    assert ed.commit() == 0
    assert data == bytearray(b"\x07\xff")
    assert ed.commit() is None


def test_editing_stops_at_end_of_buffer() -> None:
    data = bytearray(2)
    ed = ByteEditor(BufferSource(data))
    ed.begin(1)
    ed.feed("f")
    ed.feed("f")
    assert data[1] == 0xFF
    assert not ed.active


def test_read_only_source_refuses_edit() -> None:
    ed = ByteEditor(BufferSource(b"\x00\x00"))
    assert not ed.begin(0)
    assert not ed.active
    assert not ed.feed("1")


def test_out_of_range_and_cancel() -> None:
    ed = ByteEditor(BufferSource(bytearray(2)))
    assert not ed.begin(2)
    ed.begin(0)
    ed.feed("1")
    ed.cancel()
    assert not ed.active
    assert ed.buffer == ""


def test_edit_goes_through_write_fn() -> None:
    writes = []
    src = BufferSource(b"\x00\x00", write_fn=lambda data, off, value: writes.append((off, value)))
    ed = ByteEditor(src)
    assert ed.begin(0)
    ed.feed("4")
    ed.feed("2")
    assert writes == [(0, 0x42)]
