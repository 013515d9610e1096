from __future__ import annotations

from pathlib import Path

import pytest

from memview.core.io import (
    BufferSource,
    ByteSource,
    InvalidOffset,
    PagedReader,
    as_source,
    save_to_file,
)


def make_fixture_file(tmp_path: Path, size: int = 5000) -> Path:
    # Deterministic content: 0..255 repeating
    data = bytes(i % 256 for i in range(size))
    p = tmp_path / "fixture.bin"
    p.write_bytes(data)
    return p


@pytest.mark.parametrize("use_mmap", [True, False])
def test_paged_read_exact_ranges(tmp_path: Path, use_mmap: bool) -> None:
    path = make_fixture_file(tmp_path)
    with PagedReader(str(path), use_mmap=use_mmap, page_size=256, cache_pages=2) as r:
        assert r.read(0, 16) == bytes(range(16))
        off, ln = 1234, 777
        assert r.read(off, ln) == bytes(i % 256 for i in range(off, off + ln))
        # revisit an evicted page
        assert r.read(0, 4) == bytes(range(4))


@pytest.mark.parametrize("use_mmap", [True, False])
def test_paged_read_past_eof_truncated(tmp_path: Path, use_mmap: bool) -> None:
    path = make_fixture_file(tmp_path, size=4097)
    with PagedReader(str(path), use_mmap=use_mmap) as r:
        start = r.size - 10
        out = r.read(start, 100)
        assert out == bytes(i % 256 for i in range(start, r.size))
        assert r.read(r.size, 10) == b""
        assert r.byte_at(r.size) is None
        assert r.byte_at(256) == 0


@pytest.mark.parametrize("use_mmap", [True, False])
def test_paged_negative_offsets_raise(tmp_path: Path, use_mmap: bool) -> None:
    path = make_fixture_file(tmp_path, size=100)
    with PagedReader(str(path), use_mmap=use_mmap) as r:
        with pytest.raises(InvalidOffset):
            r.read(-1, 1)
        with pytest.raises(InvalidOffset):
            r.byte_at(-5)
        with pytest.raises(InvalidOffset):
            r.read(0, -1)
        assert not r.is_highlighted(3)


def test_paged_empty_file(tmp_path: Path) -> None:
    p = tmp_path / "empty.bin"
    p.write_bytes(b"")
    with PagedReader(str(p)) as r:
        assert r.size == 0
        assert r.read(0, 10) == b""


def test_paged_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        PagedReader(str(tmp_path / "nope.bin"))


def test_buffer_source_reads_through_read_fn() -> None:
    calls = []

    def read_fn(data: bytes, off: int) -> int:
        calls.append(off)
        return data[off] + 1

    src = BufferSource(b"\x00\x01\xff", read_fn=read_fn)
    assert src.read(0, 10) == b"\x01\x02\x00"
    assert src.byte_at(1) == 2
    assert src.byte_at(3) is None
    assert calls == [0, 1, 2, 1]


def test_buffer_source_highlight_fn() -> None:
    src = BufferSource(bytes(8), highlight_fn=lambda data, off: off % 2 == 0)
    assert src.is_highlighted(2)
    assert not src.is_highlighted(3)
    assert not src.is_highlighted(8)
    assert not BufferSource(bytes(8)).is_highlighted(2)


def test_sources_satisfy_protocol(tmp_path: Path) -> None:
    src = as_source(b"abc")
    assert isinstance(src, BufferSource)
    assert isinstance(src, ByteSource)
    assert as_source(src) is src
    with PagedReader(str(make_fixture_file(tmp_path, 10))) as r:
        assert isinstance(r, ByteSource)


def test_buffer_source_write_byte() -> None:
    data = bytearray(4)
    src = BufferSource(data)
    assert not src.read_only
    src.write_byte(2, 0x7F)
    assert data == bytearray(b"\x00\x00\x7f\x00")
    with pytest.raises(InvalidOffset):
        src.write_byte(4, 1)
    with pytest.raises(InvalidOffset):
        src.write_byte(-1, 1)
    with pytest.raises(ValueError):
        src.write_byte(0, 256)


def test_buffer_source_write_is_all_or_nothing() -> None:
    data = bytearray(4)
    src = BufferSource(data)
    src.write(1, b"\x01\x02")
    assert data == bytearray(b"\x00\x01\x02\x00")
    with pytest.raises(InvalidOffset):
        src.write(3, b"\xaa\xbb")
    assert data[3] == 0


def test_read_only_sources_reject_writes(tmp_path: Path) -> None:
    assert BufferSource(b"abc").read_only
    assert BufferSource(memoryview(b"abc")).read_only
    flagged = BufferSource(bytearray(3), read_only=True)
    assert flagged.read_only
    with pytest.raises(PermissionError):
        flagged.write_byte(0, 1)
    with pytest.raises(PermissionError):
        flagged.write(0, b"\x01")
    with PagedReader(str(make_fixture_file(tmp_path, 10))) as r:
        assert r.read_only
        with pytest.raises(PermissionError):
            r.write_byte(0, 1)


def test_write_fn_makes_immutable_data_writable() -> None:
    shadow = bytearray(3)

    def write_fn(data: bytearray, off: int, value: int) -> None:
        shadow[off] = value

    src = BufferSource(b"\x00\x00\x00", write_fn=write_fn)
    assert not src.read_only
    src.write_byte(1, 9)
    assert shadow == bytearray(b"\x00\x09\x00")


def test_save_to_file(tmp_path: Path) -> None:
    src = BufferSource(bytearray(b"\x01\x02\x03"))
    src.write_byte(0, 0xFF)
    out = tmp_path / "out.bin"
    assert save_to_file(src, str(out)) == 3
    assert out.read_bytes() == b"\xff\x02\x03"
