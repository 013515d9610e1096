from __future__ import annotations

import logging
import os
from collections import OrderedDict
from collections.abc import Callable
from contextlib import suppress
from typing import Protocol, runtime_checkable

try:
    import mmap as _mmap_mod  # type: ignore
except Exception:  # pragma: no cover - platform-specific
    _mmap_mod = None  # type: ignore

ReadFn = Callable[[bytes, int], int]
WriteFn = Callable[[bytearray, int, int], None]
HighlightFn = Callable[[bytes, int], bool]

logger = logging.getLogger("memview.io")


class InvalidOffset(ValueError):
    """Raised when an offset or length lies outside what a source can serve."""


@runtime_checkable
class ByteSource(Protocol):
    """Flat addressable byte sequence of known length."""

    @property
    def size(self) -> int: ...

    def byte_at(self, offset: int) -> int | None: ...

    def read(self, offset: int, length: int) -> bytes: ...

    def is_highlighted(self, offset: int) -> bool: ...

    @property
    def read_only(self) -> bool: ...

    def write_byte(self, offset: int, value: int) -> None: ...


def _check(offset: int, length: int = 0) -> None:
    if offset < 0:
        raise InvalidOffset("offset must be >= 0")
    if length < 0:
        raise InvalidOffset("length must be >= 0")


class BufferSource:
    """In-memory byte source.

    `read_fn(data, offset)` replaces direct indexing (non-contiguous or
    virtualized memory) and `write_fn(data, offset, value)` replaces direct
    assignment. `highlight_fn(data, offset)` is an externally driven
    highlight predicate. All are optional.

    Immutable data without a `write_fn` is always read-only.
    """

    def __init__(
        self,
        data: bytes | bytearray | memoryview,
        *,
        read_fn: ReadFn | None = None,
        write_fn: WriteFn | None = None,
        highlight_fn: HighlightFn | None = None,
        read_only: bool = False,
    ) -> None:
        self._data = data
        self._read_fn = read_fn
        self._write_fn = write_fn
        self._highlight_fn = highlight_fn
        mutable = isinstance(data, bytearray) or (
            isinstance(data, memoryview) and not data.readonly
        )
        self._read_only = read_only or (write_fn is None and not mutable)

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def data(self) -> bytes | bytearray | memoryview:
        return self._data

    def byte_at(self, offset: int) -> int | None:
        _check(offset)
        if offset >= len(self._data):
            return None
        if self._read_fn is not None:
            return int(self._read_fn(self._data, offset)) & 0xFF
        return self._data[offset]

    def read(self, offset: int, length: int) -> bytes:
        _check(offset, length)
        end = min(len(self._data), offset + length)
        if offset >= end:
            return b""
        if self._read_fn is None:
            return bytes(self._data[offset:end])
        return bytes(int(self._read_fn(self._data, i)) & 0xFF for i in range(offset, end))

    def is_highlighted(self, offset: int) -> bool:
        if self._highlight_fn is None or offset < 0 or offset >= len(self._data):
            return False
        return bool(self._highlight_fn(self._data, offset))

    @property
    def read_only(self) -> bool:
        return self._read_only

    def write_byte(self, offset: int, value: int) -> None:
        """Store `value` at `offset` through `write_fn` or by assignment."""
        if self._read_only:
            raise PermissionError("source is read-only")
        _check(offset)
        if offset >= len(self._data):
            raise InvalidOffset(f"offset {offset} outside buffer of {len(self._data)} bytes")
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte value must be in 0..255, got {value}")
        if self._write_fn is not None:
            self._write_fn(self._data, offset, value)  # type: ignore[arg-type]
        else:
            self._data[offset] = value  # type: ignore[index]
        logger.debug("wrote 0x%02x at 0x%x", value, offset)

    def write(self, offset: int, data: bytes) -> None:
        """Store `data` starting at `offset`; nothing is written if it does not fit."""
        if self._read_only:
            raise PermissionError("source is read-only")
        _check(offset, len(data))
        if offset + len(data) > len(self._data):
            raise InvalidOffset(f"{len(data)} bytes at {offset} run past the end of the buffer")
        for i, value in enumerate(data):
            self.write_byte(offset + i, value)


class PagedReader:
    """Bounds-checked byte source backed by a file.

    Prefers `mmap`; falls back to buffered reads with a small LRU page cache.
    The full file is never loaded into memory at once.
    """

    def __init__(
        self,
        path: str,
        *,
        page_size: int = 64 * 1024,
        cache_pages: int = 16,
        use_mmap: bool = True,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if cache_pages <= 0:
            raise ValueError("cache_pages must be positive")

        self._path = path
        try:
            st = os.stat(path)
        except FileNotFoundError:
            raise FileNotFoundError(f"File not found: {path}") from None

        self._size = int(st.st_size)
        self._fh = open(path, "rb", buffering=0)  # noqa: SIM115
        self._page_size = int(page_size)
        self._cache_limit = int(cache_pages)
        self._pages: OrderedDict[int, bytes] = OrderedDict()

        self._mmap = None
        if use_mmap and _mmap_mod is not None and self._size > 0:
            try:
                self._mmap = _mmap_mod.mmap(
                    self._fh.fileno(), length=0, access=_mmap_mod.ACCESS_READ
                )
            except Exception:
                # buffered page cache instead
                self._mmap = None

    def close(self) -> None:
        if getattr(self, "_mmap", None) is not None:
            with suppress(Exception):
                self._mmap.close()  # type: ignore[union-attr]
            self._mmap = None
        with suppress(Exception):
            self._fh.close()

    def __enter__(self) -> PagedReader:  # pragma: no cover - sugar
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - sugar
        self.close()

    @property
    def size(self) -> int:
        return self._size

    @property
    def path(self) -> str:
        return self._path

    def _page(self, index: int) -> bytes:
        if index in self._pages:
            self._pages.move_to_end(index)
            return self._pages[index]

        start = index * self._page_size
        data = b""
        if start < self._size:
            self._fh.seek(start)
            data = self._fh.read(min(self._page_size, self._size - start))

        self._pages[index] = data
        if len(self._pages) > self._cache_limit:
            self._pages.popitem(last=False)
        return data

    def read(self, offset: int, length: int) -> bytes:
        """Read up to `length` bytes at `offset`, truncated at end of file."""
        _check(offset, length)
        if length == 0 or offset >= self._size:
            return b""

        end = min(self._size, offset + length)
        if self._mmap is not None:
            return bytes(self._mmap[offset:end])  # type: ignore[index]

        result = bytearray()
        pos = offset
        while pos < end:
            index = pos // self._page_size
            page = self._page(index)
            within = pos - index * self._page_size
            take = min(len(page) - within, end - pos)
            if take <= 0:
                break
            result += page[within : within + take]
            pos += take
        return bytes(result)

    def byte_at(self, offset: int) -> int | None:
        """Byte value at `offset`, or None at end of file."""
        _check(offset)
        if offset >= self._size:
            return None
        if self._mmap is not None:
            return self._mmap[offset]  # type: ignore[index]
        index = offset // self._page_size
        page = self._page(index)
        within = offset - index * self._page_size
        return page[within] if within < len(page) else None

    def is_highlighted(self, offset: int) -> bool:
        return False

    @property
    def read_only(self) -> bool:
        return True

    def write_byte(self, offset: int, value: int) -> None:
        raise PermissionError(f"{self._path} is opened read-only")


def as_source(obj: ByteSource | bytes | bytearray | memoryview) -> ByteSource:
    """Wrap raw buffers in a `BufferSource`; pass sources through."""
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BufferSource(obj)
    return obj


def save_to_file(source: ByteSource, path: str) -> int:
    """Write the whole of `source` to `path`; returns the byte count."""
    data = source.read(0, source.size)
    with open(path, "wb") as fh:
        fh.write(data)
    logger.info("saved %d bytes to %s", len(data), path)
    return len(data)
