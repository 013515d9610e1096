from __future__ import annotations

import pytest

from memview.core.endian import (
    bits_from_bytes,
    bits_to_bytes,
    from_native,
    host_endian,
    normalize_endian,
    to_native,
)


def test_normalize_endian() -> None:
    assert normalize_endian("LE") == "little"
    assert normalize_endian("big") == "big"
    assert normalize_endian(None) is None
    with pytest.raises(ValueError):
        normalize_endian("middle")


def test_host_endian_is_valid() -> None:
    assert host_endian() in ("little", "big")


def test_to_native_copies_or_reverses() -> None:
    data = b"\x01\x02\x03"
    assert to_native(data, "little", "little") == data
    assert to_native(data, "big", "little") == b"\x03\x02\x01"
    assert from_native(to_native(data, "big", "little"), "big", "little") == data


@pytest.mark.parametrize("endian", ["little", "big"])
def test_bits_are_host_independent(endian: str) -> None:
    data = b"\x12\x34\x56"
    a = bits_from_bytes(data, endian, "little")  # type: ignore[arg-type]
    b = bits_from_bytes(data, endian, "big")  # type: ignore[arg-type]
    assert a == b == int.from_bytes(data, endian)  # type: ignore[arg-type]
    assert bits_to_bytes(a, 3, endian) == data  # type: ignore[arg-type]
