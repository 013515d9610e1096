"""Byte-order helpers that never depend on the host's native order."""

from __future__ import annotations

import sys
from typing import Literal

# Type alias for endianness
Endian = Literal["little", "big"]


def normalize_endian(value: str | None) -> Endian | None:
    """Normalize an endian value from config or the command line.

    Accepts 'little'/'big' and the short forms 'le'/'be'.

    Raises:
        ValueError: If value is not a recognised byte order
    """
    if value is None:
        return None

    value_lower = value.lower()
    if value_lower in ("le", "little"):
        return "little"
    if value_lower in ("be", "big"):
        return "big"
    raise ValueError(f"Invalid endian '{value}'. Expected 'little' or 'big'.")


def host_endian() -> Endian:
    """Native byte order of the running interpreter, read on every call."""
    return "little" if sys.byteorder == "little" else "big"


def to_native(data: bytes, endian: Endian, host: Endian | None = None) -> bytes:
    """Copy `data` stored in `endian` order into `host` order.

    A straight copy when both orders agree, a reversed copy otherwise.
    """
    host = host or host_endian()
    if endian == host:
        return bytes(data)
    return bytes(reversed(data))


def from_native(data: bytes, endian: Endian, host: Endian | None = None) -> bytes:
    """Inverse of `to_native`; the copy is its own inverse."""
    return to_native(data, endian, host)


def bits_from_bytes(data: bytes, endian: Endian, host: Endian | None = None) -> int:
    """Unsigned bit pattern of `data` read in `endian` order.

    The bytes are first normalised to host order and then read natively, so
    the result is identical whichever `host` is assumed.
    """
    host = host or host_endian()
    return int.from_bytes(to_native(data, endian, host), host, signed=False)


def bits_to_bytes(bits: int, width: int, endian: Endian) -> bytes:
    return bits.to_bytes(width, endian, signed=False)
