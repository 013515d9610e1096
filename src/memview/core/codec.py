"""Typed decoding of raw bytes into binary/decimal/hexadecimal text, and back.

All conversions go through an unsigned bit pattern of the type's width:
`decode` reads bytes in the requested byte order into such a pattern and
renders it; `encode` parses text into one. The host byte order never leaks
into the result.
"""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass

from memview.core.endian import Endian, bits_from_bytes, bits_to_bytes
from memview.core.io import ByteSource, InvalidOffset, as_source
from memview.core.types import NumericFormat, NumericType

MAX_BINARY_BITS = 64

_FLOAT_CODES = {
    NumericType.F16: "<e",
    NumericType.F32: "<f",
    NumericType.F64: "<d",
}

_FLOAT_LAYOUT = {  # (exponent bits, mantissa bits)
    NumericType.F16: (5, 10),
    NumericType.F32: (8, 23),
    NumericType.F64: (11, 52),
}

_HEX_RE = re.compile(r"(?:0[xX])?([0-9a-fA-F]+)")
_DEC_RE = re.compile(r"[+-]?[0-9]+")
_BIN_RE = re.compile(r"[01]+")
_FLOAT_DEC_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_FLOAT_HEX_RE = re.compile(
    r"[+-]?(?:0[xX])?(?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+"
)
_INF_RE = re.compile(r"[+-]?inf(?:inity)?", re.IGNORECASE)
# sign and mantissa survive: "-nan", "nan(0x1)"
_NAN_RE = re.compile(r"([+-]?)nan(?:\(0[xX]([0-9a-fA-F]+)\))?", re.IGNORECASE)


class CodecError(ValueError):
    """Unsupported type/format combination or an over-wide binary rendering."""


@dataclass(frozen=True)
class PreviewValues:
    decimal: str
    hexadecimal: str
    binary: str


def format_binary(buf: bytes) -> str:
    """Render `buf` as space-terminated bit groups, last byte first.

    >>> format_binary(b"\\x01\\xff")
    '11111111 00000001 '
    """
    if len(buf) * 8 > MAX_BINARY_BITS:
        raise CodecError(f"binary rendering supports at most {MAX_BINARY_BITS} bits")
    return "".join(f"{b:08b} " for b in reversed(buf))


def bits_to_int(bits: int, ntype: NumericType) -> int:
    if ntype.signed and bits >> (ntype.bits - 1):
        return bits - (1 << ntype.bits)
    return bits


def int_to_bits(value: int, ntype: NumericType) -> int:
    """Two's complement pattern of `value` at the type's width (wraps)."""
    return value & ((1 << ntype.bits) - 1)


def bits_to_float(bits: int, ntype: NumericType) -> float:
    code = _FLOAT_CODES.get(ntype)
    if code is None:
        raise CodecError(f"{ntype.label} is not a floating type")
    return struct.unpack(code, bits.to_bytes(ntype.width, "little"))[0]


def float_to_bits(value: float, ntype: NumericType) -> int | None:
    """Bit pattern of `value` at the type's precision, None when it overflows."""
    code = _FLOAT_CODES.get(ntype)
    if code is None:
        raise CodecError(f"{ntype.label} is not a floating type")
    try:
        packed = struct.pack(code, value)
    except (OverflowError, struct.error):
        return None
    return int.from_bytes(packed, "little")


def _shortest_single(value: float) -> str:
    # fewest significant digits that still reads back as the same float32
    for precision in range(1, 10):
        text = f"{value:.{precision}g}"
        bits = float_to_bits(float(text), NumericType.F32)
        if bits is not None and bits_to_float(bits, NumericType.F32) == value:
            return repr(float(text))
    return repr(value)


def _format_nan(bits: int, ntype: NumericType) -> str | None:
    """NaN text keeping sign and payload, or None when `bits` is not a NaN.

    The default quiet NaN is plain ``nan``/``-nan``; any other payload is
    spelled out as ``nan(0x...)``.
    """
    exp_bits, man_bits = _FLOAT_LAYOUT[ntype]
    exponent = (bits >> man_bits) & ((1 << exp_bits) - 1)
    mantissa = bits & ((1 << man_bits) - 1)
    if exponent != (1 << exp_bits) - 1 or mantissa == 0:
        return None
    sign = "-" if bits >> (ntype.bits - 1) else ""
    if mantissa == 1 << (man_bits - 1):
        return f"{sign}nan"
    return f"{sign}nan(0x{mantissa:x})"


def _nan_bits(m: re.Match[str], ntype: NumericType) -> int | None:
    exp_bits, man_bits = _FLOAT_LAYOUT[ntype]
    mantissa = int(m.group(2), 16) if m.group(2) else 1 << (man_bits - 1)
    if mantissa == 0 or mantissa >> man_bits:
        return None
    sign = 1 if m.group(1) == "-" else 0
    return (sign << (ntype.bits - 1)) | (((1 << exp_bits) - 1) << man_bits) | mantissa


def _format_float_dec(value: float, ntype: NumericType) -> str:
    if math.isinf(value):
        return repr(value)
    if ntype is NumericType.F64:
        return repr(value)
    # half values are widened to single precision before formatting
    return _shortest_single(value)


def _format_float_hex(value: float) -> str:
    """C-style %a literal: 0x1.8p+1, 0x0p+0, -0x1p-2."""
    if math.isinf(value):
        return repr(value)
    mantissa, exponent = value.hex().split("p")
    if "." in mantissa:
        mantissa = mantissa.rstrip("0").rstrip(".")
    return f"{mantissa}p{exponent}"


def format_bits(bits: int, ntype: NumericType, fmt: NumericFormat) -> str:
    """Render a `ntype.width`-byte bit pattern in the given format."""
    bits &= (1 << ntype.bits) - 1
    if fmt is NumericFormat.BINARY:
        return format_binary(bits.to_bytes(ntype.width, "little"))
    if ntype.is_float:
        nan = _format_nan(bits, ntype)
        if nan is not None:
            return nan
        value = bits_to_float(bits, ntype)
        if fmt is NumericFormat.DECIMAL:
            return _format_float_dec(value, ntype)
        if fmt is NumericFormat.HEXADECIMAL:
            return _format_float_hex(value)
    else:
        if fmt is NumericFormat.DECIMAL:
            return str(bits_to_int(bits, ntype))
        if fmt is NumericFormat.HEXADECIMAL:
            return f"0x{bits:0{ntype.width * 2}x}"
    raise CodecError(f"unsupported combination {ntype.label}/{fmt.label}")


def decode_bytes(
    data: bytes,
    ntype: NumericType,
    fmt: NumericFormat,
    endian: Endian,
    *,
    host: Endian | None = None,
) -> str:
    """Decode up to `ntype.width` bytes stored in `endian` order.

    Fewer bytes than the type's width is a short read: the missing
    high-order bytes are zero. Binary output covers only the bytes given.
    """
    if not data:
        raise CodecError("nothing to decode")
    if len(data) > ntype.width:
        raise CodecError(f"{ntype.label} takes at most {ntype.width} bytes, got {len(data)}")
    bits = bits_from_bytes(data, endian, host)
    if fmt is NumericFormat.BINARY:
        return format_binary(bits.to_bytes(len(data), "little"))
    return format_bits(bits, ntype, fmt)


def decode(
    source: ByteSource | bytes,
    offset: int,
    ntype: NumericType,
    fmt: NumericFormat,
    endian: Endian,
    *,
    host: Endian | None = None,
) -> str:
    """Decode the value of `ntype` at `offset` of `source`.

    Reads `min(width, size - offset)` bytes through the source's read
    function. Offsets outside the buffer raise `InvalidOffset`.
    """
    src = as_source(source)
    if offset < 0 or offset >= src.size:
        raise InvalidOffset(f"offset {offset} outside buffer of {src.size} bytes")
    count = min(ntype.width, src.size - offset)
    return decode_bytes(src.read(offset, count), ntype, fmt, endian, host=host)


def preview(
    source: ByteSource | bytes, offset: int, ntype: NumericType, endian: Endian
) -> PreviewValues:
    return PreviewValues(
        decimal=decode(source, offset, ntype, NumericFormat.DECIMAL, endian),
        hexadecimal=decode(source, offset, ntype, NumericFormat.HEXADECIMAL, endian),
        binary=decode(source, offset, ntype, NumericFormat.BINARY, endian),
    )


def _parse_float_special(text: str, ntype: NumericType) -> tuple[bool, int | None]:
    """Handle nan/inf spellings; the flag says whether `text` was one."""
    m = _NAN_RE.fullmatch(text)
    if m is not None:
        return True, _nan_bits(m, ntype)
    if _INF_RE.fullmatch(text) is not None:
        return True, float_to_bits(float(text), ntype)
    return False, None


def _parse_hex(text: str, ntype: NumericType) -> int | None:
    if ntype.is_float:
        special, bits = _parse_float_special(text, ntype)
        if special:
            return bits
        if _FLOAT_HEX_RE.fullmatch(text) is not None:
            try:
                value = float.fromhex(text)
            except (ValueError, OverflowError):
                return None
            return float_to_bits(value, ntype)
    m = _HEX_RE.fullmatch(text)
    if m is None:
        return None
    bits = int(m.group(1), 16)
    if bits >> ntype.bits:
        return None
    return bits


def _parse_decimal(text: str, ntype: NumericType) -> int | None:
    if ntype.is_float:
        special, bits = _parse_float_special(text, ntype)
        if special:
            return bits
        if _FLOAT_DEC_RE.fullmatch(text) is None:
            return None
        value = float(text)
        if math.isinf(value):
            return None
        return float_to_bits(value, ntype)
    if _DEC_RE.fullmatch(text) is None:
        return None
    value = int(text)
    if not ntype.min_value <= value <= ntype.max_value:
        return None
    return int_to_bits(value, ntype)


def _parse_binary(text: str, ntype: NumericType) -> int | None:
    digits = "".join(text.split()).replace("_", "")
    if _BIN_RE.fullmatch(digits) is None or len(digits) > ntype.bits:
        return None
    return int(digits, 2)


def encode(text: str, ntype: NumericType, fmt: NumericFormat) -> int | None:
    """Parse `text` into the raw bit pattern of `ntype`.

    Returns None for malformed or out-of-range text; callers keep their
    previous value in that case.
    """
    text = text.strip()
    if not text:
        return None
    if fmt is NumericFormat.HEXADECIMAL:
        return _parse_hex(text, ntype)
    if fmt is NumericFormat.DECIMAL:
        return _parse_decimal(text, ntype)
    if fmt is NumericFormat.BINARY:
        return _parse_binary(text, ntype)
    raise CodecError(f"unsupported format {fmt!r}")


def encode_bytes(
    text: str, ntype: NumericType, fmt: NumericFormat, endian: Endian
) -> bytes | None:
    bits = encode(text, ntype, fmt)
    if bits is None:
        return None
    return bits_to_bytes(bits, ntype.width, endian)
