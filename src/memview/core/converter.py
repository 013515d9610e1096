"""Value converter: one working value viewed and edited as any numeric type.

The working value is an 8-byte raw buffer. Changing the display format only
re-renders it. Changing the type follows these rules:

* Hexadecimal format: the raw bits are kept as they are. Views show the low
  ``width(type)`` bytes, so narrowing truncates; widening shows whatever was
  stored above, which is zero after any edit (zero-extension).
* Decimal/Binary format, float to integer: truncation toward zero, saturated
  to the target range (NaN becomes 0).
* Decimal/Binary format, signed integer to unsigned integer: the value modulo
  ``2**bits`` of the new type.
* Decimal/Binary format, integer to float: numeric cast. Values beyond the
  float's range become an infinity of the same sign.
* Anything else keeps the input text and re-parses it under the new type.
  If it no longer parses, the raw value is kept until the next edit.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from memview.core.codec import (
    bits_to_float,
    bits_to_int,
    encode,
    float_to_bits,
    format_bits,
    int_to_bits,
)
from memview.core.types import NumericFormat, NumericType

logger = logging.getLogger("memview.converter")

RAW_SIZE = 8


@dataclass
class ConversionState:
    raw: bytearray = field(default_factory=lambda: bytearray(RAW_SIZE))
    numeric_type: NumericType = NumericType.U32
    numeric_format: NumericFormat = NumericFormat.HEXADECIMAL
    text: str = ""

    @property
    def bits(self) -> int:
        """Raw buffer as an unsigned 64-bit pattern (little-endian storage)."""
        return int.from_bytes(self.raw, "little")


@dataclass(frozen=True)
class ConverterView:
    decimal: str
    hexadecimal: str
    binary: str


class Converter:
    def __init__(
        self,
        numeric_type: NumericType = NumericType.U32,
        numeric_format: NumericFormat = NumericFormat.HEXADECIMAL,
    ) -> None:
        self.state = ConversionState(numeric_type=numeric_type, numeric_format=numeric_format)
        self.state.text = self._render_text()

    @property
    def numeric_type(self) -> NumericType:
        return self.state.numeric_type

    @property
    def numeric_format(self) -> NumericFormat:
        return self.state.numeric_format

    @property
    def text(self) -> str:
        return self.state.text

    @property
    def bits(self) -> int:
        """Raw bits visible at the current type's width."""
        t = self.state.numeric_type
        return self.state.bits & ((1 << t.bits) - 1)

    @property
    def value(self) -> int | float:
        t = self.state.numeric_type
        if t.is_float:
            return bits_to_float(self.bits, t)
        return bits_to_int(self.bits, t)

    def _store(self, bits: int) -> None:
        self.state.raw[:] = bits.to_bytes(RAW_SIZE, "little")

    def _render_text(self) -> str:
        return format_bits(self.bits, self.state.numeric_type, self.state.numeric_format)

    def set_format(self, numeric_format: NumericFormat) -> None:
        if numeric_format is self.state.numeric_format:
            return
        self.state.numeric_format = numeric_format
        self.state.text = self._render_text()

    def set_type(self, numeric_type: NumericType) -> None:
        prev = self.state.numeric_type
        if numeric_type is prev:
            return

        if self.state.numeric_format is NumericFormat.HEXADECIMAL:
            self.state.numeric_type = numeric_type
            self.state.text = self._render_text()
            return

        old_value = self.value
        self.state.numeric_type = numeric_type

        if prev.is_float and numeric_type.is_integer:
            self._store(int_to_bits(_narrow(float(old_value), numeric_type), numeric_type))
        elif prev.is_integer and numeric_type.is_integer and prev.signed and not numeric_type.signed:
            self._store(int_to_bits(int(old_value), numeric_type))
        elif prev.is_integer and numeric_type.is_float:
            self._store(_cast_to_float_bits(int(old_value), numeric_type))
        else:
            bits = encode(self.state.text, numeric_type, self.state.numeric_format)
            if bits is None:
                logger.debug(
                    "keeping raw value: %r does not parse as %s", self.state.text, numeric_type.label
                )
            else:
                self._store(bits)
            return
        self.state.text = self._render_text()

    def set_text(self, text: str) -> bool:
        """Replace the input text; returns whether it was accepted.

        Rejected text is kept in the input buffer but the value is unchanged.
        """
        self.state.text = text
        bits = encode(text, self.state.numeric_type, self.state.numeric_format)
        if bits is None:
            logger.debug(
                "rejected %s %s input %r",
                self.state.numeric_type.label,
                self.state.numeric_format.label,
                text,
            )
            return False
        self._store(bits)
        return True

    def render(self) -> ConverterView:
        t = self.state.numeric_type
        bits = self.bits
        return ConverterView(
            decimal=format_bits(bits, t, NumericFormat.DECIMAL),
            hexadecimal=format_bits(bits, t, NumericFormat.HEXADECIMAL),
            binary=format_bits(bits, t, NumericFormat.BINARY),
        )


def _narrow(value: float, target: NumericType) -> int:
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return target.max_value if value > 0 else target.min_value
    return max(target.min_value, min(target.max_value, math.trunc(value)))


def _cast_to_float_bits(value: int, target: NumericType) -> int:
    try:
        as_float = float(value)
    except OverflowError:
        as_float = math.copysign(math.inf, value)
    bits = float_to_bits(as_float, target)
    if bits is None:
        bits = float_to_bits(math.copysign(math.inf, as_float), target)
    return bits or 0
