"""Two-digit hexadecimal editing of one byte at a time.

Typing the second digit (or committing early) writes the byte through the
source and moves the edit to the next address, until the end of the buffer.
"""

from __future__ import annotations

import logging
import string

from memview.core.io import ByteSource

logger = logging.getLogger("memview.editing")


class ByteEditor:
    def __init__(self, source: ByteSource) -> None:
        self.source = source
        self.address: int | None = None
        self.buffer = ""

    @property
    def active(self) -> bool:
        return self.address is not None

    def begin(self, address: int) -> bool:
        """Start editing `address`; refused for read-only sources."""
        self.buffer = ""
        if self.source.read_only or not 0 <= address < self.source.size:
            self.address = None
            return False
        self.address = address
        return True

    def cancel(self) -> None:
        self.address = None
        self.buffer = ""

    def feed(self, char: str) -> bool:
        """Take one hex digit; False when `char` is not consumed."""
        if self.address is None or len(char) != 1 or char not in string.hexdigits:
            return False
        self.buffer += char.upper()
        if len(self.buffer) == 2:
            self.commit()
        return True

    def commit(self) -> int | None:
        """Write the pending digits; returns the address written, if any."""
        if self.address is None or not self.buffer:
            return None
        addr = self.address
        value = int(self.buffer, 16)
        self.source.write_byte(addr, value)
        logger.debug("edited 0x%x -> 0x%02X", addr, value)
        self.buffer = ""
        self.address = addr + 1 if addr + 1 < self.source.size else None
        return addr
