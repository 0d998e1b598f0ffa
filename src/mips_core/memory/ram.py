"""RAM: bytearray-backed flat memory with a configurable byte order."""

from __future__ import annotations

from typing import Literal

from ..errors import OutOfBoundsAccess

ByteOrder = Literal["little", "big"]

_WIDTHS = (1, 2, 4)
_MASKS = {1: 0xFF, 2: 0xFFFF, 4: 0xFFFFFFFF}


class RAM:
    """Byte-addressable RAM with a base address and fixed size.

    Multi-byte values are assembled in ``byteorder`` (little-endian for
    mipsel images). No alignment is enforced: halfword and word accesses
    may start at any byte address inside the range.
    """

    def __init__(self, base: int, size: int, byteorder: ByteOrder = "little") -> None:
        if byteorder not in ("little", "big"):
            raise ValueError(f"Unknown byte order: {byteorder!r}")
        if size <= 0:
            raise ValueError(f"RAM size must be positive, got {size}")
        self.base = base
        self.size = size
        self.byteorder: ByteOrder = byteorder
        self._data = bytearray(size)

    def _offset(self, addr: int, width: int) -> int:
        """Translate absolute address to internal offset, checking bounds."""
        offset = addr - self.base
        if offset < 0 or offset + width > self.size:
            raise OutOfBoundsAccess(addr, width)
        return offset

    def read(self, addr: int, width: int) -> int:
        """Read an unsigned value of ``width`` bytes (1, 2 or 4)."""
        if width not in _WIDTHS:
            raise ValueError(f"Unsupported access width: {width}")
        off = self._offset(addr, width)
        return int.from_bytes(self._data[off:off + width], self.byteorder)

    def write(self, addr: int, value: int, width: int) -> None:
        """Store the low ``width`` bytes of ``value``."""
        if width not in _WIDTHS:
            raise ValueError(f"Unsupported access width: {width}")
        off = self._offset(addr, width)
        self._data[off:off + width] = (value & _MASKS[width]).to_bytes(
            width, self.byteorder
        )

    def read8(self, addr: int) -> int:
        """Read an unsigned byte."""
        return self.read(addr, 1)

    def read16(self, addr: int) -> int:
        """Read an unsigned 16-bit halfword."""
        return self.read(addr, 2)

    def read32(self, addr: int) -> int:
        """Read an unsigned 32-bit word."""
        return self.read(addr, 4)

    def write8(self, addr: int, value: int) -> None:
        """Write a byte."""
        self.write(addr, value, 1)

    def write16(self, addr: int, value: int) -> None:
        """Write a 16-bit halfword."""
        self.write(addr, value, 2)

    def write32(self, addr: int, value: int) -> None:
        """Write a 32-bit word."""
        self.write(addr, value, 4)

    def load_segment(self, addr: int, data: bytes) -> None:
        """Bulk-load bytes into RAM at an absolute address.

        Copies the entire `data` buffer into memory starting at `addr`.
        Raises OutOfBoundsAccess if the segment extends beyond RAM bounds.

        Args:
            addr: Absolute start address for the load.
            data: Raw bytes to copy into memory.
        """
        if not data:
            return
        off = self._offset(addr, len(data))
        self._data[off : off + len(data)] = data
