"""Memory hex dump: renders RAM as bytes or as 32-bit words, 16 bytes per row."""

from __future__ import annotations

from ..memory.ram import RAM

_ROW_BYTES = 16


def _read_row(memory: RAM, row_addr: int) -> list[int | None]:
    """Bytes of one row; None where the address is outside the RAM."""
    row: list[int | None] = []
    for offset in range(_ROW_BYTES):
        try:
            row.append(memory.read8((row_addr + offset) & 0xFFFFFFFF))
        except MemoryError:
            row.append(None)
    return row


def _bytes_column(row: list[int | None]) -> str:
    cells = ["??" if b is None else f"{b:02X}" for b in row]
    return " ".join(cells[:8]) + "  " + " ".join(cells[8:])


def _words_column(row: list[int | None], byteorder: str) -> str:
    cells: list[str] = []
    for i in range(0, _ROW_BYTES, 4):
        chunk = row[i:i + 4]
        if any(b is None for b in chunk):
            cells.append("????????")
        else:
            cells.append(f"{int.from_bytes(bytes(chunk), byteorder):08X}")
    return " ".join(cells)


def format_hex_dump(
    memory: RAM,
    start_addr: int,
    num_rows: int = 16,
    *,
    words: bool = False,
) -> str:
    """Format a memory region for display.

    Rows start on a 16-byte boundary at or below ``start_addr``. By default
    each row lists the bytes in address order; with ``words`` it lists four
    32-bit words assembled in the RAM's byte order, which is how register
    values stored with SW read back. Unmapped bytes show as ``??``.
    Every row ends with an ASCII column.
    """
    first = start_addr & ~(_ROW_BYTES - 1)
    lines: list[str] = []
    for n in range(num_rows):
        row_addr = (first + n * _ROW_BYTES) & 0xFFFFFFFF
        row = _read_row(memory, row_addr)
        if words:
            body = _words_column(row, memory.byteorder)
        else:
            body = _bytes_column(row)
        text = "".join(
            chr(b) if b is not None and 0x20 <= b <= 0x7E else "." for b in row
        )
        lines.append(f"0x{row_addr:08X}: {body}  |{text}|")
    return "\n".join(lines)
