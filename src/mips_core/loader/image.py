"""Flat binary image loader: places assembled machine code into RAM."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..memory.ram import RAM

logger = logging.getLogger(__name__)


def read_image(path: str | Path) -> bytes:
    """Read a raw binary image (e.g. ``llvm-objcopy -O binary`` output)."""
    return Path(path).read_bytes()


def load_binary(memory: RAM, data: bytes, base: int) -> int:
    """Copy a flat image into memory at ``base``.

    The image is stored byte for byte; instruction words keep whatever
    byte order the toolchain emitted, which must match the RAM's.

    Args:
        memory: Destination RAM.
        data: Raw image bytes.
        base: Absolute load address.

    Returns:
        Number of bytes loaded.

    Raises:
        OutOfBoundsAccess: If the image does not fit in memory.
    """
    memory.load_segment(base, data)
    if len(data) % 4:
        logger.warning(
            "Image size %d is not a whole number of instruction words", len(data)
        )
    logger.debug("Loaded %d-byte image at 0x%08X", len(data), base)
    return len(data)
