"""Packing assembled words into ROM bytes."""

from __future__ import annotations

import logging
from typing import BinaryIO

from .binary_format import format_binary8
from .instructions import Instruction

logger = logging.getLogger(__name__)


def pack_bytes(instruction: Instruction, result: int) -> bytes:
    """Return the little-endian bytes of ``result`` for the instruction's length."""
    count = instruction.length // 8
    return bytes((result >> (i * 8)) & 0xFF for i in range(count))


def write_to_file(rom_file: BinaryIO, pack: bytes) -> None:
    """Append packed instruction bytes to a binary ROM stream."""
    if logger.isEnabledFor(logging.DEBUG):
        for index, byte in enumerate(pack):
            logger.debug("Packing byte %d: %s", index, format_binary8(byte))
    rom_file.write(pack)