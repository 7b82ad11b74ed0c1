"""Selecting the encoder for an instruction by opcode and funct3."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from .assemble import (
    AssemblyError,
    assemble_arithmetic_bitwise,
    assemble_byte_instruction,
    assemble_immediates_loads,
    assemble_jumps,
    assemble_jumps_register,
    assemble_shift_immediates,
    assemble_stores_branches,
    assemble_upper_immediates,
)
from .instructions import Instruction

Encoder = Callable[[Instruction, str], int]

_HALT_OPCODE = 0x0F


def _uniform(encoder: Encoder, funct3s: Iterable[int]) -> dict[int, Encoder]:
    return dict.fromkeys(funct3s, encoder)


def _select(instruction: Instruction, asm_line: str, table: dict[int, Encoder]) -> int:
    encoder = table.get(instruction.funct3)
    if encoder is None:
        raise AssemblyError(
            f"unsupported funct3 0x{instruction.funct3:X} for {instruction.name}"
        )
    return encoder(instruction, asm_line)


_BYTE = _uniform(assemble_byte_instruction, (0x00, 0x07))
_ARITHMETIC = _uniform(assemble_arithmetic_bitwise, (0x00,))
_IMMEDIATES = _uniform(assemble_immediates_loads, range(0x04))
_UPPER = _uniform(assemble_upper_immediates, (0x00,))
_STORES = _uniform(assemble_stores_branches, range(0x03))
_BRANCHES = _uniform(assemble_stores_branches, range(0x06))
_JUMPS: dict[int, Encoder] = {0x01: assemble_jumps, 0x02: assemble_jumps_register}
_LOADS = _uniform(assemble_immediates_loads, range(0x03))
_BITWISE = _uniform(assemble_arithmetic_bitwise, (0x00,))
_BITWISE_IMMEDIATES = _uniform(assemble_immediates_loads, range(0x03))
_SHIFTS: dict[int, Encoder] = {
    0x00: assemble_arithmetic_bitwise,
    0x01: assemble_shift_immediates,
}


def handle_byte_instruction(instruction: Instruction, asm_line: str) -> int:
    """Encode a one-byte instruction."""
    return _select(instruction, asm_line, _BYTE)


def handle_funct3_arithmetic(instruction: Instruction, asm_line: str) -> int:
    """Encode a register arithmetic instruction."""
    return _select(instruction, asm_line, _ARITHMETIC)


def handle_funct3_immediates(instruction: Instruction, asm_line: str) -> int:
    """Encode an arithmetic instruction with an immediate."""
    return _select(instruction, asm_line, _IMMEDIATES)


def handle_funct3_upper_immediates(instruction: Instruction, asm_line: str) -> int:
    """Encode LUI or AUIPC."""
    return _select(instruction, asm_line, _UPPER)


def handle_funct3_stores(instruction: Instruction, asm_line: str) -> int:
    """Encode a store."""
    return _select(instruction, asm_line, _STORES)


def handle_funct3_branches(instruction: Instruction, asm_line: str) -> int:
    """Encode a conditional branch."""
    return _select(instruction, asm_line, _BRANCHES)


def handle_funct3_jumps(instruction: Instruction, asm_line: str) -> int:
    """Encode JAL or JALR."""
    return _select(instruction, asm_line, _JUMPS)


def handle_funct3_loads(instruction: Instruction, asm_line: str) -> int:
    """Encode a load."""
    return _select(instruction, asm_line, _LOADS)


def handle_funct3_bitwise(instruction: Instruction, asm_line: str) -> int:
    """Encode a register bitwise instruction."""
    return _select(instruction, asm_line, _BITWISE)


def handle_funct3_bitwise_immediates(instruction: Instruction, asm_line: str) -> int:
    """Encode a bitwise instruction with an immediate."""
    return _select(instruction, asm_line, _BITWISE_IMMEDIATES)


def handle_funct3_shifts(instruction: Instruction, asm_line: str) -> int:
    """Encode a register or immediate shift."""
    return _select(instruction, asm_line, _SHIFTS)


_BY_OPCODE: dict[int, Encoder] = {
    0x1F: handle_byte_instruction,
    0x01: handle_funct3_arithmetic,
    0x02: handle_funct3_immediates,
    0x03: handle_funct3_upper_immediates,
    0x04: handle_funct3_stores,
    0x05: handle_funct3_branches,
    0x06: handle_funct3_jumps,
    0x07: handle_funct3_loads,
    0x08: handle_funct3_bitwise,
    0x09: handle_funct3_bitwise_immediates,
    0x0A: handle_funct3_shifts,
}


def handle_opcode(instruction: Instruction, asm_line: str) -> int:
    """Encode an assembly line for the given instruction.

    Raises AssemblyError when the opcode or funct3 has no encoder or the
    line's operands are malformed.
    """
    if instruction.opcode == _HALT_OPCODE:
        return (_HALT_OPCODE & 0x1F) << 3
    handler = _BY_OPCODE.get(instruction.opcode)
    if handler is None:
        raise AssemblyError(
            f"unsupported opcode 0x{instruction.opcode:02X} for {instruction.name}"
        )
    return handler(instruction, asm_line)