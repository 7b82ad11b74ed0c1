"""Instruction table of the toy ISA and lookups into it."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Instruction:
    """Static properties of one instruction of the ISA."""

    name: str
    opcode: int
    funct3: int
    opcode_funct3: int
    funct4: int
    length: int


INSTRUCTIONS: tuple[Instruction, ...] = (
    Instruction("NULL", 0x0, 0x0, 0x0, 0x0, 0x0),
    # Arithmetic
    Instruction("ADD", 0x01, 0x00, 0x08, 0x00, 24),
    Instruction("SUB", 0x01, 0x00, 0x08, 0x01, 24),
    Instruction("MUL", 0x01, 0x00, 0x08, 0x02, 24),
    Instruction("DIV", 0x01, 0x00, 0x08, 0x03, 24),
    # Immediates
    Instruction("ADDI", 0x02, 0x00, 0x10, 0, 32),
    Instruction("SUBI", 0x02, 0x01, 0x11, 0, 32),
    Instruction("MULI", 0x02, 0x02, 0x12, 0, 32),
    Instruction("DIVI", 0x02, 0x03, 0x13, 0, 32),
    # Upper immediates
    Instruction("LUI", 0x03, 0x00, 0x18, 0x00, 32),
    Instruction("AUIPC", 0x03, 0x00, 0x18, 0x01, 32),
    # Stores
    Instruction("SB", 0x04, 0x00, 0x20, 0, 32),
    Instruction("SH", 0x04, 0x01, 0x21, 0, 32),
    Instruction("SW", 0x04, 0x02, 0x22, 0, 32),
    # Branches
    Instruction("BEQ", 0x05, 0x00, 0x28, 0, 32),
    Instruction("BNE", 0x05, 0x01, 0x29, 0, 32),
    Instruction("BLT", 0x05, 0x02, 0x2A, 0, 32),
    Instruction("BGT", 0x05, 0x03, 0x2B, 0, 32),
    Instruction("BLE", 0x05, 0x04, 0x2C, 0, 32),
    Instruction("BGE", 0x05, 0x05, 0x2D, 0, 32),
    # Jump and link
    Instruction("JAL", 0x06, 0x01, 0x31, 0, 32),
    Instruction("JALR", 0x06, 0x02, 0x32, 0, 32),
    # Loads
    Instruction("LW", 0x07, 0x00, 0x38, 0, 32),
    Instruction("LH", 0x07, 0x01, 0x39, 0, 32),
    Instruction("LB", 0x07, 0x02, 0x3A, 0, 32),
    # Bitwise operations
    Instruction("AND", 0x08, 0x0, 0x40, 0x0, 24),
    Instruction("OR", 0x08, 0x0, 0x40, 0x1, 24),
    Instruction("XOR", 0x08, 0x0, 0x40, 0x2, 24),
    # Bitwise immediates
    Instruction("ANDI", 0x09, 0x0, 0x49, 0, 32),
    Instruction("ORI", 0x09, 0x1, 0x4A, 0, 32),
    Instruction("XORI", 0x09, 0x2, 0x4B, 0, 32),
    # Shifts
    Instruction("SLL", 0xA, 0x0, 0x50, 0, 24),
    Instruction("SRL", 0xA, 0x0, 0x50, 0x1, 24),
    # Immediate shifts
    Instruction("SLLI", 0xA, 0x1, 0x51, 0x0, 32),
    Instruction("SRLI", 0xA, 0x1, 0x51, 0x1, 32),
    # Display
    Instruction("CHAR", 0x0B, 0x0, 0x58, 0x0, 24),
    # Byte instructions
    Instruction("HALT", 0x1F, 0x7, 0xFF, 0, 8),
    Instruction("CLS", 0x1F, 0x7, 0x5F, 0x0, 8),
)

NULL_INSTRUCTION = INSTRUCTIONS[0]


def get_instruction_by_alias(name: str) -> Instruction:
    """Look an instruction up by mnemonic, ignoring case; NULL if unknown."""
    folded = name.casefold()
    return next(
        (ins for ins in INSTRUCTIONS if ins.name.casefold() == folded),
        NULL_INSTRUCTION,
    )


def get_instruction_by_asm(asm_line: str) -> Instruction:
    """Look up the instruction named by the first word of an assembly line."""
    words = asm_line.split()
    if not words:
        return NULL_INSTRUCTION
    return get_instruction_by_alias(words[0])


def get_instruction_by_opcode_funct3(opcode: int, funct3: int) -> Instruction | None:
    """Return the first instruction with this opcode and funct3, or None."""
    return next(
        (ins for ins in INSTRUCTIONS if ins.opcode == opcode and ins.funct3 == funct3),
        None,
    )


def get_instruction_by_opcodefunct3(opcode_funct3: int) -> Instruction | None:
    """Return the first instruction with this combined opcode/funct3 byte, or None."""
    return next(
        (ins for ins in INSTRUCTIONS if ins.opcode_funct3 == opcode_funct3),
        None,
    )


def get_instruction_by_all(opcode: int, funct3: int, funct4: int) -> Instruction | None:
    """Return the instruction matching opcode, funct3 and funct4, or None."""
    return next(
        (
            ins
            for ins in INSTRUCTIONS
            if ins.opcode == opcode and ins.funct3 == funct3 and ins.funct4 == funct4
        ),
        None,
    )