"""Splitting instruction words into their fields."""

from __future__ import annotations

from dataclasses import dataclass

from .instructions import Instruction

_RTYPE_24BIT = frozenset({0x08, 0x40, 0x50})


@dataclass(slots=True)
class DecodedInstruction:
    """Fields of one decoded instruction word."""

    opcode: int = 0
    funct3: int = 0
    funct4: int = 0
    opcode_funct3: int = 0
    rd: int = 0
    rs1: int = 0
    rs2: int = 0
    imm: int = 0
    is_halt: bool = False
    instruction: Instruction | None = None


def _decoded(word: int, ins: Instruction, **fields: int | bool) -> DecodedInstruction:
    return DecodedInstruction(
        opcode=(word >> 3) & 0x1F,
        funct3=word & 0x7,
        opcode_funct3=ins.opcode_funct3,
        instruction=ins,
        **fields,
    )


def _register_triplet(word: int, ins: Instruction) -> DecodedInstruction:
    byte1 = (word >> 8) & 0xFF
    byte2 = (word >> 16) & 0xFF
    return _decoded(
        word,
        ins,
        funct4=byte1 & 0xF,
        rd=byte1 >> 4,
        rs1=byte2 & 0xF,
        rs2=byte2 >> 4,
    )


def decode_arith_rtype(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode ADD, SUB, MUL or DIV."""
    return _register_triplet(instruction, ins)


def decode_bitwise_rtype(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode a 24-bit register instruction (AND, OR, XOR, SLL, SRL)."""
    return _register_triplet(instruction, ins)


def _rd_rs1_imm16(word: int, ins: Instruction) -> DecodedInstruction:
    return _decoded(
        word,
        ins,
        rd=(word >> 8) & 0xF,
        rs1=(word >> 12) & 0xF,
        imm=(word >> 16) & 0xFFFF,
    )


def decode_arith_itype(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode ADDI, SUBI, MULI or DIVI."""
    return _rd_rs1_imm16(instruction, ins)


def decode_load(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode LW, LH or LB."""
    return _rd_rs1_imm16(instruction, ins)


def decode_logic_imm(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode ANDI, ORI or XORI."""
    return _rd_rs1_imm16(instruction, ins)


def decode_upper_imm(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode LUI or AUIPC."""
    return _decoded(
        instruction,
        ins,
        funct4=(instruction >> 8) & 0xF,
        rd=(instruction >> 12) & 0xF,
        imm=(instruction >> 16) & 0xFFFF,
    )


def decode_store(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode SB, SH or SW."""
    return _decoded(
        instruction,
        ins,
        rs1=(instruction >> 8) & 0xF,
        rs2=(instruction >> 12) & 0xF,
        imm=(instruction >> 16) & 0xFFFF,
    )


def decode_branch(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode BEQ, BNE, BLT, BGT, BLE or BGE."""
    imm = ((instruction >> 16) & 0xFF) | (((instruction >> 24) & 0xFF) << 8)
    return _decoded(
        instruction,
        ins,
        rs1=(instruction >> 8) & 0xF,
        rs2=(instruction >> 12) & 0xF,
        imm=imm,
    )


def decode_jump(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode JAL (20-bit immediate) or JALR (register plus 16-bit immediate)."""
    rd = (instruction >> 8) & 0xF
    if instruction & 0x7 == 0x02:
        return _decoded(
            instruction,
            ins,
            rd=rd,
            rs1=(instruction >> 12) & 0xF,
            imm=(instruction >> 16) & 0xFFFF,
        )
    imm = ((instruction >> 12) & 0xFFF) | (((instruction >> 24) & 0xFF) << 12)
    return _decoded(instruction, ins, rd=rd, imm=imm)


def decode_shift_imm(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode SLLI or SRLI."""
    return _decoded(
        instruction,
        ins,
        funct4=(instruction >> 8) & 0xF,
        rd=(instruction >> 12) & 0xF,
        rs1=(instruction >> 24) & 0xF,
        imm=(instruction >> 16) & 0xFF,
    )


def decode_halt(instruction: int, ins: Instruction) -> DecodedInstruction:
    """Decode the halt opcode."""
    return _decoded(instruction, ins, is_halt=True, funct4=ins.funct4)


_BY_OPCODE = {
    0x01: decode_arith_rtype,
    0x02: decode_arith_itype,
    0x03: decode_upper_imm,
    0x04: decode_store,
    0x05: decode_branch,
    0x06: decode_jump,
    0x07: decode_load,
    0x09: decode_logic_imm,
    0x0A: decode_shift_imm,
    0x0F: decode_halt,
}


def vm_decode(instruction: int, properties: Instruction) -> DecodedInstruction:
    """Decode an instruction word whose table entry is already known."""
    if properties.opcode_funct3 in _RTYPE_24BIT:
        return decode_bitwise_rtype(instruction, properties)
    decoder = _BY_OPCODE.get((instruction >> 3) & 0x1F)
    if decoder is not None:
        return decoder(instruction, properties)
    return _decoded(
        instruction,
        properties,
        rd=(instruction >> 8) & 0xF,
        rs1=(instruction >> 12) & 0xF,
        rs2=(instruction >> 16) & 0xF,
        imm=(instruction >> 16) & 0xFFFF,
    )