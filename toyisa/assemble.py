"""Encoding single assembly lines into instruction words."""

from __future__ import annotations

import logging
from string import hexdigits

from .binary_format import format_binary8, format_binary32
from .instructions import Instruction

logger = logging.getLogger(__name__)

_C_SPACE = " \t\n\v\f\r"
_ULONG_MAX = 2**64 - 1
_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)
_DIGITS = {8: "01234567", 10: "0123456789", 16: hexdigits}


class AssemblyError(ValueError):
    """Raised when an assembly line does not have the expected operands."""


def _parse_c_integer(text: str) -> tuple[int, int]:
    """Parse a leading integer with C base-0 rules.

    Returns the signed value and the index just past it; the index is 0
    when no digits were found.
    """
    n = len(text)
    i = 0
    while i < n and text[i] in _C_SPACE:
        i += 1
    negative = False
    if i < n and text[i] in "+-":
        negative = text[i] == "-"
        i += 1
    base = 10
    if text.startswith(("0x", "0X"), i) and i + 2 < n and text[i + 2] in hexdigits:
        base = 16
        i += 2
    elif i < n and text[i] == "0":
        base = 8
    start = i
    digits = _DIGITS[base]
    while i < n and text[i] in digits:
        i += 1
    if i == start:
        return 0, 0
    magnitude = int(text[start:i], base)
    return (-magnitude if negative else magnitude), i


def _strtoul(text: str) -> tuple[int, int]:
    value, end = _parse_c_integer(text)
    if abs(value) > _ULONG_MAX:
        value = _ULONG_MAX
    elif value < 0:
        value %= _ULONG_MAX + 1
    return value, end


def _strtol(text: str) -> tuple[int, int]:
    value, end = _parse_c_integer(text)
    return max(_LONG_MIN, min(_LONG_MAX, value)), end


def _atoi(text: str) -> int:
    value, _ = _parse_c_integer(text.lstrip(_C_SPACE).lstrip("0") or "0") if False else _decimal_prefix(text)
    return value


def _decimal_prefix(text: str) -> tuple[int, int]:
    n = len(text)
    i = 0
    while i < n and text[i] in _C_SPACE:
        i += 1
    negative = False
    if i < n and text[i] in "+-":
        negative = text[i] == "-"
        i += 1
    start = i
    while i < n and text[i] in _DIGITS[10]:
        i += 1
    if i == start:
        return 0, 0
    value = int(text[start:i])
    return (-value if negative else value), i


def _scan(text: str, directives: tuple[str, ...]) -> list[str]:
    """Match a small subset of scanf directives, returning the captured fields."""
    pos = 0
    n = len(text)
    captured: list[str] = []
    for directive in directives:
        if directive == " ":
            while pos < n and text[pos] in _C_SPACE:
                pos += 1
        elif directive == ",":
            if pos < n and text[pos] == ",":
                pos += 1
            else:
                break
        elif directive in ("%s", "%*s"):
            while pos < n and text[pos] in _C_SPACE:
                pos += 1
            start = pos
            while pos < n and text[pos] not in _C_SPACE:
                pos += 1
            if pos == start:
                break
            if directive == "%s":
                captured.append(text[start:pos])
        elif directive == "%[^,]":
            start = pos
            while pos < n and text[pos] != ",":
                pos += 1
            if pos == start:
                break
            captured.append(text[start:pos])
        else:
            raise ValueError(f"unsupported directive {directive!r}")
    return captured


_FOUR_FIELDS = ("%s", " ", "%[^,]", ",", " ", "%[^,]", ",", " ", "%s")
_TWO_FIELDS_SKIP = ("%*s", " ", "%[^,]", ",", " ", "%s")
_THREE_FIELDS_SKIP = ("%*s", " ", "%[^,]", ",", " ", "%[^,]", ",", " ", "%s")


def _operands(asm_line: str, directives: tuple[str, ...], expected: int) -> list[str]:
    fields = _scan(asm_line, directives)
    if len(fields) != expected:
        raise AssemblyError(f"malformed assembly line: {asm_line.rstrip()!r}")
    return fields


def _head(instruction: Instruction) -> int:
    return (instruction.funct3 & 0b111) | ((instruction.opcode & 0b11111) << 3)


def _log_word(word: int) -> int:
    logger.debug("Parsed Assembly\n%s", format_binary32(word))
    return word


def register_to_byte(reg: str) -> int:
    """Return the register number of ``rN``/``RN`` (0-15), otherwise 0."""
    if reg[:1] in ("r", "R"):
        value, _ = _decimal_prefix(reg[1:])
        if 0 <= value <= 15:
            logger.debug("byte: %d", value)
            return value
    return 0


def imm_to_word_unsigned(imm_str: str | None) -> int:
    """Parse an unsigned immediate (decimal, 0x hex or 0 octal) to 32 bits."""
    if not imm_str:
        return 0
    value, _ = _strtoul(imm_str)
    return value & 0xFFFFFFFF


def imm_to_half_word_unsigned(imm_str: str | None) -> int:
    """Parse an immediate up to 0xFFFF and return its low byte; 0 if invalid."""
    if not imm_str:
        return 0
    value, end = _strtoul(imm_str)
    if end == len(imm_str) and value <= 0xFFFF:
        return value & 0xFF
    return 0


def imm_to_word_signed(imm_str: str | None) -> int:
    """Parse a signed 16-bit immediate as its two's-complement pattern; 0 if invalid."""
    if not imm_str:
        return 0
    value, end = _strtol(imm_str)
    if end == len(imm_str) and -32768 <= value <= 32767:
        return value & 0xFFFF
    return 0


def assemble_byte_instruction(instruction: Instruction, asm_line: str) -> int:
    """Encode a one-byte instruction such as HALT."""
    _operands(asm_line, ("%s",), 1)
    word = _head(instruction)
    logger.debug("Parsed Assembly\n%s", format_binary8(word))
    return word


def assemble_arithmetic_bitwise(instruction: Instruction, asm_line: str) -> int:
    """Encode ``OP rd, rs1, rs2`` in the 24-bit register format."""
    _, rd, rs1, rs2 = _operands(asm_line, _FOUR_FIELDS, 4)
    word = _head(instruction)
    word |= (instruction.funct4 & 0xF) << 8
    word |= (register_to_byte(rd) & 0xF) << 12
    word |= (register_to_byte(rs1) & 0xF) << 16
    word |= (register_to_byte(rs2) & 0xF) << 20
    return _log_word(word)


def assemble_immediates_loads(instruction: Instruction, asm_line: str) -> int:
    """Encode ``OP rd, rs1, imm`` with a 16-bit immediate in the top half."""
    _, rd, rs1, imm = _operands(asm_line, _FOUR_FIELDS, 4)
    word = _head(instruction)
    word |= (register_to_byte(rd) & 0xF) << 8
    word |= (register_to_byte(rs1) & 0xF) << 12
    word |= imm_to_word_unsigned(imm) << 16
    return _log_word(word & 0xFFFFFFFF)


def assemble_upper_immediates(instruction: Instruction, asm_line: str) -> int:
    """Encode ``LUI/AUIPC rd, imm``."""
    rd, imm = _operands(asm_line, _TWO_FIELDS_SKIP, 2)
    word = _head(instruction)
    word |= (instruction.funct4 & 0xF) << 8
    word |= (register_to_byte(rd) & 0xF) << 12
    word |= (imm_to_word_unsigned(imm) & 0xFFFF) << 16
    return word


def assemble_jumps(instruction: Instruction, asm_line: str) -> int:
    """Encode ``JAL rd, imm`` with a 20-bit immediate."""
    rd, imm_text = _operands(asm_line, _TWO_FIELDS_SKIP, 2)
    imm = imm_to_word_unsigned(imm_text) & 0xFFFFF
    word = _head(instruction)
    word |= (register_to_byte(rd) & 0xF) << 8
    word |= (imm & 0xFFF) << 12
    word |= ((imm >> 12) & 0xFF) << 24
    return _log_word(word)


def assemble_jumps_register(instruction: Instruction, asm_line: str) -> int:
    """Encode ``JALR rd, rs1, imm``."""
    rd, rs1, imm = _operands(asm_line, _THREE_FIELDS_SKIP, 3)
    word = _head(instruction)
    word |= (register_to_byte(rd) & 0xF) << 8
    word |= (register_to_byte(rs1) & 0xF) << 12
    word |= (imm_to_word_unsigned(imm) & 0xFFFF) << 16
    return _log_word(word)


def assemble_stores_branches(instruction: Instruction, asm_line: str) -> int:
    """Encode ``OP rs1, rs2, imm`` for stores and branches."""
    _, rs1, rs2, imm = _operands(asm_line, _FOUR_FIELDS, 4)
    word = _head(instruction)
    word |= (register_to_byte(rs1) & 0xF) << 8
    word |= (register_to_byte(rs2) & 0xF) << 12
    word |= imm_to_word_unsigned(imm) << 16
    return _log_word(word & 0xFFFFFFFF)


def assemble_shift_immediates(instruction: Instruction, asm_line: str) -> int:
    """Encode ``SLLI/SRLI rd, rs1, imm`` with an 8-bit shift amount."""
    _, rd, rs1, imm = _operands(asm_line, _FOUR_FIELDS, 4)
    word = _head(instruction)
    word |= (instruction.funct4 & 0xF) << 8
    word |= (register_to_byte(rd) & 0xF) << 12
    word |= (imm_to_word_unsigned(imm) & 0xFF) << 16
    word |= (register_to_byte(rs1) & 0xF) << 24
    return word