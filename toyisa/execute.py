"""Carrying out decoded instructions on a machine."""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable

from .decode import DecodedInstruction
from .machine import DISPLAY_SIZE, DISPLAY_WIDTH, FONT_ADDR, BasicVm

logger = logging.getLogger(__name__)

WHITE = 0xFFFFFFFF
_ADDRESS_MASK = 0xFFF

BinaryOp = Callable[[int, int], int]

_ARITHMETIC: dict[int, BinaryOp] = {
    0x00: operator.add,
    0x01: operator.sub,
    0x02: operator.mul,
    0x03: operator.floordiv,
}
_BITWISE: dict[int, BinaryOp] = {
    0x00: operator.and_,
    0x01: operator.or_,
    0x02: operator.xor,
}


def _signed8(value: int) -> int:
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value


def _signed16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


_BRANCH_TESTS: dict[int, Callable[[int, int], bool]] = {
    0x00: operator.eq,
    0x01: operator.ne,
    0x02: operator.lt,
    0x03: operator.gt,
    0x04: operator.le,
    0x05: operator.ge,
}


def _apply(vm: BasicVm, rd: int, op: BinaryOp | None, a: int, b: int) -> None:
    if op is None:
        return
    if op is operator.floordiv and b == 0:
        logger.error("Division by zero")
        return
    vm.registers[rd] = op(a, b) & 0xFF


def _arithmetic_register(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    regs = vm.registers
    _apply(vm, dec.rd, _ARITHMETIC.get(dec.funct4), regs[dec.rs1], regs[dec.rs2])
    vm.program_counter = next_pc


def _arithmetic_immediate(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    _apply(vm, dec.rd, _ARITHMETIC.get(dec.funct3), vm.registers[dec.rs1], dec.imm & 0xFF)
    vm.program_counter = next_pc


def _upper_immediate(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    if dec.funct4 == 0x00:  # LUI
        vm.registers[dec.rd] = (dec.imm >> 8) & 0xFF
    elif dec.funct4 == 0x01:  # AUIPC
        vm.registers[dec.rd] = ((next_pc + (dec.imm << 8)) >> 8) & 0xFF
    vm.program_counter = next_pc


def _store(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    regs, mem = vm.registers, vm.memory
    base = regs[dec.rs1] + dec.imm

    def put(offset: int, value: int) -> None:
        mem[(base + offset) & _ADDRESS_MASK] = value & 0xFF

    if dec.funct3 == 0x00:  # SB
        put(0, regs[dec.rs2])
    elif dec.funct3 == 0x01:  # SH
        put(0, regs[dec.rs2])
        put(1, regs[dec.rs2] >> 8)
    elif dec.funct3 == 0x02:  # SW, spread over two registers
        put(0, regs[dec.rs2])
        put(1, regs[dec.rs2] >> 8)
        put(2, regs[dec.rs2 + 1])
        put(3, regs[dec.rs2 + 1] >> 8)
    vm.program_counter = next_pc


def _branch(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    test = _BRANCH_TESTS.get(dec.funct3)
    if test is None:
        return
    a = _signed8(vm.registers[dec.rs1])
    b = _signed8(vm.registers[dec.rs2])
    if test(a, b):
        vm.program_counter = (next_pc + _signed16(dec.imm)) & 0xFFFF
    else:
        vm.program_counter = next_pc


def _jump(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    link = (next_pc >> 8) & 0xFF
    if dec.funct4 == 0x01:  # JALR
        target = (vm.registers[dec.rs1] + _signed16(dec.imm)) & ~1
        vm.registers[dec.rd] = link
        vm.program_counter = target & 0xFFFF
    else:  # JAL
        vm.registers[dec.rd] = link
        vm.program_counter = (next_pc + _signed16(dec.imm)) & 0xFFFF


def _load(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    regs, mem = vm.registers, vm.memory
    if dec.funct3 in (0x00, 0x01, 0x02):
        addr = (regs[dec.rs1] + dec.imm) & _ADDRESS_MASK

        def half(at: int) -> int:
            return (mem[at & _ADDRESS_MASK] | (mem[(at + 1) & _ADDRESS_MASK] << 8)) & 0xFF

        if dec.funct3 == 0x02:  # LB
            regs[dec.rd] = mem[addr]
        elif dec.funct3 == 0x01:  # LH
            regs[dec.rd] = half(addr)
        else:  # LW
            regs[dec.rd] = half(addr)
            regs[dec.rd + 1] = half(addr + 2)
    vm.program_counter = next_pc


def _bitwise_register(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    regs = vm.registers
    _apply(vm, dec.rd, _BITWISE.get(dec.funct4), regs[dec.rs1], regs[dec.rs2])
    vm.program_counter = next_pc


def _bitwise_immediate(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    _apply(vm, dec.rd, _BITWISE.get(dec.funct3), vm.registers[dec.rs1], dec.imm & 0xFF)
    vm.program_counter = next_pc


def _shift(vm: BasicVm, rd: int, value: int, amount: int, left: bool) -> None:
    shifted = value << amount if left else value >> amount
    vm.registers[rd] = shifted & 0xFF


def _shift_register(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    if dec.funct4 in (0x00, 0x01):
        amount = vm.registers[dec.rs2] & 0x1F
        _shift(vm, dec.rd, vm.registers[dec.rs1], amount, dec.funct4 == 0x00)
    vm.program_counter = next_pc


def _shift_immediate(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    if dec.funct3 == 0x01:
        _shift(vm, dec.rd, vm.registers[dec.rs1], dec.imm & 0x1F, dec.funct4 == 0)
    vm.program_counter = next_pc


def _draw_char(vm: BasicVm, font_index: int, x: int, y: int) -> None:
    font_addr = (FONT_ADDR + font_index * 8) & 0xFFFF
    screen_x, screen_y = x * 8, y * 8
    for row in range(8):
        bits = vm.memory[font_addr + row]
        for col in range(8):
            if bits & (0x80 >> col):
                pixel = (screen_y + row) * DISPLAY_WIDTH + screen_x + col
                if pixel < DISPLAY_SIZE:
                    vm.display_buffer[pixel] = WHITE


def _display(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    if dec.funct3 == 0x00:  # CLS
        vm.clear_display()
    elif dec.funct3 == 0x01:  # CHAR: font index in rd, cell column in rs1, row in rs2
        _draw_char(vm, dec.rd, dec.rs1, dec.rs2)
    vm.program_counter = next_pc


_BY_OPCODE: dict[int, Callable[[BasicVm, DecodedInstruction, int], None]] = {
    0x01: _arithmetic_register,
    0x02: _arithmetic_immediate,
    0x03: _upper_immediate,
    0x04: _store,
    0x05: _branch,
    0x06: _jump,
    0x07: _load,
    0x08: _bitwise_register,
    0x09: _bitwise_immediate,
    0x0A: _shift_register,
    0x0B: _display,
    0x0C: _shift_immediate,
}


def execute_instruction(vm: BasicVm, dec: DecodedInstruction, next_pc: int) -> None:
    """Apply a decoded instruction to the machine and advance its PC.

    ``next_pc`` is the address of the following instruction; branches and
    jumps compute their targets from it. Division by zero is logged and
    leaves the destination register unchanged. An unknown opcode raises
    ValueError and leaves the machine untouched.
    """
    handler = _BY_OPCODE.get(dec.opcode)
    if handler is None:
        raise ValueError(f"Unknown opcode 0x{dec.opcode:02X}")
    handler(vm, dec, next_pc)