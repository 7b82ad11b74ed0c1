"""Fetching, decoding and running programs on the machine."""

from __future__ import annotations

import logging
from os import PathLike
from pathlib import Path

from .decode import DecodedInstruction, vm_decode
from .execute import execute_instruction
from .instructions import get_instruction_by_all, get_instruction_by_opcode_funct3
from .machine import PROGRAM_ROM, PROGRAM_SIZE, REGISTER_COUNT, BasicVm

logger = logging.getLogger(__name__)

DEFAULT_MAX_INSTRUCTIONS = 1_000_000

# First bytes whose instruction is told apart by the funct4 field of byte 1.
_FUNCT4_SELECTED = frozenset({0x08, 0x40, 0x50, 0x51})
_UPPER_IMMEDIATE_OPCODE = 0x03
_HALT_OPCODE_FUNCT3 = 0xFF
_DEFAULT_LENGTH = 3


class RomError(Exception):
    """Raised when a ROM cannot be loaded or its contents cannot be run."""


class Vm:
    """Runs the program held in a machine's memory.

    With ``execute`` false, instructions are only fetched, decoded and
    traced, and the program counter simply moves past each one.
    """

    def __init__(self, machine: BasicVm | None = None, execute: bool = False) -> None:
        self.machine = machine if machine is not None else BasicVm()
        self.execute = execute

    def load_rom(self, path: str | PathLike[str]) -> int:
        """Copy a ROM file into program memory and return its size in bytes."""
        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise RomError(f"Could not open ROM file: {path}") from exc
        if len(data) > PROGRAM_SIZE:
            raise RomError(
                f"ROM file too large: {path} ({len(data)} bytes, max {PROGRAM_SIZE})"
            )
        self.machine.memory[PROGRAM_ROM : PROGRAM_ROM + len(data)] = data
        logger.debug("Loaded ROM: %s (%d bytes)", path, len(data))
        return len(data)

    def step(self) -> DecodedInstruction:
        """Fetch, decode and (if enabled) execute the instruction at the PC.

        Raises RomError when the PC is out of bounds or the bytes there
        name no known instruction.
        """
        machine = self.machine
        pc = machine.program_counter
        if pc >= PROGRAM_ROM + PROGRAM_SIZE:
            raise RomError(f"PC out of bounds (0x{pc:04X})")

        memory = machine.memory
        byte0 = memory[pc]
        funct3 = byte0 & 0x7
        opcode = (byte0 >> 3) & 0x1F

        if byte0 in _FUNCT4_SELECTED or opcode == _UPPER_IMMEDIATE_OPCODE:
            funct4 = memory[(pc + 1) & 0xFFFF] & 0xF
            ins = get_instruction_by_all(opcode, funct3, funct4)
        else:
            ins = get_instruction_by_opcode_funct3(opcode, funct3)

        if ins is None:
            raise RomError(
                f"Unknown instruction at PC=0x{pc:04X} "
                f"(opcode=0x{opcode:02X}, funct3=0x{funct3:X})"
            )
        logger.debug("Fetched instruction: %s at PC=0x%04X", ins.name, pc)

        length = ins.length // 8 or _DEFAULT_LENGTH
        word = int.from_bytes(
            bytes(memory[(pc + i) & 0xFFFF] for i in range(length)), "little"
        )
        machine.opcode = word & 0xFFFF

        decoded = vm_decode(word, ins)
        trace = self.format_instruction(decoded)
        if trace:
            logger.info("%s", trace)

        if decoded.is_halt:
            return decoded

        next_pc = (pc + length) & 0xFFFF
        if self.execute:
            try:
                execute_instruction(machine, decoded, next_pc)
            except ValueError as exc:
                logger.error("Error: %s", exc)
        else:
            machine.program_counter = next_pc

        logger.debug("%s", self.format_state())
        return decoded

    def run(self, max_instructions: int = DEFAULT_MAX_INSTRUCTIONS) -> int:
        """Step until HALT or the instruction limit; return the count stepped.

        Raises RomError, naming the failing instruction's position, when a
        step fails or meets an empty (NULL) instruction.
        """
        count = 0
        while count < max_instructions:
            try:
                decoded = self.step()
            except RomError as exc:
                raise RomError(f"VM error at instruction {count}: {exc}") from exc

            if decoded.is_halt:
                return count
            if decoded.opcode == 0:
                raise RomError(f"VM error at instruction {count}")
            count += 1

            if self.machine.opcode == 0:
                continue
            if decoded.opcode_funct3 == _HALT_OPCODE_FUNCT3:
                break

        if count >= max_instructions:
            logger.warning("Reached maximum instruction limit")
        return count

    def format_state(self) -> str:
        """Describe the program counter, stack pointer and registers."""
        m = self.machine
        header = (
            f"PC: 0x{m.program_counter:04X} | IR: 0x{m.opcode:04X} | "
            f"SP: {m.stack_pointer} | I: 0x{m.index_register:04X}"
        )
        registers = "".join(
            f"r{index}:0x{m.registers[index]:02X} " for index in range(REGISTER_COUNT)
        )
        return f"{header}\nRegisters: {registers}"

    def format_instruction(self, decoded: DecodedInstruction) -> str:
        """Render a decoded instruction as assembly-like text; empty for NULL."""
        ins = decoded.instruction
        if ins is None or ins.name.startswith("N"):
            return ""
        d = decoded
        detail = ""
        if d.opcode in (0x01, 0x08):
            detail = f"[funct4=0x{d.funct4:X}] r{d.rd}, r{d.rs1}, r{d.rs2}"
        elif d.opcode in (0x02, 0x07, 0x09):
            detail = f"r{d.rd}, r{d.rs1}, 0x{d.imm:04X}"
        elif d.opcode == 0x03:
            detail = f"[funct4=0x{d.funct4:X}] r{d.rd}, 0x{d.imm:04X}"
        elif d.opcode == 0x04:
            detail = f"r{d.rs2}, 0x{d.imm:04X}(r{d.rs1})"
        elif d.opcode == 0x05:
            detail = f"r{d.rs1}, r{d.rs2}, 0x{d.imm:04X}"
        elif d.opcode == 0x06:
            if d.funct3 == 0x02:
                detail = f"r{d.rd}, r{d.rs1}, 0x{d.imm:04X}"
            else:
                detail = f"r{d.rd}, 0x{d.imm:05X}"
        elif d.opcode == 0x0A:
            if d.opcode_funct3 == 0x50:
                detail = f"[funct4=0x{d.funct4:X}] r{d.rd}, r{d.rs1}, r{d.rs2}"
            else:
                detail = f"[funct4=0x{d.funct4:X}] r{d.rd}, r{d.rs1}, 0x{d.imm & 0xFF:X}"
        elif d.opcode == 0x1F:
            detail = ""
        else:
            detail = f"opcode=0x{d.opcode:02X} funct3=0x{d.funct3:X}"
        return f"[{ins.name}] {detail}".rstrip()