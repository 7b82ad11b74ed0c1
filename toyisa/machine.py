"""State of the virtual machine: registers, memory and display."""

from __future__ import annotations

from array import array
from dataclasses import dataclass, field

from .font import FONT_DATA

# Memory layout (64KB)
RAM_SIZE = 65536
FONT_ADDR = 0x0000
FONT_SIZE = 4096
PROGRAM_ROM = 0x1000
PROGRAM_SIZE = 61440
STACK_ADDR = 0xFF00
STACK_SIZE = 256

DISPLAY_WIDTH = 640
DISPLAY_HEIGHT = 480
DISPLAY_SIZE = DISPLAY_WIDTH * DISPLAY_HEIGHT

REGISTER_COUNT = 16
STACK_DEPTH = 16


def _blank_display() -> array:
    return array("I", bytes(DISPLAY_SIZE * array("I").itemsize))


@dataclass(eq=False)
class BasicVm:
    """Registers, memory and display of one machine.

    A new machine starts in its reset state: program counter at the
    start of program ROM and the font loaded at FONT_ADDR.
    """

    registers: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    memory: bytearray = field(default_factory=lambda: bytearray(RAM_SIZE))
    program_counter: int = PROGRAM_ROM
    opcode: int = 0
    index_register: int = 0
    stack: list[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    stack_pointer: int = 0
    delay_timer: int = 0
    sound_timer: int = 0
    display_buffer: array = field(default_factory=_blank_display)

    def __post_init__(self) -> None:
        self.load_font()

    def reset(self) -> None:
        """Zero all state, point the PC at program ROM and reload the font."""
        self.registers[:] = bytes(REGISTER_COUNT)
        self.memory[:] = bytes(RAM_SIZE)
        self.program_counter = PROGRAM_ROM
        self.opcode = 0
        self.index_register = 0
        self.stack[:] = [0] * STACK_DEPTH
        self.stack_pointer = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.load_font()
        self.clear_display()

    def load_font(self) -> None:
        """Copy the built-in font into memory at FONT_ADDR."""
        self.memory[FONT_ADDR : FONT_ADDR + len(FONT_DATA)] = FONT_DATA

    def clear_display(self) -> None:
        """Set every display pixel to black."""
        self.display_buffer[:] = _blank_display()