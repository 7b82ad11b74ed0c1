"""Assembler, ROM writer and virtual machine for a small toy instruction set."""

__version__ = "0.1.0"