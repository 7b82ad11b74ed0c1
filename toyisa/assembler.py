"""Assembling source text into a ROM image."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable, Iterator
from os import PathLike
from pathlib import Path

from .assemble import AssemblyError
from .dispatch import handle_opcode
from .instructions import get_instruction_by_asm
from .rom_writer import pack_bytes, write_to_file

logger = logging.getLogger(__name__)

DEFAULT_ASM_PATH = Path("roms/rom.asm")
DEFAULT_ROM_PATH = Path("roms/rom.bin")


def _packs(lines: Iterable[str]) -> Iterator[bytes]:
    line_number = 1
    for text in lines:
        logger.debug("----------------\n%s", text)
        instruction = get_instruction_by_asm(text)
        if instruction.opcode_funct3 == 0x00:
            logger.info("NULL line detected on line %d", line_number)
            continue
        try:
            word = handle_opcode(instruction, text)
        except AssemblyError as exc:
            raise AssemblyError(
                f"Error assembling line {line_number}: {text.rstrip()}"
            ) from exc
        yield pack_bytes(instruction, word)
        line_number += 1


def assemble_lines(lines: Iterable[str]) -> bytes:
    """Assemble lines of source into ROM bytes.

    Lines without a known mnemonic are skipped; a malformed line raises
    AssemblyError.
    """
    return b"".join(_packs(lines))


def assemble_source(text: str) -> bytes:
    """Assemble a whole source text into ROM bytes."""
    return assemble_lines(text.splitlines(keepends=True))


def assemble_file(
    asm_path: str | PathLike[str] = DEFAULT_ASM_PATH,
    rom_path: str | PathLike[str] = DEFAULT_ROM_PATH,
) -> int:
    """Assemble a source file into a ROM file and return the bytes written."""
    written = 0
    with open(asm_path, encoding="utf-8") as asm_file, open(rom_path, "wb") as rom_file:
        for pack in _packs(asm_file):
            write_to_file(rom_file, pack)
            written += len(pack)
    return written


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point: assemble a source file into a ROM."""
    parser = argparse.ArgumentParser(description="Assemble a source file into a ROM image.")
    parser.add_argument("asm", nargs="?", default=str(DEFAULT_ASM_PATH))
    parser.add_argument("rom", nargs="?", default=str(DEFAULT_ROM_PATH))
    parser.add_argument("-v", "--verbose", action="store_true", help="print encoding details")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s")

    try:
        assemble_file(args.asm, args.rom)
    except OSError as exc:
        print(f"Error opening file: {exc}", file=sys.stderr)
        return 1
    except AssemblyError as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())