"""Command-line entry point: optionally assemble, then run a ROM."""

from __future__ import annotations

import argparse
import logging
import sys
from os import PathLike

from .assemble import AssemblyError
from .assembler import DEFAULT_ROM_PATH, assemble_file
from .vm import RomError, Vm


def run_rom(
    rom_path: str | PathLike[str] = DEFAULT_ROM_PATH, execute: bool = False
) -> tuple[Vm, int]:
    """Load a ROM into a fresh machine, run it, and return the VM and step count."""
    vm = Vm(execute=execute)
    vm.load_rom(rom_path)
    count = vm.run()
    return vm, count


def main(argv: list[str] | None = None) -> int:
    """Run a ROM image, assembling it from source first when asked."""
    parser = argparse.ArgumentParser(description="Run a ROM image on the virtual machine.")
    parser.add_argument("rom", nargs="?", default=str(DEFAULT_ROM_PATH))
    parser.add_argument("--asm", metavar="PATH", help="assemble this source into the ROM first")
    parser.add_argument("--execute", action="store_true", help="execute instructions, not only trace them")
    parser.add_argument("-v", "--verbose", action="store_true", help="print machine state after each step")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s"
    )

    if args.asm is not None:
        try:
            assemble_file(args.asm, args.rom)
        except OSError as exc:
            print(f"Error opening file: {exc}", file=sys.stderr)
            return 1
        except AssemblyError as exc:
            print(exc, file=sys.stderr)
            return 1

    try:
        vm, count = run_rom(args.rom, args.execute)
    except RomError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Executed {count} instructions")
    print(vm.format_state())
    return 0


if __name__ == "__main__":
    sys.exit(main())