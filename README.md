# toyisa

An assembler and a virtual machine for a small toy instruction set with
sixteen 8-bit registers, a 64 KB address space and a 640×480 display buffer.

Instructions are 8, 24 or 32 bits long. The first byte holds the 5-bit
opcode and the 3-bit `funct3`; some instructions add a 4-bit `funct4` to
tell variants apart (for example `ADD`/`SUB`/`MUL`/`DIV`).

## Memory layout

| Range             | Use                    |
|-------------------|------------------------|
| `0x0000 – 0x0FFF` | Font (8×8 glyphs)      |
| `0x1000 – 0xFEFF` | Program ROM            |
| `0xFF00 – 0xFFFF` | Stack                  |

A new `toyisa.machine.BasicVm` starts with its program counter at `0x1000`
and the built-in font (printable ASCII, `0x20`–`0x7E`) copied to `0x0000`.
`toyisa.font.glyph` returns the eight row bytes of one character.

## Installing

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
```

## Command line

Assemble a source file into a ROM image (defaults: `roms/rom.asm` into
`roms/rom.bin`; `-v` prints encoding details):

```
toyisa-asm
toyisa-asm prog.asm prog.bin
```

Load a ROM into the program area and run it (defaults to `roms/rom.bin`):

```
toyisa-run roms/rom.bin
```

Options of `toyisa-run`:

- `--asm PATH` assembles `PATH` into the ROM file first.
- `--execute` executes the instructions. Without it the VM only fetches,
  decodes and prints each instruction and moves the program counter past it.
- `-v`, `--verbose` also prints the machine state after each step.

The VM prints every instruction it decodes and finishes with the number of
instructions it stepped and the final register state. It stops at `HALT`,
after 1,000,000 instructions, or with an error on an empty or unknown
instruction.

## Assembly syntax

One instruction per line, the mnemonic first (case does not matter), then
operands separated by commas. Registers are written `r0` to `r15`; immediates
may be decimal, hexadecimal (`0x…`) or octal (leading `0`). Lines whose first
word is not a known mnemonic are skipped.

```
ADDI r1, r0, 5
ADD  r2, r1, r1
SLLI r3, r2, 2
BEQ  r1, r2, 8
HALT
```

Mnemonics the assembler encodes: `ADD SUB MUL DIV`, `ADDI SUBI MULI DIVI`,
`LUI AUIPC`, `SB SH SW`, `BEQ BNE BLT BGT BLE BGE`, `JAL JALR`, `LW LH LB`,
`AND OR XOR`, `ANDI ORI XORI`, `SLL SRL`, `SLLI SRLI`, `HALT`, `CLS`.
`CLS` is encoded as the same byte as `HALT`.

## Using the library

```python
from toyisa.instructions import get_instruction_by_alias
from toyisa.assemble import assemble_immediates_loads
from toyisa.rom_writer import pack_bytes

addi = get_instruction_by_alias("ADDI")
word = assemble_immediates_loads(addi, "ADDI r1, r2, 5")
rom_bytes = pack_bytes(addi, word)   # little-endian, addi.length // 8 bytes
```

Whole programs go through `toyisa.assembler.assemble_source`,
`toyisa.assembler.assemble_lines` or `toyisa.assembler.assemble_file`;
`toyisa.dispatch.handle_opcode` encodes a single line. Programs are run with
`toyisa.vm.Vm` (`load_rom`, `step`, `run`) on a `toyisa.machine.BasicVm`;
`toyisa.cli.run_rom` loads and runs a ROM file in one call.
`toyisa.decode.vm_decode` splits a word into its fields, and
`toyisa.execute.execute_instruction` applies a decoded instruction to a
machine.

Lines that cannot be assembled raise `toyisa.assemble.AssemblyError`.
ROMs that are missing or too large, a program counter out of bounds and
unknown instructions raise `toyisa.vm.RomError`.

## What it does not do

- There is no window or screen output: drawing writes pixels into
  `BasicVm.display_buffer`, and nothing shows that buffer.
- `CHAR` is in the instruction table, but the assembler rejects it as an
  unsupported opcode.
- The stack, delay timer and sound timer are part of the machine state but
  no instruction uses them.

## Running the tests

```
pytest
```