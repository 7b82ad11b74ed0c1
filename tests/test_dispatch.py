import dataclasses

import pytest

from toyisa.assemble import (
    AssemblyError,
    assemble_arithmetic_bitwise,
    assemble_byte_instruction,
    assemble_immediates_loads,
    assemble_jumps,
    assemble_jumps_register,
    assemble_shift_immediates,
    assemble_stores_branches,
    assemble_upper_immediates,
)
from toyisa.dispatch import (
    handle_byte_instruction,
    handle_funct3_arithmetic,
    handle_funct3_bitwise,
    handle_funct3_branches,
    handle_funct3_jumps,
    handle_funct3_shifts,
    handle_funct3_stores,
    handle_opcode,
)
from toyisa.instructions import Instruction, get_instruction_by_alias


@pytest.mark.parametrize(
    "name, line, encoder",
    [
        ("ADD", "ADD r1, r2, r3", assemble_arithmetic_bitwise),
        ("DIV", "DIV r4, r5, r6", assemble_arithmetic_bitwise),
        ("ADDI", "ADDI r1, r2, 5", assemble_immediates_loads),
        ("DIVI", "DIVI r1, r2, 0x10", assemble_immediates_loads),
        ("LUI", "LUI r3, 0x1234", assemble_upper_immediates),
        ("AUIPC", "AUIPC r3, 0x20", assemble_upper_immediates),
        ("SW", "SW r1, r2, 8", assemble_stores_branches),
        ("BGE", "BGE r1, r2, 12", assemble_stores_branches),
        ("JAL", "JAL r1, 0x12345", assemble_jumps),
        ("JALR", "JALR r1, r2, 16", assemble_jumps_register),
        ("LB", "LB r7, r8, 3", assemble_immediates_loads),
        ("XOR", "XOR r1, r2, r3", assemble_arithmetic_bitwise),
        ("ORI", "ORI r1, r2, 0xF0", assemble_immediates_loads),
        ("SRL", "SRL r1, r2, r3", assemble_arithmetic_bitwise),
        ("SLLI", "SLLI r3, r4, 2", assemble_shift_immediates),
        ("HALT", "HALT", assemble_byte_instruction),
        ("CLS", "CLS", assemble_byte_instruction),
    ],
)
def test_handle_opcode_uses_matching_encoder(name, line, encoder):
    ins = get_instruction_by_alias(name)
    assert handle_opcode(ins, line) == encoder(ins, line)


def test_char_has_no_encoder():
    ins = get_instruction_by_alias("CHAR")
    with pytest.raises(AssemblyError):
        handle_opcode(ins, "CHAR r1, r2, r3")


def test_halt_opcode_encodes_header_only():
    ins = Instruction("STOP", 0x0F, 0x0, 0x78, 0x0, 8)
    word = handle_opcode(ins, "STOP")
    assert (word >> 3) & 0x1F == 0x0F
    assert word & 0x7 == 0


def test_unknown_opcode_raises():
    ins = Instruction("BOGUS", 0x1E, 0x0, 0xF0, 0x0, 32)
    with pytest.raises(AssemblyError):
        handle_opcode(ins, "BOGUS r1, r2, r3")


def test_jumps_reject_funct3_zero():
    ins = dataclasses.replace(get_instruction_by_alias("JAL"), funct3=0)
    with pytest.raises(AssemblyError):
        handle_funct3_jumps(ins, "JAL r1, 4")


def test_branches_reject_funct3_six():
    ins = dataclasses.replace(get_instruction_by_alias("BEQ"), funct3=6)
    with pytest.raises(AssemblyError):
        handle_funct3_branches(ins, "BEQ r1, r2, 4")


def test_stores_reject_funct3_three():
    ins = dataclasses.replace(get_instruction_by_alias("SB"), funct3=3)
    with pytest.raises(AssemblyError):
        handle_funct3_stores(ins, "SB r1, r2, 4")


def test_arithmetic_and_bitwise_reject_nonzero_funct3():
    add = dataclasses.replace(get_instruction_by_alias("ADD"), funct3=1)
    and_ = dataclasses.replace(get_instruction_by_alias("AND"), funct3=1)
    with pytest.raises(AssemblyError):
        handle_funct3_arithmetic(add, "ADD r1, r2, r3")
    with pytest.raises(AssemblyError):
        handle_funct3_bitwise(and_, "AND r1, r2, r3")


def test_shifts_route_by_funct3():
    sll = get_instruction_by_alias("SLL")
    srli = get_instruction_by_alias("SRLI")
    assert handle_funct3_shifts(sll, "SLL r1, r2, r3") == assemble_arithmetic_bitwise(
        sll, "SLL r1, r2, r3"
    )
    assert handle_funct3_shifts(srli, "SRLI r1, r2, 3") == assemble_shift_immediates(
        srli, "SRLI r1, r2, 3"
    )


def test_byte_instruction_rejects_other_funct3():
    ins = dataclasses.replace(get_instruction_by_alias("HALT"), funct3=3)
    with pytest.raises(AssemblyError):
        handle_byte_instruction(ins, "HALT")


def test_malformed_operands_propagate():
    with pytest.raises(AssemblyError):
        handle_opcode(get_instruction_by_alias("ADD"), "ADD r1")