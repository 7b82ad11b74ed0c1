import logging

import pytest

from toyisa.decode import DecodedInstruction, vm_decode
from toyisa.dispatch import handle_opcode
from toyisa.execute import WHITE, execute_instruction
from toyisa.font import glyph
from toyisa.instructions import get_instruction_by_asm
from toyisa.machine import DISPLAY_WIDTH, PROGRAM_ROM, BasicVm

NEXT_PC = PROGRAM_ROM + 4


def _decode(line):
    ins = get_instruction_by_asm(line)
    return vm_decode(handle_opcode(ins, line), ins)


def _run(vm, line, next_pc=NEXT_PC):
    execute_instruction(vm, _decode(line), next_pc)


@pytest.fixture
def vm():
    return BasicVm()


def test_add_then_sub_round_trip(vm):
    vm.registers[1] = 9
    vm.registers[2] = 4
    _run(vm, "ADD r3, r1, r2")
    _run(vm, "SUB r4, r3, r2")
    assert vm.registers[4] == 9
    assert vm.program_counter == NEXT_PC


def test_add_wraps_at_eight_bits(vm):
    vm.registers[1] = 0xFF
    vm.registers[2] = 1
    _run(vm, "ADD r3, r1, r2")
    assert vm.registers[3] == 0


def test_mul_then_div_round_trip(vm):
    vm.registers[1] = 6
    vm.registers[2] = 5
    _run(vm, "MUL r3, r1, r2")
    _run(vm, "DIV r4, r3, r2")
    assert vm.registers[4] == 6


def test_division_by_zero_is_logged_and_skipped(vm, caplog):
    vm.registers[1] = 7
    vm.registers[3] = 33
    with caplog.at_level(logging.ERROR):
        _run(vm, "DIV r3, r1, r2")
    assert vm.registers[3] == 33
    assert vm.program_counter == NEXT_PC
    assert "Division by zero" in caplog.text


def test_divi_by_zero_leaves_register(vm, caplog):
    vm.registers[1] = 7
    vm.registers[2] = 11
    with caplog.at_level(logging.ERROR):
        _run(vm, "DIVI r2, r1, 0")
    assert vm.registers[2] == 11
    assert "Division by zero" in caplog.text


def test_addi_subi_round_trip(vm):
    vm.registers[1] = 40
    _run(vm, "ADDI r2, r1, 25")
    _run(vm, "SUBI r3, r2, 25")
    assert vm.registers[3] == 40
    assert vm.program_counter == NEXT_PC


def test_lui_takes_high_byte(vm):
    _run(vm, "LUI r1, 0xAB00")
    assert vm.registers[1] == 0xAB


def test_store_byte_then_load_byte(vm):
    vm.registers[1] = 0x20
    vm.registers[2] = 0x7F
    _run(vm, "SB r1, r2, 0x100")
    _run(vm, "LB r3, r1, 0x100")
    assert vm.memory[0x20 + 0x100] == 0x7F
    assert vm.registers[3] == 0x7F


def test_store_word_then_load_word(vm):
    vm.registers[1] = 0x10
    vm.registers[2] = 0x11
    vm.registers[3] = 0x22
    _run(vm, "SW r1, r2, 0x40")
    _run(vm, "LW r5, r1, 0x40")
    assert vm.registers[5] == 0x11
    assert vm.registers[6] == 0x22


def test_store_address_wraps_to_twelve_bits(vm):
    vm.registers[1] = 0
    vm.registers[2] = 0x5A
    _run(vm, "SB r1, r2, 0x1200")
    assert vm.memory[0x200] == 0x5A
    assert vm.memory[0x1200] == 0


def test_beq_taken_and_not_taken(vm):
    vm.registers[1] = 3
    vm.registers[2] = 3
    _run(vm, "BEQ r1, r2, 8")
    assert vm.program_counter == NEXT_PC + 8
    vm.registers[2] = 4
    _run(vm, "BEQ r1, r2, 8")
    assert vm.program_counter == NEXT_PC


def test_branch_offset_is_signed(vm):
    vm.registers[1] = 1
    vm.registers[2] = 2
    _run(vm, "BNE r1, r2, 0xFFFC")
    assert vm.program_counter == NEXT_PC - 4


def test_blt_compares_signed(vm):
    vm.registers[1] = 0xFF
    vm.registers[2] = 1
    _run(vm, "BLT r1, r2, 8")
    assert vm.program_counter == NEXT_PC + 8
    _run(vm, "BGT r1, r2, 8")
    assert vm.program_counter == NEXT_PC


def test_jal_links_and_jumps(vm):
    next_pc = 0x2A04
    _run(vm, "JAL r1, 0x10", next_pc)
    assert vm.registers[1] == 0x2A
    assert vm.program_counter == next_pc + 0x10


def test_jalr_target_is_even():
    vm = BasicVm()
    vm.registers[1] = 0x41
    dec = DecodedInstruction(opcode=0x06, funct3=0x02, funct4=0x01, rd=2, rs1=1, imm=0x02)
    execute_instruction(vm, dec, NEXT_PC)
    assert vm.program_counter % 2 == 0
    assert vm.program_counter in (0x41 + 0x02, 0x41 + 0x02 - 1)


def test_bitwise_identities(vm):
    vm.registers[1] = 0x5C
    _run(vm, "AND r2, r1, r1")
    _run(vm, "OR r3, r1, r0")
    _run(vm, "XOR r4, r1, r1")
    assert vm.registers[2] == 0x5C
    assert vm.registers[3] == 0x5C
    assert vm.registers[4] == 0


def test_xori_twice_restores_value(vm):
    vm.registers[1] = 0x3D
    _run(vm, "XORI r2, r1, 0xA5")
    _run(vm, "XORI r3, r2, 0xA5")
    assert vm.registers[3] == 0x3D
    _run(vm, "ANDI r4, r1, 0xFF")
    assert vm.registers[4] == 0x3D


def test_register_shift_round_trip(vm):
    vm.registers[1] = 0x0F
    vm.registers[2] = 4
    _run(vm, "SLL r3, r1, r2")
    _run(vm, "SRL r4, r3, r2")
    assert vm.registers[4] == 0x0F


def test_left_shift_drops_high_bits(vm):
    vm.registers[1] = 0x80
    vm.registers[2] = 1
    _run(vm, "SLL r3, r1, r2")
    assert vm.registers[3] == 0


def test_immediate_shift_round_trip(vm):
    vm.registers[1] = 0x03
    left = DecodedInstruction(opcode=0x0C, funct3=0x01, funct4=0, rd=2, rs1=1, imm=5)
    right = DecodedInstruction(opcode=0x0C, funct3=0x01, funct4=1, rd=3, rs1=2, imm=5)
    execute_instruction(vm, left, NEXT_PC)
    execute_instruction(vm, right, NEXT_PC)
    assert vm.registers[3] == 0x03
    assert vm.program_counter == NEXT_PC


def test_char_draws_glyph_in_its_cell(vm):
    dec = DecodedInstruction(opcode=0x0B, funct3=0x01, rd=1, rs1=2, rs2=3)
    execute_instruction(vm, dec, NEXT_PC)
    lit = [i for i, pixel in enumerate(vm.display_buffer) if pixel == WHITE]
    assert len(lit) == sum(bin(row).count("1") for row in glyph("!"))
    for index in lit:
        y, x = divmod(index, DISPLAY_WIDTH)
        assert 2 * 8 <= x < 3 * 8
        assert 3 * 8 <= y < 4 * 8
    assert vm.program_counter == NEXT_PC


def test_cls_clears_display(vm):
    vm.display_buffer[5] = WHITE
    execute_instruction(vm, DecodedInstruction(opcode=0x0B, funct3=0x00), NEXT_PC)
    assert not any(vm.display_buffer)
    assert vm.program_counter == NEXT_PC


def test_unknown_opcode_raises_and_keeps_pc(vm):
    with pytest.raises(ValueError):
        execute_instruction(vm, DecodedInstruction(opcode=0x1F), NEXT_PC)
    assert vm.program_counter == PROGRAM_ROM