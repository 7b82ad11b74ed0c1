import pytest

from toyisa.assembler import assemble_source
from toyisa.machine import PROGRAM_ROM, PROGRAM_SIZE, BasicVm
from toyisa.vm import RomError, Vm


def _loaded(tmp_path, source, execute):
    rom = assemble_source(source)
    path = tmp_path / "rom.bin"
    path.write_bytes(rom)
    vm = Vm(BasicVm(), execute)
    vm.load_rom(path)
    return vm, rom


def test_load_rom_copies_into_program_memory(tmp_path):
    path = tmp_path / "rom.bin"
    data = bytes(range(1, 40))
    path.write_bytes(data)
    vm = Vm()
    assert vm.load_rom(path) == len(data)
    assert bytes(vm.machine.memory[PROGRAM_ROM : PROGRAM_ROM + len(data)]) == data


def test_load_rom_too_large(tmp_path):
    path = tmp_path / "big.bin"
    path.write_bytes(bytes(PROGRAM_SIZE + 1))
    with pytest.raises(RomError, match="too large"):
        Vm().load_rom(path)


def test_load_rom_missing_file(tmp_path):
    with pytest.raises(RomError, match="Could not open ROM file"):
        Vm().load_rom(tmp_path / "absent.bin")


def test_run_executes_arithmetic(tmp_path):
    source = "ADDI r1, r0, 7\nADDI r2, r0, 3\nADD r3, r1, r2\nHALT\n"
    vm, _ = _loaded(tmp_path, source, execute=True)
    assert vm.run() == 4
    regs = vm.machine.registers
    assert regs[1] == 7
    assert regs[2] == 3
    assert regs[3] == regs[1] + regs[2]


def test_run_without_execution_leaves_registers(tmp_path):
    vm, rom = _loaded(tmp_path, "ADDI r1, r0, 5\nHALT\n", execute=False)
    assert vm.run() == 2
    assert bytes(vm.machine.registers) == bytes(16)
    assert vm.machine.program_counter == PROGRAM_ROM + len(rom)


def test_step_stores_low_half_of_word(tmp_path):
    vm, rom = _loaded(tmp_path, "ADDI r1, r0, 5\n", execute=False)
    vm.step()
    assert vm.machine.opcode == int.from_bytes(rom[:2], "little")


def test_halt_with_execution_keeps_pc(tmp_path):
    vm, _ = _loaded(tmp_path, "HALT\n", execute=True)
    decoded = vm.step()
    assert decoded.opcode_funct3 == 0xFF
    assert vm.machine.program_counter == PROGRAM_ROM


def test_run_on_empty_memory_fails():
    with pytest.raises(RomError, match="VM error at instruction 0"):
        Vm().run()


def test_step_unknown_instruction():
    vm = Vm()
    vm.machine.memory[PROGRAM_ROM] = 0x0F << 3
    with pytest.raises(RomError, match="Unknown instruction"):
        vm.step()


def test_run_respects_instruction_limit(tmp_path):
    vm, _ = _loaded(tmp_path, "BEQ r0, r0, 0xFFFC\n", execute=True)
    assert vm.run(max_instructions=50) == 50
    assert vm.machine.program_counter == PROGRAM_ROM


def test_run_limit_without_execution(tmp_path):
    source = "ADDI r1, r0, 1\n" * 5 + "HALT\n"
    vm, _ = _loaded(tmp_path, source, execute=False)
    assert vm.run(max_instructions=3) == 3
    assert vm.machine.program_counter == PROGRAM_ROM + 12


def test_format_state_fresh_machine():
    text = Vm().format_state()
    lines = text.splitlines()
    assert lines[0] == "PC: 0x1000 | IR: 0x0000 | SP: 0 | I: 0x0000"
    assert lines[1].startswith("Registers: r0:0x00 ")
    assert "r15:0x00" in lines[1]


def test_format_instruction_immediate(tmp_path):
    vm, _ = _loaded(tmp_path, "ADDI r1, r0, 5\n", execute=False)
    assert vm.format_instruction(vm.step()) == "[ADDI] r1, r0, 0x0005"


def test_format_instruction_jal_round_trip(tmp_path):
    vm, _ = _loaded(tmp_path, "JAL r1, 0x12345\n", execute=False)
    assert vm.format_instruction(vm.step()) == "[JAL] r1, 0x12345"


def test_format_instruction_register_form(tmp_path):
    vm, _ = _loaded(tmp_path, "SUB r3, r1, r2\n", execute=False)
    assert vm.format_instruction(vm.step()) == "[SUB] [funct4=0x1] r3, r1, r2"


def test_format_instruction_halt(tmp_path):
    vm, _ = _loaded(tmp_path, "HALT\n", execute=False)
    assert vm.format_instruction(vm.step()) == "[HALT]"