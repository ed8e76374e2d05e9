"""CHIP-8 timer, index and register block instructions (FXNN)."""

from octavm.constants import FONT_HEIGHT, FONT_START
from octavm.decode import DecodedInstruction
from octavm.memory import read_byte, write_byte
from octavm.state import EmulatorState


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    registers = state.registers.set_v(instruction.x, state.registers.delay_timer)
    return state.replace(registers=registers.advance_pc())


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Halt until a key is pressed, then store it in VX.

    Only latches the register; ``set_key`` resolves the wait.
    """
    registers = state.registers.replace(awaiting_key=instruction.x)
    return state.replace(registers=registers.advance_pc())


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    registers = state.registers.replace(delay_timer=state.V[instruction.x])
    return state.replace(registers=registers.advance_pc())


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    registers = state.registers.replace(sound_timer=state.V[instruction.x])
    return state.replace(registers=registers.advance_pc())


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register (VF untouched)."""
    registers = state.registers.set_i(int(state.I) + int(state.V[instruction.x]))
    return state.replace(registers=registers.advance_pc())


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x]) & 0xF
    registers = state.registers.set_i(FONT_START + digit * FONT_HEIGHT)
    return state.replace(registers=registers.advance_pc())


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2, then I += 3."""
    value = int(state.V[instruction.x])
    index = int(state.I)

    digits = (value // 100, (value // 10) % 10, value % 10)

    memory = state.memory
    for offset, digit in enumerate(digits):
        memory = write_byte(memory, (index + offset) & 0xFFFF, digit)

    registers = state.registers.set_i(index + len(digits))
    return state.replace(memory=memory, registers=registers.advance_pc())


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I, incrementing I."""
    index = int(state.I)
    count = instruction.x + 1

    memory = state.memory
    for register in range(count):
        memory = write_byte(memory, (index + register) & 0xFFFF, int(state.V[register]))

    registers = state.registers.set_i(index + count)
    return state.replace(memory=memory, registers=registers.advance_pc())


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I, incrementing I."""
    index = int(state.I)
    count = instruction.x + 1

    registers = state.registers
    for register in range(count):
        registers = registers.set_v(register, read_byte(state.memory, (index + register) & 0xFFFF))

    registers = registers.set_i(index + count)
    return state.replace(registers=registers.advance_pc())
