"""CHIP-8 register load and arithmetic immediate instructions."""

from octavm.decode import DecodedInstruction
from octavm.rng import RandomSource
from octavm.state import EmulatorState


def execute_set(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """6XNN - Set VX = NN."""
    registers = state.registers.set_v(instruction.x, instruction.nn)
    return state.replace(registers=registers.advance_pc())


def execute_add(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """7XNN - Add NN to VX, without touching the carry flag."""
    registers = state.registers.set_v(instruction.x, int(state.V[instruction.x]) + instruction.nn)
    return state.replace(registers=registers.advance_pc())


def execute_set_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """ANNN - Set I = NNN."""
    registers = state.registers.set_i(instruction.nnn)
    return state.replace(registers=registers.advance_pc())


def execute_random(state: EmulatorState, instruction: DecodedInstruction, rng: RandomSource) -> EmulatorState:
    """CXNN - Set VX = random & NN."""
    registers = state.registers.set_v(instruction.x, rng.next_byte() & instruction.nn)
    return state.replace(registers=registers.advance_pc())
