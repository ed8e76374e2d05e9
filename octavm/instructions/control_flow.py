"""CHIP-8 control flow instructions."""

from octavm.constants import INSTRUCTION_SIZE
from octavm.decode import DecodedInstruction
from octavm.stack import push
from octavm.state import EmulatorState


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(registers=state.registers.set_pc(instruction.nnn))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    registers = state.registers
    return_address = (int(registers.pc) + INSTRUCTION_SIZE) & 0xFFFF
    registers = registers.replace(stack=push(registers.stack, return_address))
    return state.replace(registers=registers.set_pc(instruction.nnn))


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        amount = 2 * INSTRUCTION_SIZE if condition_fn(state, instruction) else INSTRUCTION_SIZE
        return state.replace(registers=state.registers.advance_pc(amount))
    return skip_instruction


def _key_down(state: EmulatorState, inst: DecodedInstruction) -> bool:
    return bool(state.registers.keypad[int(state.V[inst.x]) & 0xF])


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != inst.nn
)

execute_skip_if_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) == int(state.V[inst.y])
)

execute_skip_if_not_equal_register = make_skip_instruction(
    lambda state, inst: int(state.V[inst.x]) != int(state.V[inst.y])
)

# EX9E/EXA1 - Skip if key VX is pressed/not pressed
execute_skip_if_key_down = make_skip_instruction(_key_down)

execute_skip_if_key_up = make_skip_instruction(
    lambda state, inst: not _key_down(state, inst)
)


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = int(state.V[0]) + instruction.nnn
    return state.replace(registers=state.registers.set_pc(jump_address))
