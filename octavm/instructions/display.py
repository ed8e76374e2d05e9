"""CHIP-8 display operations."""

from octavm.constants import FLAG_REGISTER
from octavm.decode import DecodedInstruction
from octavm.memory import draw_sprite
from octavm.state import EmulatorState


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N, VF = collision."""
    memory, collision = draw_sprite(
        state.memory,
        int(state.V[instruction.x]),
        int(state.V[instruction.y]),
        instruction.n,
        int(state.I),
    )
    registers = state.registers.set_v(FLAG_REGISTER, collision)
    return state.replace(memory=memory, registers=registers.advance_pc())
