"""CHIP-8 ALU operations (8XYN).

Each operation takes the current VX and VY and returns the new VX together
with the new VF, or ``None`` when the operation leaves VF alone. Carry and
borrow are derived from the wrapped 8-bit result, never from a wider
intermediate.
"""

from typing import Optional

from octavm.constants import FLAG_REGISTER
from octavm.decode import DecodedInstruction, Operation
from octavm.state import EmulatorState


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, VF = carry."""
    result = (vx + vy) & 0xFF
    return result, int(result < vx)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY, VF = borrow."""
    result = (vx - vy) & 0xFF
    return result, int(result > vx)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1, VF = bit shifted out."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX, VF = borrow."""
    result = (vy - vx) & 0xFF
    return result, int(result > vy)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY8/8XYE - Shift left: VX <<= 1, VF = bit shifted out."""
    return (vx << 1) & 0xFF, (vx >> 7) & 1


ALU_OPERATIONS = {
    Operation.MOVE: alu_set,
    Operation.OR: alu_or,
    Operation.AND: alu_and,
    Operation.XOR: alu_xor,
    Operation.ADD: alu_add,
    Operation.SUBTRACT: alu_sub_xy,
    Operation.SHIFT_RIGHT: alu_shift_right,
    Operation.SUBTRACT_REVERSE: alu_sub_yx,
    Operation.SHIFT_LEFT: alu_shift_left,
}


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = int(state.V[instruction.x])
    vy = int(state.V[instruction.y])

    result, vf = ALU_OPERATIONS[instruction.operation](vx, vy)

    # The flag is written last, so it wins when X is F
    registers = state.registers.set_v(instruction.x, result)
    if vf is not None:
        registers = registers.set_v(FLAG_REGISTER, vf)
    return state.replace(registers=registers.advance_pc())
