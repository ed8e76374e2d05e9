"""CHIP-8 system instructions (0NNN)."""

from octavm.decode import DecodedInstruction
from octavm.errors import InvalidOpcodeError, UnsupportedMachineCodeError
from octavm.memory import clear_display
from octavm.stack import pop
from octavm.state import EmulatorState


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(
        memory=clear_display(state.memory),
        registers=state.registers.advance_pc(),
    )


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.registers.stack)
    return state.replace(registers=state.registers.replace(stack=stack).set_pc(address))


def execute_machine_code_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """0NNN - Call native routine, which no interpreter can run."""
    raise UnsupportedMachineCodeError(f"Machine code routine 0x{instruction.nnn:03X} is unsupported")


def execute_invalid(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    raise InvalidOpcodeError("Invalid opcode")
