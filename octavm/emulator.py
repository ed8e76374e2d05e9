"""Main CHIP-8 emulator execution engine.

``execute`` is the opcode dispatcher: it decodes one instruction and runs the
handler for its operation. ``step`` is the stepper built on top of it, which
honours the awaiting-key halt and divides the step rate down to the 60Hz
timers. The host drives ``step`` from its own pacing loop and feeds key
events through ``set_key`` in between.
"""

from pathlib import Path
from typing import Optional

import jax.numpy as jnp

from octavm.constants import NUM_KEYS, PROGRAM_START, STEPS_PER_TIMER_TICK
from octavm.decode import DecodedInstruction, Operation, decode, mnemonic
from octavm.errors import InvalidProgramError
from octavm.instructions.alu import execute_alu_operation
from octavm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key_down, execute_skip_if_key_up
)
from octavm.instructions.display import execute_display
from octavm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from octavm.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)
from octavm.instructions.system import (
    execute_clear_screen, execute_return, execute_machine_code_call, execute_invalid
)
from octavm.logging import get_logger
from octavm.memory import read_word, write_block
from octavm.rng import KeyRandomSource, RandomSource
from octavm.state import EmulatorState, MachineStatus

logger = get_logger("octavm.emulator")

INSTRUCTION_TABLE = {
    Operation.CLEAR_SCREEN: execute_clear_screen,
    Operation.RETURN: execute_return,
    Operation.MACHINE_CODE_CALL: execute_machine_code_call,
    Operation.JUMP: execute_jump,
    Operation.CALL: execute_call,
    Operation.SKIP_IF_EQUAL_IMMEDIATE: execute_skip_if_equal_immediate,
    Operation.SKIP_IF_NOT_EQUAL_IMMEDIATE: execute_skip_if_not_equal_immediate,
    Operation.SKIP_IF_EQUAL_REGISTER: execute_skip_if_equal_register,
    Operation.SET_IMMEDIATE: execute_set,
    Operation.ADD_IMMEDIATE: execute_add,
    Operation.MOVE: execute_alu_operation,
    Operation.OR: execute_alu_operation,
    Operation.AND: execute_alu_operation,
    Operation.XOR: execute_alu_operation,
    Operation.ADD: execute_alu_operation,
    Operation.SUBTRACT: execute_alu_operation,
    Operation.SHIFT_RIGHT: execute_alu_operation,
    Operation.SUBTRACT_REVERSE: execute_alu_operation,
    Operation.SHIFT_LEFT: execute_alu_operation,
    Operation.SKIP_IF_NOT_EQUAL_REGISTER: execute_skip_if_not_equal_register,
    Operation.SET_INDEX: execute_set_index,
    Operation.JUMP_WITH_OFFSET: execute_jump_with_offset,
    Operation.RANDOM: execute_random,
    Operation.DRAW: execute_display,
    Operation.SKIP_IF_KEY_DOWN: execute_skip_if_key_down,
    Operation.SKIP_IF_KEY_UP: execute_skip_if_key_up,
    Operation.GET_DELAY_TIMER: execute_get_delay_timer,
    Operation.WAIT_FOR_KEY: execute_wait_for_key,
    Operation.SET_DELAY_TIMER: execute_set_delay_timer,
    Operation.SET_SOUND_TIMER: execute_set_sound_timer,
    Operation.ADD_TO_INDEX: execute_add_to_index,
    Operation.FONT_CHARACTER: execute_font_character,
    Operation.BCD: execute_bcd_conversion,
    Operation.STORE_REGISTERS: execute_store_registers,
    Operation.LOAD_REGISTERS: execute_load_registers,
    Operation.INVALID: execute_invalid,
}


def fetch(state: EmulatorState) -> int:
    """Fetch the instruction at the program counter."""
    return read_word(state.memory, state.pc)


def execute(
    state: EmulatorState,
    instruction: int | DecodedInstruction,
    rng: Optional[RandomSource] = None,
) -> EmulatorState:
    """Execute a single CHIP-8 instruction located at the program counter.

    Args:
        state: Current machine state
        instruction: Raw 16-bit opcode or an already decoded instruction
        rng: Random byte source, required when the instruction is CXNN

    Returns:
        The successor state. The handler advances or sets the program counter.

    Raises:
        InvalidProgramError: The opcode is invalid, calls machine code, or
            over/underflows the call stack. ``address`` and ``opcode`` on the
            error identify the instruction.
        ValueError: CXNN was executed without a random source.
    """
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction)

    handler = INSTRUCTION_TABLE[instruction.operation]
    try:
        if instruction.operation is Operation.RANDOM:
            if rng is None:
                raise ValueError(f"{mnemonic(instruction)} needs a random source")
            return handler(state, instruction, rng)
        return handler(state, instruction)
    except InvalidProgramError as error:
        error.locate(int(state.pc), instruction.raw)
        raise


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Count one step and decrement the timers every STEPS_PER_TIMER_TICK steps."""
    cycles = state.cycles_since_timer + 1
    if cycles < STEPS_PER_TIMER_TICK:
        return state.replace(cycles_since_timer=cycles)

    registers = state.registers
    delay_timer = jnp.where(registers.delay_timer > 0, registers.delay_timer - 1, registers.delay_timer)
    sound_timer = jnp.where(registers.sound_timer > 0, registers.sound_timer - 1, registers.sound_timer)
    if logger.is_enabled_for("DEBUG"):
        logger.debug(f"Timer tick: DT={int(delay_timer)} ST={int(sound_timer)}")
    return state.replace(
        registers=registers.replace(delay_timer=delay_timer, sound_timer=sound_timer),
        cycles_since_timer=0,
    )


def step(state: EmulatorState, rng: Optional[RandomSource] = None) -> EmulatorState:
    """Execute one instruction unless awaiting a key, then advance the timers."""
    if state.status is MachineStatus.RUNNING:
        instruction = decode(fetch(state))
        if logger.is_enabled_for("DEBUG"):
            logger.debug(f"PC: 0x{int(state.pc):03X} {instruction.raw:04X} {mnemonic(instruction)}")

        state = execute(state, instruction, rng)

        if state.status is MachineStatus.AWAITING_KEY:
            logger.debug(f"Waiting for key press into V{state.registers.awaiting_key:X}")

    return tick_timers(state)


def run(state: EmulatorState, steps: int, rng: Optional[RandomSource] = None) -> EmulatorState:
    """Run a fixed number of steps.

    Without an explicit source, CXNN draws from a fresh ``KeyRandomSource(0)``
    owned by this call, so every run from the same state is identical.
    """
    if rng is None:
        rng = KeyRandomSource(0)
    for _ in range(steps):
        state = step(state, rng)
    return state


def set_key(state: EmulatorState, key: int, pressed: bool) -> EmulatorState:
    """Update one keypad key, resolving a pending key wait on a new press."""
    if not 0 <= key < NUM_KEYS:
        raise ValueError(f"Key {key} is out of range 0-{NUM_KEYS - 1}")

    registers = state.registers
    was_pressed = bool(registers.keypad[key])

    if pressed and not was_pressed and registers.awaiting_key is not None:
        logger.debug(f"Key {key:X} pressed, resuming with V{registers.awaiting_key:X} = {key}")
        registers = registers.set_v(registers.awaiting_key, key).replace(awaiting_key=None)

    registers = registers.replace(keypad=registers.keypad.at[key].set(bool(pressed)))
    return state.replace(registers=registers)


def sound_active(state: EmulatorState) -> bool:
    """True while the host should be emitting a tone."""
    return int(state.registers.sound_timer) > 0


def load_program(state: EmulatorState, data: bytes, address: int = PROGRAM_START) -> EmulatorState:
    """Copy a program image verbatim into memory."""
    return state.replace(memory=write_block(state.memory, address, data))


def load_rom(state: EmulatorState, filename: str | Path, address: int = PROGRAM_START) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    rom_data = Path(filename).read_bytes()
    state = load_program(state, rom_data, address)
    logger.info(f"Loaded {len(rom_data)} bytes from {filename} at 0x{address:03X}")
    return state
