"""CHIP-8 machine state structures."""

import enum
from typing import Optional, Sequence

import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from octavm.constants import NUM_KEYS, NUM_REGISTERS, PROGRAM_START, STACK_SIZE
from octavm.memory import Memory, write_block


class MachineStatus(enum.Enum):
    """Whether the stepper executes instructions or waits for a key press."""
    RUNNING = "running"
    AWAITING_KEY = "awaiting_key"


@dataclass(frozen=True)
class StackState:
    """Return addresses for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: int = 0


class RegisterFile(PyTreeNode):
    """CPU-visible registers, call stack, timers and keypad."""
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.asarray(PROGRAM_START, dtype=jnp.uint16))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    stack: StackState = field(default_factory=StackState)
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    # Register index latched by FX0A until a key is pressed
    awaiting_key: Optional[int] = field(pytree_node=False, default=None)

    def set_v(self, index: int, value) -> "RegisterFile":
        """Write a general register, wrapping the value to 8 bits."""
        return self.replace(V=self.V.at[index].set(jnp.astype(jnp.asarray(value) & 0xFF, jnp.uint8)))

    def set_pc(self, address) -> "RegisterFile":
        return self.replace(pc=jnp.astype(jnp.asarray(address) & 0xFFFF, jnp.uint16))

    def set_i(self, address) -> "RegisterFile":
        return self.replace(I=jnp.astype(jnp.asarray(address) & 0xFFFF, jnp.uint16))

    def advance_pc(self, amount: int = 2) -> "RegisterFile":
        return self.set_pc(jnp.astype(self.pc, jnp.uint32) + amount)


class EmulatorState(PyTreeNode):
    """Complete machine: registers, memory and the stepper's timer divider."""
    registers: RegisterFile = field(default_factory=RegisterFile)
    memory: Memory = field(default_factory=Memory)
    cycles_since_timer: int = 0

    @property
    def V(self) -> jnp.ndarray:
        return self.registers.V

    @property
    def pc(self) -> jnp.ndarray:
        return self.registers.pc

    @property
    def I(self) -> jnp.ndarray:
        return self.registers.I

    @property
    def display(self) -> jnp.ndarray:
        return self.memory.display

    @property
    def status(self) -> MachineStatus:
        if self.registers.awaiting_key is None:
            return MachineStatus.RUNNING
        return MachineStatus.AWAITING_KEY

    def update_registers(self, **changes) -> "EmulatorState":
        return self.replace(registers=self.registers.replace(**changes))


def create_state(
    program: bytes | Sequence[int] = b"",
    load_address: int = PROGRAM_START,
    entry_point: Optional[int] = None,
) -> EmulatorState:
    """Create a machine with a program image copied in at load_address.

    Execution starts at entry_point, which defaults to the load address.
    """
    state = EmulatorState()
    state = state.replace(memory=write_block(state.memory, load_address, program))
    start = load_address if entry_point is None else entry_point
    return state.replace(registers=state.registers.set_pc(start))
