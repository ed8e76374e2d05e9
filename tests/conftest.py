"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
from octavm import create_state, write_byte, PROGRAM_START


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test (pc at 0x200)."""
    return create_state()


@pytest.fixture
def make_state():
    """Factory for states with a program image loaded (at 0x200 unless told otherwise)."""
    def _make_state(program, load_address=PROGRAM_START):
        return create_state(bytes(program), load_address=load_address)
    return _make_state


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    memory = state.memory
    for offset, value in enumerate(sprite_bytes):
        memory = write_byte(memory, address + offset, value)
    return state.replace(memory=memory)


def set_registers(state, **values):
    """Helper to set general registers by name, e.g. set_registers(state, V1=3, VF=1)."""
    registers = state.registers
    for name, value in values.items():
        registers = registers.set_v(int(name[1:], 16), value)
    return state.replace(registers=registers)
