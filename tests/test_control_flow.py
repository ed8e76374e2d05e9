"""Tests for control flow instructions."""

import pytest
from octavm import execute, set_key
from conftest import set_registers


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    def test_jump_with_offset(self, fresh_state):
        """BNNN - Jump to NNN + V0."""
        state = set_registers(fresh_state, V0=0x10)
        state = execute(state, 0xB300)
        assert state.pc == 0x310

    def test_jump_with_offset_uses_full_address_space(self, fresh_state):
        """BNNN - V0 + NNN is not truncated to 12 bits."""
        state = set_registers(fresh_state, V0=0xFF)
        state = execute(state, 0xBFFF)
        assert state.pc == 0x10FE


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = set_registers(fresh_state, V5=0x42)
        initial_pc = int(state.pc)

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 4

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = set_registers(fresh_state, V5=0x41)
        initial_pc = int(state.pc)

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 2

    @pytest.mark.parametrize("value", range(256))
    def test_skip_if_equal_immediate_all_values(self, fresh_state, value):
        """3XNN - Skips exactly when the register holds the immediate."""
        state = set_registers(fresh_state, VA=value)

        state = execute(state, 0x3A80)
        assert state.pc == (0x204 if value == 0x80 else 0x202)

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = set_registers(fresh_state, V3=0x10)
        initial_pc = int(state.pc)

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 4

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = set_registers(fresh_state, V3=0x20)
        initial_pc = int(state.pc)

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x55)

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == 0x204

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x56)

        state = execute(state, 0x5120)
        assert state.pc == 0x202

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = set_registers(fresh_state, V1=0x01, V2=0x02)

        state = execute(state, 0x9120)
        assert state.pc == 0x204

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = set_registers(fresh_state, V1=0x07, V2=0x07)

        state = execute(state, 0x9120)
        assert state.pc == 0x202


class TestKeySkips:
    """Test EX9E / EXA1."""

    def test_skip_if_key_down(self, fresh_state):
        """EX9E - Skips when the key named by VX is held."""
        state = set_registers(fresh_state, V4=0xB)
        state = set_key(state, 0xB, True)

        state = execute(state, 0xE49E)
        assert state.pc == 0x204

    def test_skip_if_key_down_not_pressed(self, fresh_state):
        """EX9E - Falls through when the key is up."""
        state = set_registers(fresh_state, V4=0xB)

        state = execute(state, 0xE49E)
        assert state.pc == 0x202

    def test_skip_if_key_up(self, fresh_state):
        """EXA1 - Skips when the key is up."""
        state = set_registers(fresh_state, V4=0x3)

        state = execute(state, 0xE4A1)
        assert state.pc == 0x204

    def test_skip_if_key_up_while_pressed(self, fresh_state):
        """EXA1 - Falls through when the key is held."""
        state = set_registers(fresh_state, V4=0x3)
        state = set_key(state, 0x3, True)

        state = execute(state, 0xE4A1)
        assert state.pc == 0x202

    def test_key_index_uses_low_nibble(self, fresh_state):
        """Only the low nibble of VX selects the key."""
        state = set_registers(fresh_state, V0=0xF2)
        state = set_key(state, 0x2, True)

        state = execute(state, 0xE09E)
        assert state.pc == 0x204
