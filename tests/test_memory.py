"""Tests for memory and register operations."""

import jax.numpy as jnp
import pytest
from octavm import execute, read_byte, SequenceRandomSource, FONT_START
from octavm.constants import FONT_DATA
from conftest import set_registers


class TestBasicMemory:
    """Test basic memory operations."""

    @pytest.mark.parametrize("value", range(256))
    @pytest.mark.parametrize("register", range(16))
    def test_set_every_register(self, fresh_state, register, value):
        """6XNN - Set VX = NN for every register and immediate, advancing pc by 2."""
        state = execute(fresh_state, 0x6000 | (register << 8) | value)

        assert state.V[register] == value
        assert state.pc == 0x202

    def test_add_basic(self, fresh_state):
        """7XNN - Add NN to VX."""
        state = set_registers(fresh_state, V1=0x10)
        state = execute(state, 0x7105)  # V1 += 5
        assert state.V[1] == 0x15

    def test_add_wraps_without_flag(self, fresh_state):
        """7XNN - Overflow wraps and leaves VF unchanged."""
        state = set_registers(fresh_state, V1=0xFF, VF=0)
        state = execute(state, 0x7102)
        assert state.V[1] == 0x01
        assert state.V[15] == 0


class TestIndexRegister:
    """Test I register operations."""

    def test_set_index_basic(self, fresh_state):
        """ANNN - Set I register to NNN."""
        state = execute(fresh_state, 0xA123)  # I = 0x123
        assert state.I == 0x123
        assert state.pc == 0x202

    def test_set_index_maximum(self, fresh_state):
        """ANNN - Set I register to maximum 12-bit value."""
        state = execute(fresh_state, 0xAFFF)  # I = 0xFFF
        assert state.I == 0xFFF

    def test_add_to_index(self, fresh_state):
        """FX1E - I += VX."""
        state = set_registers(fresh_state, V2=0x20)
        state = execute(state, 0xA300)
        state = execute(state, 0xF21E)
        assert state.I == 0x320

    def test_add_to_index_wraps_16_bits(self, fresh_state):
        """FX1E - I wraps modulo 2^16 and does not set VF."""
        state = set_registers(fresh_state, V2=0x10)
        state = state.replace(registers=state.registers.set_i(0xFFF8))

        state = execute(state, 0xF21E)

        assert state.I == 0x0008
        assert state.V[15] == 0


class TestRandom:
    """Test CXNN with an injected random source."""

    def test_random_masked(self, fresh_state):
        """CXNN - VX = random & NN."""
        rng = SequenceRandomSource([0xAB])
        state = execute(fresh_state, 0xC30F, rng)
        assert state.V[3] == 0x0B
        assert state.pc == 0x202

    def test_random_sequence(self, fresh_state):
        """Each CXNN consumes the next byte."""
        rng = SequenceRandomSource([0x12, 0x34])
        state = execute(fresh_state, 0xC0FF, rng)
        state = execute(state, 0xC1FF, rng)
        assert state.V[0] == 0x12
        assert state.V[1] == 0x34

    def test_random_zero_mask(self, fresh_state):
        """CXNN - A zero mask always gives zero."""
        state = execute(fresh_state, 0xC500, SequenceRandomSource([0xFF]))
        assert state.V[5] == 0


class TestFont:
    """Test FX29."""

    @pytest.mark.parametrize("digit", range(16))
    def test_font_character_address(self, fresh_state, digit):
        """FX29 - I points at the glyph, which reads back from the font."""
        state = set_registers(fresh_state, V7=digit)
        state = execute(state, 0xF729)

        assert state.I == FONT_START + digit * 5
        glyph = [read_byte(state.memory, int(state.I) + row) for row in range(5)]
        assert glyph == [int(b) for b in FONT_DATA[digit * 5:digit * 5 + 5]]

    def test_font_character_uses_low_nibble(self, fresh_state):
        """FX29 - Only the low nibble of VX picks the digit."""
        state = set_registers(fresh_state, V7=0x3A)
        state = execute(state, 0xF729)
        assert state.I == FONT_START + 0xA * 5


class TestTimers:
    """Test FX07, FX15 and FX18."""

    def test_set_and_get_delay_timer(self, fresh_state):
        state = set_registers(fresh_state, V4=0x3C)
        state = execute(state, 0xF415)  # DT = V4
        state = execute(state, 0xF507)  # V5 = DT

        assert state.registers.delay_timer == 0x3C
        assert state.V[5] == 0x3C
        assert state.pc == 0x204

    def test_set_sound_timer(self, fresh_state):
        state = set_registers(fresh_state, V2=0x10)
        state = execute(state, 0xF218)

        assert state.registers.sound_timer == 0x10
        assert state.registers.delay_timer == 0


class TestBCD:
    """Test FX33."""

    def test_bcd_conversion(self, fresh_state):
        """V3=146 with I=0x40 stores 1, 4, 6 and leaves I at 0x43."""
        state = set_registers(fresh_state, V3=146)
        state = execute(state, 0xA040)
        state = execute(state, 0xF333)

        assert [read_byte(state.memory, 0x40 + i) for i in range(3)] == [1, 4, 6]
        assert state.I == 0x43
        assert state.pc == 0x204

    @pytest.mark.parametrize("value,digits", [(0, [0, 0, 0]), (9, [0, 0, 9]), (255, [2, 5, 5])])
    def test_bcd_edge_values(self, fresh_state, value, digits):
        state = set_registers(fresh_state, V0=value)
        state = execute(state, 0xA300)
        state = execute(state, 0xF033)

        assert [read_byte(state.memory, 0x300 + i) for i in range(3)] == digits


class TestRegisterBlocks:
    """Test FX55 and FX65."""

    def test_store_registers(self, fresh_state):
        """FX55 - Stores V0..VX and increments I past them."""
        state = set_registers(fresh_state, V0=0x11, V1=0x22, V2=0x33, V3=0x44)
        state = execute(state, 0xA400)
        state = execute(state, 0xF255)  # V0..V2

        assert [read_byte(state.memory, 0x400 + i) for i in range(4)] == [0x11, 0x22, 0x33, 0x00]
        assert state.I == 0x403

    def test_load_registers(self, fresh_state):
        """FX65 - Loads V0..VX and increments I past them."""
        state = fresh_state
        state = state.replace(memory=state.memory.replace(
            data=state.memory.data.at[0x400:0x404].set(jnp.array([9, 8, 7, 6], dtype=jnp.uint8))
        ))
        state = execute(state, 0xA400)
        state = execute(state, 0xF365)  # V0..V3

        assert [int(v) for v in state.V[:5]] == [9, 8, 7, 6, 0]
        assert state.I == 0x404

    def test_store_then_load_restores_registers(self, fresh_state):
        """FX55 followed by FX65 from the same address restores V0..VF."""
        values = {f"V{i:X}": i * 17 for i in range(16)}
        state = set_registers(fresh_state, **values)
        state = execute(state, 0xA500)
        state = execute(state, 0xFF55)

        cleared = state.update_registers(V=jnp.zeros(16, dtype=jnp.uint8))
        cleared = execute(cleared, 0xA500)
        cleared = execute(cleared, 0xFF65)

        assert [int(v) for v in cleared.V] == [i * 17 for i in range(16)]
        assert cleared.I == 0x510
