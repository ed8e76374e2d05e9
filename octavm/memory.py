"""CHIP-8 memory and framebuffer.

Memory holds the byte-addressable data store and the 64x32 monochrome
framebuffer. The hexadecimal font is not stored in the data array: it is
mapped read-only at ``FONT_START`` so that ``I`` can point at any glyph without
colliding with program memory. Writes into that window land in the data array
(wrapped like any other address) and never alter the glyphs.

All functions are pure and return a new ``Memory``.
"""

from typing import Sequence

import jax.numpy as jnp
from flax.struct import PyTreeNode, field

from octavm.constants import (
    FONT_DATA, FONT_END, FONT_START, MEMORY_SIZE, SCREEN_HEIGHT, SCREEN_WIDTH
)
from octavm.errors import ProgramTooLargeError

# Bit masks for one sprite row, most significant bit (leftmost pixel) first
SPRITE_SHIFTS = jnp.arange(7, -1, -1, dtype=jnp.uint8)
SPRITE_COLUMNS = jnp.arange(8)


class Memory(PyTreeNode):
    """Data store and framebuffer (indexed ``display[x, y]``)."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))


def read_byte(memory: Memory, address: int) -> int:
    """Read one byte, serving the font window from the glyph table."""
    address = int(address)
    if FONT_START <= address < FONT_END:
        return int(FONT_DATA[address - FONT_START])
    return int(memory.data[address % MEMORY_SIZE])


def write_byte(memory: Memory, address: int, value: int) -> Memory:
    """Write one byte into the data store."""
    return memory.replace(data=memory.data.at[int(address) % MEMORY_SIZE].set(int(value) & 0xFF))


def read_word(memory: Memory, address: int) -> int:
    """Read a big-endian 16-bit word (the byte order of program images)."""
    address = int(address)
    return (read_byte(memory, address) << 8) | read_byte(memory, (address + 1) & 0xFFFF)


def write_block(memory: Memory, address: int, block: bytes | Sequence[int]) -> Memory:
    """Copy a block of bytes verbatim into the data store starting at address."""
    block = bytes(block)
    end = address + len(block)
    if address < 0 or end > MEMORY_SIZE:
        raise ProgramTooLargeError(
            f"{len(block)} bytes at 0x{address:03X} do not fit in {MEMORY_SIZE} bytes of memory"
        )
    if not block:
        return memory
    data = jnp.array(list(block), dtype=jnp.uint8)
    return memory.replace(data=memory.data.at[address:end].set(data))


def clear_display(memory: Memory) -> Memory:
    """Turn every framebuffer pixel off."""
    return memory.replace(display=jnp.zeros_like(memory.display))


def draw_sprite(memory: Memory, x: int, y: int, height: int, sprite_address: int) -> tuple[Memory, int]:
    """XOR a sprite into the framebuffer.

    Each of the ``height`` rows starting at ``sprite_address`` is one byte,
    drawn most significant bit first from column ``x``. Coordinates wrap around
    the screen edges independently on each axis.

    Args:
        memory: Current memory
        x: Left column of the sprite
        y: Top row of the sprite
        height: Number of sprite rows (0-15)
        sprite_address: Address of the first sprite row

    Returns:
        Tuple of:
            - memory: Memory with the updated framebuffer
            - collision: 1 if any set pixel was turned off, else 0
    """
    if height == 0:
        return memory, 0

    sprite_address = int(sprite_address)
    rows = jnp.array(
        [read_byte(memory, (sprite_address + row) & 0xFFFF) for row in range(height)],
        dtype=jnp.uint8,
    )
    sprite = ((rows[:, None] >> SPRITE_SHIFTS[None, :]) & 1).astype(jnp.bool_)

    # (height, 8) grids of wrapped screen coordinates
    xs = ((int(x) + SPRITE_COLUMNS) % SCREEN_WIDTH)[None, :]
    ys = ((int(y) + jnp.arange(height)) % SCREEN_HEIGHT)[:, None]

    current = memory.display[xs, ys]
    collision = int(jnp.any(current & sprite))
    display = memory.display.at[xs, ys].set(current ^ sprite)

    return memory.replace(display=display), collision
