"""Framebuffer rendering: RGB frames, terminal text and screenshots.

The framebuffer is stored column-major as ``display[x, y]``; every renderer
here transposes it to the row-major ``(height, width)`` layout images use.
"""

from pathlib import Path
from typing import Tuple

import jax.numpy as jnp
import numpy as np
from PIL import Image

Color = Tuple[int, int, int]

# name -> (on_color, off_color)
COLOR_SCHEMES = {
    "classic": ((0, 255, 0), (0, 0, 0)),
    "amber": ((255, 176, 0), (0, 0, 0)),
    "white": ((255, 255, 255), (0, 0, 0)),
    "blue": ((0, 255, 255), (0, 0, 64)),
    "retro": ((255, 255, 0), (64, 0, 64)),
    "cyan": ((0, 255, 255), (0, 0, 0)),
}


def _rows(display: jnp.ndarray) -> np.ndarray:
    """Host copy of the framebuffer as a (height, width) bool array."""
    return np.asarray(display, dtype=np.bool_).T


def chip8_display_to_rgb(
    display: jnp.ndarray,
    scale: int = 8,
    on_color: Color = COLOR_SCHEMES["classic"][0],
    off_color: Color = COLOR_SCHEMES["classic"][1],
) -> np.ndarray:
    """Convert the framebuffer to an upscaled RGB image.

    Args:
        display: Bool array of shape (64, 32)
        scale: Output pixels per CHIP-8 pixel along each axis
        on_color: RGB color of lit pixels
        off_color: RGB color of dark pixels

    Returns:
        uint8 array of shape (32 * scale, 64 * scale, 3)
    """
    palette = np.array([off_color, on_color], dtype=np.uint8)
    frame = palette[_rows(display).astype(np.intp)]
    if scale > 1:
        frame = frame.repeat(scale, axis=0).repeat(scale, axis=1)
    return frame


def create_color_scheme(scheme: str = "classic") -> Tuple[Color, Color]:
    """Return ``(on_color, off_color)`` for a named scheme."""
    try:
        return COLOR_SCHEMES[scheme]
    except KeyError:
        raise ValueError(
            f"Unknown color scheme '{scheme}'. Available: {sorted(COLOR_SCHEMES)}"
        ) from None


def chip8_display_to_text(display: jnp.ndarray, on_char: str = "*", off_char: str = " ") -> str:
    """Render the display as lines of text, one character per pixel."""
    return "\n".join(
        "".join(on_char if pixel else off_char for pixel in row)
        for row in _rows(display)
    )


def save_screenshot(
    display: jnp.ndarray,
    filename: str | Path,
    scale: int = 8,
    color_scheme: str = "classic",
) -> None:
    """Write the display to an image file (format chosen from the extension)."""
    on_color, off_color = create_color_scheme(color_scheme)
    Image.fromarray(chip8_display_to_rgb(display, scale, on_color, off_color)).save(filename)
