"""CHIP-8 virtual machine package."""

from octavm.state import EmulatorState, RegisterFile, StackState, MachineStatus, create_state
from octavm.memory import Memory, read_byte, write_byte, read_word, clear_display, draw_sprite
from octavm.emulator import execute, fetch, step, run, set_key, sound_active, load_program, load_rom
from octavm.decode import DecodedInstruction, Operation, decode, mnemonic
from octavm.errors import (
    OctavmError, InvalidProgramError, InvalidOpcodeError, UnsupportedMachineCodeError,
    StackError, StackOverflowError, StackUnderflowError, ProgramTooLargeError
)
from octavm.rng import RandomSource, KeyRandomSource, SequenceRandomSource
from octavm.constants import *
from octavm.rendering import chip8_display_to_rgb, chip8_display_to_text, create_color_scheme, save_screenshot

__all__ = [
    "EmulatorState",
    "RegisterFile",
    "StackState",
    "MachineStatus",
    "create_state",
    "Memory",
    "read_byte",
    "write_byte",
    "read_word",
    "clear_display",
    "draw_sprite",
    "fetch",
    "execute",
    "step",
    "run",
    "set_key",
    "sound_active",
    "load_program",
    "load_rom",
    "DecodedInstruction",
    "Operation",
    "decode",
    "mnemonic",
    "OctavmError",
    "InvalidProgramError",
    "InvalidOpcodeError",
    "UnsupportedMachineCodeError",
    "StackError",
    "StackOverflowError",
    "StackUnderflowError",
    "ProgramTooLargeError",
    "RandomSource",
    "KeyRandomSource",
    "SequenceRandomSource",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "chip8_display_to_rgb",
    "chip8_display_to_text",
    "create_color_scheme",
    "save_screenshot",
]
