"""CHIP-8 instruction decoding.

Decoding is a two-level table lookup. The top nibble indexes a 16-entry
primary table; four of its entries are secondary tables keyed by another
field of the opcode (the full 12-bit payload for system calls, the low nibble
for ALU operations, the low byte for key and load/store/timer operations).
The result is an explicit ``Operation`` tag plus every operand field, which
the dispatcher then switches on.
"""

import enum
from typing import NamedTuple

from chex import dataclass


class Operation(enum.Enum):
    # 0NNN
    CLEAR_SCREEN = enum.auto()
    RETURN = enum.auto()
    MACHINE_CODE_CALL = enum.auto()
    # 1NNN - 7XNN
    JUMP = enum.auto()
    CALL = enum.auto()
    SKIP_IF_EQUAL_IMMEDIATE = enum.auto()
    SKIP_IF_NOT_EQUAL_IMMEDIATE = enum.auto()
    SKIP_IF_EQUAL_REGISTER = enum.auto()
    SET_IMMEDIATE = enum.auto()
    ADD_IMMEDIATE = enum.auto()
    # 8XYN
    MOVE = enum.auto()
    OR = enum.auto()
    AND = enum.auto()
    XOR = enum.auto()
    ADD = enum.auto()
    SUBTRACT = enum.auto()
    SHIFT_RIGHT = enum.auto()
    SUBTRACT_REVERSE = enum.auto()
    SHIFT_LEFT = enum.auto()
    # 9XY0 - DXYN
    SKIP_IF_NOT_EQUAL_REGISTER = enum.auto()
    SET_INDEX = enum.auto()
    JUMP_WITH_OFFSET = enum.auto()
    RANDOM = enum.auto()
    DRAW = enum.auto()
    # EXNN
    SKIP_IF_KEY_DOWN = enum.auto()
    SKIP_IF_KEY_UP = enum.auto()
    # FXNN
    GET_DELAY_TIMER = enum.auto()
    WAIT_FOR_KEY = enum.auto()
    SET_DELAY_TIMER = enum.auto()
    SET_SOUND_TIMER = enum.auto()
    ADD_TO_INDEX = enum.auto()
    FONT_CHARACTER = enum.auto()
    BCD = enum.auto()
    STORE_REGISTERS = enum.auto()
    LOAD_REGISTERS = enum.auto()

    INVALID = enum.auto()


class SubTable(NamedTuple):
    """Secondary dispatch table keyed by one decoded field."""
    key: str
    entries: dict
    default: Operation


SYSTEM_TABLE = SubTable("nnn", {
    0x0E0: Operation.CLEAR_SCREEN,
    0x0EE: Operation.RETURN,
}, Operation.MACHINE_CODE_CALL)

ALU_TABLE = SubTable("n", {
    0x0: Operation.MOVE,
    0x1: Operation.OR,
    0x2: Operation.AND,
    0x3: Operation.XOR,
    0x4: Operation.ADD,
    0x5: Operation.SUBTRACT,
    0x6: Operation.SHIFT_RIGHT,
    0x7: Operation.SUBTRACT_REVERSE,
    0x8: Operation.SHIFT_LEFT,
    0xE: Operation.SHIFT_LEFT,  # 8XYE, the encoding used by real ROMs
}, Operation.INVALID)

KEY_TABLE = SubTable("nn", {
    0x9E: Operation.SKIP_IF_KEY_DOWN,
    0xA1: Operation.SKIP_IF_KEY_UP,
}, Operation.INVALID)

MISC_TABLE = SubTable("nn", {
    0x07: Operation.GET_DELAY_TIMER,
    0x0A: Operation.WAIT_FOR_KEY,
    0x15: Operation.SET_DELAY_TIMER,
    0x18: Operation.SET_SOUND_TIMER,
    0x1E: Operation.ADD_TO_INDEX,
    0x29: Operation.FONT_CHARACTER,
    0x33: Operation.BCD,
    0x55: Operation.STORE_REGISTERS,
    0x65: Operation.LOAD_REGISTERS,
}, Operation.INVALID)

PRIMARY_TABLE = (
    SYSTEM_TABLE,                                # 0NNN
    Operation.JUMP,                              # 1NNN
    Operation.CALL,                              # 2NNN
    Operation.SKIP_IF_EQUAL_IMMEDIATE,           # 3XNN
    Operation.SKIP_IF_NOT_EQUAL_IMMEDIATE,       # 4XNN
    Operation.SKIP_IF_EQUAL_REGISTER,            # 5XY0
    Operation.SET_IMMEDIATE,                     # 6XNN
    Operation.ADD_IMMEDIATE,                     # 7XNN
    ALU_TABLE,                                   # 8XYN
    Operation.SKIP_IF_NOT_EQUAL_REGISTER,        # 9XY0
    Operation.SET_INDEX,                         # ANNN
    Operation.JUMP_WITH_OFFSET,                  # BNNN
    Operation.RANDOM,                            # CXNN
    Operation.DRAW,                              # DXYN
    KEY_TABLE,                                   # EXNN
    MISC_TABLE,                                  # FXNN
)

MNEMONICS = {
    Operation.CLEAR_SCREEN: "CLS",
    Operation.RETURN: "RET",
    Operation.MACHINE_CODE_CALL: "SYS 0x{nnn:03X}",
    Operation.JUMP: "JP 0x{nnn:03X}",
    Operation.CALL: "CALL 0x{nnn:03X}",
    Operation.SKIP_IF_EQUAL_IMMEDIATE: "SE V{x:X}, 0x{nn:02X}",
    Operation.SKIP_IF_NOT_EQUAL_IMMEDIATE: "SNE V{x:X}, 0x{nn:02X}",
    Operation.SKIP_IF_EQUAL_REGISTER: "SE V{x:X}, V{y:X}",
    Operation.SET_IMMEDIATE: "LD V{x:X}, 0x{nn:02X}",
    Operation.ADD_IMMEDIATE: "ADD V{x:X}, 0x{nn:02X}",
    Operation.MOVE: "LD V{x:X}, V{y:X}",
    Operation.OR: "OR V{x:X}, V{y:X}",
    Operation.AND: "AND V{x:X}, V{y:X}",
    Operation.XOR: "XOR V{x:X}, V{y:X}",
    Operation.ADD: "ADD V{x:X}, V{y:X}",
    Operation.SUBTRACT: "SUB V{x:X}, V{y:X}",
    Operation.SHIFT_RIGHT: "SHR V{x:X}",
    Operation.SUBTRACT_REVERSE: "SUBN V{x:X}, V{y:X}",
    Operation.SHIFT_LEFT: "SHL V{x:X}",
    Operation.SKIP_IF_NOT_EQUAL_REGISTER: "SNE V{x:X}, V{y:X}",
    Operation.SET_INDEX: "LD I, 0x{nnn:03X}",
    Operation.JUMP_WITH_OFFSET: "JP V0, 0x{nnn:03X}",
    Operation.RANDOM: "RND V{x:X}, 0x{nn:02X}",
    Operation.DRAW: "DRW V{x:X}, V{y:X}, {n}",
    Operation.SKIP_IF_KEY_DOWN: "SKP V{x:X}",
    Operation.SKIP_IF_KEY_UP: "SKNP V{x:X}",
    Operation.GET_DELAY_TIMER: "LD V{x:X}, DT",
    Operation.WAIT_FOR_KEY: "LD V{x:X}, K",
    Operation.SET_DELAY_TIMER: "LD DT, V{x:X}",
    Operation.SET_SOUND_TIMER: "LD ST, V{x:X}",
    Operation.ADD_TO_INDEX: "ADD I, V{x:X}",
    Operation.FONT_CHARACTER: "LD F, V{x:X}",
    Operation.BCD: "LD B, V{x:X}",
    Operation.STORE_REGISTERS: "LD [I], V0-V{x:X}",
    Operation.LOAD_REGISTERS: "LD V0-V{x:X}, [I]",
    Operation.INVALID: "INVALID 0x{raw:04X}",
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)
    operation: Operation


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into an operation and its operands."""
    instruction = int(instruction) & 0xFFFF
    fields = dict(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
    )

    entry = PRIMARY_TABLE[fields["opcode"]]
    if isinstance(entry, SubTable):
        entry = entry.entries.get(fields[entry.key], entry.default)

    return DecodedInstruction(operation=entry, **fields)


def mnemonic(instruction: DecodedInstruction | int) -> str:
    """Render an instruction as a short assembly-style string."""
    if not isinstance(instruction, DecodedInstruction):
        instruction = decode(instruction)
    return MNEMONICS[instruction.operation].format(
        raw=instruction.raw,
        x=instruction.x,
        y=instruction.y,
        n=instruction.n,
        nn=instruction.nn,
        nnn=instruction.nnn,
    )
