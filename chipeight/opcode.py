"""CHIP-8 instruction set and decoder."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Op(Enum):
    """Every CHIP-8 operation the emulator supports."""

    CLEAR_SCREEN = auto()
    RETURN = auto()
    JUMP = auto()
    CALL = auto()
    SET = auto()
    ADD = auto()
    SKIP_IF_VX_EQ = auto()
    SKIP_IF_VX_NEQ = auto()
    SKIP_IF_VX_EQ_VY = auto()
    SKIP_IF_VX_NEQ_VY = auto()
    SET_VX_TO_VY = auto()
    BINARY_OR = auto()
    BINARY_AND = auto()
    LOGICAL_XOR = auto()
    ADD_VY_TO_VX = auto()
    SUB_VX_VY_TO_VX = auto()
    SUB_VY_VX_TO_VX = auto()
    SHIFT = auto()
    SET_INDEX = auto()
    JUMP_WITH_OFFSET = auto()
    RANDOM = auto()
    DISPLAY = auto()
    SKIP_IF_KEY_PRESSED = auto()
    SKIP_IF_KEY_NOT_PRESSED = auto()
    SET_VX_TO_DELAY_TIMER = auto()
    SET_DELAY_TIMER_TO_VX = auto()
    SET_SOUND_TIMER_TO_VX = auto()
    ADD_TO_INDEX = auto()
    GET_KEY = auto()
    FONT_CHARACTER = auto()
    BINARY_CODED_DECIMAL = auto()
    STORE_MEMORY = auto()
    LOAD_MEMORY = auto()


@dataclass(frozen=True, slots=True)
class Instruction:
    """A decoded instruction; operands an operation does not use stay zero."""

    op: Op
    vx: int = 0
    vy: int = 0
    val: int = 0
    left_shift: bool = False


_ALU_OPS = {
    0x0: Op.SET_VX_TO_VY,
    0x1: Op.BINARY_OR,
    0x2: Op.BINARY_AND,
    0x3: Op.LOGICAL_XOR,
    0x4: Op.ADD_VY_TO_VX,
    0x5: Op.SUB_VX_VY_TO_VX,
    0x7: Op.SUB_VY_VX_TO_VX,
}

_KEY_OPS = {
    0x9E: Op.SKIP_IF_KEY_PRESSED,
    0xA1: Op.SKIP_IF_KEY_NOT_PRESSED,
}

_MISC_OPS = {
    0x07: Op.SET_VX_TO_DELAY_TIMER,
    0x15: Op.SET_DELAY_TIMER_TO_VX,
    0x18: Op.SET_SOUND_TIMER_TO_VX,
    0x1E: Op.ADD_TO_INDEX,
    0x0A: Op.GET_KEY,
    0x29: Op.FONT_CHARACTER,
    0x33: Op.BINARY_CODED_DECIMAL,
    0x55: Op.STORE_MEMORY,
    0x65: Op.LOAD_MEMORY,
}


def decode(data: bytes | bytearray | memoryview) -> Instruction:
    """Decode the instruction held in the first two bytes of *data*.

    Raises ValueError when fewer than two bytes are given or the bytes do not
    form a supported instruction.
    """
    if len(data) < 2:
        raise ValueError("an instruction needs two bytes")
    high, low = data[0], data[1]
    vx = high & 0xF
    vy = low >> 4
    n = low & 0xF
    address = (vx << 8) | low
    word = (high << 8) | low

    match high >> 4:
        case 0x0 if word == 0x00E0:
            return Instruction(Op.CLEAR_SCREEN)
        case 0x0 if word == 0x00EE:
            return Instruction(Op.RETURN)
        case 0x1:
            return Instruction(Op.JUMP, val=address)
        case 0x2:
            return Instruction(Op.CALL, val=address)
        case 0x3:
            return Instruction(Op.SKIP_IF_VX_EQ, vx=vx, val=low)
        case 0x4:
            return Instruction(Op.SKIP_IF_VX_NEQ, vx=vx, val=low)
        case 0x5 if n == 0:
            return Instruction(Op.SKIP_IF_VX_EQ_VY, vx=vx, vy=vy)
        case 0x6:
            return Instruction(Op.SET, vx=vx, val=low)
        case 0x7:
            return Instruction(Op.ADD, vx=vx, val=low)
        case 0x8 if n in _ALU_OPS:
            return Instruction(_ALU_OPS[n], vx=vx, vy=vy)
        case 0x8 if n in (0x6, 0xE):
            return Instruction(Op.SHIFT, vx=vx, vy=vy, left_shift=n == 0xE)
        case 0x9 if n == 0:
            return Instruction(Op.SKIP_IF_VX_NEQ_VY, vx=vx, vy=vy)
        case 0xA:
            return Instruction(Op.SET_INDEX, val=address)
        case 0xB:
            return Instruction(Op.JUMP_WITH_OFFSET, vx=vx, val=address)
        case 0xC:
            return Instruction(Op.RANDOM, vx=vx, val=low)
        case 0xD:
            return Instruction(Op.DISPLAY, vx=vx, vy=vy, val=n)
        case 0xE if low in _KEY_OPS:
            return Instruction(_KEY_OPS[low], vx=vx)
        case 0xF if low in _MISC_OPS:
            return Instruction(_MISC_OPS[low], vx=vx)
    raise ValueError(f"unknown instruction {word:04X}")