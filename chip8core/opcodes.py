"""CHIP-8 opcode table shared by the executor, the assembler and the disassembler.

Every instruction variant is described once, as a ``(mask, match)`` bit pattern
plus the text syntax used to print it. ``OPCODE_TABLE`` maps each of the 65536
possible words to its :class:`Op`, so classification is a single lookup that
works the same on the host (numpy) and inside traced JAX code.
"""

from enum import IntEnum
from typing import NamedTuple

import numpy as np


class Op(IntEnum):
    """Instruction variants, in executor dispatch order."""
    UNKNOWN = 0
    NOP = 1
    CLS = 2
    RET = 3
    JP = 4
    CALL = 5
    SE_BYTE = 6
    SNE_BYTE = 7
    SE_REG = 8
    LD_BYTE = 9
    ADD_BYTE = 10
    LD_REG = 11
    OR = 12
    AND = 13
    XOR = 14
    ADD_REG = 15
    SUB = 16
    SHR = 17
    SUBN = 18
    SHL = 19
    SNE_REG = 20
    LD_I = 21
    JP_V0 = 22
    RND = 23
    DRW = 24
    SKP = 25
    SKNP = 26
    LD_VX_DT = 27
    LD_VX_K = 28
    LD_DT_VX = 29
    LD_ST_VX = 30
    ADD_I_VX = 31
    LD_F_VX = 32
    LD_B_VX = 33
    LD_MEM_VX = 34
    LD_VX_MEM = 35


class InstructionPattern(NamedTuple):
    op: Op
    mask: int
    match: int
    syntax: str  # str.format template over x, y, n, nn, nnn


UNKNOWN_MNEMONIC = "???"

PATTERNS = (
    InstructionPattern(Op.NOP, 0xFFFF, 0x0000, "NOP"),
    InstructionPattern(Op.CLS, 0xFFFF, 0x00E0, "CLS"),
    InstructionPattern(Op.RET, 0xFFFF, 0x00EE, "RET"),
    InstructionPattern(Op.JP, 0xF000, 0x1000, "JP {nnn:X}"),
    InstructionPattern(Op.CALL, 0xF000, 0x2000, "CALL {nnn:X}"),
    InstructionPattern(Op.SE_BYTE, 0xF000, 0x3000, "SE V{x:X} {nn:X}"),
    InstructionPattern(Op.SNE_BYTE, 0xF000, 0x4000, "SNE V{x:X} {nn:X}"),
    InstructionPattern(Op.SE_REG, 0xF00F, 0x5000, "SE V{x:X} V{y:X}"),
    InstructionPattern(Op.LD_BYTE, 0xF000, 0x6000, "LD V{x:X} {nn:X}"),
    InstructionPattern(Op.ADD_BYTE, 0xF000, 0x7000, "ADD V{x:X} {nn:X}"),
    InstructionPattern(Op.LD_REG, 0xF00F, 0x8000, "LD V{x:X} V{y:X}"),
    InstructionPattern(Op.OR, 0xF00F, 0x8001, "OR V{x:X} V{y:X}"),
    InstructionPattern(Op.AND, 0xF00F, 0x8002, "AND V{x:X} V{y:X}"),
    InstructionPattern(Op.XOR, 0xF00F, 0x8003, "XOR V{x:X} V{y:X}"),
    InstructionPattern(Op.ADD_REG, 0xF00F, 0x8004, "ADD V{x:X} V{y:X}"),
    InstructionPattern(Op.SUB, 0xF00F, 0x8005, "SUB V{x:X} V{y:X}"),
    InstructionPattern(Op.SHR, 0xF00F, 0x8006, "SHR V{x:X}"),
    InstructionPattern(Op.SUBN, 0xF00F, 0x8007, "SUBN V{x:X} V{y:X}"),
    InstructionPattern(Op.SHL, 0xF00F, 0x800E, "SHL V{x:X}"),
    InstructionPattern(Op.SNE_REG, 0xF00F, 0x9000, "SNE V{x:X} V{y:X}"),
    InstructionPattern(Op.LD_I, 0xF000, 0xA000, "LD I {nnn:X}"),
    InstructionPattern(Op.JP_V0, 0xF000, 0xB000, "JP V0 {nnn:X}"),
    InstructionPattern(Op.RND, 0xF000, 0xC000, "RND V{x:X} {nn:X}"),
    InstructionPattern(Op.DRW, 0xF000, 0xD000, "DRW V{x:X} V{y:X} {n:X}"),
    InstructionPattern(Op.SKP, 0xF0FF, 0xE09E, "SKP V{x:X}"),
    InstructionPattern(Op.SKNP, 0xF0FF, 0xE0A1, "SKNP V{x:X}"),
    InstructionPattern(Op.LD_VX_DT, 0xF0FF, 0xF007, "LD V{x:X} DT"),
    InstructionPattern(Op.LD_VX_K, 0xF0FF, 0xF00A, "LD V{x:X} K"),
    InstructionPattern(Op.LD_DT_VX, 0xF0FF, 0xF015, "LD DT V{x:X}"),
    InstructionPattern(Op.LD_ST_VX, 0xF0FF, 0xF018, "LD ST V{x:X}"),
    InstructionPattern(Op.ADD_I_VX, 0xF0FF, 0xF01E, "ADD I V{x:X}"),
    InstructionPattern(Op.LD_F_VX, 0xF0FF, 0xF029, "LD F V{x:X}"),
    InstructionPattern(Op.LD_B_VX, 0xF0FF, 0xF033, "LD B V{x:X}"),
    InstructionPattern(Op.LD_MEM_VX, 0xF0FF, 0xF055, "LD [I] V{x:X}"),
    InstructionPattern(Op.LD_VX_MEM, 0xF0FF, 0xF065, "LD V{x:X} [I]"),
)

PATTERN_BY_OP = {pattern.op: pattern for pattern in PATTERNS}


def build_opcode_table() -> np.ndarray:
    """Classify every 16-bit word into its Op."""
    words = np.arange(0x10000, dtype=np.uint32)
    table = np.full(0x10000, Op.UNKNOWN, dtype=np.int32)
    for pattern in PATTERNS:
        table[(words & pattern.mask) == pattern.match] = pattern.op
    return table


OPCODE_TABLE = build_opcode_table()


def encode(op: Op, x: int = 0, y: int = 0, n: int = 0, nn: int = 0, nnn: int = 0) -> int:
    """Build an instruction word for `op` from its operand fields."""
    return (PATTERN_BY_OP[op].match
            | (x & 0xF) << 8
            | (y & 0xF) << 4
            | (n & 0xF)
            | (nn & 0xFF)
            | (nnn & 0xFFF))
