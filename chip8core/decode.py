"""CHIP-8 instruction decoding."""

import jax.numpy as jnp
from chex import dataclass

from chip8core.opcodes import OPCODE_TABLE, Op

OPCODE_LOOKUP = jnp.asarray(OPCODE_TABLE)


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: int      # Op variant
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)


def _operands(instruction) -> dict:
    return dict(
        raw=instruction,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
    )


def decode(instruction) -> DecodedInstruction:
    """Decode 16-bit instruction into components; `instruction` may be traced."""
    return DecodedInstruction(op=OPCODE_LOOKUP[instruction], **_operands(instruction))


def decode_word(word: int) -> DecodedInstruction:
    """Decode a concrete instruction word on the host."""
    word = int(word) & 0xFFFF
    return DecodedInstruction(op=Op(int(OPCODE_TABLE[word])), **_operands(word))
