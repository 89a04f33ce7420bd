"""CHIP-8 disassembler: machine code to assembly text.

The output grammar is exactly what :mod:`chip8core.assembler` accepts: one
instruction per line, operands in uppercase hexadecimal separated by spaces.
Words with no defined meaning print as ``???``.
"""

from chip8core.decode import decode_word
from chip8core.opcodes import Op, PATTERN_BY_OP, UNKNOWN_MNEMONIC


def disassemble_instruction(word: int) -> str:
    """Render one 16-bit instruction word as assembly text."""
    decoded = decode_word(word)
    if decoded.op == Op.UNKNOWN:
        return UNKNOWN_MNEMONIC
    return PATTERN_BY_OP[decoded.op].syntax.format(
        x=decoded.x, y=decoded.y, n=decoded.n, nn=decoded.nn, nnn=decoded.nnn
    )


def disassemble(program: bytes) -> str:
    """Disassemble a program, two bytes per line.

    A trailing odd byte is ignored.
    """
    lines = []
    for offset in range(0, len(program) - 1, 2):
        word = (program[offset] << 8) | program[offset + 1]
        lines.append(disassemble_instruction(word) + "\n")
    return "".join(lines)
