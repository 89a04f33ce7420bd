"""CHIP-8 assembler: assembly text to machine code.

One instruction per line, mnemonic followed by whitespace-separated operands
(no commas). Numbers are hexadecimal without prefix, registers are ``V``
followed by a hex digit and the memory operand is written ``[I]``::

    LD V0 2A
    LD I 300
    DRW V0 V1 5
    JP V0 200

Assembly never fails. A numeric operand that does not parse (or does not fit
its field) becomes ``0xF``, which stands out in a dump because VF is reserved.
Lines with an unknown mnemonic, or with operands that match none of a
mnemonic's forms, produce no bytes.
"""

import re
from typing import Callable, Dict, List, Optional

from chip8core.opcodes import Op, encode

SENTINEL = 0xF

_HEX_LITERAL = re.compile(r"\+?[0-9A-Fa-f]+")


def parse_hex(token: str, limit: int) -> int:
    """Parse a hexadecimal literal no larger than `limit`, or return the sentinel."""
    if not _HEX_LITERAL.fullmatch(token):
        return SENTINEL
    value = int(token, 16)
    return value if value <= limit else SENTINEL


def parse_register(token: str) -> int:
    """Parse a ``Vx`` token. Only the digits after the prefix are checked."""
    return parse_hex(token[1:], 0xF)


def parse_byte(token: str) -> int:
    return parse_hex(token, 0xFF)


def parse_address(token: str) -> int:
    return parse_hex(token, 0xFFFF) & 0xFFF


def parse_nibble(token: str) -> int:
    return parse_hex(token, 0xF)


def _is_register(token: str) -> bool:
    return token.startswith("V")


class _Operands:
    """Positional operand access where a missing operand reads as empty text."""

    def __init__(self, tokens: List[str]):
        self.tokens = tokens

    def __getitem__(self, index: int) -> str:
        return self.tokens[index] if index < len(self.tokens) else ""


def _assemble_jp(args: _Operands) -> Optional[int]:
    # JP V0 nnn (Bnnn) or JP nnn (1nnn)
    if _is_register(args[0]):
        return encode(Op.JP_V0, nnn=parse_address(args[1]))
    return encode(Op.JP, nnn=parse_address(args[0]))


def _assemble_call(args: _Operands) -> Optional[int]:
    return encode(Op.CALL, nnn=parse_address(args[0]))


def _make_compare(register_op: Op, byte_op: Op) -> Callable[[_Operands], Optional[int]]:
    """SE / SNE: register form when the second operand is a register."""
    def assemble_compare(args: _Operands) -> Optional[int]:
        x = parse_register(args[0])
        if _is_register(args[1]):
            return encode(register_op, x=x, y=parse_register(args[1]))
        return encode(byte_op, x=x, nn=parse_byte(args[1]))
    return assemble_compare


# LD with a register destination, keyed on the source operand's prefix
_LD_FROM = (("DT", Op.LD_VX_DT), ("K", Op.LD_VX_K), ("[I]", Op.LD_VX_MEM))
# LD with a special destination and a register source
_LD_TO = (("DT", Op.LD_DT_VX), ("ST", Op.LD_ST_VX), ("F", Op.LD_F_VX),
          ("B", Op.LD_B_VX), ("[I]", Op.LD_MEM_VX))


def _assemble_ld(args: _Operands) -> Optional[int]:
    destination, source = args[0], args[1]

    if _is_register(destination):
        x = parse_register(destination)
        if _is_register(source):
            return encode(Op.LD_REG, x=x, y=parse_register(source))
        for prefix, op in _LD_FROM:
            if source.startswith(prefix):
                return encode(op, x=x)
        return encode(Op.LD_BYTE, x=x, nn=parse_byte(source))

    if destination.startswith("I"):
        return encode(Op.LD_I, nnn=parse_address(source))

    for prefix, op in _LD_TO:
        if destination.startswith(prefix):
            return encode(op, x=parse_register(source))
    return None


def _assemble_add(args: _Operands) -> Optional[int]:
    destination, source = args[0], args[1]

    if _is_register(destination):
        x = parse_register(destination)
        if _is_register(source):
            return encode(Op.ADD_REG, x=x, y=parse_register(source))
        return encode(Op.ADD_BYTE, x=x, nn=parse_byte(source))

    if destination.startswith("I"):
        return encode(Op.ADD_I_VX, x=parse_register(source))
    return None


def _make_register_pair(op: Op) -> Callable[[_Operands], Optional[int]]:
    def assemble_register_pair(args: _Operands) -> Optional[int]:
        return encode(op, x=parse_register(args[0]), y=parse_register(args[1]))
    return assemble_register_pair


def _make_single_register(op: Op) -> Callable[[_Operands], Optional[int]]:
    # SHR/SHL carry a VY field that the processor ignores; it is always V0.
    def assemble_single_register(args: _Operands) -> Optional[int]:
        return encode(op, x=parse_register(args[0]))
    return assemble_single_register


def _make_fixed(op: Op) -> Callable[[_Operands], Optional[int]]:
    def assemble_fixed(args: _Operands) -> Optional[int]:
        return encode(op)
    return assemble_fixed


def _assemble_rnd(args: _Operands) -> Optional[int]:
    return encode(Op.RND, x=parse_register(args[0]), nn=parse_byte(args[1]))


def _assemble_drw(args: _Operands) -> Optional[int]:
    return encode(Op.DRW, x=parse_register(args[0]), y=parse_register(args[1]), n=parse_nibble(args[2]))


MNEMONICS: Dict[str, Callable[[_Operands], Optional[int]]] = {
    "NOP": _make_fixed(Op.NOP),
    "CLS": _make_fixed(Op.CLS),
    "RET": _make_fixed(Op.RET),
    "JP": _assemble_jp,
    "CALL": _assemble_call,
    "SE": _make_compare(Op.SE_REG, Op.SE_BYTE),
    "SNE": _make_compare(Op.SNE_REG, Op.SNE_BYTE),
    "LD": _assemble_ld,
    "ADD": _assemble_add,
    "OR": _make_register_pair(Op.OR),
    "AND": _make_register_pair(Op.AND),
    "XOR": _make_register_pair(Op.XOR),
    "SUB": _make_register_pair(Op.SUB),
    "SUBN": _make_register_pair(Op.SUBN),
    "SHR": _make_single_register(Op.SHR),
    "SHL": _make_single_register(Op.SHL),
    "RND": _assemble_rnd,
    "DRW": _assemble_drw,
    "SKP": _make_single_register(Op.SKP),
    "SKNP": _make_single_register(Op.SKNP),
}


def assemble_line(line: str) -> Optional[int]:
    """Assemble one line into an instruction word, or None if it encodes nothing."""
    tokens = line.split()
    if not tokens:
        return None
    assembler = MNEMONICS.get(tokens[0])
    if assembler is None:
        return None
    return assembler(_Operands(tokens[1:]))


def assemble(program: str) -> bytes:
    """Assemble program text into big-endian machine code."""
    output = bytearray()
    for line in program.splitlines():
        word = assemble_line(line)
        if word is not None:
            output += word.to_bytes(2, "big")
    return bytes(output)
