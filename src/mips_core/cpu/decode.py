"""Instruction decoder: splits MIPS I words into fields and classifies them."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..errors import UnsupportedInstruction


def sign_extend(value: int, bits: int) -> int:
    """Sign-extend a `bits`-wide value to 32 bits."""
    value &= (1 << bits) - 1
    sign_bit = 1 << (bits - 1)
    return ((value ^ sign_bit) - sign_bit) & 0xFFFFFFFF


def to_signed(value: int) -> int:
    """Interpret a 32-bit unsigned value as signed Python int."""
    return value - 0x100000000 if value >= 0x80000000 else value


class Format(enum.Enum):
    """Execution category of a decoded instruction.

    Each member is handled by exactly one branch of the dispatcher in
    ``execute.py``.
    """

    REGISTER = "register"    # rd <- rs op rt
    SHIFT = "shift"          # rd <- rt shifted by shamt or rs
    IMMEDIATE = "immediate"  # rt <- rs op imm16
    MEMORY = "memory"        # loads and stores, EA = rs + simm16
    BRANCH = "branch"        # PC-relative conditional transfers
    JUMP = "jump"            # J/JAL/JR/JALR
    HILO = "hilo"            # multiply/divide and HI/LO moves
    SYSTEM = "system"        # SYSCALL/BREAK


@dataclass(frozen=True)
class Instruction:
    """Decoded MIPS instruction.

    All fields are always populated from the raw word so that any
    instruction can be inspected uniformly; which ones are meaningful
    depends on ``format``.
    """

    format: Format
    mnemonic: str
    word: int
    opcode: int = 0
    rs: int = 0
    rt: int = 0
    rd: int = 0
    shamt: int = 0
    funct: int = 0
    imm: int = 0
    target: int = 0

    @property
    def simm(self) -> int:
        """16-bit immediate sign-extended to an unsigned 32-bit value."""
        return sign_extend(self.imm, 16)

    @property
    def is_nop(self) -> bool:
        return self.word == 0


# Primary opcodes (bits 31:26)
OP_SPECIAL = 0x00
OP_REGIMM = 0x01
OP_J = 0x02
OP_JAL = 0x03
OP_BEQ = 0x04
OP_BNE = 0x05
OP_BLEZ = 0x06
OP_BGTZ = 0x07
OP_ADDI = 0x08
OP_ADDIU = 0x09
OP_SLTI = 0x0A
OP_SLTIU = 0x0B
OP_ANDI = 0x0C
OP_ORI = 0x0D
OP_XORI = 0x0E
OP_LUI = 0x0F
OP_LB = 0x20
OP_LH = 0x21
OP_LW = 0x23
OP_LBU = 0x24
OP_LHU = 0x25
OP_SB = 0x28
OP_SH = 0x29
OP_SW = 0x2B

# SPECIAL funct -> (format, mnemonic)
_SPECIAL: dict[int, tuple[Format, str]] = {
    0x00: (Format.SHIFT, "SLL"),
    0x02: (Format.SHIFT, "SRL"),
    0x03: (Format.SHIFT, "SRA"),
    0x04: (Format.SHIFT, "SLLV"),
    0x06: (Format.SHIFT, "SRLV"),
    0x07: (Format.SHIFT, "SRAV"),
    0x08: (Format.JUMP, "JR"),
    0x09: (Format.JUMP, "JALR"),
    0x0C: (Format.SYSTEM, "SYSCALL"),
    0x0D: (Format.SYSTEM, "BREAK"),
    0x10: (Format.HILO, "MFHI"),
    0x11: (Format.HILO, "MTHI"),
    0x12: (Format.HILO, "MFLO"),
    0x13: (Format.HILO, "MTLO"),
    0x18: (Format.HILO, "MULT"),
    0x19: (Format.HILO, "MULTU"),
    0x1A: (Format.HILO, "DIV"),
    0x1B: (Format.HILO, "DIVU"),
    0x20: (Format.REGISTER, "ADD"),
    0x21: (Format.REGISTER, "ADDU"),
    0x22: (Format.REGISTER, "SUB"),
    0x23: (Format.REGISTER, "SUBU"),
    0x24: (Format.REGISTER, "AND"),
    0x25: (Format.REGISTER, "OR"),
    0x26: (Format.REGISTER, "XOR"),
    0x27: (Format.REGISTER, "NOR"),
    0x2A: (Format.REGISTER, "SLT"),
    0x2B: (Format.REGISTER, "SLTU"),
}

# Primary opcode -> (format, mnemonic), everything except SPECIAL/REGIMM
_PRIMARY: dict[int, tuple[Format, str]] = {
    OP_J: (Format.JUMP, "J"),
    OP_JAL: (Format.JUMP, "JAL"),
    OP_BEQ: (Format.BRANCH, "BEQ"),
    OP_BNE: (Format.BRANCH, "BNE"),
    OP_BLEZ: (Format.BRANCH, "BLEZ"),
    OP_BGTZ: (Format.BRANCH, "BGTZ"),
    OP_ADDI: (Format.IMMEDIATE, "ADDI"),
    OP_ADDIU: (Format.IMMEDIATE, "ADDIU"),
    OP_SLTI: (Format.IMMEDIATE, "SLTI"),
    OP_SLTIU: (Format.IMMEDIATE, "SLTIU"),
    OP_ANDI: (Format.IMMEDIATE, "ANDI"),
    OP_ORI: (Format.IMMEDIATE, "ORI"),
    OP_XORI: (Format.IMMEDIATE, "XORI"),
    OP_LUI: (Format.IMMEDIATE, "LUI"),
    OP_LB: (Format.MEMORY, "LB"),
    OP_LH: (Format.MEMORY, "LH"),
    OP_LW: (Format.MEMORY, "LW"),
    OP_LBU: (Format.MEMORY, "LBU"),
    OP_LHU: (Format.MEMORY, "LHU"),
    OP_SB: (Format.MEMORY, "SB"),
    OP_SH: (Format.MEMORY, "SH"),
    OP_SW: (Format.MEMORY, "SW"),
}

_REGIMM_MNEMONICS = ("BLTZ", "BGEZ", "BLTZAL", "BGEZAL")


def _group_mnemonics() -> dict[Format, frozenset[str]]:
    groups: dict[Format, set[str]] = {fmt: set() for fmt in Format}
    for fmt, name in (*_SPECIAL.values(), *_PRIMARY.values()):
        groups[fmt].add(name)
    groups[Format.BRANCH].update(_REGIMM_MNEMONICS)
    return {fmt: frozenset(names) for fmt, names in groups.items()}


# Every mnemonic decode() can produce, grouped by format
MNEMONICS: dict[Format, frozenset[str]] = _group_mnemonics()


def _regimm_mnemonic(rt: int) -> str:
    """Name a REGIMM branch from its rt field.

    Only rt values 0x10/0x11 are the linking forms; every other value
    behaves like BLTZ/BGEZ selected by bit 0.
    """
    link = (rt & 0x1E) == 0x10
    gez = rt & 1
    if link:
        return "BGEZAL" if gez else "BLTZAL"
    return "BGEZ" if gez else "BLTZ"


def decode(word: int) -> Instruction:
    """Decode a 32-bit instruction word into an Instruction.

    Raises:
        UnsupportedInstruction: If the opcode/funct pair is not implemented.
    """
    word &= 0xFFFFFFFF
    opcode = (word >> 26) & 0x3F
    rs = (word >> 21) & 0x1F
    rt = (word >> 16) & 0x1F
    rd = (word >> 11) & 0x1F
    shamt = (word >> 6) & 0x1F
    funct = word & 0x3F
    imm = word & 0xFFFF
    target = word & 0x03FFFFFF

    if opcode == OP_SPECIAL:
        entry = _SPECIAL.get(funct)
        if entry is None:
            raise UnsupportedInstruction(word, reason=f"SPECIAL funct 0x{funct:02X}")
    elif opcode == OP_REGIMM:
        entry = (Format.BRANCH, _regimm_mnemonic(rt))
    else:
        entry = _PRIMARY.get(opcode)
        if entry is None:
            raise UnsupportedInstruction(word, reason=f"opcode 0x{opcode:02X}")

    fmt, mnemonic = entry
    return Instruction(
        format=fmt, mnemonic=mnemonic, word=word, opcode=opcode,
        rs=rs, rt=rt, rd=rd, shamt=shamt, funct=funct, imm=imm, target=target,
    )
