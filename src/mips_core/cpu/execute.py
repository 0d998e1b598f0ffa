"""Instruction execution: implements the MIPS I integer instruction set."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .decode import Format, Instruction, sign_extend, to_signed
from .registers import RegisterFile
from ..memory.ram import RAM

if TYPE_CHECKING:
    from .cpu import CPU

_MASK32 = 0xFFFFFFFF
_INT32_MIN = -0x80000000
_INT32_MAX = 0x7FFFFFFF


class TrapCause(enum.Enum):
    """Why an instruction stopped the core instead of completing."""

    SYSCALL = "syscall"
    BREAK = "break"
    OVERFLOW = "overflow"


@dataclass(frozen=True)
class Outcome:
    """Control-flow effect of one executed instruction.

    ``target`` is set when a branch or jump is taken; ``trap`` when the
    instruction did not complete.
    """

    target: int | None = None
    trap: TrapCause | None = None


FALLTHROUGH = Outcome()


def execute(inst: Instruction, cpu: CPU) -> Outcome:
    """Execute a decoded instruction at ``cpu.pc``.

    The PC itself is never modified here; the CPU applies the returned
    Outcome through its delay-slot state machine.
    """
    regs = cpu.registers
    fmt = inst.format

    if fmt is Format.REGISTER:
        return _exec_register(inst, regs)
    elif fmt is Format.SHIFT:
        return _exec_shift(inst, regs)
    elif fmt is Format.IMMEDIATE:
        return _exec_immediate(inst, regs)
    elif fmt is Format.MEMORY:
        return _exec_memory(inst, regs, cpu.memory)
    elif fmt is Format.BRANCH:
        return _exec_branch(inst, regs, cpu.pc)
    elif fmt is Format.JUMP:
        return _exec_jump(inst, regs, cpu.pc)
    elif fmt is Format.HILO:
        return _exec_hilo(inst, regs)
    elif fmt is Format.SYSTEM:
        if inst.mnemonic == "SYSCALL":
            return Outcome(trap=TrapCause.SYSCALL)
        return Outcome(trap=TrapCause.BREAK)
    else:
        raise ValueError(f"Unhandled instruction format: {fmt}")


def _add_overflows(a: int, b: int) -> bool:
    """True if the signed 32-bit sum a + b does not fit in 32 bits."""
    total = to_signed(a) + to_signed(b)
    return total < _INT32_MIN or total > _INT32_MAX


def _exec_register(inst: Instruction, regs: RegisterFile) -> Outcome:
    """Execute three-register ALU instructions (SPECIAL, rd <- rs op rt)."""
    rs = regs.read(inst.rs)
    rt = regs.read(inst.rt)
    op = inst.mnemonic

    if op == "ADDU":
        result = (rs + rt) & _MASK32
    elif op == "SUBU":
        result = (rs - rt) & _MASK32
    elif op == "ADD":
        if _add_overflows(rs, rt):
            return Outcome(trap=TrapCause.OVERFLOW)
        result = (rs + rt) & _MASK32
    elif op == "SUB":
        diff = to_signed(rs) - to_signed(rt)
        if diff < _INT32_MIN or diff > _INT32_MAX:
            return Outcome(trap=TrapCause.OVERFLOW)
        result = diff & _MASK32
    elif op == "AND":
        result = rs & rt
    elif op == "OR":
        result = rs | rt
    elif op == "XOR":
        result = rs ^ rt
    elif op == "NOR":
        result = ~(rs | rt) & _MASK32
    elif op == "SLT":
        result = 1 if to_signed(rs) < to_signed(rt) else 0
    elif op == "SLTU":
        result = 1 if rs < rt else 0
    else:
        raise ValueError(f"Unknown register-format mnemonic: {op}")

    regs.write(inst.rd, result)
    return FALLTHROUGH


def _exec_shift(inst: Instruction, regs: RegisterFile) -> Outcome:
    """Execute SLL/SRL/SRA and their variable-amount forms."""
    value = regs.read(inst.rt)
    op = inst.mnemonic

    if op.endswith("V"):
        amount = regs.read(inst.rs) & 0x1F
        op = op[:-1]
    else:
        amount = inst.shamt

    if op == "SLL":
        result = (value << amount) & _MASK32
    elif op == "SRL":
        result = value >> amount
    elif op == "SRA":
        result = (to_signed(value) >> amount) & _MASK32
    else:
        raise ValueError(f"Unknown shift mnemonic: {inst.mnemonic}")

    regs.write(inst.rd, result)
    return FALLTHROUGH


def _exec_immediate(inst: Instruction, regs: RegisterFile) -> Outcome:
    """Execute I-type ALU instructions (rt <- rs op imm16)."""
    rs = regs.read(inst.rs)
    op = inst.mnemonic

    if op == "LUI":
        result = inst.imm << 16
    elif op == "ADDIU":
        result = (rs + inst.simm) & _MASK32
    elif op == "ADDI":
        if _add_overflows(rs, inst.simm):
            return Outcome(trap=TrapCause.OVERFLOW)
        result = (rs + inst.simm) & _MASK32
    elif op == "SLTI":
        result = 1 if to_signed(rs) < to_signed(inst.simm) else 0
    elif op == "SLTIU":
        # Immediate is sign-extended first, then compared unsigned
        result = 1 if rs < inst.simm else 0
    elif op == "ANDI":
        result = rs & inst.imm
    elif op == "ORI":
        result = rs | inst.imm
    elif op == "XORI":
        result = rs ^ inst.imm
    else:
        raise ValueError(f"Unknown immediate-format mnemonic: {op}")

    regs.write(inst.rt, result)
    return FALLTHROUGH


# Load mnemonic -> (width, signed)
_LOADS: dict[str, tuple[int, bool]] = {
    "LB": (1, True), "LBU": (1, False),
    "LH": (2, True), "LHU": (2, False),
    "LW": (4, False),
}

# Store mnemonic -> width
_STORES: dict[str, int] = {"SB": 1, "SH": 2, "SW": 4}


def _exec_memory(inst: Instruction, regs: RegisterFile, mem: RAM) -> Outcome:
    """Execute loads and stores. EA = rs + sign_extend(imm16), no alignment check."""
    addr = (regs.read(inst.rs) + inst.simm) & _MASK32
    op = inst.mnemonic

    if op in _LOADS:
        width, signed = _LOADS[op]
        value = mem.read(addr, width)
        if signed:
            value = sign_extend(value, width * 8)
        regs.write(inst.rt, value)
    elif op in _STORES:
        mem.write(addr, regs.read(inst.rt), _STORES[op])
    else:
        raise ValueError(f"Unknown memory mnemonic: {op}")

    return FALLTHROUGH


def _exec_branch(inst: Instruction, regs: RegisterFile, pc: int) -> Outcome:
    """Execute PC-relative branches.

    The target is relative to the delay slot (pc + 4). The linking forms
    write $31 whether or not the branch is taken.
    """
    rs = regs.read(inst.rs)
    srs = to_signed(rs)
    op = inst.mnemonic

    if op == "BEQ":
        taken = rs == regs.read(inst.rt)
    elif op == "BNE":
        taken = rs != regs.read(inst.rt)
    elif op == "BLEZ":
        taken = srs <= 0
    elif op == "BGTZ":
        taken = srs > 0
    elif op in ("BLTZ", "BLTZAL"):
        taken = srs < 0
    elif op in ("BGEZ", "BGEZAL"):
        taken = srs >= 0
    else:
        raise ValueError(f"Unknown branch mnemonic: {op}")

    if op.endswith("AL"):
        regs.write(31, pc + 8)

    if not taken:
        return FALLTHROUGH
    offset = sign_extend(inst.imm << 2, 18)
    return Outcome(target=(pc + 4 + offset) & _MASK32)


def _exec_jump(inst: Instruction, regs: RegisterFile, pc: int) -> Outcome:
    """Execute J/JAL (region jumps) and JR/JALR (register jumps)."""
    op = inst.mnemonic

    if op in ("J", "JAL"):
        # Upper four bits come from the delay slot address
        target = ((pc + 4) & 0xF0000000) | (inst.target << 2)
        if op == "JAL":
            regs.write(31, pc + 8)
    elif op == "JR":
        target = regs.read(inst.rs)
    elif op == "JALR":
        # rs is read before the link write so rd == rs still jumps to the old value
        target = regs.read(inst.rs)
        regs.write(inst.rd, pc + 8)
    else:
        raise ValueError(f"Unknown jump mnemonic: {op}")

    return Outcome(target=target & _MASK32)


def _exec_hilo(inst: Instruction, regs: RegisterFile) -> Outcome:
    """Execute MULT/MULTU/DIV/DIVU and the HI/LO move instructions."""
    op = inst.mnemonic
    rs = regs.read(inst.rs)
    rt = regs.read(inst.rt)

    if op == "MFHI":
        regs.write(inst.rd, regs.hi)
    elif op == "MFLO":
        regs.write(inst.rd, regs.lo)
    elif op == "MTHI":
        regs.hi = rs
    elif op == "MTLO":
        regs.lo = rs
    elif op == "MULT":
        product = to_signed(rs) * to_signed(rt)
        regs.hi = (product >> 32) & _MASK32
        regs.lo = product & _MASK32
    elif op == "MULTU":
        product = rs * rt
        regs.hi = product >> 32
        regs.lo = product & _MASK32
    elif op == "DIV":
        _signed_divide(regs, rs, rt)
    elif op == "DIVU":
        if rt == 0:
            regs.lo = _MASK32
            regs.hi = rs
        else:
            regs.lo = rs // rt
            regs.hi = rs % rt
    else:
        raise ValueError(f"Unknown HI/LO mnemonic: {op}")

    return FALLTHROUGH


def _signed_divide(regs: RegisterFile, rs: int, rt: int) -> None:
    """DIV: quotient to LO, remainder to HI, truncating toward zero.

    Division by zero does not trap; the R3000 leaves LO = -1 for a
    non-negative dividend (1 otherwise) and HI = dividend.
    """
    s1 = to_signed(rs)
    s2 = to_signed(rt)

    if s2 == 0:
        regs.lo = _MASK32 if s1 >= 0 else 1
        regs.hi = rs
        return
    if s1 == _INT32_MIN and s2 == -1:
        regs.lo = 0x80000000
        regs.hi = 0
        return

    # Python // floors; MIPS truncates, so divide magnitudes and fix the sign
    q = abs(s1) // abs(s2)
    if (s1 < 0) != (s2 < 0):
        q = -q
    regs.lo = q & _MASK32
    regs.hi = (s1 - q * s2) & _MASK32
