"""Register dump: the 32 GPRs and HI/LO with o32 names and change highlighting."""

from __future__ import annotations

from ..cpu.registers import RegisterFile

# MIPS o32 ABI register names ($0-$31)
ABI_NAMES: list[str] = [
    "zero", "at", "v0", "v1",
    "a0", "a1", "a2", "a3",
    "t0", "t1", "t2", "t3", "t4", "t5", "t6", "t7",
    "s0", "s1", "s2", "s3", "s4", "s5", "s6", "s7",
    "t8", "t9", "k0", "k1",
    "gp", "sp", "fp", "ra",
]

# Snapshot slots after the 32 GPRs
HI_SLOT = 32
LO_SLOT = 33


def _cell(label: str, value: int, changed: bool) -> str:
    text = f"{label} 0x{value:08X}"
    return f"[bold yellow]{text}[/bold yellow]" if changed else text


def format_registers(regs: RegisterFile, prev_values: list[int] | None = None) -> str:
    """Render the register file as eight rows of four, then a HI/LO row.

    Registers run down the columns ($0-$7 in the first, $24-$31 in the
    last). Each cell reads ``$n name 0xXXXXXXXX``. When ``prev_values``
    (from ``snapshot_registers``) is given, cells whose value differs are
    wrapped in ``[bold yellow]`` Rich markup; a 32-entry list leaves HI/LO
    unhighlighted.
    """
    current = snapshot_registers(regs)

    def changed(slot: int) -> bool:
        return (
            prev_values is not None
            and slot < len(prev_values)
            and current[slot] != prev_values[slot]
        )

    lines = []
    for row in range(8):
        cells = [
            _cell(f"${idx:<2d} {ABI_NAMES[idx]:<4s}", current[idx], changed(idx))
            for idx in range(row, 32, 8)
        ]
        lines.append("  ".join(cells))
    lines.append("  ".join([
        _cell(f"{'hi':<8s}", current[HI_SLOT], changed(HI_SLOT)),
        _cell(f"{'lo':<8s}", current[LO_SLOT], changed(LO_SLOT)),
    ]))
    return "\n".join(lines)


def snapshot_registers(regs: RegisterFile) -> list[int]:
    """Capture the 32 GPRs followed by HI and LO, e.g. to diff after a run."""
    return regs.values() + [regs.hi, regs.lo]
