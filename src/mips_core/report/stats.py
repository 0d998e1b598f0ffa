"""Instruction mix: per-mnemonic execution counts grouped by instruction format."""

from __future__ import annotations

from ..cpu.decode import MNEMONICS, Format

# Category label per format, in display order
CATEGORY_LABELS: dict[Format, str] = {
    Format.REGISTER: "ALU",
    Format.IMMEDIATE: "Imm",
    Format.SHIFT: "Shift",
    Format.MEMORY: "Mem",
    Format.BRANCH: "Branch",
    Format.JUMP: "Jump",
    Format.HILO: "HI/LO",
    Format.SYSTEM: "System",
}

_LABEL_BY_MNEMONIC: dict[str, str] = {
    name: CATEGORY_LABELS[fmt] for fmt, names in MNEMONICS.items() for name in names
}

_COLUMNS = 4


def _categorize(mnemonic: str) -> str:
    """Return the category label for a mnemonic, or "Other"."""
    return _LABEL_BY_MNEMONIC.get(mnemonic, "Other")


def _columns(cells: list[str], n_cols: int) -> list[str]:
    """Lay cells out column-major, indented by two spaces."""
    width = max(len(c) for c in cells) + 2
    n_rows = -(-len(cells) // n_cols)
    rows: list[str] = []
    for r in range(n_rows):
        row = "".join(c.ljust(width) for c in cells[r::n_rows])
        rows.append("  " + row.rstrip())
    return rows


def format_instruction_stats(stats: dict[str, int], top_n: int = 15) -> str:
    """Summarise the executed instruction mix.

    The ``top_n`` most frequent mnemonics are listed with their share of
    the total (the remainder folded into one "... others" cell), then one
    line of per-category totals.
    """
    if not stats:
        return "No instructions executed."

    total = sum(stats.values())
    ranked = sorted(stats.items(), key=lambda item: item[1], reverse=True)
    shown, rest = ranked[:top_n], ranked[top_n:]
    if rest:
        shown = shown + [("... others", sum(count for _, count in rest))]

    name_w = max(len(name) for name, _ in shown)
    count_w = max(len(str(count)) for _, count in shown)
    cells = [
        f"{name:<{name_w}} {count:>{count_w}} ({count / total * 100:5.1f}%)"
        for name, count in shown
    ]

    totals: dict[str, int] = {}
    for name, count in stats.items():
        label = _categorize(name)
        totals[label] = totals.get(label, 0) + count
    order = [*CATEGORY_LABELS.values(), "Other"]
    summary = "  |  ".join(
        f"{label}: {totals[label]:,} ({totals[label] / total * 100:.0f}%)"
        for label in order if label in totals
    )

    header = f"Top {min(top_n, len(ranked))} instructions (total: {total:,})"
    return "\n".join([header, "", *_columns(cells, _COLUMNS), "", "  " + summary])
