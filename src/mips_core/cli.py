"""Command-line interface for the MIPS I interpreter."""

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from .cpu.cpu import StepStatus
from .errors import EmulatorError
from .harness import DEFAULT_BASE, DEFAULT_MAX_STEPS, DEFAULT_MEMORY_SIZE, MachineConfig, run_program
from .loader.image import read_image
from .report.memory import format_hex_dump
from .report.registers import format_registers
from .report.stats import format_instruction_stats

DEFAULT_DUMP_ROWS = 4

# Four 19-character register columns plus gaps and the panel border
REGISTER_PANEL_WIDTH = 86


def _parse_int(value: str) -> int:
    """Parse a decimal or 0x-prefixed integer argument."""
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer '{value}'") from None


def _parse_dump_arg(value: str) -> tuple[int, int]:
    """Parse a --dump ADDR[:ROWS] argument.

    Args:
        value: String in the form "ADDR" or "ADDR:ROWS".

    Returns:
        Tuple of (address, row_count).

    Raises:
        argparse.ArgumentTypeError: If the format is invalid.
    """
    addr_text, _, rows_text = value.partition(":")
    addr = _parse_int(addr_text)
    rows = _parse_int(rows_text) if rows_text else DEFAULT_DUMP_ROWS
    if rows <= 0:
        raise argparse.ArgumentTypeError(f"invalid row count in '{value}'")
    return addr, rows


def _configure_logging(verbosity: int) -> None:
    """Route log records to stderr through Rich; -v is INFO, -vv is DEBUG."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def main(argv: list[str] | None = None) -> None:
    """Entry point for the interpreter CLI."""
    parser = argparse.ArgumentParser(description="MIPS I Interpreter")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log run progress (-v) or every executed instruction (-vv)",
    )
    sub = parser.add_subparsers(dest="command")

    run_parser = sub.add_parser("run", help="Run a flat binary image")
    run_parser.add_argument("image", help="Path to raw machine code (objcopy -O binary)")
    run_parser.add_argument(
        "--base", type=_parse_int, default=DEFAULT_BASE,
        help="Load address of the image (default: 0x%(default)X)",
    )
    run_parser.add_argument(
        "--entry", type=_parse_int, default=None,
        help="Initial PC (default: the load address)",
    )
    run_parser.add_argument(
        "--memory-size", type=_parse_int, default=DEFAULT_MEMORY_SIZE,
        help="RAM size in bytes (default: %(default)d)",
    )
    run_parser.add_argument(
        "--max-steps", type=_parse_int, default=DEFAULT_MAX_STEPS,
        help="Step ceiling before giving up (default: %(default)d)",
    )
    run_parser.add_argument(
        "--big-endian", action="store_true",
        help="Use big-endian memory (default: little-endian, mipsel)",
    )
    run_parser.add_argument(
        "--dump", action="append", type=_parse_dump_arg, default=[],
        metavar="ADDR[:ROWS]",
        help="Hex dump memory after the run (repeatable)",
    )
    run_parser.add_argument(
        "--words", action="store_true",
        help="Show --dump rows as 32-bit words in memory byte order",
    )
    run_parser.add_argument(
        "--stats", action="store_true", help="Show the executed instruction mix",
    )

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "run":
        sys.exit(run_image(args))
    else:
        parser.print_help()
        sys.exit(1)


def run_image(args: argparse.Namespace) -> int:
    """Load and run an image, print the final machine state, return an exit code.

    Exit codes: 0 when the program halted or spun until the step ceiling,
    1 when it trapped, 2 on a fatal emulator or input error.
    """
    console = Console()
    if console.width < REGISTER_PANEL_WIDTH:
        console.width = REGISTER_PANEL_WIDTH
    err = Console(stderr=True)

    try:
        image = read_image(args.image)
        config = MachineConfig(
            base=args.base,
            memory_size=args.memory_size,
            entry=args.entry,
            byteorder="big" if args.big_endian else "little",
            max_steps=args.max_steps,
        )
        result = run_program(image, config, strict=False)
    except (EmulatorError, OSError, ValueError) as e:
        err.print(f"Error: {e}", markup=False)
        return 2

    cpu = result.cpu
    if result.status is StepStatus.HALTED:
        summary = f"Halted after {result.steps} steps at PC 0x{cpu.pc:08X}."
    elif result.status is StepStatus.TRAPPED and cpu.trap is not None:
        summary = (
            f"Trapped ({cpu.trap.cause.value}) after {result.steps} steps "
            f"at PC 0x{cpu.trap.pc:08X}."
        )
    else:
        summary = f"Step ceiling of {config.max_steps} reached at PC 0x{cpu.pc:08X}."
    err.print(summary, markup=False)

    console.print(Panel(format_registers(cpu.registers), title="Registers"))
    for addr, rows in args.dump:
        dump = format_hex_dump(cpu.memory, addr, num_rows=rows, words=args.words)
        console.print(Panel(Text(dump), title=f"Memory @ 0x{addr:08X}"))
    if args.stats:
        stats = format_instruction_stats(cpu.instruction_stats)
        console.print(Panel(Text(stats), title="Instruction Statistics"))

    return 1 if result.status is StepStatus.TRAPPED else 0
