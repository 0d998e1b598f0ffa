"""Test harness: builds a machine from a flat image and runs it under a step ceiling."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .cpu.cpu import CPU, StepStatus
from .errors import StepBudgetExceeded
from .loader.image import load_binary
from .memory.ram import RAM, ByteOrder

logger = logging.getLogger(__name__)

DEFAULT_BASE = 0x00000000
DEFAULT_MEMORY_SIZE = 64 * 1024  # 64 KB, covers the test corpus footprint
DEFAULT_MAX_STEPS = 100_000


@dataclass(frozen=True)
class MachineConfig:
    """Everything needed to build and bound one interpreter instance.

    ``entry`` defaults to ``base`` when left as None.
    """

    base: int = DEFAULT_BASE
    memory_size: int = DEFAULT_MEMORY_SIZE
    entry: int | None = None
    byteorder: ByteOrder = "little"
    max_steps: int = DEFAULT_MAX_STEPS

    def __post_init__(self) -> None:
        if not 0 <= self.base <= 0xFFFFFFFF:
            raise ValueError(f"Base address out of range: 0x{self.base:X}")
        if self.memory_size <= 0 or self.base + self.memory_size > 0x100000000:
            raise ValueError(f"Invalid memory size: {self.memory_size}")
        if self.byteorder not in ("little", "big"):
            raise ValueError(f"Unknown byte order: {self.byteorder!r}")
        if self.max_steps <= 0:
            raise ValueError(f"max_steps must be positive, got {self.max_steps}")
        entry = self.entry_pc
        if entry & 0x3:
            raise ValueError(f"Entry point 0x{entry:08X} is not word-aligned")
        if not self.base <= entry < self.base + self.memory_size:
            raise ValueError(f"Entry point 0x{entry:08X} is outside memory")

    @property
    def entry_pc(self) -> int:
        return self.base if self.entry is None else self.entry


@dataclass(frozen=True)
class RunResult:
    """Final machine and how the run ended."""

    cpu: CPU
    status: StepStatus
    steps: int


def build_machine(image: bytes, config: MachineConfig | None = None) -> CPU:
    """Create RAM, load ``image`` at the configured base, and return a CPU at the entry."""
    config = config or MachineConfig()
    ram = RAM(config.base, config.memory_size, config.byteorder)
    load_binary(ram, image, config.base)
    return CPU(ram, entry=config.entry_pc)


def run_program(
    image: bytes,
    config: MachineConfig | None = None,
    *,
    strict: bool = True,
) -> RunResult:
    """Run an image until it halts, traps, or exhausts ``config.max_steps``.

    Programs that spin on a label other than a plain jump-to-self never
    halt on their own; with ``strict=False`` they end with status
    CONTINUE and the caller inspects the returned CPU.

    Raises:
        StepBudgetExceeded: Budget exhausted and ``strict`` is set.
        UnsupportedInstruction, OutOfBoundsAccess: Propagated from the core.
    """
    config = config or MachineConfig()
    cpu = build_machine(image, config)
    status = cpu.run(config.max_steps)
    steps = cpu.step_count

    if status is StepStatus.CONTINUE:
        logger.info("Step budget of %d exhausted at 0x%08X", config.max_steps, cpu.pc)
        if strict:
            raise StepBudgetExceeded(config.max_steps, cpu)
    else:
        logger.info("Program %s after %d steps at 0x%08X", status.value, steps, cpu.pc)

    return RunResult(cpu=cpu, status=status, steps=steps)
