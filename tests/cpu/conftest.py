"""Shared fixtures for CPU tests."""

import pytest

from mips_core.cpu.cpu import CPU
from mips_core.memory.ram import RAM

BASE = 0x00000000
RAM_SIZE = 64 * 1024  # 64 KB
PROGRAM = 0x1000


@pytest.fixture
def make_cpu():
    """Factory fixture: returns a function that creates a fresh CPU at PROGRAM."""
    def _make() -> CPU:
        ram = RAM(BASE, RAM_SIZE)
        return CPU(ram, entry=PROGRAM)
    return _make


@pytest.fixture
def exec_instruction(make_cpu):
    """Write a 32-bit instruction word at PC, step once, return the cpu."""
    def _exec(cpu: CPU | None = None, word: int = 0) -> CPU:
        if cpu is None:
            cpu = make_cpu()
        cpu.memory.write32(cpu.pc, word)
        cpu.step()
        return cpu
    return _exec


@pytest.fixture
def set_regs():
    """Set numbered registers (e.g., set_regs(cpu, r1=5, r2=10))."""
    def _set(cpu: CPU, **kwargs: int) -> None:
        for name, value in kwargs.items():
            if not name.startswith("r"):
                raise ValueError(f"Register name must start with 'r': {name}")
            cpu.registers.write(int(name[1:]), value)
    return _set
