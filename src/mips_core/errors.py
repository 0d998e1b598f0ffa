"""Emulator error taxonomy: decode failures, memory faults, runaway programs."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .cpu.cpu import CPU


class EmulatorError(Exception):
    """Base class for all fatal emulator conditions."""


class UnsupportedInstruction(EmulatorError, ValueError):
    """The fetched word is not in the supported instruction table."""

    def __init__(self, word: int, pc: int | None = None, reason: str = "") -> None:
        self.word = word & 0xFFFFFFFF
        self.pc = pc
        self.reason = reason
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = f" at 0x{self.pc:08X}" if self.pc is not None else ""
        detail = f": {self.reason}" if self.reason else ""
        return f"Unsupported instruction 0x{self.word:08X}{where}{detail}"

    def at(self, pc: int) -> UnsupportedInstruction:
        """Attach the fetch address and refresh the message."""
        self.pc = pc
        self.args = (self._describe(),)
        return self


class OutOfBoundsAccess(EmulatorError, MemoryError):
    """A memory access touched bytes outside the provisioned range.

    The RAM raises it with the address and width; the CPU annotates the
    instruction that caused it before letting it propagate.
    """

    def __init__(self, address: int, width: int) -> None:
        self.address = address & 0xFFFFFFFF
        self.width = width
        self.pc: int | None = None
        self.word: int | None = None
        super().__init__(self._describe())

    def _describe(self) -> str:
        msg = f"Access out of bounds: 0x{self.address:08X} (width={self.width})"
        if self.pc is None:
            return msg
        if self.word is None:
            return msg + f" while fetching at 0x{self.pc:08X}"
        return msg + f" by instruction 0x{self.word:08X} at 0x{self.pc:08X}"

    def at(self, pc: int, word: int | None) -> OutOfBoundsAccess:
        """Attach the faulting instruction and refresh the message."""
        self.pc = pc
        self.word = word
        self.args = (self._describe(),)
        return self


class StepBudgetExceeded(EmulatorError):
    """The harness step ceiling was reached before the program terminated.

    Several test programs spin forever on purpose, so the CPU is attached
    for inspection of the final architectural state.
    """

    def __init__(self, steps: int, cpu: CPU) -> None:
        self.steps = steps
        self.cpu = cpu
        self.pc = cpu.pc
        super().__init__(
            f"Step budget of {steps} exhausted at PC 0x{self.pc:08X}"
        )
