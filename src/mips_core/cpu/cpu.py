"""CPU core: fetch-decode-execute loop with branch delay slots."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from ..errors import OutOfBoundsAccess, UnsupportedInstruction
from ..memory.ram import RAM
from .decode import Instruction, decode
from .execute import TrapCause, execute
from .registers import RegisterFile

logger = logging.getLogger(__name__)

_LINKING = ("JAL", "BLTZAL", "BGEZAL")


def _link_register(inst: Instruction) -> int | None:
    """Register a linking branch or jump writes, or None."""
    if inst.mnemonic == "JALR":
        return inst.rd
    if inst.mnemonic in _LINKING:
        return 31
    return None


class StepStatus(enum.Enum):
    """Result of a single step."""

    CONTINUE = "continue"
    HALTED = "halted"    # reached a jump-to-self fixed point
    TRAPPED = "trapped"  # SYSCALL, BREAK or arithmetic overflow


@dataclass(frozen=True)
class Trap:
    """The instruction that stopped the core with ``StepStatus.TRAPPED``."""

    cause: TrapCause
    pc: int
    word: int
    in_delay_slot: bool


class CPU:
    """MIPS I CPU: fetch-decode-execute over a register file and flat memory.

    Control transfers are delayed by one instruction. A taken branch sets
    ``branch_target`` and the following step executes the delay slot
    before redirecting the PC. A taken branch inside a delay slot replaces
    the pending target and opens a new delay slot; a not-taken one leaves
    the pending target in force.
    """

    def __init__(self, memory: RAM, entry: int = 0) -> None:
        self.pc: int = entry & 0xFFFFFFFF
        self.registers = RegisterFile()
        self.memory = memory
        self.branch_target: int | None = None
        self.in_delay_slot: bool = False
        self.halted: bool = False
        self.status: StepStatus = StepStatus.CONTINUE
        self.trap: Trap | None = None
        self.step_count: int = 0
        self.instruction_stats: dict[str, int] = {}
        self._branch_pc: int | None = None
        self._branch_linked: bool = False

    @property
    def hi(self) -> int:
        return self.registers.hi

    @property
    def lo(self) -> int:
        return self.registers.lo

    def step(self) -> StepStatus:
        """Execute one instruction: fetch, decode, execute, update the PC.

        Returns the status after the instruction. A halted or trapped CPU
        returns its final status without executing anything.

        Raises:
            UnsupportedInstruction: The word at PC is not implemented.
            OutOfBoundsAccess: Fetch, load or store outside memory.
        """
        if self.halted:
            return self.status

        pc = self.pc
        word: int | None = None
        try:
            word = self.memory.read32(pc)
            inst = decode(word)
            link = _link_register(inst)
            before = self.registers.read(link) if link is not None else 0
            outcome = execute(inst, self)
        except UnsupportedInstruction as exc:
            exc.at(pc)
            raise
        except OutOfBoundsAccess as exc:
            exc.at(pc, word)
            raise

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "%08X: %08X %-7s%s", pc, inst.word, inst.mnemonic,
                " (delay slot)" if self.in_delay_slot else "",
            )

        self.step_count += 1
        self.instruction_stats[inst.mnemonic] = (
            self.instruction_stats.get(inst.mnemonic, 0) + 1
        )

        if outcome.trap is not None:
            self.trap = Trap(outcome.trap, pc, inst.word, self.in_delay_slot)
            self.halted = True
            self.status = StepStatus.TRAPPED
            logger.info("Trap %s at 0x%08X", outcome.trap.value, pc)
            return self.status

        pending = self.branch_target
        if outcome.target is not None:
            if pending is not None:
                logger.debug(
                    "Branch at 0x%08X in delay slot replaces pending target 0x%08X",
                    pc, pending,
                )
            self.branch_target = outcome.target
            self._branch_pc = pc
            # A link write that changed its register can redirect the next pass
            self._branch_linked = (
                link is not None and self.registers.read(link) != before
            )
            self.in_delay_slot = True
            self.pc = (pc + 4) & 0xFFFFFFFF
        elif pending is not None:
            branch_pc = self._branch_pc
            linked = self._branch_linked
            self.branch_target = None
            self._branch_pc = None
            self._branch_linked = False
            self.in_delay_slot = False
            self.pc = pending
            if pending == branch_pc and inst.is_nop and not linked:
                # Jump-to-self with an empty delay slot never changes state again
                self.halted = True
                self.status = StepStatus.HALTED
                logger.info("Halted on self-loop at 0x%08X", pending)
        else:
            self.pc = (pc + 4) & 0xFFFFFFFF

        return self.status

    def run(self, max_steps: int = 1_000_000) -> StepStatus:
        """Step until halted, trapped, or ``max_steps`` instructions have run."""
        steps = 0
        while not self.halted and steps < max_steps:
            self.step()
            steps += 1
        return self.status
