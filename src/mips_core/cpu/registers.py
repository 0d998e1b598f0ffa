"""Register file: 32 general purpose registers plus the HI/LO pair."""

_MASK32 = 0xFFFFFFFF


class RegisterFile:
    """MIPS integer registers.

    ``$0`` reads as zero and ignores writes. ``hi`` and ``lo`` receive
    multiply/divide results and are only touched by MULT/DIV/MTHI/MTLO.
    """

    def __init__(self) -> None:
        self._gpr: list[int] = [0] * 32
        self._hi = 0
        self._lo = 0

    def read(self, index: int) -> int:
        """Read GPR ``index`` as an unsigned 32-bit value."""
        if index == 0:
            return 0
        return self._gpr[index]

    def write(self, index: int, value: int) -> None:
        """Write GPR ``index``; the value is truncated to 32 bits."""
        if index == 0:
            return
        self._gpr[index] = value & _MASK32

    @property
    def hi(self) -> int:
        return self._hi

    @hi.setter
    def hi(self, value: int) -> None:
        self._hi = value & _MASK32

    @property
    def lo(self) -> int:
        return self._lo

    @lo.setter
    def lo(self, value: int) -> None:
        self._lo = value & _MASK32

    def values(self) -> list[int]:
        """All 32 GPR values in index order ($0 included)."""
        return [0] + self._gpr[1:]
