"""Tests for the register file."""

from mips_core.cpu.registers import RegisterFile


class TestRegisterFile:
    def test_initial_zero(self) -> None:
        regs = RegisterFile()
        for i in range(32):
            assert regs.read(i) == 0
        assert regs.hi == 0
        assert regs.lo == 0

    def test_write_read(self) -> None:
        regs = RegisterFile()
        regs.write(1, 42)
        assert regs.read(1) == 42

    def test_zero_hardwired(self) -> None:
        regs = RegisterFile()
        regs.write(0, 0xDEADBEEF)
        assert regs.read(0) == 0

    def test_masks_to_32_bits(self) -> None:
        regs = RegisterFile()
        regs.write(5, 0x1_FFFF_FFFF)
        assert regs.read(5) == 0xFFFFFFFF

    def test_negative_value_stored_unsigned(self) -> None:
        regs = RegisterFile()
        regs.write(5, -1)
        assert regs.read(5) == 0xFFFFFFFF

    def test_all_registers_independent(self) -> None:
        regs = RegisterFile()
        for i in range(1, 32):
            regs.write(i, i * 100)
        for i in range(1, 32):
            assert regs.read(i) == i * 100

    def test_hi_lo_masked(self) -> None:
        regs = RegisterFile()
        regs.hi = -2
        regs.lo = 0x1_0000_0001
        assert regs.hi == 0xFFFFFFFE
        assert regs.lo == 1

    def test_values(self) -> None:
        regs = RegisterFile()
        regs.write(31, 7)
        values = regs.values()
        assert len(values) == 32
        assert values[0] == 0
        assert values[31] == 7

    def test_values_is_a_copy(self) -> None:
        regs = RegisterFile()
        values = regs.values()
        values[1] = 99
        assert regs.read(1) == 0
