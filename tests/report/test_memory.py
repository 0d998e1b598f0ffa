"""Tests for the memory hex dump module."""

from mips_core.memory.ram import RAM
from mips_core.report.memory import format_hex_dump


class TestFormatHexDump:
    """Tests for format_hex_dump function."""

    def test_single_row_all_zeros(self) -> None:
        ram = RAM(0x100, 256)
        output = format_hex_dump(ram, 0x100, num_rows=1)
        assert output.startswith("0x00000100:")
        assert "00 00 00 00 00 00 00 00" in output

    def test_hex_byte_values(self) -> None:
        ram = RAM(0x100, 256)
        ram.write32(0x100, 0x1234ABCD)
        output = format_hex_dump(ram, 0x100, num_rows=1)
        assert "CD AB 34 12" in output

    def test_ascii_column(self) -> None:
        ram = RAM(0, 256)
        ram.load_segment(0, b"MIPS\x00")
        output = format_hex_dump(ram, 0, num_rows=1)
        assert "|MIPS............|" in output

    def test_row_count(self) -> None:
        ram = RAM(0, 256)
        output = format_hex_dump(ram, 0, num_rows=3)
        assert len(output.split("\n")) == 3

    def test_aligns_start_down(self) -> None:
        ram = RAM(0, 256)
        output = format_hex_dump(ram, 0x47, num_rows=1)
        assert output.startswith("0x00000040:")

    def test_unmapped_bytes(self) -> None:
        ram = RAM(0x100, 16)
        output = format_hex_dump(ram, 0x100, num_rows=2)
        second = output.split("\n")[1]
        assert second.startswith("0x00000110:")
        assert "??" in second
        assert "00" not in second.split(":", 1)[1]

    def test_extra_gap_after_eighth_byte(self) -> None:
        ram = RAM(0, 16)
        output = format_hex_dump(ram, 0, num_rows=1)
        assert "00 00 00 00 00 00 00 00  00" in output


class TestFormatHexDumpWords:
    """Tests for the 32-bit word view."""

    def test_little_endian_words(self) -> None:
        ram = RAM(0x100, 256)
        ram.write32(0x100, 0x1234ABCD)
        ram.write32(0x10C, 0xDEADBEEF)
        output = format_hex_dump(ram, 0x100, num_rows=1, words=True)
        assert output.startswith("0x00000100: 1234ABCD 00000000 00000000 DEADBEEF")

    def test_big_endian_words(self) -> None:
        ram = RAM(0, 16, byteorder="big")
        ram.write32(0, 0x1234ABCD)
        output = format_hex_dump(ram, 0, num_rows=1, words=True)
        assert "1234ABCD" in output
        assert output.startswith("0x00000000: 1234ABCD")

    def test_ascii_column_kept(self) -> None:
        ram = RAM(0, 16)
        ram.load_segment(0, b"MIPS")
        output = format_hex_dump(ram, 0, num_rows=1, words=True)
        assert output.endswith("|MIPS............|")

    def test_unmapped_words(self) -> None:
        ram = RAM(0x100, 16)
        output = format_hex_dump(ram, 0x100, num_rows=2, words=True)
        assert output.split("\n")[1].count("????????") == 4
