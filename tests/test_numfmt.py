"""Tests for value presentation helpers."""

from hexmate.config import BitLabel
from hexmate.utils.numfmt import (
    bit_row,
    byte_groups,
    conversions,
    decoration_text,
    describe_bitfields,
    parse_number_input,
    render_hover,
)


def test_conversions() -> None:
    assert conversions(10) == ("10", "0xA", "0b1010", "0o12")
    assert conversions(10).hex == "0xA"


def test_byte_groups_pad_to_four_bytes() -> None:
    assert byte_groups(255) == (["00", "00", "00", "FF"], ["FF", "00", "00", "00"])
    assert byte_groups(0) == (["00"] * 4, ["00"] * 4)


def test_byte_groups_keep_wide_values() -> None:
    big, little = byte_groups(0x123456789)

    assert big == ["01", "23", "45", "67", "89"]
    assert little == ["89", "67", "45", "23", "01"]


def test_render_hover() -> None:
    assert render_hover(255).splitlines() == [
        "255 ⟶ 0xFF | 0b11111111 | 0o377",
        "Dec: 255",
        "Hex: 0xFF",
        "Bin: 0b11111111",
        "Oct: 0o377",
        "Endianness",
        "  Big: 00 00 00 FF",
        "  Little: FF 00 00 00",
    ]


def test_decoration_text() -> None:
    assert decoration_text(8) == " ⟶ Dec: 8 | Hex: 0x8 | Bin: 0b1000 | Oct: 0o10"


def test_bit_row_is_32_bits_msb_first() -> None:
    assert bit_row(5) == "0" * 29 + "101"
    assert bit_row(0x80000000) == "1" + "0" * 31
    assert bit_row(2**32 + 1) == "0" * 31 + "1"


def test_describe_bitfields() -> None:
    bitfields = {
        "STATUS": {
            2: BitLabel("Negative"),
            0: BitLabel("Carry"),
            1: BitLabel("Zero", "Result was zero"),
            40: BitLabel("Far"),
        },
        "EMPTY": {},
    }

    result = describe_bitfields(0b101, bitfields)
    status = result["STATUS"]

    assert [s.bit for s in status] == [0, 1, 2, 40]
    assert [s.is_set for s in status] == [True, False, True, False]
    assert status[1].doc == "Result was zero"
    assert result["EMPTY"] == []


def test_parse_number_input() -> None:
    assert parse_number_input("  0x10 ") == 16
    assert parse_number_input("0b11") == 3
    assert parse_number_input("") is None
    assert parse_number_input("   ") is None
    assert parse_number_input("ten") is None
