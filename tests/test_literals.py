"""Tests for literal scanning, parsing and formatting."""

import pytest

from hexmate.core.literals import Base, LiteralMatch, format_value, literal_at, parse_literal, scan_literals


def test_scan_finds_all_four_shapes_in_order() -> None:
    matches = list(scan_literals("0xFF 10 0b101 0o17"))

    assert [m.raw_text for m in matches] == ["0xFF", "10", "0b101", "0o17"]
    assert [m.value for m in matches] == [255, 10, 5, 15]


def test_scan_offsets_cover_raw_text() -> None:
    text = "int a = 0x1F + 42;"

    for match in scan_literals(text):
        assert match.end - match.start == len(match.raw_text)
        assert text[match.start:match.end] == match.raw_text


def test_scan_is_restartable() -> None:
    text = "a=1 b=2"
    assert list(scan_literals(text)) == list(scan_literals(text))


def test_bare_zero_is_decimal() -> None:
    assert list(scan_literals("x = 0;")) == [LiteralMatch("0", 4, 5, 0)]


def test_uppercase_prefixes() -> None:
    assert [m.value for m in scan_literals("0XfF 0B11 0O7")] == [255, 3, 7]


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("-5", ["5"]),
        ("1_000", []),
        ("abc123", []),
        ("0x", []),
        ("0xG", []),
        ("3.14", ["3", "14"]),
    ],
)
def test_unsupported_forms(text: str, expected: list) -> None:
    assert [m.raw_text for m in scan_literals(text)] == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("0x1f", 31),
        ("0XFF", 255),
        ("0b1010", 10),
        ("0o777", 511),
        ("42", 42),
        ("007", 7),
        ("0b2", None),
        ("0o", None),
        ("12a", None),
        ("", None),
        ("٣", None),
        ("0x1_0", None),
        ("0x 1", None),
        ("0x+1", None),
        ("0x-1", None),
        ("0xFF ", None),
        ("0b1_0", None),
        ("0o-7", None),
        ("0x١٢", None),
    ],
)
def test_parse_literal(text: str, expected) -> None:
    assert parse_literal(text) == expected


def test_parse_keeps_values_wider_than_32_bits() -> None:
    assert parse_literal("0x1FFFFFFFF") == 0x1FFFFFFFF
    assert parse_literal("123456789012345678901234567890") == 123456789012345678901234567890


@pytest.mark.parametrize(
    ("base", "expected_255", "expected_0"),
    [
        (Base.DECIMAL, "255", "0"),
        (Base.HEX, "0xFF", "0x0"),
        (Base.BINARY, "0b11111111", "0b0"),
        (Base.OCTAL, "0o377", "0o0"),
    ],
)
def test_format_value(base: Base, expected_255: str, expected_0: str) -> None:
    assert format_value(255, base) == expected_255
    assert format_value(0, base) == expected_0


def test_format_rejects_negative_values() -> None:
    with pytest.raises(ValueError):
        format_value(-1, Base.HEX)


@pytest.mark.parametrize("base", list(Base))
def test_format_then_parse_gives_back_the_value(base: Base) -> None:
    for value in (0, 1, 7, 8, 255, 256, 65535, 2**31, 2**32 - 1):
        assert parse_literal(format_value(value, base)) == value


def test_base_codes() -> None:
    assert Base.from_code("hex") is Base.HEX
    assert [b.radix for b in Base] == [10, 16, 2, 8]
    assert [b.prefix for b in Base] == ["", "0x", "0b", "0o"]

    with pytest.raises(ValueError):
        Base.from_code("hexadecimal")


def test_literal_at_includes_start_and_end() -> None:
    text = "x = 0xFF;"

    assert literal_at(text, 4).raw_text == "0xFF"
    assert literal_at(text, 8).raw_text == "0xFF"
    assert literal_at(text, 2) is None
