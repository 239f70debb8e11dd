"""
Numeric literal scanning, parsing and formatting.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterator, Optional


class Base(Enum):
    """A numeral system with its canonical prefix."""

    DECIMAL = ('dec', '', 10)
    HEX = ('hex', '0x', 16)
    BINARY = ('bin', '0b', 2)
    OCTAL = ('oct', '0o', 8)

    def __init__(self, code: str, prefix: str, radix: int) -> None:
        self.code = code
        self.prefix = prefix
        self.radix = radix

    @classmethod
    def from_code(cls, code: str) -> 'Base':
        """Look up a base by its short code ('dec', 'hex', 'bin' or 'oct')."""

        for base in cls:
            if base.code == code:
                return base

        raise ValueError(f"Unknown base code: {code!r}")


LITERAL_PATTERN: Final['re.Pattern[str]'] = re.compile(
    r'0[xX][0-9A-Fa-f]+|0[bB][01]+|0[oO][0-7]+|\b\d+\b',
    re.ASCII
)

DECIMAL_PATTERN: Final['re.Pattern[str]'] = re.compile(r'\d+', re.ASCII)

PREFIX_DIGITS: Final[dict] = {
    '0x': (16, re.compile(r'[0-9A-Fa-f]+', re.ASCII)),
    '0b': (2, re.compile(r'[01]+', re.ASCII)),
    '0o': (8, re.compile(r'[0-7]+', re.ASCII)),
}


@dataclass(frozen=True)
class LiteralMatch:
    """A literal found in a text snapshot."""
    raw_text: str
    start: int
    end: int
    value: int

    def contains(self, offset: int) -> bool:
        """Check whether an offset touches this literal, end inclusive."""

        return self.start <= offset <= self.end


def parse_literal(text: str) -> Optional[int]:
    """
    Parse the text of a literal into its integer value.

    Args:
        text (str): Literal text such as "0xFF", "0b101", "0o17" or "42"

    Returns:
        int: Parsed value or None if the text is not a literal
    """

    # int() alone would also accept signs, underscores and whitespace.
    prefixed = PREFIX_DIGITS.get(text[:2].lower())
    if prefixed is not None:
        radix, digits = prefixed
        if not digits.fullmatch(text[2:]):
            return None

        return int(text[2:], radix)

    if not DECIMAL_PATTERN.fullmatch(text):
        return None

    return int(text, 10)


def format_value(value: int, base: Base) -> str:
    """
    Render a value as canonical literal text in the given base.

    Args:
        value (int): Non-negative value to render
        base (Base): Target base

    Returns:
        str: Literal text, e.g. "0xFF" for 255 in HEX
    """

    if value < 0:
        raise ValueError("Negative values have no literal form")

    if base is Base.HEX:
        return f"0x{value:X}"

    if base is Base.BINARY:
        return f"0b{value:b}"

    if base is Base.OCTAL:
        return f"0o{value:o}"

    return str(value)


def scan_literals(text: str) -> Iterator[LiteralMatch]:
    """
    Yield every literal in the text, left to right.

    Matches that fail to parse are skipped. The scan holds no state, so
    calling it again re-reads the same text from the start.
    """

    for match in LITERAL_PATTERN.finditer(text):
        value = parse_literal(match.group())
        if value is None:
            continue

        yield LiteralMatch(match.group(), match.start(), match.end(), value)


def literal_at(text: str, offset: int) -> Optional[LiteralMatch]:
    """Find the literal under an offset, including the position just past its end."""

    for literal in scan_literals(text):
        if literal.start > offset:
            break

        if literal.contains(offset):
            return literal

    return None
