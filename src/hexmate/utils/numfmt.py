"""
Utility functions for presenting a value in several bases.
"""

from dataclasses import dataclass
from typing import Dict, Final, List, NamedTuple, Optional, Tuple

from ..config import BitLabel
from ..core.literals import Base, format_value, parse_literal

WORD_BITS: Final[int] = 32
WORD_MASK: Final[int] = (1 << WORD_BITS) - 1
MIN_HEX_DIGITS: Final[int] = 8


class Conversions(NamedTuple):
    """A value rendered in every base."""
    dec: str
    hex: str
    bin: str
    oct: str


@dataclass(frozen=True)
class BitState:
    """One labelled bit of a register and whether it is set."""
    bit: int
    label: str
    doc: Optional[str]
    is_set: bool


def conversions(value: int) -> Conversions:
    """Render a value in decimal, hex, binary and octal."""

    return Conversions(
        format_value(value, Base.DECIMAL),
        format_value(value, Base.HEX),
        format_value(value, Base.BINARY),
        format_value(value, Base.OCTAL),
    )


def byte_groups(value: int) -> Tuple[List[str], List[str]]:
    """
    Split the hex form of a value into bytes.

    The hex digits are zero-padded to at least 8 digits and to an even
    count, so values wider than 32 bits keep all of their bytes.

    Args:
        value (int): Non-negative value

    Returns:
        Tuple[List[str], List[str]]: Big endian and little endian byte lists
    """

    digits = f"{value:0{MIN_HEX_DIGITS}X}"
    if len(digits) % 2:
        digits = '0' + digits

    big = [digits[i:i + 2] for i in range(0, len(digits), 2)]
    return big, list(reversed(big))


def decoration_text(value: int) -> str:
    """Inline annotation drawn after a literal."""

    conv = conversions(value)
    return f" ⟶ Dec: {conv.dec} | Hex: {conv.hex} | Bin: {conv.bin} | Oct: {conv.oct}"


def render_hover(value: int) -> str:
    """
    Build the hover text for a value.

    Args:
        value (int): Value of the literal under the cursor

    Returns:
        str: Multi-line text with the conversions and byte order views
    """

    conv = conversions(value)
    big, little = byte_groups(value)

    lines = [
        f"{conv.dec} ⟶ {conv.hex} | {conv.bin} | {conv.oct}",
        f"Dec: {conv.dec}",
        f"Hex: {conv.hex}",
        f"Bin: {conv.bin}",
        f"Oct: {conv.oct}",
        "Endianness",
        f"  Big: {' '.join(big)}",
        f"  Little: {' '.join(little)}",
    ]

    return '\n'.join(lines)


def bit_row(value: int) -> str:
    """The low 32 bits of a value, most significant bit first."""

    return f"{value & WORD_MASK:0{WORD_BITS}b}"


def describe_bitfields(value: int,
                       bitfields: Dict[str, Dict[int, BitLabel]]) -> Dict[str, List[BitState]]:
    """
    Evaluate register bit definitions against a value.

    Bits are read from the 32-bit view of the value. Definitions for bits
    outside 0..31 are reported as unset.

    Args:
        value (int): Value to inspect
        bitfields: Register name to bit number to label

    Returns:
        Dict[str, List[BitState]]: Per register, its bits in ascending order
    """

    word = value & WORD_MASK
    result: Dict[str, List[BitState]] = {}

    for register, bits in bitfields.items():
        states = []
        for bit in sorted(bits):
            info = bits[bit]
            is_set = 0 <= bit < WORD_BITS and bool((word >> bit) & 1)
            states.append(BitState(bit, info.label, info.doc, is_set))

        result[register] = states

    return result


def parse_number_input(text: str) -> Optional[int]:
    """Parse a value typed by the user, e.g. " 0xFF " or "42"."""

    text = text.strip()
    if not text:
        return None

    return parse_literal(text)
