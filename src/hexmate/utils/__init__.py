"""
Utility package for conversion views and literal navigation.
"""

from .numfmt import (
    conversions,
    byte_groups,
    decoration_text,
    render_hover,
    bit_row,
    describe_bitfields,
    parse_number_input
)
from .search import LiteralSearch

__all__ = [
    'conversions',
    'byte_groups',
    'decoration_text',
    'render_hover',
    'bit_row',
    'describe_bitfields',
    'parse_number_input',
    'LiteralSearch'
]
