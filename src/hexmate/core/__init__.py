"""
Core package for literal scanning, rewriting and the document buffer.

This package implements the literal engine (scanner, parser, formatter,
context guard and bulk rewrite) together with the Buffer class that holds
the document being edited and the SyntaxHighlighter used to draw it.
"""

from .buffer import Buffer
from .literals import Base, LiteralMatch, format_value, parse_literal, scan_literals

__all__ = ['Buffer', 'Base', 'LiteralMatch', 'format_value', 'parse_literal', 'scan_literals']
