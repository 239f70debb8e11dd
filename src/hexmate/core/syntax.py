"""
Syntax highlighting module for the editor using Pygments.

Numeric literals found by the literal scanner are always drawn as numbers,
whatever the lexer made of them, so that the spans the editor converts are
the spans the user sees highlighted.
"""

import curses
import re
from typing import Any, Dict, Final, List, Optional, Tuple

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_for_filename
from pygments.lexers.c_cpp import CLexer, CppLexer
from pygments.lexers.javascript import JavascriptLexer
from pygments.lexers.python import PythonLexer
from pygments.lexers.rust import RustLexer
from pygments.lexers.shell import BashLexer
from pygments.token import Token, _TokenType
from pygments.util import ClassNotFound

from .literals import scan_literals

SYNTAX_COLORS: Final[Dict[str, int]] = {
    'keyword': 11,     # Cyan
    'string': 12,      # Yellow
    'comment': 13,     # Green
    'function': 14,    # Cyan
    'class': 15,       # Magenta
    'number': 16,      # Red
    'operator': 17,    # White
    'variable': 18,    # White
    'default': 0,      # Default
}

C_PATTERN: Final[str] = r'^\s*(#include|int\s+main|void\s+main|struct\s+\w+\s*{)'
CPP_PATTERN: Final[str] = r'^\s*(class\s+\w+|namespace\s+\w+|template\s*<)'

LANGUAGE_PATTERNS: Final[Dict[str, Tuple[Any, str]]] = {
    r'^\s*(def|class|import|from|if __name__ == [\'"]__main__[\'"])':
        (PythonLexer, 'Python'),
    r'^\s*(function|const|let|var|document\.|window\.|=>)':
        (JavascriptLexer, 'JavaScript'),
    r'^\s*(#!\s*/bin/bash|function\s+\w+\s*\(\))':
        (BashLexer, 'Bash'),
    r'^\s*(fn\s+\w+|pub\s+struct|use\s+std)':
        (RustLexer, 'Rust'),
}

TOKEN_CATEGORIES: Final[Dict[Any, str]] = {
    Token.Keyword: 'keyword',
    Token.Name.Class: 'class',
    Token.Name.Function: 'function',
    Token.Name.Decorator: 'function',
    Token.Name.Variable: 'variable',
    Token.String: 'string',
    Token.Comment: 'comment',
    Token.Number: 'number',
    Token.Operator: 'operator',
    Token.Text: 'default',
}


def token_category(token_type: _TokenType) -> str:
    """Map a Pygments token type to a colour category, walking up its parents."""

    while token_type is not None:
        if token_type in TOKEN_CATEGORIES:
            return TOKEN_CATEGORIES[token_type]

        token_type = token_type.parent

    return 'default'


class SyntaxHighlighter:
    """Handles syntax highlighting for code files using Pygments."""

    def __init__(self) -> None:
        self.lexer: Optional[Lexer] = None
        self.language: Optional[str] = None
        self.color_pairs_initialized = False

    def init_colors(self) -> None:
        """Initialize color pairs for syntax highlighting."""

        if self.color_pairs_initialized:
            return

        curses.init_pair(SYNTAX_COLORS['keyword'], curses.COLOR_CYAN, -1)
        curses.init_pair(SYNTAX_COLORS['string'], curses.COLOR_YELLOW, -1)
        curses.init_pair(SYNTAX_COLORS['comment'], curses.COLOR_GREEN, -1)
        curses.init_pair(SYNTAX_COLORS['function'], curses.COLOR_CYAN, -1)
        curses.init_pair(SYNTAX_COLORS['class'], curses.COLOR_MAGENTA, -1)
        curses.init_pair(SYNTAX_COLORS['number'], curses.COLOR_RED, -1)
        curses.init_pair(SYNTAX_COLORS['operator'], curses.COLOR_WHITE, -1)
        curses.init_pair(SYNTAX_COLORS['variable'], curses.COLOR_WHITE, -1)

        self.color_pairs_initialized = True

    def detect_language(self, filename: str, content: str) -> Optional[str]:
        """
        Detect the programming language of a file based on its extension and content.

        Args:
            filename: The name of the file
            content: The content of the file

        Returns:
            The detected language or None if not detected
        """

        try:
            self.lexer = get_lexer_for_filename(filename)
            self.language = self.lexer.name
            return self.language
        except ClassNotFound:
            pass

        for pattern, (lexer_class, lang_name) in LANGUAGE_PATTERNS.items():
            if re.search(pattern, content, re.MULTILINE):
                self.lexer = lexer_class()
                self.language = lang_name
                return self.language

        if re.search(C_PATTERN, content, re.MULTILINE):
            if re.search(CPP_PATTERN, content, re.MULTILINE):
                self.lexer = CppLexer()
                self.language = 'C++'

                return self.language

            self.lexer = CLexer()
            self.language = 'C'

            return self.language

        return None

    def segment_line(self, line: str) -> List[Tuple[str, str]]:
        """
        Split a line into (text, category) segments.

        Literal spans override whatever category the lexer gave them.
        Without a lexer everything but the literals is 'default'.
        """

        categories = ['default'] * len(line)

        if self.lexer:
            pos = 0
            for token_type, text in self.lexer.get_tokens(line):
                category = token_category(token_type)
                for i in range(pos, min(pos + len(text), len(line))):
                    categories[i] = category
                pos += len(text)

        for literal in scan_literals(line):
            for i in range(literal.start, literal.end):
                categories[i] = 'number'

        segments: List[Tuple[str, str]] = []
        for char, category in zip(line, categories):
            if segments and segments[-1][1] == category:
                segments[-1] = (segments[-1][0] + char, category)
                continue

            segments.append((char, category))

        return segments

    def highlight_line(self, line: str) -> List[Tuple[str, int]]:
        """
        Highlight a line of code.

        Args:
            line: The line of code to highlight

        Returns:
            A list of (text, color_attr) tuples
        """

        if not line:
            return [(line, curses.color_pair(0))]

        return [
            (text, curses.color_pair(SYNTAX_COLORS[category]))
            for text, category in self.segment_line(line)
        ]

    def get_language_name(self) -> Optional[str]:
        """Get the name of the currently detected language."""

        return self.language
