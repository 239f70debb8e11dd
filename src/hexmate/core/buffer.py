"""
Buffer module for holding and editing a text document.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

from ..core.rewrite import Edit, apply_to_text
from ..core.syntax import SyntaxHighlighter

logger = logging.getLogger(__name__)


@dataclass
class UndoAction:
    """Represents an undoable action in the buffer."""
    position: int
    old_data: str
    new_data: str
    action_type: str
    batch_actions: List['UndoAction'] = field(default_factory=list)


class Buffer:
    """Main buffer class for a text document."""

    def __init__(self, text: str = '') -> None:
        self.code_lines: List[str] = text.split('\n')
        self.modified = False
        self.filename: Optional[str] = None
        self.language: Optional[str] = None
        self.trailing_newline = False
        self.undo_stack: Deque[UndoAction] = deque(maxlen=100)
        self.redo_stack: Deque[UndoAction] = deque(maxlen=100)
        self.cursor_line = 0
        self.cursor_column = 0

    @property
    def text(self) -> str:
        """The whole document as one string."""

        return '\n'.join(self.code_lines)

    def set_text(self, text: str) -> None:
        """Replace the document content, keeping the cursor inside it."""

        self.code_lines = text.split('\n')
        self.cursor_line = min(self.cursor_line, len(self.code_lines) - 1)
        self.cursor_column = min(self.cursor_column, len(self.code_lines[self.cursor_line]))

    def get_code_line(self, line_number: int) -> str:
        """Get a line of text."""

        if not 0 <= line_number < len(self.code_lines):
            return ""

        return self.code_lines[line_number]

    def get_line_count(self) -> int:
        """Get the total number of lines."""

        return len(self.code_lines)

    def offset_of(self, line: int, column: int) -> int:
        """Convert a line and column into an offset into the text."""

        line = max(0, min(line, len(self.code_lines) - 1))
        offset = sum(len(text) + 1 for text in self.code_lines[:line])

        return offset + min(column, len(self.code_lines[line]))

    def position_of(self, offset: int) -> Tuple[int, int]:
        """Convert an offset into the text into a line and column."""

        offset = max(0, offset)
        for line_num, line in enumerate(self.code_lines):
            if offset <= len(line):
                return line_num, offset

            offset -= len(line) + 1

        last = len(self.code_lines) - 1
        return last, len(self.code_lines[last])

    @property
    def cursor_offset(self) -> int:
        """The cursor position as an offset into the text."""

        return self.offset_of(self.cursor_line, self.cursor_column)

    def move_cursor_to(self, offset: int) -> None:
        """Place the cursor at an offset."""

        self.cursor_line, self.cursor_column = self.position_of(offset)

    def apply_edits(self, edits: List[Edit]) -> int:
        """
        Apply an edit set as one undoable batch.

        All offsets refer to the current text. The set is validated before
        anything changes, so either every edit is applied or none is.

        Args:
            edits: Edits to apply

        Returns:
            int: Number of edits applied

        Raises:
            ApplyError: If an edit is out of range or edits overlap
        """

        if not edits:
            return 0

        old_text = self.text
        new_text = apply_to_text(old_text, edits)

        cursor = self.cursor_offset
        self.set_text(new_text)
        self.move_cursor_to(min(cursor, len(new_text)))

        self.undo_stack.append(UndoAction(
            position=cursor,
            old_data=old_text,
            new_data=new_text,
            action_type='batch_replace'
        ))
        self.redo_stack.clear()
        self.modified = True

        logger.debug("Applied %d edits to %s", len(edits), self.filename or '[No Name]')
        return len(edits)

    def insert_text(self, line: int, column: int, text: str) -> None:
        """Insert text at the specified position."""

        if line >= len(self.code_lines):
            return

        current_line = self.code_lines[line]
        column = min(column, len(current_line))

        self._replace_line(line, current_line[:column] + text + current_line[column:])
        self.cursor_column = column + len(text)

    def delete_text(self, line: int, start_col: int, end_col: int) -> None:
        """Delete text in the specified range of a line."""

        if line >= len(self.code_lines):
            return

        current_line = self.code_lines[line]
        start_col = min(start_col, len(current_line))
        end_col = min(end_col, len(current_line))

        self._replace_line(line, current_line[:start_col] + current_line[end_col:])
        self.cursor_column = start_col

    def _replace_line(self, line: int, new_line: str) -> None:
        self.undo_stack.append(UndoAction(
            position=line,
            old_data=self.code_lines[line],
            new_data=new_line,
            action_type='replace_line'
        ))
        self.redo_stack.clear()

        self.code_lines[line] = new_line
        self.modified = True

    def split_line(self, line: int, column: int) -> None:
        """Break a line in two at the given column and move the cursor down."""

        if line >= len(self.code_lines):
            return

        self._record_snapshot()

        current_line = self.code_lines[line]
        column = min(column, len(current_line))
        self.code_lines[line] = current_line[:column]
        self.code_lines.insert(line + 1, current_line[column:])

        self.cursor_line = line + 1
        self.cursor_column = 0
        self.modified = True

    def join_with_previous(self, line: int) -> None:
        """Join a line onto the end of the previous one."""

        if not 0 < line < len(self.code_lines):
            return

        self._record_snapshot()

        previous = self.code_lines[line - 1]
        self.code_lines[line - 1] = previous + self.code_lines[line]
        del self.code_lines[line]

        self.cursor_line = line - 1
        self.cursor_column = len(previous)
        self.modified = True

    def delete_line(self, line: int) -> None:
        """Delete a line."""

        if line >= len(self.code_lines) or len(self.code_lines) == 1:
            return

        self._record_snapshot()
        del self.code_lines[line]

        if self.cursor_line > line:
            self.cursor_line -= 1
        elif self.cursor_line >= len(self.code_lines):
            self.cursor_line = max(0, len(self.code_lines) - 1)

        self.modified = True

    def _record_snapshot(self) -> None:
        """Push the whole text as an undo point before a structural change."""

        text = self.text
        self.undo_stack.append(UndoAction(
            position=self.cursor_offset,
            old_data=text,
            new_data=text,
            action_type='batch_replace'
        ))
        self.redo_stack.clear()

    def undo(self) -> bool:
        """Undo the last action."""

        if not self.undo_stack:
            return False

        action = self.undo_stack.pop()

        if action.action_type == 'batch_replace':
            # Structural edits record the text before the change only.
            if action.old_data == action.new_data:
                action.new_data = self.text

            self.set_text(action.old_data)
            self.move_cursor_to(action.position)

        elif action.action_type == 'replace_line':
            line_num = action.position
            if 0 <= line_num < len(self.code_lines):
                self.code_lines[line_num] = action.old_data
                self.cursor_line = line_num
                self.cursor_column = min(self.cursor_column, len(action.old_data))

        self.redo_stack.append(action)
        self.modified = bool(self.undo_stack)

        return True

    def redo(self) -> bool:
        """Redo the last undone action."""

        if not self.redo_stack:
            return False

        action = self.redo_stack.pop()
        self.undo_stack.append(action)

        if action.action_type == 'batch_replace':
            self.set_text(action.new_data)
            self.move_cursor_to(action.position)

        elif action.action_type == 'replace_line':
            line_num = action.position
            if 0 <= line_num < len(self.code_lines):
                self.code_lines[line_num] = action.new_data
                self.cursor_line = line_num
                self.cursor_column = min(self.cursor_column, len(action.new_data))

        self.modified = True

        return True

    def load_file(self, filename: str) -> None:
        """Load text from a file."""

        self.filename = filename
        self.modified = False
        self.cursor_line = 0
        self.cursor_column = 0
        self.undo_stack.clear()
        self.redo_stack.clear()

        with open(filename, 'r', encoding='utf-8', errors='replace', newline='') as f:
            content = f.read()

        self.trailing_newline = content.endswith('\n')
        if self.trailing_newline:
            content = content[:-1]

        self.code_lines = content.split('\n')

        highlighter = SyntaxHighlighter()
        self.language = highlighter.detect_language(filename, '\n'.join(self.code_lines[:100]))

        logger.debug("Loaded %s (%d lines, language %s)", filename, len(self.code_lines), self.language)

    def save_file(self, filename: Optional[str] = None) -> bool:
        """
        Save the text to a file.

        Args:
            filename: Optional filename to save to. If None, uses current filename.

        Returns:
            bool: True if save was successful, False if there is no filename
        """

        save_filename = filename or self.filename
        if not save_filename:
            return False

        try:
            with open(save_filename, 'w', encoding='utf-8', newline='') as f:
                f.write(self.text)
                if self.trailing_newline:
                    f.write('\n')
        except OSError as e:
            raise IOError(f"Failed to save file: {str(e)}") from e

        self.filename = save_filename
        self.modified = False
        return True
