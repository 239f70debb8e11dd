"""
Input handler module for processing keyboard events.
"""

import curses
import logging
from typing import Callable, Dict, Final, List, Optional

from ..core.literals import Base, LiteralMatch
from ..core.rewrite import RewriteRequest
from ..exceptions import HexMateError
from ..utils.search import LiteralSearch
from .window import WindowManager

logger = logging.getLogger(__name__)

CONVERT_SCOPES: Final[List[str]] = ["This", "All", "All ≡"]

CONVERT_KEYS: Final[Dict[int, Base]] = {
    ord('d'): Base.DECIMAL,
    ord('h'): Base.HEX,
    ord('b'): Base.BINARY,
    ord('o'): Base.OCTAL,
}

UNSAVED_CHANGES_STATUS_MESSAGE: Final[str] = "Buffer has unsaved changes. Press Ctrl+W to save or Ctrl+X again to discard changes."
CONVERT_STATUS_MESSAGE: Final[str] = "Convert mode. d/h/b/o: target, Tab: scope, Enter: convert, Esc: cancel"
NO_LITERAL_STATUS_MESSAGE: Final[str] = "No number under cursor"


class InputHandler:
    """Handles keyboard input and executes corresponding actions."""

    def __init__(self, window_manager: WindowManager) -> None:
        self.window_manager = window_manager
        self.window_manager.input_handler = self
        self.session = window_manager.session
        self.convert_mode = False
        self.convert_target: Optional[LiteralMatch] = None
        self.convert_base = Base.HEX
        self.convert_scope = CONVERT_SCOPES[0]
        self.quit_requested = False
        self.command_handlers: Dict[int, Callable[[], None]] = self._setup_handlers()

    def _setup_handlers(self) -> Dict[int, Callable[[], None]]:
        """Set up the keyboard command handlers."""

        return {
            curses.KEY_LEFT: self._move_left,
            curses.KEY_RIGHT: self._move_right,
            curses.KEY_UP: self._move_up,
            curses.KEY_DOWN: self._move_down,
            curses.KEY_HOME: self._move_line_start,
            curses.KEY_END: self._move_line_end,
            curses.KEY_PPAGE: self._page_up,
            curses.KEY_NPAGE: self._page_down,

            curses.KEY_DC: self._delete_char,
            curses.KEY_BACKSPACE: self._backspace,
            127: self._backspace,
            ord('\n'): self._handle_enter,
            ord('\t'): self._handle_tab,

            ord('x') & 0x1f: self._quit,  # Ctrl + X (quit key)
            ord('w') & 0x1f: self._save,  # Ctrl + W (save key)
            ord('b') & 0x1f: self._undo,  # Ctrl + B (undo key)
            ord('y') & 0x1f: self._redo,  # Ctrl + Y (redo key)
            ord('t') & 0x1f: self._toggle_number_format,  # Ctrl + T (cycle number format)
            ord('d') & 0x1f: self._toggle_decorations,  # Ctrl + D (toggle decorations)
            ord('r') & 0x1f: self._start_convert,  # Ctrl + R (convert number)
            ord('n') & 0x1f: self._find_next,  # Ctrl + N (next number)
            ord('p') & 0x1f: self._find_previous,  # Ctrl + P (previous number)
        }

    def handle_input(self, ch: int) -> bool:
        """Handle a single keyboard input. Returns False if should quit."""

        if self.convert_mode:
            self._handle_convert_input(ch)
            return True

        if ch == 27:
            next_ch = self.window_manager.stdscr.getch()
            if ord('1') <= next_ch <= ord('9'):
                self.window_manager.switch_buffer(next_ch - ord('1'))
            return True

        buf = self.window_manager.get_active_buffer()
        if not buf:
            return True

        if ch in self.command_handlers:
            self.command_handlers[ch]()
            return not self.quit_requested

        if 32 <= ch <= 126:  # Printable characters
            buf.insert_text(buf.cursor_line, buf.cursor_column, chr(ch))

        return True

    def _handle_convert_input(self, ch: int) -> None:
        """Handle keys while the convert dialog is open."""

        if ch == ord('\n'):
            self._execute_convert()
            return

        if ch == 27:
            self._end_convert()
            return

        if ch == 9:
            index = CONVERT_SCOPES.index(self.convert_scope)
            self.convert_scope = CONVERT_SCOPES[(index + 1) % len(CONVERT_SCOPES)]
            return

        if ch in CONVERT_KEYS:
            self.convert_base = CONVERT_KEYS[ch]

    def _start_convert(self) -> None:
        """Open the convert dialog for the literal under the cursor."""

        buf = self.window_manager.get_active_buffer()
        if not buf:
            return

        target = LiteralSearch(buf).literal_at_cursor()
        if target is None:
            self.window_manager.set_status(NO_LITERAL_STATUS_MESSAGE)
            return

        self.convert_target = target
        self.convert_mode = True
        self.window_manager.set_status(CONVERT_STATUS_MESSAGE)

    def _end_convert(self) -> None:
        self.convert_mode = False
        self.convert_target = None
        self.window_manager.dialog_window = None

    def build_request(self) -> Optional[RewriteRequest]:
        """Turn the dialog state into a rewrite request."""

        target = self.convert_target
        if target is None:
            return None

        return RewriteRequest(
            value=target.value,
            format=self.convert_base.code,
            original_text=target.raw_text,
            span=(target.start, target.end),
            all=self.convert_scope != CONVERT_SCOPES[0],
            equivalent=self.convert_scope == CONVERT_SCOPES[2],
        )

    def _execute_convert(self) -> None:
        """Run the rewrite chosen in the convert dialog."""

        buf = self.window_manager.get_active_buffer()
        request = self.build_request()
        self._end_convert()

        if not buf or request is None:
            return

        try:
            count = self.session.replace_number(buf, request)
        except HexMateError as e:
            logger.warning("Convert failed: %s", e)
            self.window_manager.set_status(f"Error: {e}")
            return

        self.window_manager.set_status(f"Converted {count} occurrence{'s' if count != 1 else ''}.")

    def _toggle_number_format(self) -> None:
        """Cycle the display mode and rewrite the buffer in it."""

        buf = self.window_manager.get_active_buffer()

        try:
            count = self.session.toggle_number_format(buf)
        except HexMateError as e:
            logger.warning("Number format toggle failed: %s", e)
            self.window_manager.set_status(f"Error: {e}")
            return

        self.window_manager.set_status(f"Number format: {self.session.mode.value} ({count} converted)")

    def _toggle_decorations(self) -> None:
        """Switch inline annotations on or off."""

        try:
            enabled = self.session.toggle_decorations()
        except HexMateError as e:
            logger.warning("Could not save decorations setting: %s", e)
            self.window_manager.set_status(f"Error: {e}")
            return

        self.window_manager.set_status("Decorations enabled" if enabled else "Decorations disabled")

    def _find_next(self) -> None:
        """Move the cursor to the next number."""

        self._jump(forward=True)

    def _find_previous(self) -> None:
        """Move the cursor to the previous number."""

        self._jump(forward=False)

    def _jump(self, forward: bool) -> None:
        buf = self.window_manager.get_active_buffer()
        if not buf:
            return

        search = LiteralSearch(buf)
        literal = search.find_next() if forward else search.find_previous()
        if literal is None:
            self.window_manager.set_status("No numbers in buffer")
            return

        search.move_to(literal)

    def _move_left(self) -> None:
        """Move cursor left."""

        buf = self.window_manager.get_active_buffer()
        if not buf:
            return

        if buf.cursor_column > 0:
            buf.cursor_column -= 1
            return

        if buf.cursor_line > 0:
            buf.cursor_line -= 1
            buf.cursor_column = len(buf.get_code_line(buf.cursor_line))

    def _move_right(self) -> None:
        """Move cursor right."""

        buf = self.window_manager.get_active_buffer()
        if not buf:
            return

        line = buf.get_code_line(buf.cursor_line)
        if buf.cursor_column < len(line):
            buf.cursor_column += 1
            return

        if buf.cursor_line < buf.get_line_count() - 1:
            buf.cursor_line += 1
            buf.cursor_column = 0

    def _move_up(self) -> None:
        """Move cursor up one line."""

        buf = self.window_manager.get_active_buffer()
        if not buf or buf.cursor_line == 0:
            return

        buf.cursor_line -= 1
        buf.cursor_column = min(buf.cursor_column, len(buf.get_code_line(buf.cursor_line)))

    def _move_down(self) -> None:
        """Move cursor down one line."""

        buf = self.window_manager.get_active_buffer()
        if not buf or buf.cursor_line >= buf.get_line_count() - 1:
            return

        buf.cursor_line += 1
        buf.cursor_column = min(buf.cursor_column, len(buf.get_code_line(buf.cursor_line)))

    def _move_line_start(self) -> None:
        """Move cursor to start of line."""

        buf = self.window_manager.get_active_buffer()
        if buf:
            buf.cursor_column = 0

    def _move_line_end(self) -> None:
        """Move cursor to end of line."""

        buf = self.window_manager.get_active_buffer()
        if buf:
            buf.cursor_column = len(buf.get_code_line(buf.cursor_line))

    def _page_up(self) -> None:
        """Move cursor up one page."""

        buf = self.window_manager.get_active_buffer()
        if not buf:
            return

        buf.cursor_line = max(0, buf.cursor_line - self.window_manager.content_height)
        buf.cursor_column = min(buf.cursor_column, len(buf.get_code_line(buf.cursor_line)))

    def _page_down(self) -> None:
        """Move cursor down one page."""

        buf = self.window_manager.get_active_buffer()
        if not buf:
            return

        buf.cursor_line = min(buf.get_line_count() - 1, buf.cursor_line + self.window_manager.content_height)
        buf.cursor_column = min(buf.cursor_column, len(buf.get_code_line(buf.cursor_line)))

    def _delete_char(self) -> None:
        """Delete the character under the cursor."""

        buf = self.window_manager.get_active_buffer()
        if not buf:
            return

        line = buf.get_code_line(buf.cursor_line)
        if buf.cursor_column < len(line):
            buf.delete_text(buf.cursor_line, buf.cursor_column, buf.cursor_column + 1)
            return

        if buf.cursor_line < buf.get_line_count() - 1:
            column = buf.cursor_column
            buf.join_with_previous(buf.cursor_line + 1)
            buf.cursor_column = column

    def _backspace(self) -> None:
        """Delete the character before the cursor."""

        buf = self.window_manager.get_active_buffer()
        if not buf:
            return

        if buf.cursor_column > 0:
            buf.delete_text(buf.cursor_line, buf.cursor_column - 1, buf.cursor_column)
            return

        if buf.cursor_line > 0:
            buf.join_with_previous(buf.cursor_line)

    def _handle_enter(self) -> None:
        """Split the line at the cursor."""

        buf = self.window_manager.get_active_buffer()
        if buf:
            buf.split_line(buf.cursor_line, buf.cursor_column)

    def _handle_tab(self) -> None:
        """Insert four spaces."""

        buf = self.window_manager.get_active_buffer()
        if buf:
            buf.insert_text(buf.cursor_line, buf.cursor_column, "    ")

    def _undo(self) -> None:
        buf = self.window_manager.get_active_buffer()
        if buf and not buf.undo():
            self.window_manager.set_status("Nothing to undo")

    def _redo(self) -> None:
        buf = self.window_manager.get_active_buffer()
        if buf and not buf.redo():
            self.window_manager.set_status("Nothing to redo")

    def _quit(self) -> None:
        """Quit, asking once if there are unsaved changes."""

        if any(buf.modified for buf in self.window_manager.buffers) and \
                self.window_manager.status_message != UNSAVED_CHANGES_STATUS_MESSAGE:
            self.window_manager.set_status(UNSAVED_CHANGES_STATUS_MESSAGE)
            return

        self.quit_requested = True

    def _save(self) -> None:
        """Save the active buffer."""

        buf = self.window_manager.get_active_buffer()
        if not buf:
            return

        try:
            if buf.save_file():
                self.window_manager.set_status(f"Saved {buf.filename}")
                return
        except IOError as e:
            self.window_manager.set_status(f"Error: {e}")
            return

        self.window_manager.set_status("Error: No filename")
