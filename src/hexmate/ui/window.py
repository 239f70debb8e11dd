"""
Window management module for the editor UI.
"""

import bisect
import curses
import os
import time
from typing import Dict, List, Optional, TYPE_CHECKING

from ..core.buffer import Buffer
from ..core.session import Session
from ..core.syntax import SyntaxHighlighter
from ..utils.numfmt import bit_row

if TYPE_CHECKING:
    from .input_handler import InputHandler


def safe_addstr(window: 'curses.window', y: int, x: int, string: str, attr: int = 0) -> None:
    """Safely add a string to a window, truncating if necessary."""

    height, width = window.getmaxyx()
    if y >= height or x >= width:
        return

    available = width - x
    if available <= 0:
        return

    if len(string) > available:
        string = string[:available]

    try:
        window.addstr(y, x, string, attr)
    except curses.error:
        pass


class WindowManager:
    """Manages the curses windows and UI layout."""

    STATUS_MESSAGE_DURATION = 3
    LINE_NUMBER_WIDTH = 6
    HOVER_HEIGHT = 10

    def __init__(self, stdscr: 'curses.window', session: Session):
        self.stdscr = stdscr
        self.session = session
        self.height, self.width = stdscr.getmaxyx()

        if self.height < 16 or self.width < 40:
            raise ValueError(f"Terminal too small. Minimum size: 40x16, Current size: {self.width}x{self.height}")

        self.buffers: List[Buffer] = []
        self.highlighters: Dict[int, SyntaxHighlighter] = {}
        self.active_buffer_index = 0
        self.status_window: Optional['curses.window'] = None
        self.code_window: Optional['curses.window'] = None
        self.line_numbers_window: Optional['curses.window'] = None
        self.hover_window: Optional['curses.window'] = None
        self.tab_window: Optional['curses.window'] = None
        self.dialog_window: Optional['curses.window'] = None
        self.input_handler: Optional['InputHandler'] = None
        self.status_message: Optional[str] = None
        self.status_message_time = 0.0

        curses.start_color()
        curses.init_pair(1, curses.COLOR_WHITE, -1)  # Status bar
        curses.init_pair(2, curses.COLOR_YELLOW, -1)  # Hover panel
        curses.init_pair(3, 8, -1)  # Decorations (gray)
        curses.init_pair(6, curses.COLOR_WHITE, -1)  # Dialog
        curses.init_pair(7, curses.COLOR_RED, -1)   # Error messages
        curses.init_pair(10, 8, -1)  # Line numbers (gray, default background)

        self.setup_windows()

    @property
    def content_height(self) -> int:
        return self.height - 3 - self.HOVER_HEIGHT

    def setup_windows(self) -> None:
        """Create and position all windows."""

        if self.height < 16 or self.width < 40:
            return

        self.tab_window = curses.newwin(2, self.width, 0, 0)

        self.line_numbers_window = curses.newwin(
            self.content_height,
            self.LINE_NUMBER_WIDTH,
            2,
            0
        )

        self.code_window = curses.newwin(
            self.content_height,
            self.width - self.LINE_NUMBER_WIDTH,
            2,
            self.LINE_NUMBER_WIDTH
        )

        self.hover_window = curses.newwin(
            self.HOVER_HEIGHT,
            self.width,
            2 + self.content_height,
            0
        )

        self.status_window = curses.newwin(1, self.width, self.height - 1, 0)

    def refresh_all(self) -> None:
        """Refresh all windows."""

        self.draw_tabs()

        if self.input_handler and self.input_handler.convert_mode:
            self.draw_convert_dialog()
        elif self.buffers:
            self.draw_line_numbers()
            self.draw_code_view()
            self.draw_hover()

        self.draw_status()
        curses.doupdate()

    def draw_tabs(self) -> None:
        """Draw the tab bar with open files."""

        if not self.tab_window:
            return

        self.tab_window.clear()
        tab_bar = ""
        for i, buf in enumerate(self.buffers):
            name = os.path.basename(buf.filename) if buf.filename else f"[New File {i+1}]"
            if i == self.active_buffer_index:
                tab_bar += f"[{i+1}:{name}] "
                continue

            tab_bar += f" {i+1}:{name} "

        safe_addstr(self.tab_window, 0, 0, tab_bar)

        self.tab_window.hline(1, 0, curses.ACS_HLINE, self.width)
        self.tab_window.noutrefresh()

    def _start_line(self, buf: Buffer) -> int:
        return max(0, buf.cursor_line - (self.content_height // 2))

    def draw_line_numbers(self) -> None:
        """Draw line numbers for the code view."""

        if not self.line_numbers_window or not self.buffers:
            return

        buf = self.buffers[self.active_buffer_index]
        self.line_numbers_window.clear()

        start_line = self._start_line(buf)

        for i in range(self.content_height):
            line_num = start_line + i
            if line_num >= buf.get_line_count():
                break

            attr = curses.color_pair(10)
            if line_num == buf.cursor_line:
                attr |= curses.A_BOLD

            safe_addstr(self.line_numbers_window, i, 0, f"{line_num + 1:4d} ", attr)

        self.line_numbers_window.noutrefresh()

    def get_highlighter(self, buf: Buffer) -> SyntaxHighlighter:
        """Get the highlighter for a buffer, detecting its language on first use."""

        key = id(buf)
        if key not in self.highlighters:
            highlighter = SyntaxHighlighter()
            highlighter.init_colors()
            if buf.filename:
                highlighter.detect_language(buf.filename, '\n'.join(buf.code_lines[:100]))
            self.highlighters[key] = highlighter

        return self.highlighters[key]

    def _line_annotations(self, buf: Buffer) -> Dict[int, str]:
        """Collect decoration text per line number."""

        decorations = self.session.decorations(buf.text)
        if not decorations:
            return {}

        line_starts = []
        offset = 0
        for line in buf.code_lines:
            line_starts.append(offset)
            offset += len(line) + 1

        annotations: Dict[int, str] = {}
        for literal, text in decorations:
            line_num = bisect.bisect_right(line_starts, literal.start) - 1
            annotations[line_num] = annotations.get(line_num, '') + text

        return annotations

    def draw_code_view(self) -> None:
        """Draw the code view with highlighted literals and inline annotations."""

        if not self.code_window or not self.buffers:
            return

        buf = self.buffers[self.active_buffer_index]
        highlighter = self.get_highlighter(buf)
        annotations = self._line_annotations(buf)

        self.code_window.clear()
        self.code_window.bkgd(' ', curses.A_NORMAL)

        start_line = self._start_line(buf)

        for i in range(self.content_height):
            line_num = start_line + i
            if line_num >= buf.get_line_count():
                break

            line = buf.get_code_line(line_num)
            is_cursor_line = (line_num == buf.cursor_line)

            x_pos = 0
            for text, color in highlighter.highlight_line(line):
                attr = color
                if is_cursor_line:
                    attr |= curses.A_BOLD

                safe_addstr(self.code_window, i, x_pos, text, attr)
                x_pos += len(text)

            if line_num in annotations:
                safe_addstr(self.code_window, i, x_pos, annotations[line_num],
                            curses.color_pair(3) | curses.A_DIM)

            if is_cursor_line:
                column = buf.cursor_column
                char = line[column] if column < len(line) else ' '
                try:
                    self.code_window.addch(i, column, ord(char), curses.A_REVERSE)
                except curses.error:
                    pass

        self.code_window.noutrefresh()

    def draw_hover(self) -> None:
        """Draw the conversion panel for the literal under the cursor."""

        if not self.hover_window or not self.buffers:
            return

        buf = self.buffers[self.active_buffer_index]
        self.hover_window.clear()
        self.hover_window.hline(0, 0, curses.ACS_HLINE, self.width)

        hover = self.session.hover(buf.text, buf.cursor_offset)
        if hover is None:
            safe_addstr(self.hover_window, 1, 1, "No number under cursor", curses.color_pair(10))
            self.hover_window.noutrefresh()
            return

        lines = hover.text.split('\n')
        lines.append(f"Bits: {bit_row(hover.literal.value)}")

        attr = curses.color_pair(2)
        for i, text in enumerate(lines[:self.HOVER_HEIGHT - 1]):
            safe_addstr(self.hover_window, i + 1, 1, text, attr | (curses.A_BOLD if i == 0 else 0))

        self.hover_window.noutrefresh()

    def draw_convert_dialog(self) -> None:
        """Draw the convert dialog."""

        if not self.dialog_window:
            dialog_height = 9
            dialog_width = min(80, self.width - 4)
            dialog_y = (self.height - dialog_height) // 2
            dialog_x = (self.width - dialog_width) // 2
            self.dialog_window = curses.newwin(dialog_height, dialog_width, dialog_y, dialog_x)
        else:
            _, dialog_width = self.dialog_window.getmaxyx()

        self.dialog_window.clear()
        self.dialog_window.attron(curses.color_pair(6) | curses.A_BOLD)
        self.dialog_window.box()

        title = " Convert "
        title_x = (self.dialog_window.getmaxyx()[1] - len(title)) // 2
        safe_addstr(self.dialog_window, 0, title_x, title)

        handler = self.input_handler
        if handler is not None and handler.convert_target is not None:
            safe_addstr(self.dialog_window, 2, 2, f"Literal: {handler.convert_target.raw_text}")
            safe_addstr(self.dialog_window, 3, 2, f"Target:  {handler.convert_base.name.capitalize()}")
            safe_addstr(self.dialog_window, 4, 2, f"Scope:   {handler.convert_scope}")

        safe_addstr(self.dialog_window, 6, 2, "d/h/b/o: Target base")
        safe_addstr(self.dialog_window, 7, 2, "Tab: Change scope")
        safe_addstr(self.dialog_window, 6, dialog_width // 2, "Enter: Convert")
        safe_addstr(self.dialog_window, 7, dialog_width // 2, "Esc: Cancel")

        self.dialog_window.attroff(curses.color_pair(6) | curses.A_BOLD)
        self.dialog_window.noutrefresh()

    def draw_status(self) -> None:
        """Draw the status bar."""

        if not self.status_window:
            return

        self.status_window.clear()
        self.status_window.attron(curses.color_pair(1) | curses.A_BOLD | curses.A_REVERSE)

        if not self.buffers:
            safe_addstr(self.status_window, 0, 0, " No file opened")
            self.status_window.attroff(curses.color_pair(1) | curses.A_BOLD | curses.A_REVERSE)
            self.status_window.noutrefresh()
            return

        buf = self.buffers[self.active_buffer_index]

        if self.status_message:
            if self.status_message_time == 0:
                self.status_message_time = time.time()
            elif time.time() - self.status_message_time > self.STATUS_MESSAGE_DURATION:
                self.status_message = None
                self.status_message_time = 0
            else:
                if self.status_message.startswith("Error:"):
                    self.status_window.attron(curses.color_pair(7) | curses.A_BOLD)
                safe_addstr(self.status_window, 0, 0, " " + self.status_message)
                if self.status_message.startswith("Error:"):
                    self.status_window.attroff(curses.color_pair(7) | curses.A_BOLD)
                self.status_window.attroff(curses.color_pair(1) | curses.A_BOLD | curses.A_REVERSE)
                self.status_window.noutrefresh()
                return

        name = os.path.basename(buf.filename) if buf.filename else '[No Name]'
        status = f" {name} "
        status += f"[{buf.language or 'text'}] "
        status += f"[{self.session.mode.value}] "
        status += "[Deco On] " if self.session.decorations_enabled else "[Deco Off] "

        if buf.modified:
            status += "[Modified] "

        pos_info = f"Line: {buf.cursor_line + 1} "
        pos_info += f"Col: {buf.cursor_column + 1}"

        available_width = self.width - len(pos_info) - 1
        if len(status) > available_width:
            status = status[:available_width-3] + "... "
        else:
            status += " " * (available_width - len(status))

        safe_addstr(self.status_window, 0, 0, status + pos_info)
        self.status_window.attroff(curses.color_pair(1) | curses.A_BOLD | curses.A_REVERSE)
        self.status_window.noutrefresh()

    def set_status(self, message: str) -> None:
        """Show a message in the status bar for a few seconds."""

        self.status_message = message
        self.status_message_time = 0.0

    def add_buffer(self, buf: Buffer) -> None:
        """Add a new buffer to the editor."""

        self.buffers.append(buf)
        self.active_buffer_index = len(self.buffers) - 1

    def switch_buffer(self, index: int) -> bool:
        """Switch to the buffer at the given index."""

        if index < 0 or index >= len(self.buffers):
            return False

        self.active_buffer_index = index
        buf = self.buffers[index]
        name = os.path.basename(buf.filename) if buf.filename else '[No Name]'
        self.set_status(f"Switched to: {name}")
        return True

    def get_active_buffer(self) -> Optional[Buffer]:
        """Get the currently active buffer."""

        if not self.buffers or self.active_buffer_index < 0 or self.active_buffer_index >= len(self.buffers):
            return None

        return self.buffers[self.active_buffer_index]

    def resize(self) -> None:
        """Handle terminal resize events."""

        self.height, self.width = self.stdscr.getmaxyx()

        if self.height < 16 or self.width < 40:
            self.set_status("Error: Terminal too small")
            return

        self.dialog_window = None
        self.setup_windows()
