"""
Literal navigation for the code editor.
"""

from typing import List, Optional

from ..core.buffer import Buffer
from ..core.literals import LiteralMatch, literal_at, scan_literals


class LiteralSearch:
    """Finds numeric literals in a buffer relative to its cursor."""

    def __init__(self, buffer: Buffer) -> None:
        self.buffer = buffer

    def find_all(self) -> List[LiteralMatch]:
        """Find every literal in the buffer."""

        return list(scan_literals(self.buffer.text))

    def literal_at_cursor(self) -> Optional[LiteralMatch]:
        """Find the literal under the cursor, if any."""

        return literal_at(self.buffer.text, self.buffer.cursor_offset)

    def find_next(self, offset: Optional[int] = None) -> Optional[LiteralMatch]:
        """
        Find the first literal starting after an offset.

        Args:
            offset (int): Position to search from (defaults to the cursor)

        Returns:
            Optional[LiteralMatch]: The literal, wrapping to the first one at the end
        """

        if offset is None:
            offset = self.buffer.cursor_offset

        results = self.find_all()
        for literal in results:
            if literal.start > offset:
                return literal

        return results[0] if results else None

    def find_previous(self, offset: Optional[int] = None) -> Optional[LiteralMatch]:
        """Find the last literal ending before an offset, wrapping to the last one."""

        if offset is None:
            offset = self.buffer.cursor_offset

        results = self.find_all()
        last_result = None

        for literal in results:
            if literal.end >= offset:
                break

            last_result = literal

        if last_result is None and results:
            return results[-1]

        return last_result

    def move_to(self, literal: LiteralMatch) -> None:
        """Put the cursor on the first character of a literal."""

        self.buffer.move_cursor_to(literal.start)
