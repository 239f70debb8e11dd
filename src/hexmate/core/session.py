"""
Editor session state: the number display mode and decoration toggles.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .buffer import Buffer
from .guard import ContextGuard
from .literals import Base, LiteralMatch, literal_at, scan_literals
from .rewrite import RewriteRequest, compute_edits, cycle_format_edits
from ..config import Settings, save_settings
from ..utils.numfmt import decoration_text, render_hover

logger = logging.getLogger(__name__)


class DisplayMode(Enum):
    """Global number format, cycled by the toggle action."""
    DECIMAL = 'Decimal'
    HEX = 'Hex'
    BINARY = 'Binary'
    OCTAL = 'Octal'

    @property
    def base(self) -> Base:
        return _MODE_BASES[self]

    def next(self) -> 'DisplayMode':
        modes = list(DisplayMode)
        return modes[(modes.index(self) + 1) % len(modes)]


_MODE_BASES = {
    DisplayMode.DECIMAL: Base.DECIMAL,
    DisplayMode.HEX: Base.HEX,
    DisplayMode.BINARY: Base.BINARY,
    DisplayMode.OCTAL: Base.OCTAL,
}


@dataclass(frozen=True)
class Hover:
    """The literal under a position and its annotation."""
    literal: LiteralMatch
    text: str


class Session:
    """
    Process-wide state shared by every action of one editor run.

    The display mode starts at Hex and is never persisted. The
    decorations flag starts from the settings and is written back to the
    settings file whenever it is toggled.
    """

    def __init__(self, settings: Settings,
                 settings_path: Optional[Union[str, Path]] = None) -> None:
        self.settings = settings
        self.settings_path = settings_path
        self.mode = DisplayMode.HEX
        self.decorations_enabled = settings.decorations_enabled

    @property
    def guard(self) -> ContextGuard:
        return ContextGuard(self.settings.skip_contexts)

    def toggle_number_format(self, buffer: Optional[Buffer] = None) -> int:
        """
        Advance the display mode and convert every literal in the buffer to it.

        Returns:
            int: Number of literals rewritten
        """

        self.mode = self.mode.next()
        logger.info("Number format is now %s", self.mode.value)

        if buffer is None:
            return 0

        return buffer.apply_edits(cycle_format_edits(buffer.text, self.mode.base))

    def toggle_decorations(self) -> bool:
        """Flip inline decorations on or off and persist the choice."""

        enabled = not self.decorations_enabled
        save_settings(replace(self.settings, decorations_enabled=enabled), self.settings_path)

        self.decorations_enabled = enabled
        self.settings.decorations_enabled = enabled

        logger.info("Decorations %s", "enabled" if self.decorations_enabled else "disabled")
        return self.decorations_enabled

    def replace_number(self, buffer: Buffer, request: RewriteRequest) -> int:
        """
        Carry out a convert request against a buffer.

        A request without a span works on the literal under the cursor; if
        there is none, nothing happens.

        Returns:
            int: Number of literals rewritten

        Raises:
            RequestError: If the request is malformed
            ApplyError: If the edits cannot be applied
        """

        text = buffer.text
        policy = request.to_policy(text, buffer.cursor_offset)
        if policy is None:
            logger.debug("No literal at cursor offset %d", buffer.cursor_offset)
            return 0

        return buffer.apply_edits(compute_edits(text, policy, self.guard))

    def hover(self, text: str, offset: int) -> Optional[Hover]:
        """Describe the literal touching an offset, if any."""

        literal = literal_at(text, offset)
        if literal is None:
            return None

        return Hover(literal, render_hover(literal.value))

    @property
    def decorations_visible(self) -> bool:
        return self.decorations_enabled and self.settings.dual_display

    def decorations(self, text: str) -> List[Tuple[LiteralMatch, str]]:
        """Inline annotations for every literal, or nothing when they are switched off."""

        if not self.decorations_visible:
            return []

        return [(literal, decoration_text(literal.value)) for literal in scan_literals(text)]
