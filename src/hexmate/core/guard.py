"""
Context guard for skipping literals that follow control-flow keywords.
"""

import logging
import re
from typing import Final, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_SKIP_CONTEXTS: Final[Tuple[str, ...]] = ('return', 'case', 'throw', 'goto')
LOOKBEHIND_WINDOW: Final[int] = 20


class ContextGuard:
    """Decides whether a literal at a given offset may be rewritten."""

    def __init__(self, keywords: Iterable[str] = DEFAULT_SKIP_CONTEXTS,
                 window: int = LOOKBEHIND_WINDOW) -> None:
        self.keywords = tuple(k for k in keywords if k)
        self.window = window
        self.pattern: Optional['re.Pattern[str]'] = None

        if self.keywords:
            alternatives = '|'.join(re.escape(k) for k in self.keywords)
            self.pattern = re.compile(rf'\b({alternatives})\s*$')

    def allows(self, text: str, offset: int) -> bool:
        """
        Check whether the literal starting at offset may be rewritten.

        Args:
            text (str): Full document text
            offset (int): Start offset of the literal

        Returns:
            bool: False when a configured keyword is the last token before the literal
        """

        if self.pattern is None:
            return True

        before = text[max(0, offset - self.window):offset]
        match = self.pattern.search(before)
        if match:
            logger.debug("Skipping literal at %d after %r", offset, match.group(1))
            return False

        return True
