"""
Bulk rewrite engine for converting literals between bases.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .guard import ContextGuard
from .literals import Base, LiteralMatch, format_value, literal_at, scan_literals
from ..exceptions import ApplyError, RequestError

logger = logging.getLogger(__name__)


class Scope(Enum):
    """How many literals a rewrite touches."""
    SINGLE = 'single'
    ALL = 'all'


class MatchRule(Enum):
    """How literals are compared against the anchor in an ALL rewrite."""
    EXACT_TEXT = 'exact'
    EQUIVALENT_VALUE = 'equivalent'


@dataclass(frozen=True)
class Edit:
    """A replacement of the text between two offsets of a snapshot."""
    start: int
    end: int
    replacement: str


@dataclass(frozen=True)
class RewritePolicy:
    """What to rewrite, and into which base."""
    target_base: Base
    scope: Scope
    match_rule: MatchRule
    anchor: LiteralMatch

    def matches(self, literal: LiteralMatch) -> bool:
        """Check a scanned literal against the anchor under the match rule."""

        if self.match_rule is MatchRule.EQUIVALENT_VALUE:
            return literal.value == self.anchor.value

        return literal.raw_text == self.anchor.raw_text


@dataclass(frozen=True)
class RewriteRequest:
    """
    A convert action raised by the UI.

    span is trusted as-is when given; otherwise the literal under the
    cursor is used.
    """
    value: int
    format: str
    original_text: str
    span: Optional[Tuple[int, int]] = None
    all: bool = False
    equivalent: bool = False

    @property
    def target_base(self) -> Base:
        try:
            return Base.from_code(self.format)
        except ValueError as e:
            raise RequestError(str(e)) from e

    def to_policy(self, text: str, cursor: Optional[int] = None) -> Optional[RewritePolicy]:
        """
        Resolve the request against a text snapshot.

        Args:
            text (str): Document text the request applies to
            cursor (int): Cursor offset used when no span was given

        Returns:
            RewritePolicy: The policy, or None when a single rewrite has no target
        """

        if self.value < 0:
            raise RequestError("Value must not be negative")

        target_base = self.target_base
        match_rule = MatchRule.EQUIVALENT_VALUE if self.equivalent else MatchRule.EXACT_TEXT

        if self.all:
            anchor = LiteralMatch(self.original_text, 0, len(self.original_text), self.value)
            return RewritePolicy(target_base, Scope.ALL, match_rule, anchor)

        if self.span is not None:
            start, end = self.span
            anchor = LiteralMatch(self.original_text, start, end, self.value)
            return RewritePolicy(target_base, Scope.SINGLE, match_rule, anchor)

        if cursor is None:
            return None

        found = literal_at(text, cursor)
        if found is None:
            return None

        # The request value wins over the text under the cursor.
        anchor = LiteralMatch(found.raw_text, found.start, found.end, self.value)
        return RewritePolicy(target_base, Scope.SINGLE, match_rule, anchor)


def compute_edits(text: str, policy: RewritePolicy,
                  guard: Optional[ContextGuard] = None) -> List[Edit]:
    """
    Compute the edit set for a rewrite policy.

    Args:
        text (str): Document snapshot
        policy (RewritePolicy): What to rewrite
        guard (ContextGuard): Skip-context check for ALL rewrites

    Returns:
        List[Edit]: Non-overlapping edits in document order
    """

    anchor = policy.anchor

    if policy.scope is Scope.SINGLE:
        return [Edit(anchor.start, anchor.end, format_value(anchor.value, policy.target_base))]

    if guard is None:
        guard = ContextGuard()

    edits = []
    for literal in scan_literals(text):
        if not policy.matches(literal):
            continue

        if not guard.allows(text, literal.start):
            continue

        edits.append(Edit(literal.start, literal.end, format_value(literal.value, policy.target_base)))

    logger.debug(
        "Rewrite of %r (%s) matched %d literals",
        anchor.raw_text, policy.match_rule.value, len(edits)
    )

    return edits


def cycle_format_edits(text: str, base: Base) -> List[Edit]:
    """Convert every literal in the text to one base, without any filtering."""

    return [
        Edit(literal.start, literal.end, format_value(literal.value, base))
        for literal in scan_literals(text)
    ]


def check_edits(text: str, edits: List[Edit]) -> List[Edit]:
    """
    Validate an edit set against a snapshot.

    Returns:
        List[Edit]: The edits sorted by start offset

    Raises:
        ApplyError: If an edit falls outside the text or two edits overlap
    """

    ordered = sorted(edits, key=lambda e: (e.start, e.end))
    pos = 0

    for edit in ordered:
        if edit.start < 0 or edit.end > len(text) or edit.start > edit.end:
            raise ApplyError(f"Edit {edit.start}:{edit.end} is outside the document")

        if edit.start < pos:
            raise ApplyError(f"Edit {edit.start}:{edit.end} overlaps a previous edit")

        pos = edit.end

    return ordered


def apply_to_text(text: str, edits: List[Edit]) -> str:
    """
    Apply an edit set to a snapshot in one pass.

    Offsets refer to the original text, so edits are spliced in order
    without shifting. Nothing is applied unless every edit is valid.
    """

    pieces = []
    pos = 0

    for edit in check_edits(text, edits):
        pieces.append(text[pos:edit.start])
        pieces.append(edit.replacement)
        pos = edit.end

    pieces.append(text[pos:])
    return ''.join(pieces)
