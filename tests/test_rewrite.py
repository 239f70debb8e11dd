"""Tests for the rewrite engine."""

import pytest

from hexmate.core.guard import ContextGuard
from hexmate.core.literals import Base, LiteralMatch
from hexmate.core.rewrite import (
    Edit,
    MatchRule,
    RewritePolicy,
    RewriteRequest,
    Scope,
    apply_to_text,
    check_edits,
    compute_edits,
    cycle_format_edits,
)
from hexmate.exceptions import ApplyError, RequestError


def _rewrite(text: str, request: RewriteRequest, guard: ContextGuard = None) -> str:
    policy = request.to_policy(text)
    return apply_to_text(text, compute_edits(text, policy, guard))


def test_all_exact_text_only_touches_identical_spellings() -> None:
    request = RewriteRequest(value=10, format="hex", original_text="10", all=True)
    assert _rewrite("a=10 b=0xA c=10", request) == "a=0xA b=0xA c=0xA"


def test_all_equivalent_value_touches_every_spelling() -> None:
    request = RewriteRequest(value=10, format="dec", original_text="10", all=True, equivalent=True)
    text = "a=10 b=0xA c=10"

    edits = compute_edits(text, request.to_policy(text))

    assert len(edits) == 3
    assert apply_to_text(text, edits) == "a=10 b=10 c=10"


def test_all_rewrite_skips_guarded_contexts() -> None:
    request = RewriteRequest(value=10, format="hex", original_text="10", all=True)
    assert _rewrite("return 10; x=10;", request) == "return 10; x=0xA;"


def test_all_rewrite_with_empty_guard_touches_everything() -> None:
    request = RewriteRequest(value=10, format="hex", original_text="10", all=True)
    assert _rewrite("return 10; x=10;", request, ContextGuard([])) == "return 0xA; x=0xA;"


def test_single_rewrite_uses_span_and_ignores_guard() -> None:
    request = RewriteRequest(value=10, format="hex", original_text="10", span=(7, 9))
    assert _rewrite("return 10; x=10;", request) == "return 0xA; x=10;"


def test_single_rewrite_uses_request_value() -> None:
    request = RewriteRequest(value=255, format="bin", original_text="0xFF", span=(4, 8))
    assert _rewrite("x = 0xFF;", request) == "x = 0b11111111;"


def test_cursor_resolves_literal_when_no_span() -> None:
    request = RewriteRequest(value=255, format="oct", original_text="0xFF")
    policy = request.to_policy("x = 0xFF;", cursor=5)

    assert policy.scope is Scope.SINGLE
    assert policy.match_rule is MatchRule.EXACT_TEXT
    assert (policy.anchor.start, policy.anchor.end) == (4, 8)
    assert compute_edits("x = 0xFF;", policy) == [Edit(4, 8, "0o377")]


def test_no_target_gives_no_policy() -> None:
    request = RewriteRequest(value=1, format="hex", original_text="1")

    assert request.to_policy("x = y;") is None
    assert request.to_policy("x = y;", cursor=2) is None


def test_unknown_format_is_rejected() -> None:
    request = RewriteRequest(value=1, format="base64", original_text="1", all=True)

    with pytest.raises(RequestError):
        request.to_policy("1")


def test_negative_value_is_rejected() -> None:
    request = RewriteRequest(value=-1, format="hex", original_text="1", all=True)

    with pytest.raises(RequestError):
        request.to_policy("1")


def test_policy_matches() -> None:
    anchor = LiteralMatch("10", 0, 2, 10)
    exact = RewritePolicy(Base.HEX, Scope.ALL, MatchRule.EXACT_TEXT, anchor)
    equivalent = RewritePolicy(Base.HEX, Scope.ALL, MatchRule.EQUIVALENT_VALUE, anchor)
    spelled_hex = LiteralMatch("0xA", 5, 8, 10)

    assert not exact.matches(spelled_hex)
    assert equivalent.matches(spelled_hex)


def test_cycle_converts_every_literal_regardless_of_context() -> None:
    text = "a=10 b=0b11 return 7"
    assert apply_to_text(text, cycle_format_edits(text, Base.HEX)) == "a=0xA b=0x3 return 0x7"


def test_cycle_without_literals_is_empty() -> None:
    assert cycle_format_edits("no numbers here", Base.HEX) == []


def test_edits_are_applied_against_original_offsets() -> None:
    text = "1 2 3"
    edits = [Edit(4, 5, "0b11"), Edit(0, 1, "0b1")]

    assert apply_to_text(text, edits) == "0b1 2 0b11"


def test_overlapping_edits_are_rejected() -> None:
    with pytest.raises(ApplyError):
        check_edits("0123456789", [Edit(0, 4, "x"), Edit(3, 5, "y")])


@pytest.mark.parametrize("edit", [Edit(-1, 2, "x"), Edit(8, 11, "x"), Edit(5, 4, "x")])
def test_out_of_range_edits_are_rejected(edit: Edit) -> None:
    with pytest.raises(ApplyError):
        apply_to_text("0123456789", [edit])


def test_adjacent_edits_are_allowed() -> None:
    assert apply_to_text("ab", [Edit(0, 1, "x"), Edit(1, 2, "y")]) == "xy"
