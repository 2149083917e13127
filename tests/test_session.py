"""Tests for session: the typing-session state transitions."""

from __future__ import annotations

import dataclasses
import datetime as dt

import pytest

from metrics import Metrics
from session import (
    SessionState,
    apply_input,
    new_session,
    next_expected_char,
    progress_percent,
    reset,
)


def ms(n: int) -> dt.timedelta:
    return dt.timedelta(milliseconds=n)


def type_through(state: SessionState, text: str, start: dt.datetime, step_ms: int = 200) -> SessionState:
    for i in range(1, len(text) + 1):
        state = apply_input(state, text[:i], start + ms(step_ms * (i - 1)))
    return state


# ---------------------------------------------------------------------------
# new_session
# ---------------------------------------------------------------------------

class TestNewSession:
    def test_defaults(self):
        s = new_session("cat")
        assert s.target_text == "cat"
        assert s.user_input == ""
        assert s.is_typing is False
        assert s.is_complete is False
        assert s.start_time is None
        assert s.metrics == Metrics(wpm=0, accuracy=100, error_count=0, elapsed_seconds=0.0)

    def test_state_is_immutable(self):
        s = new_session("cat")
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.user_input = "c"


# ---------------------------------------------------------------------------
# apply_input
# ---------------------------------------------------------------------------

class TestApplyInput:
    def test_cat_walkthrough(self, t0):
        s = apply_input(new_session("cat"), "c", t0)
        assert s.start_time == t0
        assert s.metrics.error_count == 0
        assert s.is_typing is True
        assert s.is_complete is False

        s = apply_input(s, "cx", t0 + ms(1000))
        assert s.metrics.error_count == 1
        assert s.metrics.accuracy == 50
        assert s.metrics.elapsed_seconds == 1.0

        s = apply_input(s, "cat", t0 + ms(2000))
        assert s.is_complete is True
        assert s.metrics.error_count == 0
        assert s.metrics.accuracy == 100
        assert s.metrics.wpm == 30

    def test_does_not_mutate_previous_state(self, t0):
        before = new_session("cat")
        after = apply_input(before, "c", t0)
        assert before.user_input == ""
        assert after is not before

    def test_empty_target_completes_on_empty_input(self, t0):
        s = apply_input(new_session(""), "", t0)
        assert s.is_complete is True
        assert s.metrics.accuracy == 100
        assert s.start_time is None

    def test_completion_requires_exact_match(self, t0):
        s = type_through(new_session("cat"), "cax", t0)
        assert s.is_complete is False
        s = apply_input(s, "cats", t0 + ms(1000))
        assert s.is_complete is False

    def test_over_typing_is_not_penalised(self, t0):
        s = apply_input(new_session("ab"), "x", t0)
        s = apply_input(s, "abc", t0 + ms(500))
        assert s.metrics.error_count == 0
        assert s.is_complete is False

    def test_backspace_shrinks_input(self, t0):
        s = type_through(new_session("cat"), "cx", t0)
        s = apply_input(s, "c", t0 + ms(500))
        assert s.user_input == "c"
        assert s.metrics.error_count == 0

    def test_clearing_input_stops_typing(self, t0):
        s = apply_input(new_session("cat"), "c", t0)
        s = apply_input(s, "", t0 + ms(500))
        assert s.is_typing is False
        assert s.start_time == t0

    def test_clock_going_backwards_clamps_elapsed(self, t0):
        s = apply_input(new_session("cat"), "c", t0)
        s = apply_input(s, "ca", t0 - ms(500))
        assert s.metrics.elapsed_seconds == 0.0
        assert s.metrics.wpm == 0


class TestStartTimeLatching:
    def test_latched_on_first_keystroke(self, t0):
        s = apply_input(new_session("cat"), "c", t0)
        assert s.start_time == t0

    def test_never_changes_afterwards(self, t0):
        s = apply_input(new_session("cat"), "c", t0)
        s = apply_input(s, "ca", t0 + ms(100))
        s = apply_input(s, "c", t0 + ms(200))
        assert s.start_time == t0

    def test_relatched_after_clearing(self, t0):
        s = apply_input(new_session("cat"), "c", t0)
        s = apply_input(s, "", t0 + ms(60_000))
        s = apply_input(s, "c", t0 + ms(120_000))
        assert s.start_time == t0 + ms(120_000)
        assert s.metrics.elapsed_seconds == 0.0
        assert s.metrics.wpm == 0

    def test_idle_gap_before_clearing_is_not_counted(self, t0):
        s = apply_input(new_session("cat"), "c", t0)
        s = apply_input(s, "", t0 + ms(60_000))
        s = apply_input(s, "c", t0 + ms(120_000))
        s = apply_input(s, "ca", t0 + ms(121_000))
        assert s.metrics.elapsed_seconds == 1.0
        assert s.metrics.wpm == 60

    def test_multi_char_paste_does_not_latch(self, t0):
        s = apply_input(new_session("cat"), "ca", t0)
        assert s.start_time is None
        assert s.metrics.elapsed_seconds == 0
        assert s.metrics.wpm == 0

    def test_empty_input_does_not_latch(self, t0):
        assert apply_input(new_session("cat"), "", t0).start_time is None


class TestCompletionLock:
    def test_further_input_is_ignored(self, t0):
        done = type_through(new_session("cat"), "cat", t0)
        assert done.is_complete is True
        for value in ["", "ca", "cats", "dog"]:
            assert apply_input(done, value, t0 + ms(10_000)) is done

    def test_empty_target_lock(self, t0):
        done = apply_input(new_session(""), "", t0)
        assert apply_input(done, "x", t0 + ms(100)) is done


# ---------------------------------------------------------------------------
# reset
# ---------------------------------------------------------------------------

class TestReset:
    @pytest.mark.parametrize("typed", ["", "c", "cx", "cat", "catsss"])
    def test_restores_defaults(self, t0, typed):
        s = type_through(new_session("cat"), typed, t0)
        r = reset(s)
        assert r == new_session("cat")
        assert r.user_input == ""
        assert r.is_complete is False
        assert r.start_time is None
        assert r.metrics.wpm == 0
        assert r.metrics.accuracy == 100
        assert r.metrics.error_count == 0

    def test_unlocks_completed_session(self, t0):
        done = type_through(new_session("cat"), "cat", t0)
        s = apply_input(reset(done), "c", t0 + ms(5000))
        assert s.user_input == "c"
        assert s.start_time == t0 + ms(5000)


# ---------------------------------------------------------------------------
# Renderer helpers
# ---------------------------------------------------------------------------

class TestRenderHelpers:
    def test_next_expected_char(self, t0):
        s = new_session("cat")
        assert next_expected_char(s) == "c"
        s = apply_input(s, "cx", t0)
        assert next_expected_char(s) == "t"

    def test_next_expected_char_at_end(self, t0):
        s = type_through(new_session("ca"), "cat", t0)
        assert next_expected_char(s) is None

    def test_progress(self, t0):
        s = apply_input(new_session("abcd"), "a", t0)
        assert progress_percent(s) == 25
