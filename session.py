from __future__ import annotations

from dataclasses import dataclass, field, replace
import datetime as dt
import logging

from metrics import Metrics, compute_metrics, progress_percent as _progress_percent


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    target_text: str
    user_input: str = ""
    is_typing: bool = False
    is_complete: bool = False
    start_time: dt.datetime | None = None
    metrics: Metrics = field(default_factory=Metrics)


def new_session(target_text: str) -> SessionState:
    return SessionState(target_text=target_text)


def apply_input(state: SessionState, new_value: str, now: dt.datetime) -> SessionState:
    """Return the state that follows ``state`` once the entry field holds ``new_value``.

    ``new_value`` is the whole field content, not a delta. A completed
    session ignores all further input until it is reset. ``start_time`` is
    latched whenever a single character is typed into an empty field, so
    clearing the field and starting over restarts the clock.
    """
    if state.is_complete:
        return state

    is_first_keystroke = state.user_input == "" and len(new_value) == 1
    start_time = now if is_first_keystroke else state.start_time
    if is_first_keystroke:
        logger.debug("Session started at %s", now.isoformat())

    elapsed_s = 0.0
    if start_time is not None:
        elapsed_s = max((now - start_time).total_seconds(), 0.0)

    metrics = compute_metrics(new_value, state.target_text, elapsed_s)
    is_complete = new_value == state.target_text
    if is_complete:
        logger.info(
            "Session complete: %d WPM, %d%% accuracy, %d errors in %.1fs",
            metrics.wpm,
            metrics.accuracy,
            metrics.error_count,
            metrics.elapsed_seconds,
        )

    return replace(
        state,
        user_input=new_value,
        is_typing=len(new_value) > 0,
        is_complete=is_complete,
        start_time=start_time,
        metrics=metrics,
    )


def reset(state: SessionState) -> SessionState:
    logger.debug("Session reset")
    return new_session(state.target_text)


def next_expected_char(state: SessionState) -> str | None:
    if len(state.user_input) < len(state.target_text):
        return state.target_text[len(state.user_input)]
    return None


def progress_percent(state: SessionState) -> int:
    return _progress_percent(state.user_input, state.target_text)
