from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math


class CharState(str, Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    CURRENT = "current"


@dataclass(frozen=True)
class Metrics:
    wpm: int = 0
    accuracy: int = 100
    error_count: int = 0
    elapsed_seconds: float = 0.0


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def count_words(typed_text: str) -> int:
    # An empty split still yields one token.
    return max(1, len(typed_text.split()))


def count_errors(typed_text: str, target_text: str) -> int:
    errors = 0
    for i in range(min(len(typed_text), len(target_text))):
        if typed_text[i] != target_text[i]:
            errors += 1
    return errors


def compute_metrics(typed_text: str, target_text: str, elapsed_s: float) -> Metrics:
    """Derive all four metrics for the current input in one go.

    Characters typed past the end of the target are not counted as errors,
    but they do count toward the accuracy denominator.
    """
    total_typed = len(typed_text)
    wpm = round_half_up(count_words(typed_text) / elapsed_s * 60) if elapsed_s > 0 else 0
    errors = count_errors(typed_text, target_text)
    if total_typed > 0:
        accuracy = max(0, round_half_up((total_typed - errors) / total_typed * 100))
    else:
        accuracy = 100

    return Metrics(
        wpm=wpm,
        accuracy=accuracy,
        error_count=errors,
        elapsed_seconds=elapsed_s,
    )


def classify_chars(typed_text: str, target_text: str) -> list[CharState]:
    states = []
    for i, ch in enumerate(target_text):
        if i < len(typed_text):
            if typed_text[i] == ch:
                states.append(CharState.CORRECT)
            else:
                states.append(CharState.INCORRECT)
        elif i == len(typed_text):
            states.append(CharState.CURRENT)
        else:
            states.append(CharState.PENDING)
    return states


def progress_percent(typed_text: str, target_text: str) -> int:
    if not target_text:
        return 100
    return min(100, round_half_up(len(typed_text) / len(target_text) * 100))
