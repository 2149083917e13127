from __future__ import annotations

import datetime as dt

import pytest


T0 = dt.datetime(2026, 1, 1, 12, 0, 0, tzinfo=dt.timezone.utc)


class FakeClock:
    def __init__(self, start: dt.datetime = T0) -> None:
        self.now = start

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += dt.timedelta(milliseconds=ms)


@pytest.fixture
def t0() -> dt.datetime:
    return T0


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
