"""Clocks used to schedule reveal steps."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float: ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Virtual time that only moves when told to.

    ``advance`` has the same signature as ``time.sleep`` so it can be handed
    to ``RoundOrchestrator.run_until_settled`` as the sleep function.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("cannot move a clock backwards")
        self._now += float(seconds)
