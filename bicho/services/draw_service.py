"""Draw sequencer: five distinct symbols revealed one step at a time."""

from __future__ import annotations

import logging
import random
from enum import Enum

from bicho.models.round import DrawResult, RevealStep
from bicho.models.symbol import SYMBOL_COUNT

logger = logging.getLogger(__name__)

DRAW_SIZE = 5
BONUS_PROBABILITY = 0.30
FORCED_TRIPLE_PROBABILITY = 0.10
FORCED_TRIPLE_POSITIONS = 3
REVEAL_DELAY_SECONDS = 2.0


class DrawPhase(str, Enum):
    IDLE = "IDLE"
    REVEALING = "REVEALING"
    COMPLETE = "COMPLETE"


class DrawSequencer:
    """Produce a round's draw with bonus annotations.

    The whole draw is sampled up front (without replacement) but only the
    revealed prefix is ever exposed. Each revealed position rolls its own
    bonus flag; in a forced-triple round the first three positions are bonus
    whatever their roll.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        bonus_probability: float = BONUS_PROBABILITY,
        forced_triple_probability: float = FORCED_TRIPLE_PROBABILITY,
    ) -> None:
        self._rng = rng or random.Random()
        self._bonus_probability = bonus_probability
        self._forced_triple_probability = forced_triple_probability
        self._phase = DrawPhase.IDLE
        self._pending: list[int] = []
        self._symbols: list[int] = []
        self._flags: list[bool] = []
        self._forced_triple = False

    @property
    def phase(self) -> DrawPhase:
        return self._phase

    @property
    def forced_triple(self) -> bool:
        return self._forced_triple

    @property
    def revealed_count(self) -> int:
        return len(self._symbols)

    @property
    def revealed_symbols(self) -> list[int]:
        return list(self._symbols)

    @property
    def bonus_flags(self) -> list[bool]:
        return list(self._flags)

    def result(self) -> DrawResult:
        return DrawResult(symbols=tuple(self._symbols), bonus_flags=tuple(self._flags))

    def start(self) -> None:
        if self._phase is DrawPhase.REVEALING:
            raise RuntimeError("draw already in progress")
        self._pending = list(self._rng.sample(range(SYMBOL_COUNT), DRAW_SIZE))
        self._forced_triple = self._rng.random() < self._forced_triple_probability
        self._symbols = []
        self._flags = []
        self._phase = DrawPhase.REVEALING
        logger.debug("Draw started (forced triple: %s)", self._forced_triple)

    def reveal_next(self) -> RevealStep:
        if self._phase is not DrawPhase.REVEALING:
            raise RuntimeError(f"cannot reveal while {self._phase.value}")

        position = len(self._symbols)
        symbol = self._pending[position]
        roll = self._rng.random()
        forced = self._forced_triple and position < FORCED_TRIPLE_POSITIONS
        is_bonus = forced or roll < self._bonus_probability

        self._symbols.append(symbol)
        self._flags.append(is_bonus)
        if len(self._symbols) == DRAW_SIZE:
            self._phase = DrawPhase.COMPLETE
            self._pending = []

        return RevealStep(
            position=position,
            symbol=symbol,
            is_bonus=is_bonus,
            revealed_count=len(self._symbols),
        )

    def reset(self) -> None:
        self._phase = DrawPhase.IDLE
        self._pending = []
        self._symbols = []
        self._flags = []
        self._forced_triple = False
