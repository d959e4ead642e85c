"""Thread-safe facade over a game session for the HTTP layer."""

from __future__ import annotations

import logging
import random
from threading import Lock
from typing import Callable, TypeVar

from bicho.config import GameSettings
from bicho.models.command import CommandResult
from bicho.services.clock import Clock, MonotonicClock
from bicho.services.events import GameEvent
from bicho.services.round_service import RoundOrchestrator

logger = logging.getLogger(__name__)

T = TypeVar("T")

Command = Callable[[RoundOrchestrator], CommandResult]
Render = Callable[[RoundOrchestrator], T]


class GameService:
    """Serializes commands and queries on one orchestrator.

    Every call first lets the clock catch up (``tick``) so reveal steps
    advance as the presentation layer polls. Rendering happens under the same
    lock, so a response never mixes state from two steps.
    """

    def __init__(self, settings: GameSettings, clock: Clock | None = None) -> None:
        self._settings = settings
        self._clock = clock or MonotonicClock()
        self._lock = Lock()
        self._game = self._new_game()

    def _new_game(self) -> RoundOrchestrator:
        return RoundOrchestrator(
            settings=self._settings,
            clock=self._clock,
            rng=random.Random(self._settings.rng_seed),
        )

    @property
    def settings(self) -> GameSettings:
        return self._settings

    @property
    def game(self) -> RoundOrchestrator:
        return self._game

    def snapshot(self, render: Render[T]) -> T:
        with self._lock:
            self._game.tick()
            return render(self._game)

    def execute(self, command: Command, render: Render[T]) -> tuple[CommandResult, T]:
        with self._lock:
            self._game.tick()
            result = command(self._game)
            if not result.accepted:
                logger.debug("Command not applied: %s", result.reason)
            return result, render(self._game)

    def events_since(self, seq: int) -> list[GameEvent]:
        with self._lock:
            self._game.tick()
            return self._game.events.since(seq)

    def reset(self, render: Render[T]) -> T:
        with self._lock:
            logger.info("Game session reset")
            self._game = self._new_game()
            return render(self._game)
