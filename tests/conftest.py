from __future__ import annotations

import dataclasses
import random
from collections.abc import Iterable, Sequence

import pytest

from bicho import create_app
from bicho.config import GameSettings
from bicho.services.clock import ManualClock
from bicho.services.draw_service import DrawSequencer
from bicho.services.round_service import RoundOrchestrator

HIT = 0.0
MISS = 0.99


class ScriptedRng:
    """Replays queued draws and rolls, then falls back to a seeded generator."""

    def __init__(
        self,
        draws: Iterable[Sequence[int]] = (),
        rolls: Iterable[float] = (),
        seed: int = 0,
    ) -> None:
        self._fallback = random.Random(seed)
        self._draws = [list(d) for d in draws]
        self._rolls = list(rolls)

    def sample(self, population, k):
        if self._draws:
            return self._draws.pop(0)
        return self._fallback.sample(population, k)

    def random(self) -> float:
        if self._rolls:
            return self._rolls.pop(0)
        return self._fallback.random()

    def randint(self, a: int, b: int) -> int:
        return self._fallback.randint(a, b)


def rolls_for(flags: Sequence[bool], forced_triple: bool = False) -> list[float]:
    """Rolls for one round: the forced-triple trial, then one per reveal."""

    return [HIT if forced_triple else MISS] + [HIT if flag else MISS for flag in flags]


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def settings() -> GameSettings:
    return GameSettings(rng_seed=7)


@pytest.fixture
def make_game(clock, settings):
    def _make(
        draws: Iterable[Sequence[int]] = (),
        flags: Sequence[bool] | None = None,
        forced_triple: bool = False,
        rolls: Iterable[float] | None = None,
        **overrides,
    ) -> RoundOrchestrator:
        if rolls is None:
            rolls = rolls_for(flags, forced_triple) if flags is not None else ()
        game_settings = dataclasses.replace(settings, **overrides)
        sequencer = DrawSequencer(rng=ScriptedRng(draws=draws, rolls=rolls))
        return RoundOrchestrator(
            settings=game_settings,
            clock=clock,
            rng=random.Random(game_settings.rng_seed),
            sequencer=sequencer,
        )

    return _make


def _add_ticket(game: RoundOrchestrator, picks: Sequence[int], stake_index: int | None = None) -> int:
    """Fill the active draft with ``picks`` and confirm it; return its id."""

    if stake_index is not None:
        game.tickets.set_stake_index(stake_index)
    ticket_id = game.tickets.active_ticket_id
    for symbol in picks:
        game.tickets.select_symbol(symbol)
    ticket = game.tickets.get(ticket_id)
    if not ticket.is_confirmed:
        assert game.tickets.confirm(ticket_id).accepted
    return ticket_id


@pytest.fixture
def add_ticket():
    return _add_ticket


@pytest.fixture
def scripted_rng():
    return ScriptedRng


@pytest.fixture
def app_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def app(app_clock):
    app = create_app(
        {
            "TESTING": True,
            "LOG_LEVEL": "WARNING",
            "BICHO_RNG_SEED": 1234,
            "BICHO_REVEAL_DELAY_SECONDS": "2.0",
        },
        clock=app_clock,
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
