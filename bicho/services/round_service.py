"""Round orchestration: start, reveal loop, settlement and bonus game.

Phases run ``SELECTING -> ARMED -> DRAWING -> SETTLED -> (BONUS_GAME) ->
SELECTING``. Reveal steps are scheduled on an injectable clock and executed by
``tick()``: the first reveal happens when the round starts, each later reveal
``reveal_delay_seconds`` after the previous one, and settlement the same
delay after the fifth. Nothing runs in the background; whoever owns the
orchestrator (a request handler, a CLI loop, a test) calls ``tick()``.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from decimal import Decimal

from bicho.config import GameSettings
from bicho.errors import InsufficientFunds
from bicho.models.command import CommandResult
from bicho.models.round import (
    DrawResult,
    RoundContext,
    RoundPhase,
    RoundSummary,
    TicketResult,
)
from bicho.models.ticket import ZERO
from bicho.services.bonus_service import (
    DEMO_STAKE_BASIS,
    BonusGame,
    BonusTier,
    decide_bonus_tier,
)
from bicho.services.clock import Clock, MonotonicClock
from bicho.services.draw_service import DrawPhase, DrawSequencer
from bicho.services.events import EventBus, EventType
from bicho.services.ledger import BalanceLedger
from bicho.services.paytable import score
from bicho.services.ticket_service import TicketManager

logger = logging.getLogger(__name__)


class RoundOrchestrator:
    """Single-player game session."""

    def __init__(
        self,
        settings: GameSettings | None = None,
        clock: Clock | None = None,
        rng: random.Random | None = None,
        sequencer: DrawSequencer | None = None,
        events: EventBus | None = None,
    ) -> None:
        self.settings = settings or GameSettings()
        self._rng = rng or random.Random(self.settings.rng_seed)
        self._clock = clock or MonotonicClock()
        self.events = events or EventBus()
        self.ledger = BalanceLedger(self.settings.starting_balance)
        self.tickets = TicketManager(
            stakes=self.settings.stakes,
            stake_cap=self.settings.stake_cap,
            default_stake_index=self.settings.default_stake_index,
            rng=self._rng,
            events=self.events,
        )
        self.sequencer = sequencer or DrawSequencer(rng=self._rng)

        self._context: RoundContext | None = None
        self._bonus_game: BonusGame | None = None
        self._bonus_is_demo = False
        self._last_summary: RoundSummary | None = None
        self._settling = False
        self._round_no = 0
        self._prize = ZERO

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def phase(self) -> RoundPhase:
        if self._context is not None:
            return RoundPhase.DRAWING
        if self._settling:
            return RoundPhase.SETTLED
        if self._bonus_game is not None:
            return RoundPhase.BONUS_GAME
        if self.tickets.confirmed_tickets:
            return RoundPhase.ARMED
        return RoundPhase.SELECTING

    @property
    def balance(self) -> Decimal:
        return self.ledger.balance

    @property
    def prize(self) -> Decimal:
        """Prize total shown for the current (or last) round, bonus included."""

        return self._prize

    @property
    def round_no(self) -> int:
        return self._round_no

    @property
    def context(self) -> RoundContext | None:
        return self._context

    @property
    def bonus_game(self) -> BonusGame | None:
        return self._bonus_game

    @property
    def last_summary(self) -> RoundSummary | None:
        return self._last_summary

    def draw(self) -> DrawResult:
        return self.sequencer.result()

    def seconds_until_next_step(self) -> float | None:
        if self._context is None:
            return None
        return max(0.0, self._context.next_action_at - self._clock.now())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start_round(self) -> CommandResult:
        if self.phase in (RoundPhase.DRAWING, RoundPhase.BONUS_GAME):
            return CommandResult.ignored("round_in_progress")
        if not self.tickets.confirmed_tickets:
            return CommandResult.ignored("no_confirmed_tickets")

        if self.settings.block_on_insufficient_funds:
            needed = self.tickets.projected_round_stake()
            if needed > self.balance:
                exc = InsufficientFunds(details={"needed": str(needed), "balance": str(self.balance)})
                logger.info("Round refused: stakes %s exceed balance %s", needed, self.balance)
                return CommandResult.advised(exc.code, exc.message)

        participants = self.tickets.prepare_round()
        total_stake = sum((t.stake or ZERO for t in participants), ZERO)

        self._round_no += 1
        self.ledger.debit(total_stake, memo=f"round {self._round_no} stakes")
        self.tickets.lock()
        self._prize = ZERO
        self._last_summary = None
        self._context = RoundContext(
            round_no=self._round_no,
            ticket_ids=[t.id for t in participants],
            total_stake=total_stake,
            next_action_at=self._clock.now(),
        )
        self.sequencer.start()

        logger.info(
            "Round %s started: %s tickets, stakes %s, balance %s",
            self._round_no,
            len(participants),
            total_stake,
            self.balance,
        )
        self.events.emit(
            EventType.ROUND_STARTED,
            round_no=self._round_no,
            ticket_count=len(participants),
            total_stake=str(total_stake),
            balance=str(self.balance),
        )
        self.tick()
        return CommandResult.ok()

    def tick(self) -> int:
        """Run every scheduled step that is due; return how many ran."""

        steps = 0
        ctx = self._context
        while ctx is not None and self._clock.now() >= ctx.next_action_at:
            if self.sequencer.phase is DrawPhase.REVEALING:
                self._reveal(ctx)
            else:
                self._settle(ctx)
            steps += 1
            ctx = self._context
        return steps

    def run_until_settled(self, sleep: Callable[[float], None] = time.sleep) -> None:
        """Block until the current round settles (no-op when idle)."""

        while self._context is not None:
            wait = self.seconds_until_next_step() or 0.0
            if wait > 0:
                sleep(wait)
            self.tick()

    def bonus_pick(self, cell: int) -> CommandResult:
        game = self._bonus_game
        if game is None:
            return CommandResult.ignored("no_bonus_game")
        result = game.pick(cell)
        if result.accepted and game.is_finished:
            self._close_bonus(game)
        return result

    def start_demo_bonus(self) -> CommandResult:
        """Open a base-tier bonus game outside a round, paid on a £1.00 basis."""

        if self.phase in (RoundPhase.DRAWING, RoundPhase.BONUS_GAME):
            return CommandResult.ignored("round_in_progress")
        self._open_bonus(BonusTier.BASE, DEMO_STAKE_BASIS, demo=True)
        return CommandResult.ok()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _reveal(self, ctx: RoundContext) -> None:
        step = self.sequencer.reveal_next()
        ctx.tracker.record(step.is_bonus)
        ctx.prize = self.tickets.update_wins(self.sequencer.revealed_symbols)
        self._prize = ctx.prize
        self.tickets.sort_by_win()
        ctx.next_action_at += self.settings.reveal_delay_seconds

        self.events.emit(
            EventType.REVEAL_STEP_COMPLETED,
            round_no=ctx.round_no,
            position=step.position,
            symbol=step.symbol,
            is_bonus=step.is_bonus,
            revealed_count=step.revealed_count,
            prize=str(ctx.prize),
        )

    def _settle(self, ctx: RoundContext) -> None:
        self._settling = True
        draw = self.sequencer.result()

        prize = self.tickets.update_wins(draw.symbols)
        self.tickets.sort_by_win()
        results = [
            TicketResult(
                ticket_id=t.id,
                picks=tuple(t.picks),
                stake=t.stake or ZERO,
                multiplier=score(t.picks, draw.symbols),
                win=t.current_win,
            )
            for t in self.tickets.tickets
            if t.is_confirmed and t.id in ctx.ticket_ids
        ]
        ctx.prize = prize
        self._prize = prize
        if prize > 0:
            self.ledger.credit(prize, memo=f"round {ctx.round_no} prize")

        self.tickets.reset_wins()
        self._context = None
        self.tickets.ensure_top_empty_draft()

        tier = decide_bonus_tier(draw.bonus_flags, ctx.tracker.eligible)
        self._last_summary = RoundSummary(
            round_no=ctx.round_no,
            draw=draw,
            total_stake=ctx.total_stake,
            prize=prize,
            results=results,
            bonus_tier=tier.value if tier else None,
        )

        logger.info(
            "Round %s settled: draw=%s bonus=%s prize=%s balance=%s",
            ctx.round_no,
            list(draw.symbols),
            draw.bonus_count,
            prize,
            self.balance,
        )
        self.events.emit(
            EventType.ROUND_SETTLED,
            round_no=ctx.round_no,
            prize=str(prize),
            balance=str(self.balance),
            bonus_tier=tier.value if tier else None,
        )
        self._settling = False

        if tier is not None:
            self._open_bonus(tier, ctx.total_stake)
        else:
            self.tickets.unlock()

    def _open_bonus(self, tier: BonusTier, stake_basis: Decimal, demo: bool = False) -> None:
        game = BonusGame(tier=tier, stake_basis=stake_basis, rng=self._rng)
        self._bonus_game = game
        self._bonus_is_demo = demo
        self.tickets.lock()

        logger.info("Bonus round %s started (demo: %s)", tier.value, demo)
        self.events.emit(
            EventType.BONUS_ROUND_STARTED,
            tier=tier.value,
            min_multiplier=str(game.multiplier_range.minimum),
            max_multiplier=str(game.multiplier_range.maximum),
            stake_basis=str(stake_basis),
            demo=demo,
        )

    def _close_bonus(self, game: BonusGame) -> None:
        award = game.award or ZERO
        self.ledger.credit(award, memo=f"bonus {game.tier.value}")
        self._prize += award
        if self._last_summary is not None and not self._bonus_is_demo:
            self._last_summary.bonus_award = award

        self._bonus_game = None
        self._bonus_is_demo = False
        self.tickets.unlock()

        self.events.emit(
            EventType.BONUS_ROUND_ENDED,
            tier=game.tier.value,
            total_multiplier=game.total_multiplier,
            award=str(award),
            balance=str(self.balance),
        )
