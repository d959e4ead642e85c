"""Ticket lifecycle: drafting, confirming, deleting and ordering slips."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from decimal import Decimal
from enum import Enum

from bicho.errors import NotFoundError, StakeLimitExceeded, ValidationError
from bicho.models.command import CommandResult
from bicho.models.symbol import SYMBOL_COUNT, is_valid_symbol
from bicho.models.ticket import MAX_PICKS, ZERO, Ticket
from bicho.services.events import EventBus, EventType
from bicho.services.paytable import ticket_win
from bicho.utils.money import format_limit

logger = logging.getLogger(__name__)


class StakeLimitStatus(str, Enum):
    OK = "OK"
    WOULD_EXCEED = "WOULD_EXCEED"
    REACHED = "REACHED"


class TicketManager:
    """Owns the ordered ticket collection.

    Tickets live in an arena keyed by a stable id; display order is a separate
    list of ids so inserts and deletes never shift identities.
    """

    def __init__(
        self,
        stakes: Sequence[Decimal],
        stake_cap: Decimal,
        default_stake_index: int = 0,
        rng: random.Random | None = None,
        events: EventBus | None = None,
    ) -> None:
        if not stakes:
            raise ValueError("at least one stake denomination is required")
        self._stakes = tuple(stakes)
        self._stake_cap = stake_cap
        self._selected = max(0, min(len(self._stakes) - 1, int(default_stake_index)))
        self._rng = rng or random.Random()
        self._events = events or EventBus()

        self._arena: dict[int, Ticket] = {}
        self._order: list[int] = []
        self._next_id = 1
        self._locked = False
        self._active_id = self._insert_empty(0).id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def tickets(self) -> list[Ticket]:
        return [self._arena[tid] for tid in self._order]

    @property
    def confirmed_tickets(self) -> list[Ticket]:
        return [t for t in self.tickets if t.is_confirmed]

    @property
    def total_confirmed_stake(self) -> Decimal:
        return sum((t.stake or ZERO for t in self._arena.values() if t.is_confirmed), ZERO)

    @property
    def stakes(self) -> tuple[Decimal, ...]:
        return self._stakes

    @property
    def stake_cap(self) -> Decimal:
        return self._stake_cap

    @property
    def selected_stake_index(self) -> int:
        return self._selected

    @property
    def selected_stake(self) -> Decimal:
        return self._stakes[self._selected]

    @property
    def active_ticket_id(self) -> int:
        return self._active_id

    @property
    def locked(self) -> bool:
        return self._locked

    def get(self, ticket_id: int) -> Ticket:
        ticket = self._arena.get(int(ticket_id))
        if ticket is None:
            raise NotFoundError(message=f"Ticket {ticket_id} not found")
        return ticket

    def index_of(self, ticket_id: int) -> int:
        return self._order.index(int(ticket_id))

    def stake_limit_status(self) -> StakeLimitStatus:
        total = self.total_confirmed_stake
        if total >= self._stake_cap:
            return StakeLimitStatus.REACHED
        if total + self.selected_stake > self._stake_cap:
            return StakeLimitStatus.WOULD_EXCEED
        return StakeLimitStatus.OK

    def stake_limit_message(self) -> str | None:
        status = self.stake_limit_status()
        limit = format_limit(self._stake_cap)
        if status is StakeLimitStatus.REACHED:
            return f"Stake limit of {limit} reached."
        if status is StakeLimitStatus.WOULD_EXCEED:
            return f"Current stake selected will take you over the {limit} limit."
        return None

    # ------------------------------------------------------------------
    # Stake selection
    # ------------------------------------------------------------------

    def set_stake_index(self, index: int) -> CommandResult:
        if not 0 <= int(index) < len(self._stakes):
            raise ValidationError(
                message="Invalid stake index",
                details={"index": [f"Must be within 0..{len(self._stakes) - 1}"]},
            )
        self._selected = int(index)
        return CommandResult.ok()

    def step_stake(self, delta: int) -> CommandResult:
        self._selected = max(0, min(len(self._stakes) - 1, self._selected + int(delta)))
        return CommandResult.ok()

    # ------------------------------------------------------------------
    # Player commands
    # ------------------------------------------------------------------

    def select_symbol(self, symbol: int, ticket_id: int | None = None) -> CommandResult:
        if not is_valid_symbol(symbol):
            raise ValidationError(
                message="Invalid symbol",
                details={"symbol": [f"Must be within 0..{SYMBOL_COUNT - 1}"]},
            )
        if self._locked:
            return self._ignore("select_symbol", "round_in_progress")

        ticket = self._resolve(ticket_id)
        if ticket.is_confirmed:
            return self._ignore("select_symbol", "ticket_confirmed")
        if symbol in ticket.picks:
            return self._ignore("select_symbol", "duplicate_symbol")
        if len(ticket.picks) >= MAX_PICKS:
            return self._ignore("select_symbol", "ticket_full")

        self._active_id = ticket.id
        if len(ticket.picks) + 1 < MAX_PICKS:
            ticket.picks.append(int(symbol))
            return CommandResult.ok()

        # The fifth pick confirms the ticket, so the cap decides whether it lands.
        try:
            self._check_stake_cap()
        except StakeLimitExceeded as exc:
            return self._advise("select_symbol", exc)
        ticket.picks.append(int(symbol))
        self._confirm(ticket)
        return CommandResult.ok()

    def confirm(self, ticket_id: int) -> CommandResult:
        if self._locked:
            return self._ignore("confirm", "round_in_progress")
        ticket = self.get(ticket_id)
        if ticket.is_confirmed:
            return self._ignore("confirm", "ticket_confirmed")
        if not ticket.picks:
            return self._ignore("confirm", "no_picks")
        try:
            self._confirm(ticket)
        except StakeLimitExceeded as exc:
            return self._advise("confirm", exc)
        return CommandResult.ok()

    def cancel(self, ticket_id: int) -> CommandResult:
        if self._locked:
            return self._ignore("cancel", "round_in_progress")
        ticket = self.get(ticket_id)
        if ticket.is_confirmed:
            return self._ignore("cancel", "ticket_confirmed")
        ticket.picks.clear()
        return CommandResult.ok()

    def delete(self, ticket_id: int) -> CommandResult:
        if self._locked:
            return self._ignore("delete", "round_in_progress")
        ticket = self.get(ticket_id)
        self._order.remove(ticket.id)
        del self._arena[ticket.id]
        self.ensure_top_empty_draft()
        return CommandResult.ok()

    def clear_confirmed(self) -> CommandResult:
        if self._locked:
            return self._ignore("clear_confirmed", "round_in_progress")
        for ticket in self.confirmed_tickets:
            self._order.remove(ticket.id)
            del self._arena[ticket.id]
        self.ensure_top_empty_draft()
        return CommandResult.ok()

    def build_random(self, ticket_id: int | None = None) -> CommandResult:
        """Fill a draft with random symbols and confirm it.

        The cap is checked before anything is picked, so a refusal leaves
        the ticket exactly as it was.
        """

        if self._locked:
            return self._ignore("build_random", "round_in_progress")
        ticket = self._resolve(ticket_id)
        if ticket.is_confirmed:
            return self._ignore("build_random", "ticket_confirmed")
        remaining = ticket.remaining_capacity
        if remaining <= 0:
            return self._ignore("build_random", "ticket_full")
        try:
            self._check_stake_cap()
        except StakeLimitExceeded as exc:
            return self._advise("build_random", exc)

        count = self._rng.randint(1, remaining)
        candidates = [i for i in range(SYMBOL_COUNT) if i not in ticket.picks]
        ticket.picks.extend(self._rng.sample(candidates, count))
        self._active_id = ticket.id
        self._confirm(ticket)
        return CommandResult.ok()

    # ------------------------------------------------------------------
    # Round hooks (called by the orchestrator)
    # ------------------------------------------------------------------

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    def projected_round_stake(self) -> Decimal:
        """Total that ``prepare_round`` would leave confirmed, without mutating."""

        total = self.total_confirmed_stake
        for ticket in self.tickets:
            if ticket.is_draft and ticket.picks and total + self.selected_stake <= self._stake_cap:
                total += self.selected_stake
        return total

    def prepare_round(self) -> list[Ticket]:
        """Drop empty slips and confirm drafted ones in place.

        Drafts are stamped with the selected stake. A draft that no longer
        fits under the cap stays a draft and sits the round out.
        """

        for ticket in [t for t in self.tickets if not t.picks]:
            self._order.remove(ticket.id)
            del self._arena[ticket.id]

        for ticket in self.tickets:
            if ticket.is_confirmed:
                continue
            if self.total_confirmed_stake + self.selected_stake > self._stake_cap:
                logger.info("Ticket %s left out of the round: stake cap reached", ticket.id)
                continue
            ticket.confirm(self.selected_stake)

        for ticket in self._arena.values():
            ticket.current_win = ZERO
        return self.confirmed_tickets

    def update_wins(self, revealed: Sequence[int]) -> Decimal:
        """Recompute every ticket's win from the revealed prefix; return the total."""

        total = ZERO
        for ticket in self._arena.values():
            if ticket.is_confirmed:
                ticket.current_win = ticket_win(ticket.stake, ticket.picks, revealed)
            else:
                ticket.current_win = ZERO
            total += ticket.current_win
        return total

    def sort_by_win(self) -> None:
        tickets = self.tickets
        empties = [t for t in tickets if t.is_empty_draft]
        others = sorted((t for t in tickets if not t.is_empty_draft), key=Ticket.ordering_key)
        self._order = [t.id for t in empties + others]

    def reset_wins(self) -> None:
        for ticket in self._arena.values():
            ticket.current_win = ZERO

    def ensure_top_empty_draft(self) -> None:
        if not self._order or not self._arena[self._order[0]].is_empty_draft:
            self._insert_empty(0)
        active = self._arena.get(self._active_id)
        if active is None or not active.is_draft:
            self._active_id = self._order[0]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve(self, ticket_id: int | None) -> Ticket:
        if ticket_id is None:
            if self._active_id not in self._arena:
                self.ensure_top_empty_draft()
            return self._arena[self._active_id]
        return self.get(ticket_id)

    def _insert_empty(self, slot: int) -> Ticket:
        ticket = Ticket(id=self._next_id)
        self._next_id += 1
        self._arena[ticket.id] = ticket
        self._order.insert(slot, ticket.id)
        return ticket

    def _check_stake_cap(self) -> None:
        if self.total_confirmed_stake + self.selected_stake > self._stake_cap:
            raise StakeLimitExceeded(
                message=self.stake_limit_message() or "Stake limit reached.",
                details={
                    "confirmed": str(self.total_confirmed_stake),
                    "selected": str(self.selected_stake),
                    "cap": str(self._stake_cap),
                },
            )

    def _confirm(self, ticket: Ticket) -> None:
        self._check_stake_cap()
        ticket.confirm(self.selected_stake)

        # Vacated slot gets a fresh draft; the confirmed slip goes right below it.
        slot = self.index_of(ticket.id)
        self._order.pop(slot)
        fresh = self._insert_empty(slot)
        self._order.insert(slot + 1, ticket.id)
        self._active_id = fresh.id

        logger.info("Ticket %s confirmed: picks=%s stake=%s", ticket.id, ticket.picks, ticket.stake)
        self._events.emit(
            EventType.TICKET_CONFIRMED,
            ticket_id=ticket.id,
            index=slot + 1,
            stake=str(ticket.stake),
        )

    def _ignore(self, command: str, reason: str) -> CommandResult:
        logger.debug("Ignored %s: %s", command, reason)
        return CommandResult.ignored(reason)

    def _advise(self, command: str, exc: StakeLimitExceeded) -> CommandResult:
        logger.info("Refused %s: %s", command, exc.message)
        return CommandResult.advised(exc.code, exc.message)
