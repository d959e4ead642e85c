"""Betting slip model."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

MAX_PICKS = 5

ZERO = Decimal("0")


class TicketState(str, Enum):
    DRAFT = "DRAFT"
    CONFIRMED = "CONFIRMED"


@dataclass
class Ticket:
    """A player's slip: up to five ordered, distinct symbols.

    ``stake`` stays ``None`` until the ticket is confirmed. ``current_win`` is
    only meaningful while a round is drawing.
    """

    id: int
    picks: list[int] = field(default_factory=list)
    state: TicketState = TicketState.DRAFT
    stake: Decimal | None = None
    current_win: Decimal = ZERO

    @property
    def is_confirmed(self) -> bool:
        return self.state is TicketState.CONFIRMED

    @property
    def is_draft(self) -> bool:
        return self.state is TicketState.DRAFT

    @property
    def is_empty_draft(self) -> bool:
        return self.is_draft and not self.picks

    @property
    def remaining_capacity(self) -> int:
        return MAX_PICKS - len(self.picks)

    def confirm(self, stake: Decimal) -> None:
        self.state = TicketState.CONFIRMED
        self.stake = stake

    def ordering_key(self) -> tuple[Decimal, Decimal, int]:
        # Ascending sort on this key yields win desc, stake desc, pick count desc.
        return (-self.current_win, -(self.stake or ZERO), -len(self.picks))
