"""Per-round state owned by the round orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from bicho.models.ticket import ZERO


class RoundPhase(str, Enum):
    SELECTING = "SELECTING"
    ARMED = "ARMED"
    DRAWING = "DRAWING"
    SETTLED = "SETTLED"
    BONUS_GAME = "BONUS_GAME"


@dataclass(frozen=True)
class RevealStep:
    position: int
    symbol: int
    is_bonus: bool
    revealed_count: int


@dataclass(frozen=True)
class DrawResult:
    """Revealed prefix of a draw. Unrevealed positions are never exposed."""

    symbols: tuple[int, ...] = ()
    bonus_flags: tuple[bool, ...] = ()

    @property
    def revealed_count(self) -> int:
        return len(self.symbols)

    @property
    def bonus_count(self) -> int:
        return sum(1 for flag in self.bonus_flags if flag)


@dataclass
class BonusTracker:
    bonus_count: int = 0
    consecutive_bonus_count: int = 0
    eligible: bool = False

    def record(self, is_bonus: bool) -> None:
        if is_bonus:
            self.bonus_count += 1
            self.consecutive_bonus_count += 1
        else:
            self.consecutive_bonus_count = 0
        # Any three bonus reveals qualify, consecutive or not.
        if self.bonus_count >= 3:
            self.eligible = True


@dataclass
class RoundContext:
    round_no: int
    ticket_ids: list[int]
    total_stake: Decimal
    next_action_at: float
    tracker: BonusTracker = field(default_factory=BonusTracker)
    prize: Decimal = ZERO


@dataclass(frozen=True)
class TicketResult:
    ticket_id: int
    picks: tuple[int, ...]
    stake: Decimal
    multiplier: Decimal
    win: Decimal


@dataclass
class RoundSummary:
    """Outcome of a settled round, kept for display until the next round."""

    round_no: int
    draw: DrawResult
    total_stake: Decimal
    prize: Decimal
    results: list[TicketResult] = field(default_factory=list)
    bonus_tier: str | None = None
    bonus_award: Decimal | None = None
