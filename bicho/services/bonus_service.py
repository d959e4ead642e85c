"""Bonus round: tier decision and the pick-a-tile mini-game."""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from bicho.errors import ValidationError
from bicho.models.command import CommandResult

logger = logging.getLogger(__name__)

BONUS_GRID_SIZE = 25
BONUS_PICKS = 5
DEMO_STAKE_BASIS = Decimal("1.00")


class BonusTier(str, Enum):
    TOP = "TOP"
    MID = "MID"
    BASE = "BASE"


@dataclass(frozen=True)
class MultiplierRange:
    minimum: Decimal
    maximum: Decimal


TIER_RANGES: dict[BonusTier, MultiplierRange] = {
    BonusTier.TOP: MultiplierRange(Decimal("5"), Decimal("100")),
    BonusTier.MID: MultiplierRange(Decimal("2"), Decimal("50")),
    BonusTier.BASE: MultiplierRange(Decimal("0.5"), Decimal("25")),
}


def decide_bonus_tier(bonus_flags: Sequence[bool], eligible: bool) -> BonusTier | None:
    """Pick the bonus tier once all reveals are in.

    The count of flagged reveals decides TOP and MID even when the first
    three were forced; three or more otherwise gives the base tier.
    """

    flagged = sum(1 for flag in bonus_flags if flag)
    if flagged == 5:
        return BonusTier.TOP
    if flagged == 4:
        return BonusTier.MID
    if eligible:
        return BonusTier.BASE
    return None


class BonusGame:
    """A concealed grid of integer multipliers; the player reveals five cells.

    Each cell is drawn independently (with replacement) from the integers in
    ``[ceil(minimum), floor(maximum)]``. The award is fixed when the last pick
    is spent.
    """

    def __init__(
        self,
        tier: BonusTier,
        stake_basis: Decimal,
        rng: random.Random | None = None,
        multiplier_range: MultiplierRange | None = None,
        picks: int = BONUS_PICKS,
        grid_size: int = BONUS_GRID_SIZE,
    ) -> None:
        rng = rng or random.Random()
        span = multiplier_range or TIER_RANGES[tier]
        low = math.ceil(span.minimum)
        high = math.floor(span.maximum)
        if low > high:
            raise ValueError(f"empty multiplier range {span.minimum}..{span.maximum}")

        self.tier = tier
        self.stake_basis = stake_basis
        self.multiplier_range = span
        self._cells = [rng.randint(low, high) for _ in range(grid_size)]
        self._revealed = [False] * grid_size
        self._picks_left = picks
        self._total = 0
        self._award: Decimal | None = None

    @property
    def grid_size(self) -> int:
        return len(self._cells)

    @property
    def picks_left(self) -> int:
        return self._picks_left

    @property
    def total_multiplier(self) -> int:
        return self._total

    @property
    def is_finished(self) -> bool:
        return self._picks_left <= 0

    @property
    def award(self) -> Decimal | None:
        return self._award

    def cells(self) -> list[int | None]:
        """Multipliers of revealed cells; concealed cells read as ``None``."""

        return [mult if shown else None for mult, shown in zip(self._cells, self._revealed)]

    def pick(self, cell: int) -> CommandResult:
        if not 0 <= int(cell) < len(self._cells):
            raise ValidationError(
                message="Invalid bonus cell",
                details={"cell": [f"Must be within 0..{len(self._cells) - 1}"]},
            )
        if self.is_finished:
            return CommandResult.ignored("no_picks_left")
        if self._revealed[cell]:
            return CommandResult.ignored("cell_revealed")

        self._revealed[cell] = True
        self._picks_left -= 1
        self._total += self._cells[cell]
        if self.is_finished:
            self._award = self.stake_basis * self._total
            logger.info(
                "Bonus %s finished: total %sx on %s -> %s",
                self.tier.value,
                self._total,
                self.stake_basis,
                self._award,
            )
        return CommandResult.ok()
