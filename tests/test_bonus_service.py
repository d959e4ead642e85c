import random
from decimal import Decimal

import pytest

from bicho.errors import ValidationError
from bicho.models.round import BonusTracker
from bicho.services.bonus_service import (
    TIER_RANGES,
    BonusGame,
    BonusTier,
    MultiplierRange,
    decide_bonus_tier,
)


@pytest.mark.parametrize(
    "flags, expected",
    [
        ([True, True, True, True, True], BonusTier.TOP),
        ([True, True, False, True, True], BonusTier.MID),
        ([True, False, True, False, True], BonusTier.BASE),
        ([True, True, True, False, False], BonusTier.BASE),
        ([False, True, False, False, True], None),
        ([False] * 5, None),
    ],
)
def test_tier_follows_bonus_count(flags, expected):
    tracker = BonusTracker()
    for flag in flags:
        tracker.record(flag)
    assert decide_bonus_tier(flags, tracker.eligible) is expected


def test_tracker_counts_consecutive_runs():
    tracker = BonusTracker()
    for flag in (True, True, False, True):
        tracker.record(flag)
    assert tracker.bonus_count == 3
    assert tracker.consecutive_bonus_count == 1
    assert tracker.eligible

    tracker.record(False)
    assert tracker.eligible


@pytest.mark.parametrize("tier", list(BonusTier))
def test_cells_stay_within_the_tier_range(tier):
    span = TIER_RANGES[tier]
    for seed in range(20):
        game = BonusGame(tier=tier, stake_basis=Decimal("1.00"), rng=random.Random(seed))
        for cell in range(5):
            game.pick(cell)
        values = [value for value in game.cells() if value is not None]
        assert len(values) == 5
        assert all(isinstance(value, int) for value in values)
        assert all(span.minimum <= value <= span.maximum for value in values)
        assert game.total_multiplier == sum(values)


def test_award_is_stake_basis_times_total():
    game = BonusGame(
        tier=BonusTier.MID,
        stake_basis=Decimal("2.50"),
        rng=random.Random(8),
        multiplier_range=MultiplierRange(Decimal("3"), Decimal("3")),
    )
    for cell in (0, 6, 12, 18):
        assert game.pick(cell).accepted
        assert not game.is_finished
    assert game.award is None

    game.pick(24)

    assert game.is_finished
    assert game.total_multiplier == 15
    assert game.award == Decimal("37.50")


def test_cells_are_concealed_until_picked():
    game = BonusGame(tier=BonusTier.TOP, stake_basis=Decimal("1.00"), rng=random.Random(1))
    assert game.cells() == [None] * 25

    game.pick(3)
    cells = game.cells()
    assert cells[3] is not None
    assert cells.count(None) == 24
    assert game.total_multiplier == cells[3]


def test_pick_rules():
    game = BonusGame(tier=BonusTier.BASE, stake_basis=Decimal("1.00"), rng=random.Random(2))
    game.pick(0)
    assert game.pick(0).reason == "cell_revealed"
    assert game.picks_left == 4

    with pytest.raises(ValidationError):
        game.pick(25)

    for cell in (1, 2, 3, 4):
        game.pick(cell)
    assert game.pick(10).reason == "no_picks_left"
    assert game.cells()[10] is None


def test_empty_integer_range_is_rejected():
    with pytest.raises(ValueError):
        BonusGame(
            tier=BonusTier.BASE,
            stake_basis=Decimal("1.00"),
            multiplier_range=MultiplierRange(Decimal("0.2"), Decimal("0.8")),
        )
