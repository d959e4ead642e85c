from decimal import Decimal

import pytest

from bicho.services.paytable import (
    PAYTABLE,
    HitCount,
    count_hits,
    paytable_rows,
    score,
    ticket_win,
)


def test_single_pick_in_first_position_pays_twelve():
    assert score([3], [3]) == Decimal("12")
    assert ticket_win(Decimal("1.00"), [3], [3, 8, 1, 0, 24]) == Decimal("12.00")


def test_two_picks_in_order_at_fifty_pence():
    assert ticket_win(Decimal("0.50"), [1, 2], [1, 2]) == Decimal("47.50")


def test_five_picks_all_drawn_out_of_order_pays_four_of_five_band():
    assert score([1, 2, 3, 4, 5], [5, 4, 3, 2, 1]) == Decimal("150")


def test_five_in_position_pays_top_band():
    assert score([1, 2, 3, 4, 5], [1, 2, 3, 4, 5]) == Decimal("17000")


def test_four_of_five_in_position_falls_through_to_unordered():
    hits = count_hits([1, 2, 3, 4, 5], [1, 2, 3, 4, 9])
    assert hits == HitCount(exact=4, unordered=4)
    assert score([1, 2, 3, 4, 5], [1, 2, 3, 4, 9]) == Decimal("150")


@pytest.mark.parametrize(
    "picks, revealed, expected",
    [
        ([3], [7, 3], Decimal("3")),
        ([2, 1], [1, 2], Decimal("12")),
        ([9, 1], [1], Decimal("1")),
        ([4, 5, 6], [6, 0, 1], Decimal("0.75")),
        ([4, 5, 6], [6, 4, 1], Decimal("3")),
        ([4, 5, 6, 7], [7, 6, 5, 0], Decimal("22")),
        ([4, 5, 6, 7], [0], Decimal("0")),
    ],
)
def test_unordered_bands(picks, revealed, expected):
    assert score(picks, revealed) == expected


def test_exact_hits_only_count_the_revealed_prefix():
    assert count_hits([1, 2, 3], [1]) == HitCount(exact=1, unordered=1)
    assert score([1, 2], [1]) == Decimal("1")
    assert score([1, 2], [1, 2]) == Decimal("95")


def test_score_is_recomputed_per_prefix():
    picks = [10, 11, 12]
    draw = [12, 11, 10, 3, 4]
    progression = [score(picks, draw[:n]) for n in range(1, 6)]
    assert progression == [
        Decimal("0.75"),
        Decimal("3"),
        Decimal("42"),
        Decimal("42"),
        Decimal("42"),
    ]


def test_no_picks_or_no_stake_pays_nothing():
    assert score([], [1, 2, 3]) == 0
    assert ticket_win(None, [1], [1]) == 0
    assert ticket_win(Decimal("1.00"), [], [1]) == 0


def test_every_pick_count_has_an_exact_band_and_single_hit_band():
    for pick_count, row in PAYTABLE.items():
        assert row.exact > 0
        assert 1 in row.unordered
        assert max(row.unordered) == pick_count


def test_paytable_rows_lists_exact_band_first():
    rows = paytable_rows()
    assert [row["picks"] for row in rows] == [1, 2, 3, 4, 5]

    two = rows[1]["bands"]
    assert two[0] == {"match": "exact", "hits": 2, "multiplier": Decimal("95")}
    assert [band["hits"] for band in two[1:]] == [2, 1]
