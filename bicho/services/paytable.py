"""Paytable and payout calculation.

The multiplier for a ticket depends on how many symbols it picks and how well
those picks match the revealed part of the draw:

* exact hits: pick ``i`` equals revealed symbol ``i`` (position for position,
  over the overlapping prefix only);
* unordered hits: picks present anywhere in the revealed symbols.

The exact band (every pick in position) always wins over the unordered bands.
There are no partial-exact bands: four of five in position falls through to
the unordered bands.

Scoring is recomputed from scratch for every reveal step; nothing here keeps
state between calls.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal

from bicho.models.ticket import ZERO


@dataclass(frozen=True)
class HitCount:
    exact: int
    unordered: int


@dataclass(frozen=True)
class PaytableRow:
    exact: Decimal
    unordered: Mapping[int, Decimal]


def _d(value: str) -> Decimal:
    return Decimal(value)


PAYTABLE: Mapping[int, PaytableRow] = {
    1: PaytableRow(exact=_d("12"), unordered={1: _d("3")}),
    2: PaytableRow(exact=_d("95"), unordered={2: _d("12"), 1: _d("1")}),
    3: PaytableRow(exact=_d("700"), unordered={3: _d("42"), 2: _d("3"), 1: _d("0.75")}),
    4: PaytableRow(
        exact=_d("4000"),
        unordered={4: _d("500"), 3: _d("22"), 2: _d("1.5"), 1: _d("0.2")},
    ),
    # Five picks all drawn out of order has no band of its own; it pays the
    # four-of-five multiplier.
    5: PaytableRow(
        exact=_d("17000"),
        unordered={5: _d("150"), 4: _d("150"), 3: _d("8"), 2: _d("1"), 1: _d("0.2")},
    ),
}


def count_hits(picks: Sequence[int], revealed: Sequence[int]) -> HitCount:
    exact = sum(1 for pick, drawn in zip(picks, revealed) if pick == drawn)
    revealed_set = set(revealed)
    unordered = sum(1 for pick in set(picks) if pick in revealed_set)
    return HitCount(exact=exact, unordered=unordered)


def multiplier_for(pick_count: int, hits: HitCount) -> Decimal:
    row = PAYTABLE.get(pick_count)
    if row is None:
        return ZERO
    if hits.exact == pick_count:
        return row.exact
    return row.unordered.get(hits.unordered, ZERO)


def score(picks: Sequence[int], revealed: Sequence[int]) -> Decimal:
    """Return the payout multiplier for ``picks`` against the revealed prefix."""

    if not picks:
        return ZERO
    return multiplier_for(len(picks), count_hits(picks, revealed))


def ticket_win(stake: Decimal | None, picks: Sequence[int], revealed: Sequence[int]) -> Decimal:
    if not stake:
        return ZERO
    return stake * score(picks, revealed)


def paytable_rows() -> list[dict]:
    """Flatten the paytable for presentation."""

    rows: list[dict] = []
    for pick_count, row in sorted(PAYTABLE.items()):
        bands = [{"match": "exact", "hits": pick_count, "multiplier": row.exact}]
        bands.extend(
            {"match": "unordered", "hits": hits, "multiplier": mult}
            for hits, mult in sorted(row.unordered.items(), reverse=True)
        )
        rows.append({"picks": pick_count, "bands": bands})
    return rows
