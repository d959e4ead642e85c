"""Currency formatting helpers for labels and advisories."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_money(value: object) -> Decimal:
    """Coerce config/env values (str, int, float, Decimal) into a Decimal."""

    if isinstance(value, Decimal):
        return value
    # str() first so floats such as 0.1 keep their shortest repr.
    return Decimal(str(value).strip())


def format_money(amount: Decimal) -> str:
    return f"£{amount.quantize(CENT, rounding=ROUND_HALF_UP)}"


def stake_label(amount: Decimal) -> str:
    """Pounds for a pound or more, pence below (``£2.00``, ``50p``)."""

    if amount >= 1:
        return format_money(amount)
    pence = (amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{pence}p"


def format_limit(amount: Decimal) -> str:
    # "£10" rather than "£10.00" when the cap is a whole number.
    if amount == amount.to_integral_value():
        return f"£{int(amount)}"
    return format_money(amount)
