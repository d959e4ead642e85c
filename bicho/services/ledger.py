"""Balance ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


@dataclass(frozen=True)
class LedgerEntry:
    kind: EntryKind
    amount: Decimal
    balance_after: Decimal
    memo: str = ""


class BalanceLedger:
    """Single account balance for the session.

    Neither operation guards against a negative balance; funds checks belong
    to whoever decides to start a round.
    """

    def __init__(self, opening_balance: Decimal) -> None:
        self._balance = opening_balance
        self._entries: list[LedgerEntry] = []

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def entries(self) -> list[LedgerEntry]:
        return list(self._entries)

    def debit(self, amount: Decimal, memo: str = "") -> Decimal:
        self._balance -= amount
        self._record(EntryKind.DEBIT, amount, memo)
        return self._balance

    def credit(self, amount: Decimal, memo: str = "") -> Decimal:
        self._balance += amount
        self._record(EntryKind.CREDIT, amount, memo)
        return self._balance

    def _record(self, kind: EntryKind, amount: Decimal, memo: str) -> None:
        entry = LedgerEntry(kind=kind, amount=amount, balance_after=self._balance, memo=memo)
        self._entries.append(entry)
        logger.debug("Ledger %s %s (%s) -> %s", kind.value, amount, memo or "-", self._balance)
