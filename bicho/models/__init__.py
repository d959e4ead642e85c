"""Game data models."""

from bicho.models.round import (
    BonusTracker,
    DrawResult,
    RevealStep,
    RoundContext,
    RoundPhase,
    RoundSummary,
    TicketResult,
)
from bicho.models.symbol import SYMBOL_COUNT, SYMBOLS, Symbol
from bicho.models.ticket import MAX_PICKS, Ticket, TicketState

__all__ = [
    "BonusTracker",
    "DrawResult",
    "MAX_PICKS",
    "RevealStep",
    "RoundContext",
    "RoundPhase",
    "RoundSummary",
    "SYMBOLS",
    "SYMBOL_COUNT",
    "Symbol",
    "Ticket",
    "TicketResult",
    "TicketState",
]
