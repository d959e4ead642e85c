"""Outcome of a player command."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandResult:
    """Whether a command changed anything.

    Rule violations are not errors: the command is ignored and ``reason``
    names the rule. ``advisory`` carries a message meant for the player
    (stake limit, insufficient balance).
    """

    accepted: bool
    reason: str | None = None
    advisory: str | None = None

    @classmethod
    def ok(cls) -> "CommandResult":
        return cls(accepted=True)

    @classmethod
    def ignored(cls, reason: str) -> "CommandResult":
        return cls(accepted=False, reason=reason)

    @classmethod
    def advised(cls, reason: str, advisory: str) -> "CommandResult":
        return cls(accepted=False, reason=reason, advisory=advisory)
