"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class StakeLimitExceeded(AppError):
    """Confirming a ticket would push the confirmed stakes over the round cap.

    Raised inside the ticket manager and turned into an advisory at the
    command boundary; it never reaches the HTTP error handlers.
    """

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(code="stake_limit_exceeded", message=message, status_code=409, details=details)


class InsufficientFunds(AppError):
    """Balance does not cover the stakes of the round about to start."""

    def __init__(self, message: str = "Insufficient balance.", details: Any | None = None) -> None:
        super().__init__(code="insufficient_funds", message=message, status_code=409, details=details)
