"""Helpers for consistent JSON response schema.

Every response carries ``success``, ``data`` and ``error``. Game commands that
break a rule are not failures: they answer ``success: true`` with
``accepted: false`` and the reason, so the presentation layer can just
re-render.
"""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify

from bicho.models.command import CommandResult


def ok(data: Any, status_code: int = 200) -> tuple[Response, int]:
    return jsonify({"success": True, "data": data, "error": None}), status_code


def command_ok(result: CommandResult, state: dict[str, Any]) -> tuple[Response, int]:
    """Outcome of a game command plus the state after it."""

    return ok(
        {
            "accepted": result.accepted,
            "reason": result.reason,
            "advisory": result.advisory,
            "state": state,
        }
    )


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> tuple[Response, int]:
    body = {
        "success": False,
        "data": None,
        "error": {"code": code, "message": message, "details": details},
    }
    return jsonify(body), status_code
