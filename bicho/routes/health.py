"""Health check routes."""

from __future__ import annotations

from flask import Blueprint

from bicho.runtime import get_game_service
from bicho.utils.responses import ok

health_bp = Blueprint("health", __name__)


@health_bp.get("/health")
def health_check():
    """Health check endpoint; reports the session phase without ticking it."""

    game = get_game_service().game
    return ok({"status": "ok", "phase": game.phase.value, "round_no": game.round_no})
