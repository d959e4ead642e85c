"""Game session wiring for the Flask app.

One in-memory session per process, kept on ``app.extensions``.
"""

from __future__ import annotations

from flask import Flask, current_app

from bicho.config import GameSettings
from bicho.services.clock import Clock
from bicho.services.game_service import GameService

_EXTENSION_KEY = "bicho.game"


def init_game(app: Flask, clock: Clock | None = None) -> GameService:
    settings = GameSettings.from_mapping(app.config)
    service = GameService(settings, clock=clock)
    app.extensions[_EXTENSION_KEY] = service
    return service


def get_game_service() -> GameService:
    service = current_app.extensions.get(_EXTENSION_KEY)
    if service is None:
        raise RuntimeError("Game session not initialised; call init_game(app)")
    return service
