"""Animal draw wagering game: Flask application package."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from flask import Flask

if TYPE_CHECKING:
    from bicho.services.clock import Clock


def create_app(overrides: Mapping[str, Any] | None = None, clock: "Clock | None" = None) -> Flask:
    """Application factory.

    Args:
        overrides: Config values applied after the environment config
            (tests use this for seeds and reveal delays).
        clock: Optional clock for the game session (a ``ManualClock`` in tests).

    Returns:
        Configured Flask application.
    """
    load_dotenv()

    from bicho.config import get_config
    from bicho.error_handlers import register_error_handlers
    from bicho.logging_config import configure_logging
    from bicho.routes.game import game_bp
    from bicho.routes.health import health_bp
    from bicho.runtime import init_game

    app = Flask(__name__)
    app.config.from_object(get_config())
    if overrides:
        app.config.update(overrides)

    configure_logging(app)
    init_game(app, clock=clock)
    register_error_handlers(app)

    app.register_blueprint(health_bp)
    app.register_blueprint(game_bp, url_prefix="/api")

    return app
