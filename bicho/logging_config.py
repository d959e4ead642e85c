"""Logging configuration."""

from __future__ import annotations

import logging

from flask import Flask


def configure_logging(app: Flask) -> None:
    """Configure plain stdlib logging for the app and the game engine."""

    level_name = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger("bicho").setLevel(level)

    # Per-request access lines drown out round logs when polling.
    logging.getLogger("werkzeug").setLevel(max(level, logging.WARNING))
