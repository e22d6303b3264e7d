"""Process-wide logging setup for callers embedding the advisory engine."""

from __future__ import annotations

import logging

from goldilocks.config import Settings, get_settings

_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def resolve_level(settings: Settings) -> int:
    if settings.debug:
        return logging.DEBUG
    return _LEVELS.get(settings.log_level.strip().lower(), logging.INFO)


def configure_logging(settings: Settings | None = None) -> int:
    """Configure root logging from settings and return the level applied."""

    settings = settings or get_settings()
    level = resolve_level(settings)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("goldilocks").setLevel(level)
    return level


__all__ = ["configure_logging", "resolve_level"]
