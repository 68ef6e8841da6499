"""Process-level logging setup for the API and the command line."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "[%(asctime)s] [%(name)s] %(levelname)s %(message)s"
LOG_LEVEL_ENV = "SALARYTAX_LOG_LEVEL"
ENVIRONMENT_ENV = "SALARYTAX_ENV"

_LOGGER = logging.getLogger(__name__)


def resolve_log_level(explicit: str | None = None) -> int:
    """Return the level to use: explicit, then environment, then deployment default.

    Production deployments only report warnings and errors; everything else
    logs down to debug.
    """

    requested = explicit or os.getenv(LOG_LEVEL_ENV)
    if requested:
        level = logging.getLevelName(requested.strip().upper())
        if isinstance(level, int):
            return level
        _LOGGER.warning("Ignoring unknown log level: %s", requested)

    environment = os.getenv(ENVIRONMENT_ENV, "").strip().lower()
    if environment in {"prod", "production"}:
        return logging.WARNING
    return logging.DEBUG


def configure_logging(level: str | None = None) -> int:
    """Configure the root logger once and return the effective level."""

    resolved = resolve_log_level(level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)
    return resolved


__all__ = ["LOG_FORMAT", "configure_logging", "resolve_log_level"]
