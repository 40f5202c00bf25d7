"""Process-wide logging setup for the CLI and services."""

from __future__ import annotations

import logging
import sys

_READABLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_STRUCTURED_FORMAT = (
    '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s",'
    '"pid":%(process)d,"message":"%(message)s"}'
)

# Client libraries that log every request or query at INFO/DEBUG.
_QUIET_LOGGERS = (
    "asyncpg",
    "httpcore",
    "httpx",
    "langchain",
    "langchain_core",
    "openai",
    "sqlalchemy.engine",
)


def setup_logging(level: str = "INFO", environment: str = "development") -> logging.Handler:
    """Route all logging to stderr through a single handler.

    Args:
        level: Root level name, case-insensitive.
        environment: ``"development"`` gets the readable format; any other
            environment gets one JSON-like object per line.

    Returns:
        The installed handler.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(_READABLE_FORMAT if environment == "development" else _STRUCTURED_FORMAT)
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
