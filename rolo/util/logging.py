"""Standard library logging routed into Logfire.

Our own code logs through ``logfire`` directly. uvicorn, alembic and the
libraries below use ``logging``; their records are forwarded so one stream
holds everything. Call after ``configure_logfire``.
"""

import logging

import logfire

from rolo.config import Settings

# Chatty at INFO; their useful signal already arrives as spans
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "asyncpg")


def setup_logging(settings: Settings) -> None:
    """Forward ``logging`` records to Logfire at the configured level.

    Args:
        settings: Application settings (``debug`` selects DEBUG over INFO)
    """
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        handlers=[logfire.LogfireLoggingHandler()],
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # uvicorn installs its own handlers; let its records reach the root instead
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
