#!/usr/bin/env python3
"""Start the FastAPI application with Logfire error tracking for startup errors."""

import sys
import logfire
import uvicorn

from rolo.config import Settings
from rolo.util.error import ConfigurationError
from rolo.util.logging import setup_logging
from rolo.util.observability import configure_logfire


def main() -> int:
    """Start the application and log any startup errors to Logfire."""
    settings = Settings()

    # Configure Logfire early to catch startup errors
    configure_logfire(settings)
    setup_logging(settings)

    try:
        if settings.environment in ("staging", "production"):
            unset = settings.check_production_secrets()
            if unset:
                raise ConfigurationError(
                    f"Placeholder secrets in {settings.environment}: {', '.join(unset)}"
                )

        logfire.info(
            "Starting Rolo API",
            environment=settings.environment,
            verifier=settings.auth.verifier,
        )

        # The app module builds the DI container on import
        uvicorn.run(
            "rolo.interface.api.app:app",
            host="0.0.0.0",
            port=settings.port,
            log_level="debug" if settings.debug else "info",
            log_config=None,  # Keep the Logfire handler from setup_logging
        )

        return 0

    except Exception as e:
        logfire.error(
            "Application startup failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container fails properly
        raise


if __name__ == "__main__":
    sys.exit(main())
