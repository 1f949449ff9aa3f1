#!/usr/bin/env python3
"""Run database migrations with Logfire error tracking.

Usage:
    python scripts/run_migrations.py             # upgrade to head
    python scripts/run_migrations.py 3c1f9a2d7b40
    python scripts/run_migrations.py --downgrade base
"""

import argparse
import sys
import logfire
from alembic import command
from alembic.config import Config

from rolo.config import Settings
from rolo.util.logging import setup_logging
from rolo.util.observability import configure_logfire


def main() -> int:
    """Run migrations and log any errors to Logfire."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("revision", nargs="?", default="head")
    parser.add_argument(
        "--downgrade", action="store_true", help="Downgrade to the given revision"
    )
    args = parser.parse_args()

    settings = Settings()

    configure_logfire(settings, process="migrations")
    setup_logging(settings)

    direction = "downgrade" if args.downgrade else "upgrade"
    try:
        logfire.info(
            "Starting database migrations",
            direction=direction,
            revision=args.revision,
            environment=settings.environment,
        )

        # env.py reads the URL from Settings
        alembic_cfg = Config("alembic.ini")

        if args.downgrade:
            command.downgrade(alembic_cfg, args.revision)
        else:
            command.upgrade(alembic_cfg, args.revision)

        logfire.info("Database migrations completed successfully", direction=direction)
        return 0

    except Exception as e:
        logfire.error(
            "Database migration failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        # Re-raise so the container fails and doesn't start with broken schema
        raise


if __name__ == "__main__":
    sys.exit(main())
