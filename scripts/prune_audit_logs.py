#!/usr/bin/env python3
"""Delete audit log entries older than the retention window.

Usage:
    python scripts/prune_audit_logs.py          # AUDIT__RETENTION_DAYS
    python scripts/prune_audit_logs.py --days 90
"""

import argparse
import asyncio
import sys
import logfire

from rolo.application.usecase.audit import PruneAuditLogsRequest, PruneAuditLogsUseCase
from rolo.config import Settings
from rolo.util.di.container import create_container
from rolo.util.observability import configure_logfire


async def run(days: int | None) -> int:
    container = create_container()
    try:
        async with container() as request_container:
            use_case = await request_container.get(PruneAuditLogsUseCase)
            response = await use_case.execute(
                PruneAuditLogsRequest(older_than_days=days)
            )
    finally:
        await container.close()
    return response.deleted


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--days", type=int, default=None)
    args = parser.parse_args()

    settings = Settings()
    configure_logfire(settings, process="prune_audit_logs")

    try:
        deleted = asyncio.run(run(args.days))
        logfire.info(
            "Audit log prune finished",
            deleted=deleted,
            older_than_days=args.days or settings.audit.retention_days,
        )
        return 0
    except Exception as e:
        logfire.error(
            "Audit log prune failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
