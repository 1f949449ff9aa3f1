#!/usr/bin/env python3
"""Mark pending invites past their expiry as expired (run from cron)."""

import asyncio
import sys
import logfire

from rolo.application.usecase.invite import ExpireInvitesRequest, ExpireInvitesUseCase
from rolo.config import Settings
from rolo.util.di.container import create_container
from rolo.util.observability import configure_logfire


async def run() -> int:
    container = create_container()
    try:
        async with container() as request_container:
            use_case = await request_container.get(ExpireInvitesUseCase)
            response = await use_case.execute(ExpireInvitesRequest())
    finally:
        await container.close()
    return response.expired


def main() -> int:
    settings = Settings()
    configure_logfire(settings, process="expire_invites")

    try:
        expired = asyncio.run(run())
        logfire.info("Invite expiry sweep finished", expired=expired)
        return 0
    except Exception as e:
        logfire.error(
            "Invite expiry sweep failed",
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
