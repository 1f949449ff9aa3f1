#!/usr/bin/env python3
"""Apply a subscription status reported by the billing provider.

Meant for operators and the billing integration's worker, which verifies the
provider's signature before calling this.

Usage:
    python scripts/sync_subscription_status.py <community_id> <status>
"""

import argparse
import asyncio
import sys
import logfire

from rolo.application.usecase.subscription import (
    RecordStatusRequest,
    RecordStatusUseCase,
    SubscriptionItem,
)
from rolo.config import Settings
from rolo.domain.value import SubscriptionStatus
from rolo.util.di.container import create_container
from rolo.util.observability import configure_logfire


async def run(community_id: str, status: SubscriptionStatus) -> SubscriptionItem:
    container = create_container()
    try:
        async with container() as request_container:
            use_case = await request_container.get(RecordStatusUseCase)
            return await use_case.execute(
                RecordStatusRequest(community_id=community_id, status=status)
            )
    finally:
        await container.close()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("community_id")
    parser.add_argument("status", choices=[s.value for s in SubscriptionStatus])
    args = parser.parse_args()

    settings = Settings()
    configure_logfire(settings, process="sync_subscription_status")

    try:
        subscription = asyncio.run(
            run(args.community_id, SubscriptionStatus(args.status))
        )
        logfire.info(
            "Subscription status synced",
            community_id=args.community_id,
            status=subscription.status,
            plan_id=subscription.plan_id,
        )
        return 0
    except Exception as e:
        logfire.error(
            "Subscription status sync failed",
            community_id=args.community_id,
            error=str(e),
            error_type=type(e).__name__,
            _exc_info=sys.exc_info(),
        )
        raise


if __name__ == "__main__":
    sys.exit(main())
