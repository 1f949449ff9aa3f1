"""PostgreSQL transaction manager.

Atomic blocks are SAVEPOINTs inside the request session's transaction, which
is committed once at the end of the request.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import logfire
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rolo.domain.repository import TransactionManager
from rolo.domain.value import CommunityId


class PostgresTransactionManager(TransactionManager):
    """TransactionManager over a request-scoped AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        async with self.session.begin_nested():
            yield

    async def lock_community(self, community_id: CommunityId) -> None:
        """Take a transaction-scoped advisory lock keyed by the community id.

        Released when the request transaction commits or rolls back.
        """
        if not self.session.in_nested_transaction():
            raise RuntimeError("lock_community must be called inside atomic()")

        with logfire.span("transaction.lock_community", community_id=str(community_id)):
            await self.session.execute(
                select(
                    func.pg_advisory_xact_lock(
                        func.hashtextextended(str(community_id), 0)
                    )
                )
            )
