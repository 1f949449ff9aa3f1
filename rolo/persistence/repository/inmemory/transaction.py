"""In-memory transaction manager for testing."""

from contextlib import AbstractAsyncContextManager

from rolo.domain.repository import TransactionManager
from rolo.domain.value import CommunityId

from .database import InMemoryDatabase


class InMemoryTransactionManager(TransactionManager):
    """TransactionManager over the InMemoryDatabase journal and locks."""

    def __init__(self, database: InMemoryDatabase) -> None:
        self.db = database

    def atomic(self) -> AbstractAsyncContextManager[None]:
        return self.db.atomic()

    async def lock_community(self, community_id: CommunityId) -> None:
        await self.db.lock_community(community_id)
