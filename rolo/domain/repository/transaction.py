"""Transaction boundary for compound operations."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager

from rolo.domain.value import CommunityId


class TransactionManager(ABC):
    """Groups several repository writes into one all-or-nothing unit.

    Used for community + owner creation, invite acceptance + grant, and
    seat check + grant.
    """

    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """Open an atomic block.

        Writes made inside the block are undone if it exits with an exception,
        which is then re-raised. Blocks may be nested.
        """
        pass

    @abstractmethod
    async def lock_community(self, community_id: CommunityId) -> None:
        """Serialize seat check-and-grant for a community.

        Must be called inside ``atomic()``. The lock is held until the
        enclosing transaction ends.
        """
        pass
