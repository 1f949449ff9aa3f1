"""Community domain service."""

from collections.abc import Iterable

import logfire
from sqlalchemy.exc import IntegrityError

from rolo.domain.error import ConflictError, NotFoundError
from rolo.domain.model import Community, CommunityDetails, CommunityUpdate
from rolo.domain.repository import CommunityRepository, TransactionManager
from rolo.domain.value import CommunityHandle, CommunityId, UserId
from rolo.util.clock import utcnow

from .base import Service


class CommunityService(Service):
    """Domain service for community records and handle uniqueness."""

    def __init__(
        self,
        community_repository: CommunityRepository,
        transactions: TransactionManager,
    ) -> None:
        """Initialize community service.

        Args:
            community_repository: Community repository
            transactions: Transaction manager
        """
        self.community_repository = community_repository
        self.transactions = transactions

    async def find(self, community_id: CommunityId) -> Community | None:
        return await self.community_repository.find_by_id(community_id)

    async def get_by_id(self, community_id: CommunityId) -> Community:
        """Get a community by id.

        Raises:
            NotFoundError: If the community does not exist
        """
        community = await self.community_repository.find_by_id(community_id)
        if not community:
            raise NotFoundError("Community", str(community_id))
        return community

    async def get_by_handle(self, handle: CommunityHandle) -> Community:
        """Get a community by handle, ignoring case.

        Raises:
            NotFoundError: If no community uses the handle
        """
        with logfire.span("community_service.get_by_handle", handle=handle.root):
            community = await self.community_repository.find_by_handle(handle)
            if not community:
                logfire.info("Community handle not found", handle=handle.root)
                raise NotFoundError("Community", handle.root)
            return community

    async def get_many(self, community_ids: Iterable[CommunityId]) -> list[Community]:
        return await self.community_repository.find_by_ids(community_ids)

    async def is_handle_available(
        self, handle: CommunityHandle, exclude_id: CommunityId | None = None
    ) -> bool:
        exists = await self.community_repository.handle_exists(handle, exclude_id)
        return not exists

    async def create(
        self, community_id: CommunityId, owner_id: UserId, details: CommunityDetails
    ) -> Community:
        """Insert a community.

        Only the community row is written here; AccessControlService creates
        the owner collaborator in the same transaction.

        Raises:
            ConflictError: If the handle is taken
        """
        now = utcnow()
        community = Community(
            id=community_id,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
            **details.model_dump(),
        )
        try:
            async with self.transactions.atomic():
                saved = await self.community_repository.save(community)
        except IntegrityError:
            logfire.warn("Community handle taken at insert", handle=details.handle.root)
            raise ConflictError(f"Handle '{details.handle}' is already taken")

        logfire.info(
            "Community created",
            community_id=str(saved.id),
            handle=saved.handle.root,
            owner_id=str(owner_id),
        )
        return saved

    async def update(self, community: Community, update: CommunityUpdate) -> Community:
        """Apply a partial update.

        Raises:
            ConflictError: If the new handle is taken
        """
        changes = update.changes()
        if not changes:
            return community

        if "handle" in changes and changes["handle"] != community.handle:
            if not await self.is_handle_available(changes["handle"], community.id):
                raise ConflictError(f"Handle '{changes['handle']}' is already taken")

        updated = community.model_copy(update={**changes, "updated_at": utcnow()})
        try:
            async with self.transactions.atomic():
                saved = await self.community_repository.save(updated)
        except IntegrityError:
            raise ConflictError(f"Handle '{updated.handle}' is already taken")

        logfire.info(
            "Community updated",
            community_id=str(community.id),
            fields=sorted(changes),
        )
        return saved

    async def set_owner(self, community: Community, owner_id: UserId) -> Community:
        updated = community.model_copy(
            update={"owner_id": owner_id, "updated_at": utcnow()}
        )
        return await self.community_repository.save(updated)

    async def delete(self, community_id: CommunityId) -> None:
        deleted = await self.community_repository.delete(community_id)
        if not deleted:
            raise NotFoundError("Community", str(community_id))
        logfire.info("Community deleted", community_id=str(community_id))
