"""Collaborator domain service (role store operations)."""

from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from rolo.domain.error import ConflictError, InvalidTransitionError, NotFoundError
from rolo.domain.model import Collaborator
from rolo.domain.repository import CollaboratorRepository, TransactionManager
from rolo.domain.value import (
    CollaboratorId,
    CollaboratorStatus,
    CommunityId,
    Role,
    SeatClass,
    UserId,
)
from rolo.util.clock import utcnow

from .base import Service


class CollaboratorService(Service):
    """Reads and writes memberships and enforces the status state machine.

    Permission checks are made by AccessControlService before calling in.
    """

    def __init__(
        self,
        collaborator_repository: CollaboratorRepository,
        transactions: TransactionManager,
    ) -> None:
        """Initialize collaborator service.

        Args:
            collaborator_repository: Collaborator repository
            transactions: Transaction manager
        """
        self.collaborator_repository = collaborator_repository
        self.transactions = transactions

    async def get_membership(
        self, user_id: UserId, community_id: CommunityId
    ) -> Collaborator | None:
        return await self.collaborator_repository.find_by_user_and_community(
            user_id, community_id
        )

    async def require_membership(
        self, user_id: UserId, community_id: CommunityId
    ) -> Collaborator:
        """Get a membership or raise NotFoundError."""
        collaborator = await self.get_membership(user_id, community_id)
        if not collaborator:
            raise NotFoundError("Collaborator", f"{community_id}/{user_id}")
        return collaborator

    async def list_for_community(
        self, community_id: CommunityId, status: CollaboratorStatus | None = None
    ) -> list[Collaborator]:
        return await self.collaborator_repository.find_by_community(community_id, status)

    async def list_for_user(
        self, user_id: UserId, status: CollaboratorStatus | None = None
    ) -> list[Collaborator]:
        return await self.collaborator_repository.find_by_user(user_id, status)

    async def has_approved_membership(self, user_id: UserId) -> bool:
        return await self.collaborator_repository.exists_approved_for_user(user_id)

    async def count_seats(self, community_id: CommunityId, seat_class: SeatClass) -> int:
        """Count approved collaborators occupying seats of a class."""
        return await self.collaborator_repository.count_approved(
            community_id, Role.for_seat_class(seat_class)
        )

    async def create(
        self,
        user_id: UserId,
        community_id: CommunityId,
        role: Role,
        status: CollaboratorStatus,
        invited_by: UserId | None = None,
    ) -> Collaborator:
        """Create a membership.

        Args:
            user_id: Member
            community_id: Community
            role: Granted role
            status: Initial status (pending for join requests, approved for grants)
            invited_by: User that granted or invited the member

        Returns:
            Created collaborator

        Raises:
            ConflictError: If a collaborator already exists for the pair
        """
        with logfire.span(
            "collaborator_service.create",
            user_id=str(user_id),
            community_id=str(community_id),
            role=role.value,
            status=status.value,
        ):
            if status == CollaboratorStatus.REJECTED:
                raise InvalidTransitionError("collaborator", "new", status.value)

            now = utcnow()
            collaborator = Collaborator(
                id=CollaboratorId(uuid4()),
                user_id=user_id,
                community_id=community_id,
                role=role,
                status=status,
                invited_by=invited_by,
                joined_at=now if status == CollaboratorStatus.APPROVED else None,
                created_at=now,
                updated_at=now,
            )

            try:
                async with self.transactions.atomic():
                    saved = await self.collaborator_repository.save(collaborator)
            except IntegrityError:
                logfire.warn(
                    "Collaborator already exists",
                    user_id=str(user_id),
                    community_id=str(community_id),
                )
                raise ConflictError(
                    f"User {user_id} is already a collaborator of community {community_id}"
                )

            logfire.info(
                "Collaborator created",
                collaborator_id=str(saved.id),
                role=role.value,
                status=status.value,
            )
            return saved

    async def approve(
        self, collaborator: Collaborator, role: Role | None = None
    ) -> Collaborator:
        """Move a pending collaborator to approved, optionally with a new role.

        The write only applies while the stored row is still pending, so a
        review that raced this one and won is never overwritten.

        Raises:
            InvalidTransitionError: If the collaborator is not pending
        """
        self._ensure_pending(collaborator, CollaboratorStatus.APPROVED)
        now = utcnow()
        updated = collaborator.model_copy(
            update={
                "status": CollaboratorStatus.APPROVED,
                "role": role or collaborator.role,
                "joined_at": now,
                "updated_at": now,
            }
        )
        saved = await self._transition(updated, expected=CollaboratorStatus.PENDING)
        logfire.info(
            "Collaborator approved",
            collaborator_id=str(saved.id),
            role=saved.role.value,
        )
        return saved

    async def reject(self, collaborator: Collaborator) -> Collaborator:
        """Move a pending collaborator to rejected.

        Raises:
            InvalidTransitionError: If the collaborator is not pending
        """
        self._ensure_pending(collaborator, CollaboratorStatus.REJECTED)
        updated = collaborator.model_copy(
            update={"status": CollaboratorStatus.REJECTED, "updated_at": utcnow()}
        )
        saved = await self._transition(updated, expected=CollaboratorStatus.PENDING)
        logfire.info("Collaborator rejected", collaborator_id=str(saved.id))
        return saved

    async def change_role(self, collaborator: Collaborator, role: Role) -> Collaborator:
        """Change the role of an approved collaborator.

        Raises:
            InvalidTransitionError: If the collaborator is not approved
        """
        if not collaborator.is_approved:
            raise InvalidTransitionError(
                "collaborator role", collaborator.status.value, role.value
            )
        if collaborator.role == role:
            return collaborator

        updated = collaborator.model_copy(update={"role": role, "updated_at": utcnow()})
        saved = await self._transition(updated, expected=CollaboratorStatus.APPROVED)
        logfire.info(
            "Collaborator role changed",
            collaborator_id=str(saved.id),
            old_role=collaborator.role.value,
            new_role=role.value,
        )
        return saved

    async def remove(self, collaborator: Collaborator) -> None:
        deleted = await self.collaborator_repository.delete(collaborator.id)
        if not deleted:
            raise NotFoundError("Collaborator", str(collaborator.id))
        logfire.info("Collaborator removed", collaborator_id=str(collaborator.id))

    async def _transition(
        self, updated: Collaborator, expected: CollaboratorStatus
    ) -> Collaborator:
        saved = await self.collaborator_repository.save_if_status(updated, expected)
        if saved is not None:
            return saved

        current = await self.collaborator_repository.find_by_user_and_community(
            updated.user_id, updated.community_id
        )
        if current is None:
            raise NotFoundError("Collaborator", str(updated.id))
        logfire.warn(
            "Collaborator changed concurrently",
            collaborator_id=str(updated.id),
            expected=expected.value,
            current=current.status.value,
            target=updated.status.value,
        )
        raise InvalidTransitionError(
            "collaborator", current.status.value, updated.status.value
        )

    @staticmethod
    def _ensure_pending(collaborator: Collaborator, target: CollaboratorStatus) -> None:
        if collaborator.status != CollaboratorStatus.PENDING:
            logfire.warn(
                "Illegal collaborator status transition",
                collaborator_id=str(collaborator.id),
                current=collaborator.status.value,
                target=target.value,
            )
            raise InvalidTransitionError(
                "collaborator", collaborator.status.value, target.value
            )
