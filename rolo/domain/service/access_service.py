"""Community access controller.

Answers "can user U do A in community C" and executes the collaborator state
transitions (create with owner, join, add, approve, reject, role change,
removal, ownership transfer). Every successful mutation is written to the
audit sink and published on the access event bus.
"""

from collections.abc import Iterable
from typing import Any
from uuid import uuid4

import logfire

from rolo.config import SubscriptionSettings
from rolo.domain.error import (
    ConflictError,
    ForbiddenError,
    InconsistencyError,
    InvalidTransitionError,
    ValidationError,
)
from rolo.domain.model import (
    AccessEvent,
    AccessEventKind,
    AccessState,
    Collaborator,
    CollaboratorUpdate,
    Community,
    CommunityDetails,
    CommunityUpdate,
    Membership,
)
from rolo.domain.repository import TransactionManager
from rolo.domain.value import (
    AuditAction,
    CollaboratorStatus,
    CommunityHandle,
    CommunityId,
    Role,
    SeatClass,
    UserId,
)

from .audit_service import AuditService
from .base import Service
from .collaborator_service import CollaboratorService
from .community_service import CommunityService
from .event_bus import AccessEventBus
from .seat_service import SeatLimitService

MANAGER_ROLES = frozenset({Role.OWNER, Role.ADMIN})
OWNER_ONLY = frozenset({Role.OWNER})
ANY_ROLE = frozenset(Role)


def _membership_snapshot(collaborator: Collaborator) -> dict[str, Any]:
    return collaborator.model_dump(mode="json", include={"user_id", "role", "status"})


class AccessControlService(Service):
    """Domain service orchestrating communities, collaborators and seat limits."""

    def __init__(
        self,
        community_service: CommunityService,
        collaborator_service: CollaboratorService,
        seat_limit_service: SeatLimitService,
        transactions: TransactionManager,
        audit_service: AuditService,
        event_bus: AccessEventBus,
        settings: SubscriptionSettings,
    ) -> None:
        """Initialize access control service.

        Args:
            community_service: Community domain service
            collaborator_service: Collaborator domain service
            seat_limit_service: Seat limit enforcer
            transactions: Transaction manager
            audit_service: Audit sink wrapper
            event_bus: Access event channel
            settings: Subscription settings (seat grant serialization)
        """
        self.community_service = community_service
        self.collaborator_service = collaborator_service
        self.seat_limit_service = seat_limit_service
        self.transactions = transactions
        self.audit_service = audit_service
        self.event_bus = event_bus
        self.settings = settings

    async def create_community(
        self, creator_id: UserId, details: CommunityDetails
    ) -> tuple[Community, Collaborator]:
        """Create a community and its owner collaborator as one unit.

        Args:
            creator_id: User creating the community, becomes the owner
            details: Validated community details

        Returns:
            Tuple of (community, owner collaborator)

        Raises:
            ConflictError: If the handle is taken
            InconsistencyError: If the community row survived a failed owner grant
        """
        with logfire.span(
            "access_control.create_community",
            creator_id=str(creator_id),
            handle=details.handle.root,
        ):
            if not await self.community_service.is_handle_available(details.handle):
                logfire.info("Community handle unavailable", handle=details.handle.root)
                raise ConflictError(f"Handle '{details.handle}' is already taken")

            community_id = CommunityId(uuid4())
            try:
                async with self.transactions.atomic():
                    community = await self.community_service.create(
                        community_id, creator_id, details
                    )
                    owner = await self.collaborator_service.create(
                        creator_id,
                        community_id,
                        Role.OWNER,
                        CollaboratorStatus.APPROVED,
                    )
            except Exception as e:
                logfire.warn(
                    "Community creation failed",
                    community_id=str(community_id),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                await self._ensure_no_ownerless_community(community_id, e)
                raise

            self.audit_service.record(
                creator_id,
                AuditAction.COMMUNITY_CREATED,
                "communities",
                community_id=community.id,
                record_id=community.id,
                new_values=community.model_dump(
                    mode="json", include={"handle", "name", "owner_id"}
                ),
            )
            await self._publish(AccessEventKind.COLLABORATOR_ADDED, owner, creator_id)
            return community, owner

    async def _ensure_no_ownerless_community(
        self, community_id: CommunityId, error: Exception
    ) -> None:
        # The caller re-raises the creation error if this check cannot run
        try:
            survivor = await self.community_service.find(community_id)
        except Exception as check_error:
            logfire.error(
                "Could not verify rollback of failed community creation",
                community_id=str(community_id),
                error=str(error),
                check_error=str(check_error),
            )
            return
        if survivor is None:
            return

        logfire.error(
            "Community persisted without owner after failed creation",
            community_id=str(community_id),
            error=str(error),
        )
        raise InconsistencyError(
            f"Community {community_id} was created but its owner grant failed"
        ) from error

    async def request_join(
        self, user_id: UserId, handle: CommunityHandle
    ) -> Collaborator:
        """Ask to join a community as a viewer, pending approval.

        Raises:
            NotFoundError: If no community uses the handle
            ConflictError: If the user already has a membership row there
        """
        with logfire.span(
            "access_control.request_join", user_id=str(user_id), handle=handle.root
        ):
            community = await self.community_service.get_by_handle(handle)
            collaborator = await self.collaborator_service.create(
                user_id,
                community.id,
                Role.VIEWER,
                CollaboratorStatus.PENDING,
            )

            self._audit_membership(
                user_id, AuditAction.JOIN_REQUESTED, collaborator, old=None
            )
            await self._publish(AccessEventKind.JOIN_REQUESTED, collaborator, user_id)
            return collaborator

    async def check_access(self, user_id: UserId) -> bool:
        """True iff the user is approved in at least one community."""
        return await self.collaborator_service.has_approved_membership(user_id)

    async def authorize(
        self,
        user_id: UserId,
        community_id: CommunityId,
        required_roles: Iterable[Role],
    ) -> Role:
        """Require an approved membership with one of the roles.

        Returns:
            The user's role in the community

        Raises:
            ForbiddenError: If the membership is missing, not approved or the
                role is not allowed
        """
        allowed = frozenset(required_roles)
        collaborator = await self.collaborator_service.get_membership(
            user_id, community_id
        )
        if collaborator and collaborator.is_approved and collaborator.role in allowed:
            return collaborator.role

        logfire.info(
            "Access denied",
            user_id=str(user_id),
            community_id=str(community_id),
            required=sorted(role.value for role in allowed),
            current_role=collaborator.role.value if collaborator else None,
            current_status=collaborator.status.value if collaborator else None,
        )
        raise ForbiddenError(
            str(user_id),
            str(community_id),
            [role.value for role in allowed],
            current_role=collaborator.role.value if collaborator else None,
            current_status=collaborator.status.value if collaborator else None,
        )

    async def grant_collaborator(
        self,
        acting_user_id: UserId,
        target_user_id: UserId,
        community_id: CommunityId,
        role: Role,
        status: CollaboratorStatus = CollaboratorStatus.APPROVED,
    ) -> Collaborator:
        """Write a membership grant without auditing or publishing it.

        Used directly by flows that wrap the grant in a larger transaction
        (invite acceptance) and emit their own records once it commits.

        An existing pending row is approved with the requested role when an
        approved grant is requested; any other existing row is a conflict.

        Raises:
            ValidationError: If the owner role or a rejected status is requested
            NotFoundError: If the community does not exist
            ConflictError: If the user already has a membership row
            SeatLimitExceededError: If the plan has no free seat of the role's class
        """
        if role == Role.OWNER:
            raise ValidationError(
                "The owner role is only granted at creation or by ownership transfer"
            )
        if status == CollaboratorStatus.REJECTED:
            raise ValidationError("A new collaborator cannot start out rejected")

        await self.community_service.get_by_id(community_id)

        async with self.transactions.atomic():
            existing = await self.collaborator_service.get_membership(
                target_user_id, community_id
            )
            approving_pending = (
                existing is not None
                and existing.status == CollaboratorStatus.PENDING
                and status == CollaboratorStatus.APPROVED
            )
            if existing and not approving_pending:
                raise ConflictError(
                    f"User {target_user_id} is already a collaborator "
                    f"of community {community_id}"
                )

            if status == CollaboratorStatus.APPROVED:
                await self._reserve_seat(community_id, role.seat_class)

            if existing:
                return await self.collaborator_service.approve(existing, role=role)
            return await self.collaborator_service.create(
                target_user_id, community_id, role, status, invited_by=acting_user_id
            )

    async def add_collaborator(
        self,
        acting_user_id: UserId,
        target_user_id: UserId,
        community_id: CommunityId,
        role: Role,
        status: CollaboratorStatus = CollaboratorStatus.APPROVED,
    ) -> Collaborator:
        """Grant a membership and record it.

        Seat limits are checked for approved grants in the role's seat class.
        See grant_collaborator for the error cases.
        """
        with logfire.span(
            "access_control.add_collaborator",
            acting_user_id=str(acting_user_id),
            target_user_id=str(target_user_id),
            community_id=str(community_id),
            role=role.value,
            status=status.value,
        ):
            collaborator = await self.grant_collaborator(
                acting_user_id, target_user_id, community_id, role, status
            )
            self._audit_membership(
                acting_user_id, AuditAction.COLLABORATOR_ADDED, collaborator, old=None
            )
            await self._publish(
                AccessEventKind.COLLABORATOR_ADDED, collaborator, acting_user_id
            )
            return collaborator

    async def update_collaborator(
        self,
        acting_user_id: UserId,
        community_id: CommunityId,
        target_user_id: UserId,
        update: CollaboratorUpdate,
    ) -> Collaborator:
        """Review a pending request and/or change an approved member's role.

        A status change is applied first, so a pending member can be approved
        with a new role in one call.

        Raises:
            ValidationError: If the update is empty or asks for the owner role
            ForbiddenError: If the acting user is not an owner or admin
            NotFoundError: If the target has no membership
            ConflictError: If the target is the owner
            InvalidTransitionError: If the status or role change is not allowed
            SeatLimitExceededError: If the change needs a seat the plan lacks
        """
        if update.is_empty():
            raise ValidationError("No collaborator changes requested")
        if update.role == Role.OWNER:
            raise ValidationError("Use an ownership transfer to change the owner")

        with logfire.span(
            "access_control.update_collaborator",
            acting_user_id=str(acting_user_id),
            community_id=str(community_id),
            target_user_id=str(target_user_id),
            status=update.status.value if update.status else None,
            role=update.role.value if update.role else None,
        ):
            await self.authorize(acting_user_id, community_id, MANAGER_ROLES)

            decisions: list[tuple[AuditAction, AccessEventKind]] = []
            async with self.transactions.atomic():
                original = await self.collaborator_service.require_membership(
                    target_user_id, community_id
                )
                if original.is_owner:
                    raise ConflictError(
                        "The owner's membership only changes through an ownership transfer"
                    )

                result = original
                if update.status is not None and update.status != original.status:
                    if update.status == CollaboratorStatus.APPROVED:
                        role = update.role or original.role
                        self._ensure_pending(original, update.status)
                        await self._reserve_seat(community_id, role.seat_class)
                        result = await self.collaborator_service.approve(
                            original, role=role
                        )
                        decisions.append(
                            (
                                AuditAction.COLLABORATOR_APPROVED,
                                AccessEventKind.COLLABORATOR_APPROVED,
                            )
                        )
                    elif update.status == CollaboratorStatus.REJECTED:
                        result = await self.collaborator_service.reject(original)
                        decisions.append(
                            (
                                AuditAction.COLLABORATOR_REJECTED,
                                AccessEventKind.COLLABORATOR_REJECTED,
                            )
                        )
                    else:
                        raise InvalidTransitionError(
                            "collaborator", original.status.value, update.status.value
                        )

                if update.role is not None and update.role != result.role:
                    if result.is_approved and result.role.seat_class is not update.role.seat_class:
                        await self._reserve_seat(community_id, update.role.seat_class)
                    result = await self.collaborator_service.change_role(
                        result, update.role
                    )
                    decisions.append(
                        (AuditAction.ROLE_CHANGED, AccessEventKind.ROLE_CHANGED)
                    )

            for action, kind in decisions:
                self._audit_membership(acting_user_id, action, result, old=original)
                await self._publish(kind, result, acting_user_id)
            return result

    async def review_collaborator(
        self,
        acting_user_id: UserId,
        community_id: CommunityId,
        target_user_id: UserId,
        approve: bool,
        role: Role | None = None,
    ) -> Collaborator:
        """Approve or reject a pending join request."""
        status = CollaboratorStatus.APPROVED if approve else CollaboratorStatus.REJECTED
        return await self.update_collaborator(
            acting_user_id,
            community_id,
            target_user_id,
            CollaboratorUpdate(status=status, role=role if approve else None),
        )

    async def change_role(
        self,
        acting_user_id: UserId,
        community_id: CommunityId,
        target_user_id: UserId,
        role: Role,
    ) -> Collaborator:
        """Change the role of an approved, non-owner collaborator."""
        return await self.update_collaborator(
            acting_user_id,
            community_id,
            target_user_id,
            CollaboratorUpdate(role=role),
        )

    async def remove_collaborator(
        self,
        acting_user_id: UserId,
        community_id: CommunityId,
        target_user_id: UserId,
    ) -> None:
        """Remove a membership. Members may remove themselves.

        Raises:
            ForbiddenError: If removing someone else without being owner or admin
            NotFoundError: If the target has no membership
            ConflictError: If the target is the owner
        """
        with logfire.span(
            "access_control.remove_collaborator",
            acting_user_id=str(acting_user_id),
            community_id=str(community_id),
            target_user_id=str(target_user_id),
        ):
            if acting_user_id != target_user_id:
                await self.authorize(acting_user_id, community_id, MANAGER_ROLES)

            target = await self.collaborator_service.require_membership(
                target_user_id, community_id
            )
            if target.is_owner:
                raise ConflictError("The community owner cannot be removed")

            await self.collaborator_service.remove(target)

            self.audit_service.record(
                acting_user_id,
                AuditAction.COLLABORATOR_REMOVED,
                "collaborators",
                community_id=community_id,
                record_id=target.id,
                old_values=_membership_snapshot(target),
            )
            await self._publish(
                AccessEventKind.COLLABORATOR_REMOVED, target, acting_user_id
            )

    async def transfer_ownership(
        self,
        acting_user_id: UserId,
        community_id: CommunityId,
        new_owner_id: UserId,
    ) -> tuple[Collaborator, Collaborator]:
        """Hand ownership to another approved member; the old owner becomes admin.

        Returns:
            Tuple of (new owner, previous owner)

        Raises:
            ForbiddenError: If the acting user is not the owner
            ValidationError: If the target is the acting user
            NotFoundError: If the target has no membership
            InvalidTransitionError: If the target is not approved
            SeatLimitExceededError: If promoting a viewer needs a team seat the plan lacks
        """
        with logfire.span(
            "access_control.transfer_ownership",
            acting_user_id=str(acting_user_id),
            community_id=str(community_id),
            new_owner_id=str(new_owner_id),
        ):
            await self.authorize(acting_user_id, community_id, OWNER_ONLY)
            if new_owner_id == acting_user_id:
                raise ValidationError("The owner already owns this community")

            async with self.transactions.atomic():
                community = await self.community_service.get_by_id(community_id)
                current_owner = await self.collaborator_service.require_membership(
                    acting_user_id, community_id
                )
                target = await self.collaborator_service.require_membership(
                    new_owner_id, community_id
                )
                if not target.is_approved:
                    raise InvalidTransitionError(
                        "collaborator", target.status.value, Role.OWNER.value
                    )
                if target.role.seat_class is SeatClass.VIEWER:
                    await self._reserve_seat(community_id, SeatClass.TEAM)

                previous = await self.collaborator_service.change_role(
                    current_owner, Role.ADMIN
                )
                new_owner = await self.collaborator_service.change_role(
                    target, Role.OWNER
                )
                await self.community_service.set_owner(community, new_owner_id)

            self.audit_service.record(
                acting_user_id,
                AuditAction.OWNERSHIP_TRANSFERRED,
                "communities",
                community_id=community_id,
                record_id=community_id,
                old_values={"owner_id": str(acting_user_id)},
                new_values={"owner_id": str(new_owner_id)},
            )
            await self._publish(
                AccessEventKind.OWNERSHIP_TRANSFERRED, new_owner, acting_user_id
            )
            return new_owner, previous

    async def update_community(
        self,
        acting_user_id: UserId,
        community_id: CommunityId,
        update: CommunityUpdate,
    ) -> Community:
        """Update community details; owner or admin only.

        Raises:
            ForbiddenError: If the acting user is not owner or admin
            NotFoundError: If the community does not exist
            ConflictError: If a new handle is taken
        """
        with logfire.span(
            "access_control.update_community",
            acting_user_id=str(acting_user_id),
            community_id=str(community_id),
        ):
            await self.authorize(acting_user_id, community_id, MANAGER_ROLES)
            community = await self.community_service.get_by_id(community_id)
            updated = await self.community_service.update(community, update)

            changed = sorted(update.changes())
            if changed:
                self.audit_service.record(
                    acting_user_id,
                    AuditAction.COMMUNITY_UPDATED,
                    "communities",
                    community_id=community_id,
                    record_id=community_id,
                    old_values=community.model_dump(mode="json", include=set(changed)),
                    new_values=updated.model_dump(mode="json", include=set(changed)),
                )
            return updated

    async def delete_community(
        self, acting_user_id: UserId, community_id: CommunityId
    ) -> None:
        """Delete a community with everything it owns; owner only."""
        with logfire.span(
            "access_control.delete_community",
            acting_user_id=str(acting_user_id),
            community_id=str(community_id),
        ):
            await self.authorize(acting_user_id, community_id, OWNER_ONLY)
            community = await self.community_service.get_by_id(community_id)
            await self.community_service.delete(community_id)
            self.audit_service.record(
                acting_user_id,
                AuditAction.COMMUNITY_DELETED,
                "communities",
                community_id=community_id,
                record_id=community_id,
                old_values=community.model_dump(mode="json", include={"handle", "name"}),
            )

    async def list_collaborators(
        self,
        acting_user_id: UserId,
        community_id: CommunityId,
        status: CollaboratorStatus | None = None,
    ) -> list[Collaborator]:
        """List collaborators; any approved member may look."""
        await self.authorize(acting_user_id, community_id, ANY_ROLE)
        return await self.collaborator_service.list_for_community(community_id, status)

    async def check_handle_availability(
        self, handle: CommunityHandle, exclude_id: CommunityId | None = None
    ) -> bool:
        return await self.community_service.is_handle_available(handle, exclude_id)

    async def list_memberships(
        self, user_id: UserId, status: CollaboratorStatus | None = None
    ) -> list[Collaborator]:
        return await self.collaborator_service.list_for_user(user_id, status)

    async def access_state(self, user_id: UserId) -> AccessState:
        """Compute the user's memberships and overall access in one snapshot."""
        with logfire.span("access_control.access_state", user_id=str(user_id)):
            collaborators = await self.list_memberships(user_id)
            communities = {
                community.id: community
                for community in await self.community_service.get_many(
                    [c.community_id for c in collaborators]
                )
            }

            memberships = [
                Membership(
                    community_id=c.community_id,
                    handle=communities[c.community_id].handle,
                    name=communities[c.community_id].name,
                    role=c.role,
                    status=c.status,
                )
                for c in collaborators
                if c.community_id in communities
            ]
            return AccessState(
                user_id=user_id,
                has_access=any(c.is_approved for c in collaborators),
                memberships=memberships,
            )

    async def _reserve_seat(self, community_id: CommunityId, seat_class: SeatClass) -> None:
        if self.settings.serialize_seat_grants:
            await self.transactions.lock_community(community_id)
        await self.seat_limit_service.ensure_can_add(community_id, seat_class)

    @staticmethod
    def _ensure_pending(collaborator: Collaborator, target: CollaboratorStatus) -> None:
        if collaborator.status != CollaboratorStatus.PENDING:
            raise InvalidTransitionError(
                "collaborator", collaborator.status.value, target.value
            )

    def _audit_membership(
        self,
        actor_id: UserId,
        action: AuditAction,
        collaborator: Collaborator,
        old: Collaborator | None,
    ) -> None:
        self.audit_service.record(
            actor_id,
            action,
            "collaborators",
            community_id=collaborator.community_id,
            record_id=collaborator.id,
            old_values=_membership_snapshot(old) if old else None,
            new_values=_membership_snapshot(collaborator),
        )

    async def _publish(
        self,
        kind: AccessEventKind,
        collaborator: Collaborator,
        actor_id: UserId | None,
    ) -> None:
        await self.event_bus.publish(
            AccessEvent(
                kind=kind,
                community_id=collaborator.community_id,
                user_id=collaborator.user_id,
                actor_id=actor_id,
                role=collaborator.role,
                status=collaborator.status,
            )
        )
