"""Invite domain service."""

from datetime import datetime, timedelta
from uuid import uuid4

import logfire
from sqlalchemy.exc import IntegrityError

from rolo.config import InvitationSettings
from rolo.domain.error import ConflictError, NotFoundError, ValidationError
from rolo.domain.model import (
    AccessEvent,
    AccessEventKind,
    Collaborator,
    Invite,
    InviteValidity,
)
from rolo.domain.repository import InviteRepository, TransactionManager
from rolo.domain.value import (
    AuditAction,
    CollaboratorStatus,
    CommunityId,
    EmailAddress,
    InviteId,
    InviteStatus,
    InviteToken,
    Role,
    UserId,
)
from rolo.util.clock import utcnow

from .access_service import AccessControlService
from .audit_service import AuditService
from .base import Service
from .event_bus import AccessEventBus


def _redact(token: InviteToken) -> str:
    return token.root[:8] + "..."


class InviteService(Service):
    """Domain service for time-limited, single-use community invites."""

    def __init__(
        self,
        invite_repository: InviteRepository,
        access_control: AccessControlService,
        transactions: TransactionManager,
        audit_service: AuditService,
        event_bus: AccessEventBus,
        settings: InvitationSettings,
    ) -> None:
        """Initialize invite service.

        Args:
            invite_repository: Invite repository
            access_control: Access controller used to grant the invited role
            transactions: Transaction manager
            audit_service: Audit sink wrapper
            event_bus: Access event channel
            settings: Invitation settings (expiry)
        """
        self.invite_repository = invite_repository
        self.access_control = access_control
        self.transactions = transactions
        self.audit_service = audit_service
        self.event_bus = event_bus
        self.settings = settings

    async def send_invite(
        self,
        inviter_id: UserId,
        community_id: CommunityId,
        email: EmailAddress,
        role: Role,
    ) -> Invite:
        """Create a pending invite.

        The caller is responsible for checking that the inviter may manage
        the community.

        Args:
            inviter_id: User sending the invite
            community_id: Community the invite grants access to
            email: Invitee email
            role: Role granted on acceptance

        Returns:
            Created invite

        Raises:
            ValidationError: If the owner role is requested
            ConflictError: If a pending, unexpired invite exists for the email
        """
        with logfire.span(
            "invite_service.send_invite",
            inviter_id=str(inviter_id),
            community_id=str(community_id),
            role=role.value,
        ):
            if role == Role.OWNER:
                raise ValidationError("Invites cannot grant the owner role")

            now = utcnow()
            if await self.invite_repository.exists_pending_for_email(
                community_id, email, now
            ):
                logfire.warn(
                    "Invite already pending",
                    community_id=str(community_id),
                )
                raise ConflictError(f"An invite for {email} is already pending")

            invite = Invite(
                id=InviteId(uuid4()),
                community_id=community_id,
                email=email,
                role=role,
                token=InviteToken(str(uuid4())),
                status=InviteStatus.PENDING,
                invited_by=inviter_id,
                created_at=now,
                expires_at=now + timedelta(days=self.settings.expiry_days),
            )

            try:
                async with self.transactions.atomic():
                    saved = await self.invite_repository.save(invite)
            except IntegrityError:
                raise ConflictError("Invite token collision, please retry")

            self.audit_service.record(
                inviter_id,
                AuditAction.INVITE_SENT,
                "invites",
                community_id=community_id,
                record_id=saved.id,
                new_values={"email": email.root, "role": role.value},
            )
            logfire.info(
                "Invite created",
                invite_id=str(saved.id),
                community_id=str(community_id),
                expires_at=saved.expires_at.isoformat(),
            )
            return saved

    async def accept_invite(
        self, user_id: UserId, token: InviteToken
    ) -> tuple[Invite, Collaborator]:
        """Redeem an invite token and grant its role to the user.

        The invite is marked accepted and the collaborator granted in one
        atomic unit. The accept is conditional on the invite still being
        pending, so of two concurrent redemptions only one succeeds.

        Args:
            user_id: Authenticated user redeeming the token
            token: Invite token from the deep link

        Returns:
            Tuple of (accepted invite, granted collaborator)

        Raises:
            NotFoundError: If the token is unknown, already used or expired
            ConflictError: If the user already has a non-pending membership
            SeatLimitExceededError: If the community has no free seat for the role
        """
        with logfire.span(
            "invite_service.accept_invite",
            user_id=str(user_id),
            token=_redact(token),
        ):
            now = utcnow()
            invite = await self.invite_repository.find_by_token(token)
            if not invite or not invite.is_redeemable(now):
                logfire.info(
                    "Invite not redeemable",
                    token=_redact(token),
                    status=invite.status.value if invite else None,
                )
                raise NotFoundError("Invite", _redact(token))

            async with self.transactions.atomic():
                accepted = await self.invite_repository.mark_accepted(
                    invite.id, user_id, now
                )
                if accepted is None:
                    logfire.info("Invite accepted concurrently", invite_id=str(invite.id))
                    raise NotFoundError("Invite", _redact(token))

                collaborator = await self.access_control.grant_collaborator(
                    invite.invited_by,
                    user_id,
                    invite.community_id,
                    invite.role,
                    CollaboratorStatus.APPROVED,
                )

            self.audit_service.record(
                user_id,
                AuditAction.INVITE_ACCEPTED,
                "invites",
                community_id=invite.community_id,
                record_id=invite.id,
                old_values={"status": InviteStatus.PENDING.value},
                new_values={
                    "status": InviteStatus.ACCEPTED.value,
                    "role": collaborator.role.value,
                    "collaborator_id": str(collaborator.id),
                },
            )
            await self.event_bus.publish(
                AccessEvent(
                    kind=AccessEventKind.INVITE_ACCEPTED,
                    community_id=invite.community_id,
                    user_id=user_id,
                    actor_id=invite.invited_by,
                    role=collaborator.role,
                    status=collaborator.status,
                )
            )
            logfire.info(
                "Invite accepted",
                invite_id=str(invite.id),
                user_id=str(user_id),
                role=collaborator.role.value,
            )
            return accepted, collaborator

    async def get_by_token(self, token: InviteToken) -> Invite | None:
        return await self.invite_repository.find_by_token(token)

    async def validate_invite(
        self, token: InviteToken
    ) -> tuple[InviteValidity, Invite | None]:
        """Report whether a token could be redeemed right now, without using it."""
        invite = await self.invite_repository.find_by_token(token)
        if not invite:
            return InviteValidity.NOT_FOUND, None
        if invite.status == InviteStatus.ACCEPTED:
            return InviteValidity.ACCEPTED, invite
        if invite.status == InviteStatus.EXPIRED or invite.is_expired(utcnow()):
            return InviteValidity.EXPIRED, invite
        return InviteValidity.VALID, invite

    async def list_invites(
        self,
        community_id: CommunityId,
        status: InviteStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Invite]:
        return await self.invite_repository.find_by_community(
            community_id, status=status, limit=limit, offset=offset
        )

    async def expire_stale_invites(self, now: datetime | None = None) -> int:
        """Mark pending invites past their expiry as expired.

        Acceptance checks the expiry itself, so this sweep only keeps listings
        accurate.

        Returns:
            Number of invites expired
        """
        with logfire.span("invite_service.expire_stale_invites"):
            now = now or utcnow()
            expired = await self.invite_repository.expire_stale(now)
            if expired:
                self.audit_service.record(
                    None,
                    AuditAction.INVITES_EXPIRED,
                    "invites",
                    new_values={"expired": expired, "as_of": now.isoformat()},
                )
            logfire.info("Stale invites expired", expired=expired)
            return expired
