"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from decimal import Decimal
from typing import Any, Dict
from uuid import UUID

from rolo.domain.model import (
    AuditLog,
    Collaborator,
    Community,
    CommunitySubscription,
    Invite,
    SubscriptionPlan,
)
from rolo.domain.value import (
    AuditAction,
    AuditLogId,
    BillingCycle,
    CollaboratorId,
    CollaboratorStatus,
    CommunityHandle,
    CommunityId,
    EmailAddress,
    InviteId,
    InviteStatus,
    InviteToken,
    PhoneNumber,
    PlanId,
    Role,
    SubscriptionId,
    SubscriptionStatus,
    UserId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def _optional_uuid(value: Any) -> UUID | None:
    return _uuid(value) if value is not None else None


def row_to_community(row: Dict[str, Any]) -> Community:
    """Convert database row to Community domain model.

    Args:
        row: Database row as dict

    Returns:
        Community domain model
    """
    return Community(
        id=CommunityId(_uuid(row["id"])),
        handle=CommunityHandle(row["handle"]),
        name=row["name"],
        email=EmailAddress(row["email"]),
        phone_number=PhoneNumber(row["phone_number"]),
        tax_id=row.get("tax_id"),
        address=row.get("address"),
        city=row.get("city"),
        state=row.get("state"),
        zip=row.get("zip"),
        country=row.get("country"),
        logo_url=row.get("logo_url"),
        owner_id=UserId(_uuid(row["owner_id"])),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def community_to_dict(community: Community) -> Dict[str, Any]:
    """Convert Community domain model to database dict.

    Args:
        community: Community domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": community.id,
        "handle": community.handle.root,
        "name": community.name,
        "email": community.email.root,
        "phone_number": community.phone_number.root,
        "tax_id": community.tax_id,
        "address": community.address,
        "city": community.city,
        "state": community.state,
        "zip": community.zip,
        "country": community.country,
        "logo_url": community.logo_url,
        "owner_id": community.owner_id,
        "created_at": community.created_at,
        "updated_at": community.updated_at,
    }


def row_to_collaborator(row: Dict[str, Any]) -> Collaborator:
    """Convert database row to Collaborator domain model."""
    return Collaborator(
        id=CollaboratorId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        community_id=CommunityId(_uuid(row["community_id"])),
        role=Role(row["role"]),
        status=CollaboratorStatus(row["status"]),
        invited_by=UserId(_uuid(row["invited_by"])) if row.get("invited_by") else None,
        joined_at=row.get("joined_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def collaborator_to_dict(collaborator: Collaborator) -> Dict[str, Any]:
    """Convert Collaborator domain model to database dict."""
    return {
        "id": collaborator.id,
        "user_id": collaborator.user_id,
        "community_id": collaborator.community_id,
        "role": collaborator.role.value,
        "status": collaborator.status.value,
        "invited_by": collaborator.invited_by,
        "joined_at": collaborator.joined_at,
        "created_at": collaborator.created_at,
        "updated_at": collaborator.updated_at,
    }


def row_to_invite(row: Dict[str, Any]) -> Invite:
    """Convert database row to Invite domain model."""
    accepted_by = row.get("accepted_by_user_id")
    return Invite(
        id=InviteId(_uuid(row["id"])),
        community_id=CommunityId(_uuid(row["community_id"])),
        email=EmailAddress(row["email"]),
        role=Role(row["role"]),
        token=InviteToken(row["token"]),
        status=InviteStatus(row["status"]),
        invited_by=UserId(_uuid(row["invited_by"])),
        created_at=row["created_at"],
        expires_at=row["expires_at"],
        accepted_at=row.get("accepted_at"),
        accepted_by_user_id=UserId(_uuid(accepted_by)) if accepted_by else None,
    )


def invite_to_dict(invite: Invite) -> Dict[str, Any]:
    """Convert Invite domain model to database dict."""
    return {
        "id": invite.id,
        "community_id": invite.community_id,
        "email": invite.email.root,
        "role": invite.role.value,
        "token": invite.token.root,
        "status": invite.status.value,
        "invited_by": invite.invited_by,
        "created_at": invite.created_at,
        "expires_at": invite.expires_at,
        "accepted_at": invite.accepted_at,
        "accepted_by_user_id": invite.accepted_by_user_id,
    }


def row_to_plan(row: Dict[str, Any]) -> SubscriptionPlan:
    """Convert database row to SubscriptionPlan domain model."""
    return SubscriptionPlan(
        id=PlanId(_uuid(row["id"])),
        name=row["name"],
        display_name=row["display_name"],
        description=row.get("description"),
        price_monthly=Decimal(row["price_monthly"]),
        price_yearly=Decimal(row["price_yearly"]),
        max_team_members=row["max_team_members"],
        max_viewers=row["max_viewers"],
        features=row.get("features") or {},
        is_active=row["is_active"],
    )


def plan_to_dict(plan: SubscriptionPlan) -> Dict[str, Any]:
    """Convert SubscriptionPlan domain model to database dict."""
    return plan.model_dump()


def row_to_subscription(row: Dict[str, Any]) -> CommunitySubscription:
    """Convert database row to CommunitySubscription domain model."""
    return CommunitySubscription(
        id=SubscriptionId(_uuid(row["id"])),
        community_id=CommunityId(_uuid(row["community_id"])),
        plan_id=PlanId(_uuid(row["plan_id"])),
        status=SubscriptionStatus(row["status"]),
        billing_cycle=BillingCycle(row["billing_cycle"]),
        current_period_start=row["current_period_start"],
        current_period_end=row.get("current_period_end"),
        cancel_at_period_end=row["cancel_at_period_end"],
        canceled_at=row.get("canceled_at"),
        stripe_subscription_id=row.get("stripe_subscription_id"),
        stripe_customer_id=row.get("stripe_customer_id"),
        payment_method_id=row.get("payment_method_id"),
        has_payment_method=row["has_payment_method"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def subscription_to_dict(subscription: CommunitySubscription) -> Dict[str, Any]:
    """Convert CommunitySubscription domain model to database dict."""
    data = subscription.model_dump()
    data["status"] = subscription.status.value
    data["billing_cycle"] = subscription.billing_cycle.value
    return data


def row_to_audit_log(row: Dict[str, Any]) -> AuditLog:
    """Convert database row to AuditLog domain model."""
    return AuditLog(
        id=AuditLogId(_uuid(row["id"])),
        actor_id=UserId(_uuid(row["actor_id"])) if row.get("actor_id") else None,
        community_id=(
            CommunityId(_uuid(row["community_id"])) if row.get("community_id") else None
        ),
        action=AuditAction(row["action"]),
        table_name=row["table_name"],
        record_id=row.get("record_id"),
        old_values=row.get("old_values"),
        new_values=row.get("new_values"),
        ip_address=str(row["ip_address"]) if row.get("ip_address") else None,
        user_agent=row.get("user_agent"),
        created_at=row["created_at"],
    )


def audit_log_to_dict(entry: AuditLog) -> Dict[str, Any]:
    """Convert AuditLog domain model to database dict."""
    data = entry.model_dump()
    data["action"] = entry.action.value
    return data
