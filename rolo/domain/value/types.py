"""Domain value objects for Rolo.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules for handles, emails, tokens and the
enumerations that drive the access-control state machines.
"""

import re
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from rolo.domain.value.common import RootValueObject, ValueObject
from rolo.domain.value.identifiers import UserId


class SeatClass(str, Enum):
    """Subscription capacity bucket consumed by an approved collaborator."""

    TEAM = "team"
    VIEWER = "viewer"


class Role(str, Enum):
    """Collaborator role within a community."""

    OWNER = "owner"
    ADMIN = "admin"
    LIMITED_ADMIN = "limited_admin"
    VIEWER = "viewer"

    @property
    def seat_class(self) -> SeatClass:
        """Owners, admins and limited admins count as team members."""
        if self is Role.VIEWER:
            return SeatClass.VIEWER
        return SeatClass.TEAM

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @classmethod
    def for_seat_class(cls, seat_class: SeatClass) -> frozenset["Role"]:
        """All roles that consume a seat of the given class."""
        return frozenset(role for role in cls if role.seat_class is seat_class)


class CollaboratorStatus(str, Enum):
    """Lifecycle state of a membership request.

    pending -> approved and pending -> rejected are the only transitions.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not CollaboratorStatus.PENDING


class InviteStatus(str, Enum):
    """Status of an invite."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"


class SubscriptionStatus(str, Enum):
    """Billing state recorded for a community subscription."""

    FREE = "free"
    TRIALING = "trialing"
    ACTIVE = "active"
    PAST_DUE = "past_due"
    UNPAID = "unpaid"
    CANCELED = "canceled"

    @property
    def grants_plan_limits(self) -> bool:
        """Whether the subscribed plan's limits apply in this state.

        Past-due subscriptions keep their limits during the provider's grace
        period; unpaid and canceled ones fall back to the default plan.
        """
        return self not in (SubscriptionStatus.UNPAID, SubscriptionStatus.CANCELED)


class BillingCycle(str, Enum):
    """Billing cycle of a paid plan."""

    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def period_days(self) -> int:
        return 365 if self is BillingCycle.YEARLY else 30


class AuditAction(str, Enum):
    """Mutating decisions recorded in the audit log."""

    COMMUNITY_CREATED = "community_created"
    COMMUNITY_UPDATED = "community_updated"
    COMMUNITY_DELETED = "community_deleted"
    JOIN_REQUESTED = "join_requested"
    COLLABORATOR_ADDED = "collaborator_added"
    COLLABORATOR_APPROVED = "collaborator_approved"
    COLLABORATOR_REJECTED = "collaborator_rejected"
    ROLE_CHANGED = "role_changed"
    COLLABORATOR_REMOVED = "collaborator_removed"
    OWNERSHIP_TRANSFERRED = "ownership_transferred"
    INVITE_SENT = "invite_sent"
    INVITE_ACCEPTED = "invite_accepted"
    INVITES_EXPIRED = "invites_expired"
    PLAN_CHANGED = "plan_changed"
    SUBSCRIPTION_CANCELED = "subscription_canceled"
    SUBSCRIPTION_REACTIVATED = "subscription_reactivated"
    SUBSCRIPTION_STATUS_CHANGED = "subscription_status_changed"
    PAYMENT_METHOD_UPDATED = "payment_method_updated"


class CommunityHandle(RootValueObject[str]):
    """Globally unique community handle.

    Normalized to lowercase with surrounding whitespace removed. Must be 3-63
    characters of lowercase letters, digits and hyphens, starting with a
    letter or digit. Examples: 'testcorp', 'river-rowing-club'
    """

    @field_validator("root", mode="before")
    @classmethod
    def normalize_handle(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("root")
    @classmethod
    def validate_handle_format(cls, v: str) -> str:
        """Validate handle format."""
        if len(v) < 3 or len(v) > 63:
            raise ValueError("Handle must be 3-63 characters")
        if not re.match(r"^[a-z0-9][a-z0-9-]*$", v):
            raise ValueError(
                "Handle can only contain lowercase letters, numbers, and hyphens"
            )
        return v


_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class EmailAddress(RootValueObject[str]):
    """Email address, normalized to lowercase."""

    @field_validator("root", mode="before")
    @classmethod
    def normalize_email(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("root")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        if len(v) > 255 or not _EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email address")
        return v


class PhoneNumber(RootValueObject[str]):
    """Contact phone number as entered, 7-32 characters."""

    @field_validator("root", mode="before")
    @classmethod
    def strip_phone(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("root")
    @classmethod
    def validate_phone_format(cls, v: str) -> str:
        if not re.match(r"^\+?[0-9 ().-]{7,32}$", v):
            raise ValueError("Invalid phone number")
        return v


class InviteToken(RootValueObject[str]):
    """URL-safe invite token carried by the accept deep link."""

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token is not empty."""
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Token must be 1-255 characters")
        return v


class IdentityClaims(ValueObject):
    """Verified identity returned by the identity provider boundary."""

    user_id: UserId
    email: str | None = None
    claims: dict[str, Any] = Field(default_factory=dict)
