"""Community entity.

A community is the tenant that owns collaborators, invites and a
subscription. Its handle is globally unique (case-insensitive).
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from rolo.domain.model.common import DomainModel, UpdateModel
from rolo.domain.value import (
    CommunityHandle,
    CommunityId,
    EmailAddress,
    PhoneNumber,
    UserId,
)
from rolo.util.clock import utcnow


class Community(DomainModel):
    """Community entity.

    Business rules:
    - Handle is unique across all communities, compared lowercased
    - Exactly one approved owner collaborator exists once creation completes
    - owner_id mirrors that collaborator's user id
    """

    id: CommunityId
    handle: CommunityHandle
    name: str = Field(min_length=1, max_length=255)
    email: EmailAddress
    phone_number: PhoneNumber
    tax_id: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    logo_url: Optional[str] = None
    owner_id: UserId
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class CommunityDetails(DomainModel):
    """Validated details supplied when creating a community."""

    handle: CommunityHandle
    name: str = Field(min_length=1, max_length=255)
    email: EmailAddress
    phone_number: PhoneNumber
    tax_id: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    logo_url: Optional[str] = None


class CommunityUpdate(UpdateModel):
    """Partial update of a community's editable fields."""

    handle: Optional[CommunityHandle] = None
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailAddress] = None
    phone_number: Optional[PhoneNumber] = None
    tax_id: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    logo_url: Optional[str] = None
