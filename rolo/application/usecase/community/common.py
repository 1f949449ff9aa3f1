"""Community response items shared by the community use cases."""

from datetime import datetime

from pydantic import BaseModel

from rolo.domain.model import Community


class CommunityItem(BaseModel):
    """Community in responses."""

    community_id: str
    handle: str
    name: str
    email: str
    phone_number: str
    tax_id: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    logo_url: str | None = None
    owner_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_community(cls, community: Community) -> "CommunityItem":
        return cls(
            community_id=str(community.id),
            handle=community.handle.root,
            name=community.name,
            email=community.email.root,
            phone_number=community.phone_number.root,
            tax_id=community.tax_id,
            address=community.address,
            city=community.city,
            state=community.state,
            zip=community.zip,
            country=community.country,
            logo_url=community.logo_url,
            owner_id=str(community.owner_id),
            created_at=community.created_at,
            updated_at=community.updated_at,
        )
