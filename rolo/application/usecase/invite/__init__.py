"""Invite use cases."""

from rolo.application.usecase.invite.accept_invite import (
    AcceptInviteRequest,
    AcceptInviteResponse,
    AcceptInviteUseCase,
)
from rolo.application.usecase.invite.common import InviteItem
from rolo.application.usecase.invite.expire_invites import (
    ExpireInvitesRequest,
    ExpireInvitesResponse,
    ExpireInvitesUseCase,
)
from rolo.application.usecase.invite.list_invites import (
    ListInvitesRequest,
    ListInvitesResponse,
    ListInvitesUseCase,
)
from rolo.application.usecase.invite.send_invite import (
    SendInviteRequest,
    SendInviteUseCase,
)
from rolo.application.usecase.invite.validate_invite import (
    ValidateInviteRequest,
    ValidateInviteResponse,
    ValidateInviteUseCase,
)

__all__ = [
    "AcceptInviteRequest",
    "AcceptInviteResponse",
    "AcceptInviteUseCase",
    "ExpireInvitesRequest",
    "ExpireInvitesResponse",
    "ExpireInvitesUseCase",
    "InviteItem",
    "ListInvitesRequest",
    "ListInvitesResponse",
    "ListInvitesUseCase",
    "SendInviteRequest",
    "SendInviteUseCase",
    "ValidateInviteRequest",
    "ValidateInviteResponse",
    "ValidateInviteUseCase",
]
