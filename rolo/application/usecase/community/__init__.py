"""Community use cases."""

from rolo.application.usecase.community.check_handle import (
    CheckHandleRequest,
    CheckHandleResponse,
    CheckHandleUseCase,
)
from rolo.application.usecase.community.common import CommunityItem
from rolo.application.usecase.community.create_community import (
    CreateCommunityRequest,
    CreateCommunityResponse,
    CreateCommunityUseCase,
    InviteeInfo,
)
from rolo.application.usecase.community.delete_community import (
    DeleteCommunityRequest,
    DeleteCommunityUseCase,
)
from rolo.application.usecase.community.get_access_state import (
    GetAccessStateRequest,
    GetAccessStateResponse,
    GetAccessStateUseCase,
    MembershipItem,
)
from rolo.application.usecase.community.request_join import (
    RequestJoinRequest,
    RequestJoinUseCase,
)
from rolo.application.usecase.community.update_community import (
    UpdateCommunityRequest,
    UpdateCommunityUseCase,
)

__all__ = [
    "CheckHandleRequest",
    "CheckHandleResponse",
    "CheckHandleUseCase",
    "CommunityItem",
    "CreateCommunityRequest",
    "CreateCommunityResponse",
    "CreateCommunityUseCase",
    "DeleteCommunityRequest",
    "DeleteCommunityUseCase",
    "GetAccessStateRequest",
    "GetAccessStateResponse",
    "GetAccessStateUseCase",
    "InviteeInfo",
    "MembershipItem",
    "RequestJoinRequest",
    "RequestJoinUseCase",
    "UpdateCommunityRequest",
    "UpdateCommunityUseCase",
]
