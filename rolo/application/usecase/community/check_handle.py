"""Check handle availability use case."""

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from rolo.application.usecase.base import BaseUseCase
from rolo.domain.service import AccessControlService
from rolo.domain.value import CommunityHandle


class CheckHandleRequest(BaseModel):
    handle: str


class CheckHandleResponse(BaseModel):
    handle: str
    available: bool
    message: str | None = None


class CheckHandleUseCase(BaseUseCase):
    """Report whether a handle is well-formed and not yet taken."""

    def __init__(self, access_control: AccessControlService) -> None:
        self.access_control = access_control

    async def execute(self, request: CheckHandleRequest) -> CheckHandleResponse:
        try:
            handle = CommunityHandle(request.handle)
        except PydanticValidationError as e:
            return CheckHandleResponse(
                handle=request.handle,
                available=False,
                message=e.errors()[0]["msg"],
            )

        available = await self.access_control.check_handle_availability(handle)
        return CheckHandleResponse(
            handle=handle.root,
            available=available,
            message=None if available else "Handle is already taken",
        )
