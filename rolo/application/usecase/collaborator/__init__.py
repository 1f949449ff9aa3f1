"""Collaborator use cases."""

from rolo.application.usecase.collaborator.add_collaborator import (
    AddCollaboratorRequest,
    AddCollaboratorUseCase,
)
from rolo.application.usecase.collaborator.change_role import (
    ChangeRoleRequest,
    ChangeRoleUseCase,
)
from rolo.application.usecase.collaborator.common import CollaboratorItem
from rolo.application.usecase.collaborator.list_collaborators import (
    ListCollaboratorsRequest,
    ListCollaboratorsResponse,
    ListCollaboratorsUseCase,
)
from rolo.application.usecase.collaborator.remove_collaborator import (
    RemoveCollaboratorRequest,
    RemoveCollaboratorUseCase,
)
from rolo.application.usecase.collaborator.review_collaborator import (
    ReviewCollaboratorRequest,
    ReviewCollaboratorUseCase,
)
from rolo.application.usecase.collaborator.transfer_ownership import (
    TransferOwnershipRequest,
    TransferOwnershipResponse,
    TransferOwnershipUseCase,
)

__all__ = [
    "AddCollaboratorRequest",
    "AddCollaboratorUseCase",
    "ChangeRoleRequest",
    "ChangeRoleUseCase",
    "CollaboratorItem",
    "ListCollaboratorsRequest",
    "ListCollaboratorsResponse",
    "ListCollaboratorsUseCase",
    "RemoveCollaboratorRequest",
    "RemoveCollaboratorUseCase",
    "ReviewCollaboratorRequest",
    "ReviewCollaboratorUseCase",
    "TransferOwnershipRequest",
    "TransferOwnershipResponse",
    "TransferOwnershipUseCase",
]
