"""Base model for all domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for all domain models.

    Entities are immutable; changes go through ``model_copy(update=...)``.
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
    )


class UpdateModel(BaseModel):
    """Base class for partial-update structs.

    Every field is optional and ``None`` means "leave unchanged".
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    def changes(self) -> dict:
        """Fields that were set to a value."""
        return {
            name: getattr(self, name)
            for name in type(self).model_fields
            if getattr(self, name) is not None
        }

    def is_empty(self) -> bool:
        return not self.changes()
