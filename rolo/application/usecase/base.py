"""Base use case."""

from abc import ABC, abstractmethod
from typing import Any


class BaseUseCase(ABC):
    """Base use case: one authenticated request, orchestrated over domain services."""

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        """Run the use case.

        Domain errors propagate unchanged; the interface layer maps them.
        """
        pass
