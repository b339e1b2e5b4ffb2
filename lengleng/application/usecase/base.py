"""Shared shape of the engine's use cases."""

from abc import ABC, abstractmethod
from typing import Any


class BaseUseCase(ABC):
    """One public engine operation.

    Subclasses take a pydantic request, call the invitation, ledger or
    reminder services, and return a pydantic response. Domain errors pass
    through unchanged for the caller to map.
    """

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        """Run the operation for one request."""
