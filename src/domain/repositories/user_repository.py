"""User repository protocol."""

from typing import Protocol
from uuid import UUID


class IUserRepository(Protocol):
    """Repository interface for User records.

    Users are provisioned by the identity service; this service only
    removes them when an account is deleted.
    """

    async def delete(self, id: UUID) -> bool:
        """Delete a user and return whether one existed."""
        ...
