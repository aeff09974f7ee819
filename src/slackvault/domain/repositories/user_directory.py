"""UserDirectory protocol."""

from typing import Protocol

from slackvault.domain.entities.user import User


class UserDirectory(Protocol):
    """Read access to archived users."""

    async def get_by_id(self, user_id: str, *, timeout: float | None = None) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If the user does not exist.
            StoreUnavailableError: If the store cannot be reached.
        """
        ...
