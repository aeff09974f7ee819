"""SQL implementation of UserDirectory."""

from sqlmodel import select

from slackvault.domain.entities.user import User
from slackvault.domain.errors import NotFoundError
from slackvault.infrastructure.persistence.database import Database


class SqlUserDirectory:
    """SQL implementation of UserDirectory."""

    def __init__(self, database: Database) -> None:
        self._database = database

    async def get_by_id(self, user_id: str, *, timeout: float | None = None) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If the user does not exist.
        """
        row = await self._database.fetch_one_or_none(
            select(User).where(User.id == user_id), timeout=timeout
        )
        if row is None:
            raise NotFoundError("user", user_id)
        return row[0]
