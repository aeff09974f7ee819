"""SQL implementation of ChannelCatalog."""

from sqlmodel import col, select
from structlog.stdlib import BoundLogger

from slackvault.domain.entities.channel import Channel
from slackvault.domain.errors import NotFoundError
from slackvault.infrastructure.logging import get_logger
from slackvault.infrastructure.persistence.database import Database


class SqlChannelCatalog:
    """SQL implementation of ChannelCatalog."""

    def __init__(self, database: Database, logger: BoundLogger | None = None) -> None:
        """Initialize the catalog.

        Args:
            database: Database instance for query execution.
            logger: Logger instance.
        """
        self._database = database
        self._logger = logger or get_logger(__name__)

    async def list_all(self, *, timeout: float | None = None) -> list[Channel]:
        """List all channels sorted by name ascending."""
        rows = await self._database.fetch_all(
            select(Channel).order_by(col(Channel.name).asc()), timeout=timeout
        )
        return [row[0] for row in rows]

    async def get_by_name(self, name: str, *, timeout: float | None = None) -> Channel:
        """Get a channel by name.

        Args:
            name: Channel name without the leading '#'.

        Returns:
            The channel.

        Raises:
            NotFoundError: If no channel has that name.
        """
        row = await self._database.fetch_one_or_none(
            select(Channel).where(Channel.name == name), timeout=timeout
        )
        if row is None:
            self._logger.debug("Channel not found", channel_name=name)
            raise NotFoundError("channel", name)
        return row[0]

    async def get_channel_info(
        self, name: str, *, timeout: float | None = None
    ) -> Channel:
        """Get a channel by name. Same contract as get_by_name()."""
        return await self.get_by_name(name, timeout=timeout)
