"""Archive browsing service."""

from datetime import datetime

from structlog.stdlib import BoundLogger

from slackvault.config.models import ArchiveConfig, SearchConfig
from slackvault.domain.entities import (
    Channel,
    ChannelPage,
    ReplyMessage,
    SearchResult,
    User,
)
from slackvault.domain.repositories import (
    ChannelCatalog,
    MessageRepository,
    SearchEngine,
    UserDirectory,
)
from slackvault.domain.timestamp_codec import parse_timestamp


class ArchiveService:
    """Entry point for the rendering layer.

    Resolves channel names, applies per-channel watermarks and default
    limits, and delegates to the repositories.

    Args:
        channels: Channel catalog.
        users: User directory.
        messages: Message repository.
        search_engine: Full-text search engine.
        archive_config: Paging configuration.
        search_config: Search configuration.
        logger: Structured logger.
    """

    def __init__(
        self,
        channels: ChannelCatalog,
        users: UserDirectory,
        messages: MessageRepository,
        search_engine: SearchEngine,
        archive_config: ArchiveConfig,
        search_config: SearchConfig,
        logger: BoundLogger,
    ) -> None:
        self._channels = channels
        self._users = users
        self._messages = messages
        self._search_engine = search_engine
        self._archive_config = archive_config
        self._search_config = search_config
        self._logger = logger

    async def list_channels(self) -> list[Channel]:
        """List all channels sorted by name."""
        return await self._channels.list_all()

    async def channel_info(self, name: str) -> Channel:
        """Get a channel by name.

        Raises:
            NotFoundError: If no channel has that name.
        """
        return await self._channels.get_channel_info(name)

    async def user(self, user_id: str) -> User:
        """Get a user by ID.

        Raises:
            NotFoundError: If the user does not exist.
        """
        return await self._users.get_by_id(user_id)

    async def channel_page(
        self,
        channel_name: str,
        cursor: datetime | str | None = None,
        page_size: int | None = None,
    ) -> ChannelPage:
        """Get one page of top-level messages of a channel.

        Args:
            channel_name: Channel name.
            cursor: ts of the last message of the previous page, as a
                datetime or in the store's text format. None for the first
                page.
            page_size: Number of messages per page. Defaults to the
                configured page size.

        Returns:
            The page. `next_cursor` is None when fewer than `page_size`
            messages were returned.

        Raises:
            NotFoundError: If no channel has that name.
            InvalidTimestampError: If the cursor string is malformed.
        """
        if isinstance(cursor, str):
            cursor = parse_timestamp(cursor)
        size = page_size or self._archive_config.page_size

        channel = await self._channels.get_by_name(channel_name)
        messages = await self._messages.fetch_page(
            channel.id,
            cursor,
            size,
            self._archive_config.watermark_for(channel.name),
        )

        next_cursor = messages[-1].ts if len(messages) == size else None
        self._logger.info(
            "Channel page fetched",
            channel=channel.name,
            count=len(messages),
            has_more=next_cursor is not None,
        )
        return ChannelPage(channel=channel, messages=messages, next_cursor=next_cursor)

    async def thread(
        self, channel_name: str, parent_ts: datetime | str, parent_user_id: str
    ) -> list[ReplyMessage]:
        """Get the replies of a thread, oldest first.

        Raises:
            NotFoundError: If no channel has that name.
            InvalidTimestampError: If `parent_ts` is a malformed string.
        """
        if isinstance(parent_ts, str):
            parent_ts = parse_timestamp(parent_ts)
        channel = await self._channels.get_by_name(channel_name)
        return await self._messages.fetch_replies(parent_ts, channel.id, parent_user_id)

    async def search(
        self,
        query: str,
        channel_name: str | None = None,
        user_id: str | None = None,
        limit: int | None = None,
    ) -> list[SearchResult]:
        """Search messages, optionally within a channel and/or by a user.

        The limit defaults to the configured default and is capped at the
        configured maximum.

        Raises:
            NotFoundError: If `channel_name` is given and does not exist.
        """
        channel_id = None
        if channel_name is not None:
            channel_id = (await self._channels.get_by_name(channel_name)).id

        effective_limit = min(
            limit or self._search_config.default_limit, self._search_config.max_limit
        )
        results = await self._search_engine.search(
            query, channel_id=channel_id, user_id=user_id, limit=effective_limit
        )
        self._logger.info(
            "Search completed",
            query=query,
            channel=channel_name,
            user_id=user_id,
            count=len(results),
        )
        return results
