"""SQL implementation of MessageRepository."""

from datetime import datetime

from sqlalchemy import and_, func
from sqlmodel import col, select
from structlog.stdlib import BoundLogger

from slackvault.domain.entities.message import Message
from slackvault.domain.entities.projections import ParentMessage, ReplyMessage
from slackvault.domain.entities.types import normalized_ts
from slackvault.domain.entities.user import User
from slackvault.domain.timestamp_codec import parse_timestamp
from slackvault.infrastructure.logging import get_logger
from slackvault.infrastructure.persistence.database import Database
from slackvault.infrastructure.persistence.thread_aggregator import (
    reply_counts_subquery,
)


class SqlMessageRepository:
    """SQL implementation of MessageRepository.

    Pages through top-level messages with their reply counts and expands
    threads into their replies.
    """

    def __init__(self, database: Database, logger: BoundLogger | None = None) -> None:
        """Initialize the repository.

        Args:
            database: Database instance for query execution.
            logger: Logger instance.
        """
        self._database = database
        self._logger = logger or get_logger(__name__)

    async def fetch_page(
        self,
        channel_id: str,
        cursor: datetime | None,
        page_size: int,
        since: datetime,
        *,
        timeout: float | None = None,
    ) -> list[ParentMessage]:
        """Fetch one page of top-level messages.

        Returns messages with ts greater than both `since` and `cursor`
        (when given), sorted by ts ascending, each annotated with its reply
        count (0 for messages without replies).

        Args:
            channel_id: The channel ID.
            cursor: ts of the last message already seen, or None.
            page_size: Maximum number of messages to return.
            since: Channel watermark.
            timeout: Deadline in seconds for the query.

        Returns:
            List of parent messages, possibly empty.

        Raises:
            ValueError: If page_size is not positive.
        """
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")

        self._logger.debug(
            "Fetching message page",
            channel_id=channel_id,
            cursor=cursor,
            since=since,
            page_size=page_size,
        )

        counts = reply_counts_subquery(channel_id)
        statement = (
            select(
                Message,
                User,
                func.coalesce(counts.c.reply_count, 0).label("reply_count"),
            )
            .join(User, col(User.id) == col(Message.user_id))
            .outerjoin(
                counts,
                and_(
                    normalized_ts(col(Message.ts)) == counts.c.parent_ts,
                    col(Message.user_id) == counts.c.parent_user_id,
                ),
            )
            .where(Message.channel_id == channel_id)
            .where(Message.parent_user_id == "")
            .where(col(Message.ts) > since)
        )
        # The watermark and the cursor are separate lower bounds
        if cursor is not None:
            statement = statement.where(col(Message.ts) > cursor)
        statement = statement.order_by(col(Message.ts).asc()).limit(page_size)

        rows = await self._database.fetch_all(statement, timeout=timeout)
        return [
            ParentMessage(message=message, author=author, reply_count=reply_count)
            for message, author, reply_count in rows
        ]

    async def fetch_replies(
        self,
        parent_ts: datetime | str,
        channel_id: str,
        parent_user_id: str,
        *,
        timeout: float | None = None,
    ) -> list[ReplyMessage]:
        """Fetch all replies of a thread, oldest first.

        Args:
            parent_ts: The parent message's ts, as a datetime or in the
                store's text format.
            channel_id: The channel ID.
            parent_user_id: The parent message's author.
            timeout: Deadline in seconds for the query.

        Returns:
            List of replies, empty if the thread has none.

        Raises:
            InvalidTimestampError: If `parent_ts` is a malformed string.
        """
        if isinstance(parent_ts, str):
            parent_ts = parse_timestamp(parent_ts)

        self._logger.debug(
            "Fetching replies",
            channel_id=channel_id,
            parent_ts=parent_ts,
            parent_user_id=parent_user_id,
        )

        statement = (
            select(Message, User)
            .join(User, col(User.id) == col(Message.user_id))
            .where(normalized_ts(col(Message.thread_ts)) == parent_ts)
            .where(Message.channel_id == channel_id)
            .where(Message.parent_user_id == parent_user_id)
            .order_by(col(Message.ts).asc())
        )

        rows = await self._database.fetch_all(statement, timeout=timeout)
        return [
            ReplyMessage(message=message, author=author) for message, author in rows
        ]
