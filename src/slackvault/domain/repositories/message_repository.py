"""MessageRepository protocol."""

from datetime import datetime
from typing import Protocol

from slackvault.domain.entities.projections import ParentMessage, ReplyMessage


class MessageRepository(Protocol):
    """Read access to channel messages and their threads."""

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
        count. Pass the ts of the last returned message as the next cursor.

        Args:
            channel_id: The channel ID.
            cursor: ts of the last message already seen, or None.
            page_size: Maximum number of messages to return.
            since: Channel watermark; older messages are never returned.
            timeout: Deadline in seconds for the query.

        Returns:
            List of parent messages, possibly empty.
        """
        ...

    async def fetch_replies(
        self,
        parent_ts: datetime | str,
        channel_id: str,
        parent_user_id: str,
        *,
        timeout: float | None = None,
    ) -> list[ReplyMessage]:
        """Fetch all replies of a thread.

        Returns replies sorted by ts ascending. The parent itself is not
        included.

        Args:
            parent_ts: The parent message's ts.
            channel_id: The channel ID.
            parent_user_id: The parent message's author.
            timeout: Deadline in seconds for the query.

        Returns:
            List of replies, empty if the thread has none.

        Raises:
            InvalidTimestampError: If `parent_ts` is a malformed string.
        """
        ...
