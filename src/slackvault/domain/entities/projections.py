"""Read models handed to the rendering layer."""

from datetime import datetime

from pydantic import BaseModel

from slackvault.domain.entities.channel import Channel
from slackvault.domain.entities.message import Message
from slackvault.domain.entities.user import User
from slackvault.domain.timestamp_codec import format_timestamp


class ReplyMessage(BaseModel):
    """A message together with its author."""

    message: Message
    author: User

    @property
    def ts(self) -> datetime:
        """Raw message timestamp, usable as a pagination cursor."""
        return self.message.ts

    def display_ts(self) -> str:
        """Return the message timestamp formatted for display."""
        return format_timestamp(self.message.ts)


class ParentMessage(ReplyMessage):
    """A top-level message with the number of replies in its thread."""

    reply_count: int = 0


class SearchResult(ReplyMessage):
    """A message matching a full-text search, with its relevance score.

    Higher `rank` means more relevant.
    """

    rank: float


class ChannelPage(BaseModel):
    """One page of top-level messages of a channel.

    Attributes:
        channel: The channel the page belongs to.
        messages: Messages in ascending ts order.
        next_cursor: ts to pass to fetch the following page, or None when
            this page was the last one.
    """

    channel: Channel
    messages: list[ParentMessage]
    next_cursor: datetime | None = None
