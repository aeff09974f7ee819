"""Message entity."""

from datetime import datetime

from sqlalchemy import Column, Index
from sqlmodel import Field, SQLModel

from slackvault.domain.entities.types import StoreTimestamp


class Message(SQLModel, table=True):
    """Slack message stored in the archive.

    A message is top-level when `parent_user_id` is empty. A reply carries
    the parent's `ts` in `thread_ts` and the parent's author in
    `parent_user_id`; queries join on that pair and assume it always matches
    an existing parent.

    Attributes:
        channel_id: Channel the message was posted in.
        user_id: Author's user ID.
        msg_text: Message body (markdown).
        ts: Message timestamp. Unique within a channel.
        thread_ts: Parent message's ts for replies.
        parent_user_id: Parent message's author for replies, "" otherwise.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("idx_messages_channel_ts", "channel_id", "ts"),
        Index("idx_messages_thread", "channel_id", "thread_ts", "parent_user_id"),
    )

    channel_id: str = Field(primary_key=True, foreign_key="channels.id")
    ts: datetime = Field(sa_column=Column(StoreTimestamp(), primary_key=True))
    user_id: str = Field(foreign_key="users.id", index=True)
    msg_text: str = Field(default="")
    thread_ts: datetime | None = Field(
        default=None, sa_column=Column(StoreTimestamp(), nullable=True)
    )
    parent_user_id: str = Field(default="")

    @property
    def is_reply(self) -> bool:
        """Return True if the message belongs to a thread."""
        return self.parent_user_id != ""
