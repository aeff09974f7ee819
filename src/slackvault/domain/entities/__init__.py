"""Domain entities."""

from slackvault.domain.entities.channel import Channel
from slackvault.domain.entities.message import Message
from slackvault.domain.entities.projections import (
    ChannelPage,
    ParentMessage,
    ReplyMessage,
    SearchResult,
)
from slackvault.domain.entities.user import User

__all__ = [
    "Channel",
    "ChannelPage",
    "Message",
    "ParentMessage",
    "ReplyMessage",
    "SearchResult",
    "User",
]
