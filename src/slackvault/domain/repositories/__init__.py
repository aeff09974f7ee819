"""Repository protocols."""

from slackvault.domain.repositories.channel_catalog import ChannelCatalog
from slackvault.domain.repositories.message_repository import MessageRepository
from slackvault.domain.repositories.search_engine import SearchEngine
from slackvault.domain.repositories.user_directory import UserDirectory

__all__ = ["ChannelCatalog", "MessageRepository", "SearchEngine", "UserDirectory"]
