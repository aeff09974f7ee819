"""Persistence infrastructure."""

from slackvault.infrastructure.persistence.channel_catalog import SqlChannelCatalog
from slackvault.infrastructure.persistence.database import Database
from slackvault.infrastructure.persistence.message_repository import (
    SqlMessageRepository,
)
from slackvault.infrastructure.persistence.schema import create_schema
from slackvault.infrastructure.persistence.search_engine import SqlSearchEngine
from slackvault.infrastructure.persistence.user_directory import SqlUserDirectory

__all__ = [
    "Database",
    "SqlChannelCatalog",
    "SqlMessageRepository",
    "SqlSearchEngine",
    "SqlUserDirectory",
    "create_schema",
]
