"""SQL implementation of SearchEngine."""

from dataclasses import dataclass
from typing import Any

from sqlalchemy.sql.expression import ColumnElement, Select
from sqlmodel import col, select
from structlog.stdlib import BoundLogger

from slackvault.config.models import SearchConfig
from slackvault.domain.entities.message import Message
from slackvault.domain.entities.projections import SearchResult
from slackvault.domain.entities.user import User
from slackvault.infrastructure.logging import get_logger
from slackvault.infrastructure.persistence.database import Database
from slackvault.infrastructure.persistence.fulltext import (
    FullTextBackend,
    WebSearchQuery,
    backend_for,
    parse_websearch,
)


@dataclass(frozen=True)
class SearchFilter:
    """Optional restrictions of a search to one channel and/or one user."""

    channel_id: str | None = None
    user_id: str | None = None

    def predicates(self) -> list[ColumnElement[bool]]:
        """WHERE predicates for the filters that are set."""
        predicates: list[ColumnElement[bool]] = []
        if self.channel_id is not None:
            predicates.append(col(Message.channel_id) == self.channel_id)
        if self.user_id is not None:
            predicates.append(col(Message.user_id) == self.user_id)
        return predicates


def build_search_statement(
    backend: FullTextBackend,
    query: WebSearchQuery,
    search_filter: SearchFilter,
    limit: int,
) -> Select[Any]:
    """Build the ranked search query.

    Every filter combination shares the select list, match predicate and
    ordering; filters only add WHERE predicates.

    Args:
        backend: Full-text support of the store's dialect.
        query: Parsed query text.
        search_filter: Channel and user restrictions.
        limit: Maximum number of rows.

    Returns:
        Select yielding (Message, User, relevance) rows, most relevant first,
        ties broken by newest ts first.
    """
    relevance = backend.rank(query).label("relevance")
    statement = backend.join_index(
        select(Message, User, relevance).join(
            User, col(User.id) == col(Message.user_id)
        )
    ).where(backend.match(query))
    for predicate in search_filter.predicates():
        statement = statement.where(predicate)
    return statement.order_by(relevance.desc(), col(Message.ts).desc()).limit(limit)


class SqlSearchEngine:
    """Ranked full-text search over message bodies.

    Uses the store's native text search: tsvector on PostgreSQL, FTS5 on
    SQLite.
    """

    def __init__(
        self,
        database: Database,
        config: SearchConfig | None = None,
        logger: BoundLogger | None = None,
    ) -> None:
        """Initialize the search engine.

        Args:
            database: Database instance for query execution.
            config: Search configuration (ranking flags, text search config).
            logger: Logger instance.
        """
        self._database = database
        self._config = config or SearchConfig()
        self._logger = logger or get_logger(__name__)
        self._backend: FullTextBackend | None = None

    @property
    def backend(self) -> FullTextBackend:
        """Full-text backend for the database's dialect."""
        if self._backend is None:
            self._backend = backend_for(self._database.dialect_name, self._config)
        return self._backend

    async def search(
        self,
        query_text: str,
        channel_id: str | None = None,
        user_id: str | None = None,
        limit: int = 50,
        *,
        timeout: float | None = None,
    ) -> list[SearchResult]:
        """Search messages.

        Args:
            query_text: Free text query (words, "phrases", -exclusions, or).
            channel_id: Only return messages from this channel.
            user_id: Only return messages by this user.
            limit: Maximum number of results.
            timeout: Deadline in seconds for the query.

        Returns:
            Results sorted by relevance, most relevant first. Empty when the
            query has no terms to look for.

        Raises:
            ValueError: If limit is not positive.
        """
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")

        query = parse_websearch(query_text)
        if query.is_empty():
            self._logger.debug("Empty search query", query=query_text)
            return []

        search_filter = SearchFilter(channel_id=channel_id, user_id=user_id)
        self._logger.debug(
            "Searching messages",
            query=query_text,
            channel_id=channel_id,
            user_id=user_id,
            limit=limit,
        )

        statement = build_search_statement(self.backend, query, search_filter, limit)
        rows = await self._database.fetch_all(statement, timeout=timeout)
        return [
            SearchResult(message=message, author=author, rank=float(relevance))
            for message, author, relevance in rows
        ]
