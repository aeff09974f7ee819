"""SearchEngine protocol."""

from typing import Protocol

from slackvault.domain.entities.projections import SearchResult


class SearchEngine(Protocol):
    """Ranked full-text search over message bodies."""

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

        The query text supports bare words (all must match), "quoted
        phrases", -excluded terms and `or` between alternatives.

        Args:
            query_text: Free text query.
            channel_id: Only return messages from this channel.
            user_id: Only return messages by this user.
            limit: Maximum number of results.
            timeout: Deadline in seconds for the query.

        Returns:
            Results sorted by relevance, most relevant first.
        """
        ...
