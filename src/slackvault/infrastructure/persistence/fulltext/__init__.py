"""Full-text search support."""

from slackvault.infrastructure.persistence.fulltext.backends import (
    FullTextBackend,
    PostgresFullText,
    SqliteFullText,
    backend_for,
)
from slackvault.infrastructure.persistence.fulltext.websearch import (
    WebSearchQuery,
    parse_websearch,
    to_fts5_match,
    to_websearch_text,
)

__all__ = [
    "FullTextBackend",
    "PostgresFullText",
    "SqliteFullText",
    "WebSearchQuery",
    "backend_for",
    "parse_websearch",
    "to_fts5_match",
    "to_websearch_text",
]
