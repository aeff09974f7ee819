"""Dialect specific full-text index and ranking."""

from typing import Any, Protocol

from sqlalchemy import (
    Boolean,
    Float,
    cast,
    column,
    func,
    literal,
    literal_column,
    table,
)
from sqlalchemy.dialects.postgresql import REGCONFIG
from sqlalchemy.sql.expression import ColumnElement, Select

from slackvault.config.models import SearchConfig
from slackvault.infrastructure.persistence.fulltext.websearch import (
    WebSearchQuery,
    to_fts5_match,
    to_websearch_text,
)


class FullTextBackend(Protocol):
    """Text-search support of one SQL dialect."""

    def index_ddl(self) -> list[str]:
        """Statements that create the text-search index over messages."""
        ...

    def join_index(self, statement: Select[Any]) -> Select[Any]:
        """Join whatever the match and rank expressions need."""
        ...

    def match(self, query: WebSearchQuery) -> ColumnElement[bool]:
        """Predicate that is true for messages matching the query."""
        ...

    def rank(self, query: WebSearchQuery) -> ColumnElement[float]:
        """Relevance score; higher is more relevant."""
        ...


class PostgresFullText:
    """tsvector column ranked with ts_rank_cd."""

    INDEX_COLUMN = "textsearchable_index_col"

    def __init__(self, config: SearchConfig) -> None:
        self._config = config

    def index_ddl(self) -> list[str]:
        language = self._config.text_search_config
        return [
            f"ALTER TABLE messages ADD COLUMN IF NOT EXISTS {self.INDEX_COLUMN} "
            f"tsvector GENERATED ALWAYS AS "
            f"(to_tsvector('{language}', coalesce(msg_text, ''))) STORED",
            f"CREATE INDEX IF NOT EXISTS textsearch_idx "
            f"ON messages USING GIN ({self.INDEX_COLUMN})",
        ]

    def _document(self) -> ColumnElement[Any]:
        return literal_column(f"messages.{self.INDEX_COLUMN}")

    def _tsquery(self, query: WebSearchQuery) -> ColumnElement[Any]:
        return func.websearch_to_tsquery(
            cast(literal(self._config.text_search_config), REGCONFIG),
            to_websearch_text(query),
        )

    def join_index(self, statement: Select[Any]) -> Select[Any]:
        return statement

    def match(self, query: WebSearchQuery) -> ColumnElement[bool]:
        return self._document().op("@@", return_type=Boolean)(self._tsquery(query))

    def rank(self, query: WebSearchQuery) -> ColumnElement[float]:
        return func.ts_rank_cd(
            self._document(),
            self._tsquery(query),
            self._config.normalization_mask,
            type_=Float,
        )


class SqliteFullText:
    """External content FTS5 table ranked with bm25.

    bm25() returns lower values for better matches, so the score is
    negated. Ranking flags have no FTS5 counterpart and are ignored.
    """

    INDEX_TABLE = "messages_fts"

    def __init__(self) -> None:
        self._index = table(self.INDEX_TABLE, column("rowid"), column("msg_text"))

    def index_ddl(self) -> list[str]:
        fts = self.INDEX_TABLE
        return [
            f"CREATE VIRTUAL TABLE IF NOT EXISTS {fts} USING fts5("
            f"msg_text, content='messages', content_rowid='rowid', "
            f"tokenize='porter unicode61')",
            f"CREATE TRIGGER IF NOT EXISTS {fts}_ai AFTER INSERT ON messages BEGIN "
            f"INSERT INTO {fts}(rowid, msg_text) VALUES (new.rowid, new.msg_text); "
            f"END",
            f"CREATE TRIGGER IF NOT EXISTS {fts}_ad AFTER DELETE ON messages BEGIN "
            f"INSERT INTO {fts}({fts}, rowid, msg_text) "
            f"VALUES ('delete', old.rowid, old.msg_text); "
            f"END",
            f"CREATE TRIGGER IF NOT EXISTS {fts}_au AFTER UPDATE ON messages BEGIN "
            f"INSERT INTO {fts}({fts}, rowid, msg_text) "
            f"VALUES ('delete', old.rowid, old.msg_text); "
            f"INSERT INTO {fts}(rowid, msg_text) VALUES (new.rowid, new.msg_text); "
            f"END",
            # Index rows that existed before the table was created
            f"INSERT INTO {fts}({fts}) VALUES ('rebuild')",
        ]

    def join_index(self, statement: Select[Any]) -> Select[Any]:
        return statement.join(
            self._index, self._index.c.rowid == literal_column("messages.rowid")
        )

    def match(self, query: WebSearchQuery) -> ColumnElement[bool]:
        expression = to_fts5_match(query)
        if expression is None:
            raise ValueError("Query has no searchable terms")
        return literal_column(self.INDEX_TABLE).op("MATCH", is_comparison=True)(
            expression
        )

    def rank(self, query: WebSearchQuery) -> ColumnElement[float]:
        return -func.bm25(literal_column(self.INDEX_TABLE), type_=Float)


def backend_for(dialect_name: str, config: SearchConfig) -> FullTextBackend:
    """Return the full-text backend for a SQL dialect.

    Raises:
        ValueError: If the dialect has no full-text support here.
    """
    if dialect_name == "postgresql":
        return PostgresFullText(config)
    if dialect_name == "sqlite":
        return SqliteFullText()
    raise ValueError(f"Full-text search is not supported on {dialect_name}")
