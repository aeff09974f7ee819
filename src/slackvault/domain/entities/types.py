"""Column types shared by the archive tables."""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, String
from sqlalchemy.engine import Dialect
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.compiler import SQLCompiler
from sqlalchemy.sql.functions import FunctionElement
from sqlalchemy.types import TypeDecorator, TypeEngine

from slackvault.domain.timestamp_codec import (
    parse_stored_timestamp,
    parse_timestamp,
    to_store_text,
)


class StoreTimestamp(TypeDecorator[datetime]):
    """Naive UTC message timestamp.

    PostgreSQL stores it as TIMESTAMP. SQLite has no timestamp type, so the
    value is kept as `YYYY-MM-DD HH:MM:SS[.ffffff]` text. Bound values are
    always written at full width, which sorts chronologically.

    Timezone-aware values are converted to UTC before binding.
    """

    impl = DateTime
    cache_ok = True

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if dialect.name == "sqlite":
            return dialect.type_descriptor(String(26))
        return dialect.type_descriptor(DateTime())

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        if value is None:
            return None
        if isinstance(value, str):
            value = parse_timestamp(value)
        if value.tzinfo is not None:
            value = value.astimezone(UTC).replace(tzinfo=None)
        if dialect.name == "sqlite":
            return to_store_text(value)
        return value

    def process_result_value(self, value: Any, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value
        return parse_stored_timestamp(str(value))


class normalized_ts(FunctionElement[datetime]):
    """A timestamp column in a form that compares equal for equal instants.

    Wraps columns only, never bound values. Used on both sides of timestamp
    equality joins and predicates. On SQLite, rows written by other tools
    may omit the fraction or carry fewer than six digits, so the text is
    padded to full width. Other dialects compare native timestamps and
    render the expression unchanged.

    Ordering comparisons need no padding: a shorter fraction is a prefix of
    its padded form and sorts the same way.
    """

    type = StoreTimestamp()
    name = "normalized_ts"
    inherit_cache = True


@compiles(normalized_ts)
def _compile_normalized_ts(
    element: normalized_ts, compiler: SQLCompiler, **kw: Any
) -> str:
    return compiler.process(element.clauses, **kw)


@compiles(normalized_ts, "sqlite")
def _compile_normalized_ts_sqlite(
    element: normalized_ts, compiler: SQLCompiler, **kw: Any
) -> str:
    value = compiler.process(element.clauses, **kw)
    return (
        f"substr(CASE WHEN instr({value}, '.') = 0 THEN {value} || '.' "
        f"ELSE {value} END || '000000', 1, 26)"
    )
