"""Schema bootstrap for local archives and tests.

Production databases are migrated by the ingestion pipeline; this module
only creates what the query layer reads.
"""

from sqlmodel import SQLModel

from slackvault.config.models import SearchConfig
from slackvault.domain.entities import Channel, Message, User
from slackvault.infrastructure.persistence.database import Database
from slackvault.infrastructure.persistence.fulltext import backend_for

ARCHIVE_TABLES = [Channel.__table__, User.__table__, Message.__table__]


async def create_schema(database: Database, config: SearchConfig | None = None) -> None:
    """Create archive tables and the text-search index if missing.

    Args:
        database: Initialized database.
        config: Search configuration (text search config on PostgreSQL).

    Raises:
        StoreUnavailableError: If the store cannot be reached or lacks the
            text-search module.
        QueryFailedError: If the store rejected a statement.
    """
    backend = backend_for(database.dialect_name, config or SearchConfig())

    async with database.begin() as conn:
        await conn.run_sync(
            lambda sync_conn: SQLModel.metadata.create_all(
                sync_conn, tables=ARCHIVE_TABLES
            )
        )
        for ddl in backend.index_ddl():
            await conn.exec_driver_sql(ddl)
