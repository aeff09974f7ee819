"""Database connection pool management."""

import asyncio
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import Row
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool
from sqlalchemy.sql.expression import Executable
from structlog.stdlib import BoundLogger

from slackvault.config.models import DatabaseConfig
from slackvault.domain.errors import (
    ArchiveError,
    CorruptTimestampError,
    QueryFailedError,
    QueryTimeoutError,
    StoreUnavailableError,
)
from slackvault.infrastructure.logging import get_logger


class Database:
    """Non-blocking connection pool for the archive store.

    Owns an async SQLAlchemy engine with a bounded pool. Every query
    checks out one connection for its duration. Driver and pool errors are
    translated into archive errors at this boundary.

    Attributes:
        url: SQLAlchemy connection URL.
        engine: Async database engine (available after initialize()).

    Example:
        >>> database = Database("sqlite+aiosqlite:///./data/archive.db")
        >>> await database.initialize()
        >>> rows = await database.fetch_all(select(Channel))
        >>> await database.close()
    """

    def __init__(
        self,
        url: str,
        pool_size: int = 5,
        acquire_timeout: float = 3.0,
        query_timeout: float | None = None,
        echo: bool = False,
        logger: BoundLogger | None = None,
    ) -> None:
        """Initialize Database with connection URL.

        Args:
            url: SQLAlchemy-style async connection URL.
            pool_size: Maximum number of pooled connections.
            acquire_timeout: Seconds to wait for a free connection.
            query_timeout: Default deadline in seconds for a query.
            echo: Log emitted SQL.
            logger: Logger instance.

        Raises:
            ValueError: If URL is empty or invalid format.
        """
        if not url:
            raise ValueError("Database URL cannot be empty")

        self._validate_url(url)
        self._url = url
        self._pool_size = pool_size
        self._acquire_timeout = acquire_timeout
        self._query_timeout = query_timeout
        self._echo = echo
        self._logger = logger or get_logger(__name__)
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    def from_config(
        cls, config: DatabaseConfig, logger: BoundLogger | None = None
    ) -> "Database":
        """Create a Database from configuration."""
        return cls(
            config.url,
            pool_size=config.pool_size,
            acquire_timeout=config.acquire_timeout,
            query_timeout=config.query_timeout,
            echo=config.echo,
            logger=logger,
        )

    def _validate_url(self, url: str) -> None:
        """Validate URL format.

        An async driver must be named explicitly (e.g. `postgresql+asyncpg`).

        Raises:
            ValueError: If URL format is invalid.
        """
        try:
            parsed = urlparse(url)
            if not parsed.scheme or "+" not in parsed.scheme:
                raise ValueError(f"Invalid database URL format: {url}")
        except Exception as e:
            raise ValueError(f"Invalid database URL format: {url}") from e

    @property
    def url(self) -> str:
        """Get the connection URL."""
        return self._url

    @property
    def engine(self) -> AsyncEngine:
        """Get the async engine.

        Raises:
            RuntimeError: If database is not initialized.
        """
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._engine

    @property
    def dialect_name(self) -> str:
        """Name of the SQL dialect, e.g. "postgresql" or "sqlite"."""
        return self.engine.dialect.name

    def _is_sqlite_memory(self) -> bool:
        parsed = urlparse(self._url)
        return parsed.scheme.startswith("sqlite") and parsed.path in (
            "",
            "/",
            "/:memory:",
        )

    async def initialize(self) -> None:
        """Create the engine and its connection pool.

        Schema management is not done here; see `schema.create_schema()`.
        """
        self._ensure_parent_directory()

        options: dict[str, Any] = {"echo": self._echo}
        # In-memory SQLite uses a single static connection and takes no sizing
        if not self._is_sqlite_memory():
            options.update(
                poolclass=AsyncAdaptedQueuePool,
                pool_size=self._pool_size,
                max_overflow=0,
                pool_timeout=self._acquire_timeout,
                pool_pre_ping=True,
            )

        self._engine = create_async_engine(self._url, **options)

        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self._logger.info(
            "Database pool created",
            dialect=self._engine.dialect.name,
            pool_size=self._pool_size,
        )

    def _ensure_parent_directory(self) -> None:
        """Create parent directory for SQLite file if it doesn't exist."""
        parsed = urlparse(self._url)
        if parsed.scheme.startswith("sqlite") and not self._is_sqlite_memory():
            db_path = parsed.path
            if db_path.startswith("///"):
                db_path = db_path[3:]
            elif db_path.startswith("/"):
                db_path = db_path[1:]

            if db_path:
                parent_dir = Path(db_path).parent
                parent_dir.mkdir(parents=True, exist_ok=True)

    async def close(self) -> None:
        """Close all pooled connections and dispose engine."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def get_session(self) -> AsyncIterator[AsyncSession]:
        """Get a database session.

        Yields:
            AsyncSession: Database session with auto-commit on success
                and auto-rollback on exception.

        Raises:
            RuntimeError: If database is not initialized or has been closed.
        """
        if self._session_factory is None:
            raise RuntimeError("Database not initialized or has been closed.")

        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[AsyncConnection]:
        """Get a connection with a transaction, for schema changes.

        Yields:
            AsyncConnection: Connection committed on success and rolled back
                on exception.

        Raises:
            StoreUnavailableError: If the connection failed.
            QueryFailedError: If the store rejected a statement.
        """
        with self._translate_errors():
            async with self.engine.begin() as conn:
                yield conn

    async def fetch_all(
        self, statement: Executable, *, timeout: float | None = None
    ) -> list[Row[Any]]:
        """Run a read query and return all rows.

        Args:
            statement: SQLAlchemy select statement.
            timeout: Deadline in seconds. Falls back to the configured
                query timeout.

        Returns:
            List of result rows.

        Raises:
            StoreUnavailableError: If no connection could be acquired or the
                connection failed.
            QueryTimeoutError: If the deadline expired.
            QueryFailedError: If the store rejected the query.
            CorruptTimestampError: If a stored timestamp cannot be decoded.
        """
        deadline = timeout if timeout is not None else self._query_timeout
        try:
            return await asyncio.wait_for(self._fetch_all(statement), deadline)
        except TimeoutError as e:
            self._logger.warning("Query deadline expired", timeout_seconds=deadline)
            raise QueryTimeoutError(
                f"Query did not complete within {deadline} seconds"
            ) from e

    async def fetch_one_or_none(
        self, statement: Executable, *, timeout: float | None = None
    ) -> Row[Any] | None:
        """Run a read query and return its first row, or None."""
        rows = await self.fetch_all(statement, timeout=timeout)
        return rows[0] if rows else None

    async def _fetch_all(self, statement: Executable) -> list[Row[Any]]:
        with self._translate_errors():
            async with self.get_session() as session:
                result = await session.execute(statement)
                return list(result.all())

    @contextmanager
    def _translate_errors(self) -> Iterator[None]:
        """Translate SQLAlchemy and driver errors into archive errors."""
        try:
            yield
        except ArchiveError:
            raise
        except sa_exc.TimeoutError as e:
            self._logger.warning(
                "Timed out waiting for a connection",
                acquire_timeout=self._acquire_timeout,
            )
            raise StoreUnavailableError(
                "Timed out waiting for a database connection"
            ) from e
        except (
            sa_exc.DisconnectionError,
            sa_exc.OperationalError,
            sa_exc.InterfaceError,
        ) as e:
            self._logger.warning("Database unavailable", error=str(e))
            raise StoreUnavailableError(f"Database unavailable: {e}") from e
        except sa_exc.StatementError as e:
            # Errors raised by column types while binding or decoding values
            if isinstance(e.orig, ArchiveError):
                raise e.orig from e
            self._logger.warning("Query failed", error=str(e))
            raise QueryFailedError(f"Query failed: {e}") from e
        except sa_exc.SQLAlchemyError as e:
            self._logger.warning("Query failed", error=str(e))
            raise QueryFailedError(f"Query failed: {e}") from e
        except OSError as e:
            self._logger.warning("Database unavailable", error=str(e))
            raise StoreUnavailableError(f"Database unavailable: {e}") from e
        except ValueError as e:
            # Raised by drivers decoding a stored value
            raise CorruptTimestampError(str(e)) from e
