"""Errors raised by archive queries."""


class ArchiveError(Exception):
    """Base exception for archive query errors."""


class NotFoundError(ArchiveError):
    """Raised when an entity lookup misses.

    Attributes:
        entity: Kind of entity that was looked up (e.g. "channel").
        key: The value that was looked up.
    """

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class StoreUnavailableError(ArchiveError):
    """Raised when the store cannot be reached or a connection is not available.

    Callers may retry.
    """


class QueryTimeoutError(StoreUnavailableError):
    """Raised when a query does not complete before its deadline."""


class QueryFailedError(ArchiveError):
    """Raised when the store rejects a well-formed query."""


class MalformedTimestampError(ArchiveError):
    """Raised when a timestamp does not match the store's text format.

    Attributes:
        raw: The text that failed to parse.
    """

    def __init__(self, raw: str, message: str | None = None) -> None:
        super().__init__(message or f"Malformed timestamp: {raw!r}")
        self.raw = raw


class InvalidTimestampError(MalformedTimestampError):
    """Raised when a caller-supplied timestamp (cursor, thread ts) is invalid."""


class CorruptTimestampError(MalformedTimestampError):
    """Raised when a timestamp read from the store cannot be decoded."""

    def __init__(self, raw: str) -> None:
        super().__init__(raw, f"Corrupt timestamp in store: {raw!r}")
