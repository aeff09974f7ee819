"""Conversion between stored message timestamps and display strings."""

import re
from datetime import datetime

from slackvault.domain.errors import (
    CorruptTimestampError,
    InvalidTimestampError,
    MalformedTimestampError,
)

DISPLAY_FORMAT = "%d %b %Y @ %I:%M %p"

# YYYY-MM-DD HH:MM:SS with an optional fraction of up to six digits
STORE_TIMESTAMP_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2}) (\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,6}))?$"
)


def format_timestamp(ts: datetime) -> str:
    """Render a timestamp for display.

    Args:
        ts: Message timestamp.

    Returns:
        Text like "01 Jan 2024 @ 10:05 AM".
    """
    return ts.strftime(DISPLAY_FORMAT)


def _parse(raw: str, error_cls: type[MalformedTimestampError]) -> datetime:
    match = STORE_TIMESTAMP_PATTERN.match(raw.strip())
    if not match:
        raise error_cls(raw)

    year, month, day, hour, minute, second, fraction = match.groups()
    microsecond = int(fraction.ljust(6, "0")) if fraction else 0
    try:
        return datetime(
            int(year),
            int(month),
            int(day),
            int(hour),
            int(minute),
            int(second),
            microsecond,
        )
    except ValueError as e:
        # Matches the pattern but is not a real date (e.g. month 13)
        raise error_cls(raw) from e


def parse_timestamp(raw: str) -> datetime:
    """Parse a caller-supplied timestamp in the store's text format.

    Args:
        raw: Text in the form `YYYY-MM-DD HH:MM:SS[.ffffff]`.

    Returns:
        The parsed naive datetime.

    Raises:
        InvalidTimestampError: If the text does not match the format.
    """
    return _parse(raw, InvalidTimestampError)


def parse_stored_timestamp(raw: str) -> datetime:
    """Parse a timestamp value that was read from the store.

    Raises:
        CorruptTimestampError: If the stored text does not match the format.
    """
    return _parse(raw, CorruptTimestampError)


def to_store_text(ts: datetime) -> str:
    """Render a timestamp in the store's text format (always with microseconds)."""
    return ts.strftime("%Y-%m-%d %H:%M:%S.%f")
