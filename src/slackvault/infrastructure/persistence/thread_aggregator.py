"""Reply counts per thread."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.sql.expression import Subquery
from sqlmodel import col, select

from slackvault.domain.entities.message import Message
from slackvault.domain.entities.types import normalized_ts
from slackvault.infrastructure.persistence.database import Database


def reply_counts_subquery(channel_id: str) -> Subquery:
    """Build the reply count aggregate of a channel.

    One row per thread: the parent's ts and author, and the number of
    replies addressed to that pair. Parents without replies have no row,
    so the subquery has to be outer-joined.

    Args:
        channel_id: The channel ID.

    Returns:
        Subquery with columns `parent_ts`, `parent_user_id`, `reply_count`.
    """
    parent_ts = normalized_ts(col(Message.thread_ts))
    return (
        select(
            parent_ts.label("parent_ts"),
            col(Message.parent_user_id).label("parent_user_id"),
            func.count().label("reply_count"),
        )
        .where(Message.channel_id == channel_id)
        .where(Message.parent_user_id != "")
        .group_by(parent_ts, col(Message.parent_user_id))
        .subquery("reply_counts")
    )


async def count_replies(
    database: Database, channel_id: str, *, timeout: float | None = None
) -> dict[tuple[datetime, str], int]:
    """Count replies of every thread in a channel.

    Returns:
        Mapping of (parent ts, parent user ID) to the number of replies.
    """
    counts = reply_counts_subquery(channel_id)
    rows = await database.fetch_all(
        select(counts.c.parent_ts, counts.c.parent_user_id, counts.c.reply_count),
        timeout=timeout,
    )
    return {(row.parent_ts, row.parent_user_id): row.reply_count for row in rows}
