"""Repository functions for practice logs.

A practice log is the set of articles a user touched on one calendar day.
Each member of the set is its own row; INSERT OR IGNORE against the
(user_id, date, article_id) unique constraint gives set-union upserts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

import structlog

from guitarlab.db.database import get_db

logger = structlog.get_logger(__name__)

# Heatmap history is one year
MAX_LOG_DAYS = 365


@dataclass
class PracticeLogRecord:
    """One user's practice for one day."""

    user_id: str
    date: str
    articles: list[str] = field(default_factory=list)


def add_practice_entry(user_id: str, day: date, article_id: str) -> None:
    """Add an article to the user's log for the given day.

    Creates the day's log if missing; adding an article twice is a no-op.
    """
    with get_db() as conn:
        conn.execute(
            """
            INSERT OR IGNORE INTO practice_log_entries (user_id, date, article_id)
            VALUES (?, ?, ?)
            """,
            (user_id, day.isoformat(), article_id),
        )

    logger.debug("practice_log.entry_added", user_id=user_id, date=day.isoformat(), article_id=article_id)


def list_practice_logs(user_id: str, limit: int | None = MAX_LOG_DAYS) -> list[PracticeLogRecord]:
    """Get the user's practice logs, newest day first.

    Args:
        user_id: User identifier
        limit: Maximum number of days returned (None for all)

    Returns:
        List of PracticeLogRecord sorted by date descending
    """
    # SQLite treats a negative LIMIT as no limit
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT date, article_id FROM practice_log_entries
            WHERE user_id = ? AND date IN (
                SELECT DISTINCT date FROM practice_log_entries
                WHERE user_id = ?
                ORDER BY date DESC
                LIMIT ?
            )
            ORDER BY date DESC, id
            """,
            (user_id, user_id, -1 if limit is None else limit),
        ).fetchall()

    logs: list[PracticeLogRecord] = []
    for row in rows:
        if not logs or logs[-1].date != row["date"]:
            logs.append(PracticeLogRecord(user_id=user_id, date=row["date"]))
        logs[-1].articles.append(row["article_id"])

    return logs


def list_practice_dates(user_id: str, limit: int | None = None) -> list[str]:
    """Get the distinct days the user practiced, newest first."""
    with get_db() as conn:
        rows = conn.execute(
            """
            SELECT DISTINCT date FROM practice_log_entries
            WHERE user_id = ?
            ORDER BY date DESC
            LIMIT ?
            """,
            (user_id, -1 if limit is None else limit),
        ).fetchall()

    return [row["date"] for row in rows]
