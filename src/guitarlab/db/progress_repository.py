"""Repository functions for the progress table.

completed_items is stored as a JSON list of checklist indices; the
(user_id, article_id) pair is unique.
"""

from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime

import structlog

from guitarlab.db.database import get_db

logger = structlog.get_logger(__name__)


@dataclass
class ProgressRecord:
    """Progress record from database."""

    user_id: str
    article_id: str
    completed_items: list[int] = field(default_factory=list)
    last_updated: str = ""

    @property
    def completed_count(self) -> int:
        return len(self.completed_items)

    @property
    def last_updated_at(self) -> datetime:
        return datetime.fromisoformat(self.last_updated)


def get_progress(user_id: str, article_id: str) -> ProgressRecord | None:
    """Get the progress record for one article.

    Args:
        user_id: User identifier
        article_id: Article identifier (e.g. "tech_01")

    Returns:
        ProgressRecord if found, None otherwise
    """
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM progress WHERE user_id = ? AND article_id = ?",
            (user_id, article_id),
        ).fetchone()

    if row is None:
        return None

    return _row_to_record(row)


def list_progress(user_id: str, article_prefix: str | None = None) -> list[ProgressRecord]:
    """Get all progress records of a user.

    Args:
        user_id: User identifier
        article_prefix: Optional ID prefix filter; "tech" matches "tech_*"

    Returns:
        List of ProgressRecord in insertion order
    """
    query = "SELECT * FROM progress WHERE user_id = ?"
    params: list[str | int] = [user_id]
    if article_prefix is not None:
        # substr() keeps "_" literal, unlike LIKE
        query += " AND substr(article_id, 1, ?) = ?"
        params.extend([len(article_prefix) + 1, f"{article_prefix}_"])
    query += " ORDER BY id"

    with get_db() as conn:
        rows = conn.execute(query, params).fetchall()

    return [_row_to_record(row) for row in rows]


def save_progress(
    user_id: str,
    article_id: str,
    completed_items: list[int],
    last_updated: datetime,
) -> ProgressRecord:
    """Insert or replace the completed set of one article.

    Args:
        user_id: User identifier
        article_id: Article identifier
        completed_items: Checklist indices, already deduplicated
        last_updated: Modification time (timezone-aware)

    Returns:
        The stored ProgressRecord
    """
    record = ProgressRecord(
        user_id=user_id,
        article_id=article_id,
        completed_items=list(completed_items),
        last_updated=last_updated.isoformat(),
    )

    with get_db() as conn:
        conn.execute(
            """
            INSERT INTO progress (user_id, article_id, completed_items, last_updated)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (user_id, article_id) DO UPDATE SET
                completed_items = excluded.completed_items,
                last_updated = excluded.last_updated
            """,
            (
                record.user_id,
                record.article_id,
                json.dumps(record.completed_items),
                record.last_updated,
            ),
        )

    logger.debug(
        "progress.saved",
        user_id=user_id,
        article_id=article_id,
        completed=record.completed_count,
    )
    return record


def _row_to_record(row: sqlite3.Row) -> ProgressRecord:
    """Convert database row to ProgressRecord."""
    return ProgressRecord(
        user_id=row["user_id"],
        article_id=row["article_id"],
        completed_items=json.loads(row["completed_items"]) if row["completed_items"] else [],
        last_updated=row["last_updated"],
    )
