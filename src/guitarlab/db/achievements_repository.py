"""Repository functions for the achievements table.

Achievements are append-only. The (user_id, badge_id) unique constraint is
the only guard against two requests unlocking the same badge.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime

import structlog

from guitarlab.db.database import get_db

logger = structlog.get_logger(__name__)


@dataclass
class AchievementRecord:
    """Achievement record from database."""

    user_id: str
    badge_id: str
    unlocked_at: str


def insert_achievement(user_id: str, badge_id: str, unlocked_at: datetime) -> AchievementRecord:
    """Insert a new achievement record.

    Args:
        user_id: User identifier
        badge_id: Badge identifier
        unlocked_at: Unlock time (timezone-aware)

    Raises:
        sqlite3.IntegrityError: If the user already unlocked this badge
    """
    record = AchievementRecord(
        user_id=user_id,
        badge_id=badge_id,
        unlocked_at=unlocked_at.isoformat(),
    )

    with get_db() as conn:
        conn.execute(
            "INSERT INTO achievements (user_id, badge_id, unlocked_at) VALUES (?, ?, ?)",
            (record.user_id, record.badge_id, record.unlocked_at),
        )

    logger.debug("achievements.inserted", user_id=user_id, badge_id=badge_id)
    return record


def list_achievements(user_id: str) -> list[AchievementRecord]:
    """Get all achievements of a user, oldest first."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM achievements WHERE user_id = ? ORDER BY id",
            (user_id,),
        ).fetchall()

    return [_row_to_record(row) for row in rows]


def _row_to_record(row: sqlite3.Row) -> AchievementRecord:
    """Convert database row to AchievementRecord."""
    return AchievementRecord(
        user_id=row["user_id"],
        badge_id=row["badge_id"],
        unlocked_at=row["unlocked_at"],
    )
