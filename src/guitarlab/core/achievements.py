"""Achievement evaluation.

Badges are a fixed, ordered list of independent predicates over two
aggregates: how many articles of each category are complete, and the
current practice streak. Every evaluation recomputes all of them and
inserts the ones that are newly true. Two concurrent evaluations may both
decide to insert the same badge; the unique constraint lets only one win
and the loser's IntegrityError is absorbed.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

import structlog

from guitarlab.config.app_config import AppConfig, load_app_config
from guitarlab.db.achievements_repository import insert_achievement, list_achievements
from guitarlab.db.practice_log_repository import MAX_LOG_DAYS, list_practice_dates
from guitarlab.db.progress_repository import list_progress

logger = structlog.get_logger(__name__)

GRADUATE_COUNT = 5

# Categories the series badges are defined over
BADGE_CATEGORIES = ("technique", "theory", "ghost", "dinner")


@dataclass
class ProgressSummary:
    """Aggregates the badge conditions are evaluated against."""

    streak: int = 0
    # category name -> number of complete articles
    completed: dict[str, int] = field(default_factory=dict)


def is_complete(completed_items: list[int], threshold: int = 5) -> bool:
    """An article is complete once enough checklist items are ticked."""
    return len(completed_items) >= threshold


def count_completed_articles(user_id: str, prefix: str, threshold: int = 5) -> int:
    """Count the user's complete articles whose ID starts with "{prefix}_"."""
    records = list_progress(user_id, article_prefix=prefix)
    return sum(1 for r in records if is_complete(r.completed_items, threshold))


def calc_streak(practice_dates: list[str], today: date) -> int:
    """Count consecutive practice days ending today.

    Args:
        practice_dates: Distinct ISO dates, newest first
        today: The day the streak must end on

    Returns:
        Length of the run; 0 when there is no entry for today
    """
    streak = 0
    expected = today
    for day in practice_dates:
        if day != expected.isoformat():
            break
        streak += 1
        expected -= timedelta(days=1)
    return streak


def progress_summary(
    user_id: str,
    config: AppConfig | None = None,
    today: date | None = None,
) -> ProgressSummary:
    """Compute per-category completion counts and the current streak."""
    config = config or load_app_config()
    today = today or datetime.now(timezone.utc).date()

    completed = {
        name: count_completed_articles(user_id, cat.prefix, config.completion_threshold)
        for name, cat in config.categories.items()
    }
    streak = calc_streak(list_practice_dates(user_id, limit=MAX_LOG_DAYS), today)
    if streak == MAX_LOG_DAYS:
        # The run may continue past the first page
        streak = calc_streak(list_practice_dates(user_id), today)
    return ProgressSummary(streak=streak, completed=completed)


def badge_conditions(summary: ProgressSummary, config: AppConfig) -> list[tuple[str, bool]]:
    """Build the ordered (badge_id, condition) list for a summary."""
    missing = [name for name in BADGE_CATEGORIES if name not in config.categories]
    if missing:
        logger.warning("achievements.categories_missing", missing=missing)

    def done(category: str) -> int:
        return summary.completed.get(category, 0)

    def finished(category: str) -> bool:
        cat = config.categories.get(category)
        # A category without lessons is never "finished"
        return cat is not None and cat.total > 0 and done(category) >= cat.total

    conditions: list[tuple[str, bool]] = [
        ("technique_starter", done("technique") >= 1),
        ("technique_graduate", done("technique") >= GRADUATE_COUNT),
        ("technique_master", finished("technique")),
        ("theory_starter", done("theory") >= 1),
        ("theory_graduate", done("theory") >= GRADUATE_COUNT),
        ("theory_master", finished("theory")),
        ("ghost_complete", finished("ghost")),
        ("dinner_complete", finished("dinner")),
    ]
    for threshold in config.streak_thresholds:
        conditions.append((f"streak_{threshold}", summary.streak >= threshold))
    conditions.append(
        ("all_series", all(finished(name) for name in BADGE_CATEGORIES))
    )
    return conditions


def evaluate_and_unlock(
    user_id: str,
    now: datetime | None = None,
    config: AppConfig | None = None,
) -> list[str]:
    """Unlock every badge whose condition is newly met.

    Args:
        user_id: User identifier
        now: Current time (UTC); the streak ends on now.date()
        config: App config. Defaults to the loaded config.

    Returns:
        Badge IDs inserted by this call, in condition order
    """
    config = config or load_app_config()
    now = now or datetime.now(timezone.utc)

    unlocked_ids = {a.badge_id for a in list_achievements(user_id)}
    summary = progress_summary(user_id, config=config, today=now.date())

    newly_unlocked: list[str] = []
    for badge_id, condition in badge_conditions(summary, config):
        if not condition or badge_id in unlocked_ids:
            continue
        try:
            insert_achievement(user_id, badge_id, now)
        except sqlite3.IntegrityError:
            # Another request unlocked it first
            logger.debug("achievements.already_unlocked", user_id=user_id, badge_id=badge_id)
            continue
        newly_unlocked.append(badge_id)

    if newly_unlocked:
        logger.info("achievements.unlocked", user_id=user_id, badges=newly_unlocked)

    return newly_unlocked
