"""Checklist progress toggling.

Each toggle flips one checklist index of one article, records the article
in today's practice log and re-runs the achievement evaluator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from guitarlab.core.achievements import evaluate_and_unlock
from guitarlab.db.practice_log_repository import add_practice_entry
from guitarlab.db.progress_repository import ProgressRecord, get_progress, save_progress

logger = structlog.get_logger(__name__)


class InvalidItemIndexError(ValueError):
    """Raised when a checklist index is not a non-negative integer."""

    def __init__(self, item_index: object):
        self.item_index = item_index
        super().__init__(f"Invalid checklist item index: {item_index!r}")


@dataclass
class ToggleResult:
    """Outcome of a toggle: the stored record and badges it unlocked."""

    progress: ProgressRecord
    newly_unlocked: list[str] = field(default_factory=list)


def toggle_item(
    user_id: str,
    article_id: str,
    item_index: int,
    now: datetime | None = None,
) -> ToggleResult:
    """Flip completion of one checklist item.

    Args:
        user_id: User identifier
        article_id: Article identifier (e.g. "tech_01")
        item_index: Checklist position, 0-based
        now: Current time (UTC); injectable for tests

    Returns:
        ToggleResult with the updated record and newly unlocked badge IDs

    Raises:
        InvalidItemIndexError: If item_index is negative or not an int
    """
    if isinstance(item_index, bool) or not isinstance(item_index, int) or item_index < 0:
        raise InvalidItemIndexError(item_index)

    now = now or datetime.now(timezone.utc)

    existing = get_progress(user_id, article_id)
    if existing is None:
        completed = [item_index]
    elif item_index in existing.completed_items:
        completed = [i for i in existing.completed_items if i != item_index]
    else:
        completed = existing.completed_items + [item_index]

    record = save_progress(user_id, article_id, completed, now)
    add_practice_entry(user_id, now.date(), article_id)

    logger.info(
        "progress.toggled",
        user_id=user_id,
        article_id=article_id,
        item_index=item_index,
        completed=record.completed_count,
    )

    newly_unlocked = evaluate_and_unlock(user_id, now=now)
    return ToggleResult(progress=record, newly_unlocked=newly_unlocked)
