"""Daily practice menu.

Recommends up to three articles, recomputed from current progress:

1. continue - started but unfinished, most recently touched first
2. review   - finished more than a week ago, longest untouched first
3. new      - series starters the user has not begun, in list order
4. fallback - any other finished article, only if slots remain

Each item carries its catalog title when the lesson file exists.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Literal

from guitarlab.config.app_config import AppConfig, load_app_config
from guitarlab.core.catalog import build_catalog, find_item
from guitarlab.db.progress_repository import ProgressRecord, list_progress

MenuReason = Literal["continue", "review", "new"]


@dataclass
class DailyMenuItem:
    """One recommended article."""

    article_id: str
    reason: MenuReason
    title: str | None = None


def generate_daily_menu(
    user_id: str,
    now: datetime | None = None,
    config: AppConfig | None = None,
) -> list[DailyMenuItem]:
    """Build today's recommendations for a user.

    Args:
        user_id: User identifier
        now: Current time (UTC); injectable for tests
        config: App config. Defaults to the loaded config.

    Returns:
        At most config.menu.max_items items, in priority order, titled from
        the catalog where the article exists
    """
    config = config or load_app_config()
    now = now or datetime.now(timezone.utc)

    menu = _pick_items(list_progress(user_id), now, config)

    lessons = build_catalog(config.categories)
    for entry in menu:
        item = find_item(lessons, entry.article_id)
        if item is not None:
            entry.title = item.title

    return menu


def _pick_items(
    all_progress: list[ProgressRecord],
    now: datetime,
    config: AppConfig,
) -> list[DailyMenuItem]:
    max_items = config.menu.max_items
    threshold = config.completion_threshold

    by_article = {p.article_id: p for p in all_progress}
    menu: list[DailyMenuItem] = []

    continue_items = [p for p in all_progress if 0 < p.completed_count < threshold]
    continue_items.sort(key=lambda p: p.last_updated_at, reverse=True)
    for p in continue_items:
        if len(menu) >= max_items:
            return menu
        menu.append(DailyMenuItem(p.article_id, "continue"))

    review_cutoff = now - timedelta(days=config.menu.review_after_days)
    review_items = [
        p
        for p in all_progress
        if p.completed_count >= threshold and p.last_updated_at < review_cutoff
    ]
    review_items.sort(key=lambda p: p.last_updated_at)
    for p in review_items:
        if len(menu) >= max_items:
            return menu
        menu.append(DailyMenuItem(p.article_id, "review"))

    for article_id in config.menu.starter_ids:
        if len(menu) >= max_items:
            return menu
        p = by_article.get(article_id)
        if p is None or p.completed_count == 0:
            menu.append(DailyMenuItem(article_id, "new"))

    chosen = {m.article_id for m in menu}
    for p in all_progress:
        if len(menu) >= max_items:
            break
        if p.completed_count >= threshold and p.article_id not in chosen:
            menu.append(DailyMenuItem(p.article_id, "review"))
            chosen.add(p.article_id)

    return menu
