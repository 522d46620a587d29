"""Pydantic schemas for the Web API.

Serialization models for progress, practice logs, badges, the daily menu
and the lesson catalog. JSON field names are camelCase (userId, articleId,
completedItems, ...); Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from guitarlab import __version__


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# PROGRESS SCHEMAS
# =============================================================================


class ToggleRequest(CamelModel):
    """Request body for toggling one checklist item."""

    user_id: str = Field(..., min_length=1)
    article_id: str = Field(..., min_length=1)
    item_index: int = Field(..., ge=0)


class ProgressResponse(CamelModel):
    """Completion state of one article."""

    user_id: str
    article_id: str
    completed_items: list[int]
    last_updated: str


class PracticeLogResponse(CamelModel):
    """Articles practiced on one day."""

    user_id: str
    date: str
    articles: list[str]


class ProgressSummaryResponse(CamelModel):
    """Streak and per-category completion counts."""

    user_id: str
    streak: int
    completed: dict[str, int]


class DailyMenuItemResponse(CamelModel):
    """One daily practice recommendation."""

    article_id: str
    reason: Literal["continue", "review", "new"]
    title: str | None = None


# =============================================================================
# ACHIEVEMENT SCHEMAS
# =============================================================================


class BadgeResponse(CamelModel):
    """Display metadata of a badge."""

    id: str
    emoji: str
    name: str
    description: str


class BadgeStatusResponse(BadgeResponse):
    """A badge together with the user's unlock state."""

    unlocked: bool = False
    unlocked_at: str | None = None


class ToggleResponse(CamelModel):
    """Response for a toggle."""

    progress: ProgressResponse
    newly_unlocked: list[BadgeResponse]


class EvaluateRequest(CamelModel):
    """Request body for a manual badge evaluation."""

    user_id: str = Field(..., min_length=1)


class EvaluateResponse(CamelModel):
    """Badges unlocked by a manual evaluation."""

    newly_unlocked: list[BadgeResponse]


# =============================================================================
# CONTENT SCHEMAS
# =============================================================================


class CatalogItemResponse(CamelModel):
    """One lesson with its link graph neighbours."""

    id: str
    filename: str
    title: str
    category: str
    forward_links: list[str]
    backlinks: list[str]


class ArticleContentResponse(CamelModel):
    """Raw markdown of one lesson."""

    content: str


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = "ok"
    version: str = __version__
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
