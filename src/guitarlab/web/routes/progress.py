"""Progress endpoints: checklist toggles, practice logs and daily menu."""

import structlog
from fastapi import APIRouter, HTTPException, Query, status

from guitarlab.core.achievements import progress_summary
from guitarlab.core.daily_menu import generate_daily_menu
from guitarlab.core.progress import InvalidItemIndexError, toggle_item
from guitarlab.db.practice_log_repository import MAX_LOG_DAYS, list_practice_logs
from guitarlab.db.progress_repository import list_progress
from guitarlab.web.routes.achievements import badge_responses
from guitarlab.web.schemas import (
    DailyMenuItemResponse,
    PracticeLogResponse,
    ProgressResponse,
    ProgressSummaryResponse,
    ToggleRequest,
    ToggleResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("", response_model=list[ProgressResponse])
def get_progress(
    user_id: str = Query(..., alias="userId", min_length=1),
) -> list[ProgressResponse]:
    """List all progress records of a user."""
    return [ProgressResponse.model_validate(p) for p in list_progress(user_id)]


@router.post("/toggle", response_model=ToggleResponse)
def toggle(request: ToggleRequest) -> ToggleResponse:
    """Toggle one checklist item and report newly unlocked badges."""
    try:
        result = toggle_item(request.user_id, request.article_id, request.item_index)
    except InvalidItemIndexError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return ToggleResponse(
        progress=ProgressResponse.model_validate(result.progress),
        newly_unlocked=badge_responses(result.newly_unlocked),
    )


@router.get("/practice-log", response_model=list[PracticeLogResponse])
def get_practice_log(
    user_id: str = Query(..., alias="userId", min_length=1),
) -> list[PracticeLogResponse]:
    """List the user's practice days, newest first, at most one year."""
    logs = list_practice_logs(user_id, limit=MAX_LOG_DAYS)
    return [PracticeLogResponse.model_validate(log) for log in logs]


@router.get(
    "/daily-menu",
    response_model=list[DailyMenuItemResponse],
    response_model_exclude_none=True,
)
def get_daily_menu(
    user_id: str = Query(..., alias="userId", min_length=1),
) -> list[DailyMenuItemResponse]:
    """Recommend up to three articles to practice today."""
    menu = generate_daily_menu(user_id)
    items = [DailyMenuItemResponse.model_validate(entry) for entry in menu]

    logger.debug("daily_menu.generated", user_id=user_id, items=len(items))
    return items


@router.get("/summary", response_model=ProgressSummaryResponse)
def get_summary(
    user_id: str = Query(..., alias="userId", min_length=1),
) -> ProgressSummaryResponse:
    """Current streak and completed articles per category."""
    summary = progress_summary(user_id)
    return ProgressSummaryResponse(
        user_id=user_id,
        streak=summary.streak,
        completed=summary.completed,
    )
