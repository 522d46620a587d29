"""Achievement endpoints."""

from fastapi import APIRouter, Query

from guitarlab.config.badges import get_badge, list_badges
from guitarlab.core.achievements import evaluate_and_unlock
from guitarlab.db.achievements_repository import list_achievements
from guitarlab.web.schemas import (
    BadgeResponse,
    BadgeStatusResponse,
    EvaluateRequest,
    EvaluateResponse,
)

router = APIRouter(prefix="/api/achievements", tags=["achievements"])


def badge_responses(badge_ids: list[str]) -> list[BadgeResponse]:
    """Convert badge IDs to their display metadata."""
    return [BadgeResponse.model_validate(get_badge(bid)) for bid in badge_ids]


@router.get("", response_model=list[BadgeStatusResponse])
def get_achievements(
    user_id: str = Query(..., alias="userId", min_length=1),
) -> list[BadgeStatusResponse]:
    """List every badge with the user's unlock state."""
    unlocked = {a.badge_id: a.unlocked_at for a in list_achievements(user_id)}

    return [
        BadgeStatusResponse(
            id=badge.id,
            emoji=badge.emoji,
            name=badge.name,
            description=badge.description,
            unlocked=badge.id in unlocked,
            unlocked_at=unlocked.get(badge.id),
        )
        for badge in list_badges()
    ]


@router.post("/evaluate", response_model=EvaluateResponse)
def evaluate(request: EvaluateRequest) -> EvaluateResponse:
    """Re-run badge evaluation for a user."""
    new_badges = evaluate_and_unlock(request.user_id)
    return EvaluateResponse(newly_unlocked=badge_responses(new_badges))
