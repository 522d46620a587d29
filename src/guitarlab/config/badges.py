"""Badge registry loader.

Loads badge display metadata from data/config/badges_v1.yaml. Unlock
conditions live in guitarlab.core.achievements; this module only knows
how a badge is presented.

Usage:
    from guitarlab.config.badges import get_badge, list_badges

    badge = get_badge("streak_7")
    all_badges = list_badges()
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
BADGES_FILE = Path("data/config/badges_v1.yaml")


@dataclass
class Badge:
    """A named milestone a user can unlock once."""

    id: str
    emoji: str
    name: str
    description: str


# Module-level cache (insertion order is display order)
_cached_badges: dict[str, Badge] | None = None


def _get_default_badges() -> dict[str, Badge]:
    """Get default badges when config file is missing."""
    defaults = [
        Badge("technique_starter", "🎸", "Pick Starter", "Complete your first technique lesson"),
        Badge("technique_graduate", "🎓", "Technique Graduate", "Complete 5 technique lessons"),
        Badge("technique_master", "🏆", "Technique Master", "Complete every technique lesson"),
        Badge("theory_starter", "📖", "Theory Starter", "Complete your first theory lesson"),
        Badge("theory_graduate", "🎼", "Theory Graduate", "Complete 5 theory lessons"),
        Badge("theory_master", "🧠", "Theory Master", "Complete every theory lesson"),
        Badge("ghost_complete", "👻", "Ghost Buster", "Complete the whole GHOST series"),
        Badge("dinner_complete", "🍽️", "Dinner Is Served", "Complete the whole dinner song series"),
        Badge("streak_3", "🔥", "Warming Up", "Practice 3 days in a row"),
        Badge("streak_7", "⚡", "One Week Strong", "Practice 7 days in a row"),
        Badge("streak_30", "💎", "Iron Fingers", "Practice 30 days in a row"),
        Badge("all_series", "👑", "Guitar Hero", "Complete every lesson in every series"),
    ]
    return {b.id: b for b in defaults}


def load_badges(force_reload: bool = False) -> dict[str, Badge]:
    """Load all badges from config file.

    Args:
        force_reload: If True, ignore cache and reload from file.

    Returns:
        Dictionary mapping badge ID to Badge object, in display order.
    """
    global _cached_badges

    if _cached_badges is not None and not force_reload:
        return _cached_badges

    if not BADGES_FILE.exists():
        logger.debug("badges_file_not_found", path=str(BADGES_FILE))
        _cached_badges = _get_default_badges()
        return _cached_badges

    try:
        data = yaml.safe_load(BADGES_FILE.read_text(encoding="utf-8")) or {}
        badges_data = data.get("badges", {})

        _cached_badges = {}
        for bid, bdata in badges_data.items():
            _cached_badges[bid] = Badge(
                id=bdata.get("id", bid),
                emoji=bdata.get("emoji", "🏅"),
                name=bdata.get("name", bid),
                description=bdata.get("description", ""),
            )

        logger.debug("loaded_badges", count=len(_cached_badges))
        return _cached_badges

    except (OSError, yaml.YAMLError, AttributeError) as e:
        logger.error("failed_to_load_badges", error=str(e))
        _cached_badges = _get_default_badges()
        return _cached_badges


def get_badge(badge_id: str) -> Badge:
    """Get a badge by ID.

    Unknown IDs get a placeholder so an unlocked record is never dropped
    from a response just because its metadata is missing.
    """
    badge = load_badges().get(badge_id)
    if badge is None:
        return Badge(id=badge_id, emoji="🏅", name=badge_id, description="")
    return badge


def list_badges() -> list[Badge]:
    """List all badges in display order."""
    return list(load_badges().values())


def clear_badges_cache() -> None:
    """Clear the badges cache.

    Useful for testing or when badges are modified at runtime.
    """
    global _cached_badges
    _cached_badges = None
