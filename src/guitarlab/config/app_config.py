"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults when the file is missing.

Usage:
    from guitarlab.config.app_config import load_app_config

    config = load_app_config()
    technique = config.categories["technique"]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")


@dataclass
class CategoryConfig:
    """A content category: where its markdown lives and how its IDs look."""

    name: str
    content_dir: str
    prefix: str
    total: int


@dataclass
class MenuConfig:
    """Daily practice menu settings."""

    max_items: int = 3
    review_after_days: int = 7
    starter_ids: list[str] = field(
        default_factory=lambda: [
            "tech_01",
            "tech_02",
            "tech_03",
            "theory_01",
            "theory_02",
            "ghost_01",
            "dinner_01",
        ]
    )


@dataclass
class AppConfig:
    """Application-wide configuration."""

    categories: dict[str, CategoryConfig] = field(default_factory=dict)
    menu: MenuConfig = field(default_factory=MenuConfig)
    completion_threshold: int = 5
    streak_thresholds: list[int] = field(default_factory=lambda: [3, 7, 30])
    paths: dict[str, str] = field(default_factory=dict)

    @property
    def db_path(self) -> Path:
        return Path(self.paths.get("db_path", "db/guitarlab.db"))


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "categories": {
            "technique": {"dir": "content/technique", "prefix": "tech", "total": 19},
            "theory": {"dir": "content/theory", "prefix": "theory", "total": 19},
            "ghost": {"dir": "content/ghost", "prefix": "ghost", "total": 9},
            "dinner": {"dir": "content/dinner", "prefix": "dinner", "total": 9},
        },
        "progress": {
            "completion_threshold": 5,
        },
        "menu": {
            "max_items": 3,
            "review_after_days": 7,
        },
        "streak_thresholds": [3, 7, 30],
        "paths": {
            "db_path": "db/guitarlab.db",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    categories = {}
    for name, cdata in (data.get("categories") or defaults["categories"]).items():
        cdata = cdata or {}
        categories[name] = CategoryConfig(
            name=name,
            content_dir=cdata.get("dir", f"content/{name}"),
            prefix=cdata.get("prefix", name),
            total=int(cdata.get("total", 0)),
        )

    menu_data = data.get("menu") or {}
    menu = MenuConfig(
        max_items=menu_data.get("max_items", 3),
        review_after_days=menu_data.get("review_after_days", 7),
    )
    if "starter_ids" in menu_data:
        menu.starter_ids = list(menu_data["starter_ids"])

    progress_data = data.get("progress") or {}
    paths = {**defaults["paths"], **(data.get("paths") or {})}

    return AppConfig(
        categories=categories,
        menu=menu,
        completion_threshold=progress_data.get("completion_threshold", 5),
        streak_thresholds=list(data.get("streak_thresholds") or [3, 7, 30]),
        paths=paths,
    )


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
