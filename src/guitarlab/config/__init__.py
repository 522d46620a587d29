"""Configuration package for guitarlab."""

from guitarlab.config.app_config import (
    AppConfig,
    CategoryConfig,
    MenuConfig,
    clear_config_cache,
    load_app_config,
)
from guitarlab.config.badges import (
    Badge,
    clear_badges_cache,
    get_badge,
    list_badges,
    load_badges,
)

__all__ = [
    "AppConfig",
    "CategoryConfig",
    "MenuConfig",
    "clear_config_cache",
    "load_app_config",
    "Badge",
    "clear_badges_cache",
    "get_badge",
    "list_badges",
    "load_badges",
]
