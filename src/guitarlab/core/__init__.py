"""Core modules for guitarlab.

- catalog: lesson catalog with forward links and backlinks
- progress: checklist toggling
- achievements: badge evaluation and streaks
- daily_menu: daily practice recommendations
"""

__all__ = [
    "catalog",
    "progress",
    "achievements",
    "daily_menu",
]
