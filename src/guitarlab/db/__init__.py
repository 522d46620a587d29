"""Database module for SQLite persistence.

Provides:
- Database connection management
- Schema initialization
- Repository functions for progress, practice logs and achievements
"""

from guitarlab.db.database import get_db, init_db

__all__ = ["get_db", "init_db"]
