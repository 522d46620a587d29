"""Shared fixtures.

Every test runs inside its own tmp_path: the working directory, the
content tree and the SQLite database all live there, so the suite never
reads or writes ./data, ./db or ./content of the project.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest
import structlog
from fastapi.testclient import TestClient

from guitarlab.config.app_config import clear_config_cache
from guitarlab.config.badges import clear_badges_cache
from guitarlab.db import database
from guitarlab.db.database import init_db


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging setup done by CLI invocations."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def workspace(tmp_path, monkeypatch) -> Path:
    """Isolated working directory with an initialized database."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(database, "_db_path", None)
    clear_config_cache()
    clear_badges_cache()

    init_db(tmp_path / "db" / "test.db")

    yield tmp_path

    clear_config_cache()
    clear_badges_cache()


@pytest.fixture
def content_tree(workspace) -> Path:
    """Small lesson tree under ./content with both link styles.

    technique/01_picking.md          -> [[tech_02]], [[theory_01|intervals]]
    technique/02_fretting.md         -> [[tech_02]] (self), 01_picking.md
    technique/advanced/03_power_chords.md -> ../../theory/01_intervals.md
    theory/01_intervals.md           -> [[tech_01]], [[missing_99]]
    dinner/01_intro.md               -> no links
    ghost/                           -> missing
    """
    content = workspace / "content"
    files = {
        "technique/01_picking.md": (
            "# Picking\n\nWarm up with [[tech_02]] and [[theory_01|intervals]].\n"
            "Then come back to [[tech_02]].\n"
        ),
        "technique/02_fretting.md": (
            "# Fretting\n\nThis lesson is [[tech_02]]. Review [picking](01_picking.md).\n"
        ),
        "technique/advanced/03_power_chords.md": (
            "# Power chords\n\nSee [intervals](../../theory/01_intervals.md#fifths) "
            "and [a remote page](https://example.com/guide.md).\n"
        ),
        "theory/01_intervals.md": "# Intervals\n\nUsed in [[tech_01]] and [[missing_99]].\n",
        "dinner/01_intro.md": "# Dinner song\n\nNo links here.\n",
    }
    for rel, text in files.items():
        path = content / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return content


@pytest.fixture
def client(workspace):
    """Test client bound to the isolated workspace."""
    from guitarlab.web.api import create_app

    app = create_app()
    return TestClient(app)


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time."""
    return datetime(2024, 3, 15, 18, 30, tzinfo=timezone.utc)


@pytest.fixture
def today() -> str:
    """Today's practice-log date as the API computes it."""
    return datetime.now(timezone.utc).date().isoformat()
