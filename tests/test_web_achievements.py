"""Tests for achievement endpoints."""

from guitarlab.db.achievements_repository import list_achievements

USER = "achievement-test-user"


def complete_article(client, article_id):
    """Tick all five checklist items of an article through the API."""
    for i in range(5):
        client.post(
            "/api/progress/toggle",
            json={"userId": USER, "articleId": article_id, "itemIndex": i},
        )


def get_badge(client, badge_id):
    badges = client.get("/api/achievements", params={"userId": USER}).json()
    return next(b for b in badges if b["id"] == badge_id)


class TestGetAchievements:
    """Tests for GET /api/achievements."""

    def test_initially_nothing_unlocked(self, client):
        """All twelve badges are listed, none unlocked."""
        response = client.get("/api/achievements", params={"userId": USER})

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 12
        assert not any(b["unlocked"] for b in data)
        assert all(b["unlockedAt"] is None for b in data)

    def test_badge_fields(self, client):
        """Each badge carries display data and unlock state."""
        badge = client.get("/api/achievements", params={"userId": USER}).json()[0]

        assert set(badge) == {"id", "emoji", "name", "description", "unlocked", "unlockedAt"}

    def test_first_technique_article(self, client):
        """Completing one technique lesson unlocks its starter badge."""
        complete_article(client, "tech_01")

        badge = get_badge(client, "technique_starter")
        assert badge["unlocked"] is True
        assert badge["unlockedAt"] is not None

    def test_five_technique_articles(self, client):
        """Five technique lessons unlock graduate but not master."""
        for n in range(1, 6):
            complete_article(client, f"tech_{n:02d}")

        assert get_badge(client, "technique_graduate")["unlocked"] is True
        assert get_badge(client, "technique_master")["unlocked"] is False

    def test_repeated_completion_keeps_one_record(self, client):
        """Re-completing a lesson stores the badge once."""
        complete_article(client, "tech_01")
        complete_article(client, "tech_01")
        complete_article(client, "tech_01")

        ids = [a.badge_id for a in list_achievements(USER)]
        assert ids.count("technique_starter") == 1

    def test_missing_user_id(self, client):
        """Missing userId returns 400."""
        response = client.get("/api/achievements")
        assert response.status_code == 400


class TestEvaluate:
    """Tests for POST /api/achievements/evaluate."""

    def test_nothing_to_unlock(self, client):
        """Fresh user unlocks nothing."""
        response = client.post("/api/achievements/evaluate", json={"userId": USER})

        assert response.status_code == 200
        assert response.json() == {"newlyUnlocked": []}

    def test_evaluation_after_toggles_is_idempotent(self, client):
        """Badges unlocked by toggles are not returned again."""
        complete_article(client, "theory_01")

        response = client.post("/api/achievements/evaluate", json={"userId": USER})
        assert response.json()["newlyUnlocked"] == []
        assert get_badge(client, "theory_starter")["unlocked"] is True

    def test_missing_user_id(self, client):
        """Missing userId in the body returns 400."""
        response = client.post("/api/achievements/evaluate", json={})
        assert response.status_code == 400
