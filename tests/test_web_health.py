"""Tests for health endpoint."""


class TestHealthEndpoint:
    """Tests for GET /api/health."""

    def test_health_returns_ok(self, client):
        """Health returns status ok."""
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health_returns_version(self, client):
        """Health returns the package version."""
        data = client.get("/api/health").json()
        assert data["version"] == "0.1.0"

    def test_health_returns_timestamp(self, client):
        """Health returns an ISO timestamp."""
        data = client.get("/api/health").json()
        # ISO format check
        assert "T" in data["timestamp"]
