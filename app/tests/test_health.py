# app/tests/test_health.py
"""Tests for the health endpoint."""


class TestHealthEndpoint:
    """Tests for /health endpoint."""

    def test_health_returns_200(self, client):
        """Health endpoint returns HTTP 200."""
        response = client.get("/health")
        assert response.status_code == 200

    def test_health_contains_required_keys(self, client):
        """Health response reports service identity."""
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["service"] == "members-portal"
        assert data["version"] == "0.1.0"
        assert data["environment"] == "development"
        assert "started_at" in data
