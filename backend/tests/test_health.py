"""
Tests for the health endpoints.
"""

import rest_api.routers.public.health as health_module


class TestHealth:
    """GET /api/health and /api/health/detailed"""

    def test_basic_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["service"] == "tableside"

    def test_detailed_health(self, client):
        response = client.get("/api/health/detailed")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["dependencies"]["database"]["status"] == "healthy"
        assert body["dependencies"]["database"]["details"] == {"dialect": "sqlite"}
        assert body["live_tables"]["presence"]["tracked_tables"] == 0
        assert body["live_tables"]["connections"]["total_connections"] == 0

    def test_detailed_health_reports_live_viewers(self, client):
        with client.websocket_connect("/ws/tables") as websocket:
            websocket.receive_json()
            websocket.send_json({"type": "JOIN_TABLE", "table_id": 7})
            websocket.receive_json()

            body = client.get("/api/health/detailed").json()

        assert body["live_tables"]["presence"]["viewers"] == 1
        assert body["live_tables"]["connections"]["total_connections"] == 1

    def test_database_down_returns_503(self, client, monkeypatch):
        def broken_ping():
            raise RuntimeError("connection refused")

        monkeypatch.setattr(health_module, "_ping_database", broken_ping)

        response = client.get("/api/health/detailed")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "unhealthy"
        assert body["dependencies"]["database"]["error"] == "connection refused"
