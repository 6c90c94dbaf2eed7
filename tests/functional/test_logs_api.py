"""
API tests for the request log and the shared error envelope.
"""

from fastapi.testclient import TestClient


class TestRequestLog:
    """Test that requests are recorded and readable by admins"""

    def test_requires_admin(self, client: TestClient):
        response = client.get("/api/logs")
        assert response.status_code == 401

    def test_requests_are_logged(self, client: TestClient, admin_headers):
        client.get("/api/health")

        response = client.get("/api/logs", headers=admin_headers)
        assert response.status_code == 200

        assert response.json()["success"] is True
        logs = response.json()["data"]
        assert [log["path"] for log in logs] == ["/api/health"]
        assert logs[0]["status_code"] == 200
        assert logs[0]["application_id"] == "medprep-api"
        assert response.headers["X-Total-Count"] == "1"

    def test_admin_token_not_stored(self, client: TestClient, admin_headers):
        client.get("/api/resources", headers=admin_headers)

        logs = client.get("/api/logs", headers=admin_headers).json()["data"]
        assert len(logs) == 1
        assert "test-admin-token" not in logs[0]["request_headers"]
        assert "[redacted]" in logs[0]["request_headers"]

    def test_error_logs(self, client: TestClient, admin_headers):
        client.get("/api/health")
        client.get("/api/subscriptions/missing@example.com")

        errors = client.get("/api/logs/errors", headers=admin_headers).json()["data"]
        assert len(errors) == 1
        assert errors[0]["status_code"] == 404

    def test_status_distribution(self, client: TestClient, admin_headers):
        client.get("/api/health")
        client.get("/api/health")
        client.get("/api/subscriptions/missing@example.com")

        response = client.get("/api/logs/status-distribution", headers=admin_headers)
        assert response.status_code == 200

        distribution = response.json()["data"]["status_distribution"]
        assert distribution == [
            {"status_code": 200, "count": 2, "description": "Success"},
            {"status_code": 404, "count": 1, "description": "Client Error"},
        ]

    def test_status_range_rejected(self, client: TestClient, admin_headers):
        response = client.get("/api/logs?status_min=500&status_max=400", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "status_min cannot be greater than status_max"


class TestEnvelope:
    """Test the uniform response envelope"""

    def test_health(self, client: TestClient):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "ok"

    def test_unknown_route(self, client: TestClient):
        response = client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Not Found"}
