"""
Tests for the Query Package API endpoints.
"""

import pytest


class TestCreateQueryPackage:
    """Tests for POST /api/query-package."""

    def test_read_only_query(self, client):
        """Test that a SELECT returns all three documents."""
        response = client.post(
            "/api/query-package",
            json={
                "sql": "SELECT * FROM users;",
                "purpose": "All users",
                "dialect": "PostgreSQL",
                "environment": "staging",
            },
        )
        assert response.status_code == 200
        data = response.get_json()
        assert data["slug"] == "all-users"
        assert data["classification"]["risk_tier"] == "safe"
        assert data["policy"]["severity"] == "caution"
        assert [d["kind"] for d in data["documents"]] == ["query", "explain", "guide"]

    def test_blocked_statement(self, client):
        """Test that DDL returns 422 with the violation."""
        response = client.post(
            "/api/query-package",
            json={"sql": "DROP TABLE users;", "dialect": "MySQL"},
        )
        assert response.status_code == 422
        data = response.get_json()
        assert data["error"] == "policy_violation"
        assert data["trigger"] == "DROP"
        assert "documents" not in data

    def test_unsupported_dialect(self, client):
        """Test that an unknown dialect returns 400."""
        response = client.post(
            "/api/query-package",
            json={"sql": "SELECT 1;", "dialect": "Oracle"},
        )
        assert response.status_code == 400
        data = response.get_json()
        assert data["error"] == "unsupported_dialect"
        assert data["dialect"] == "Oracle"

    def test_allow_missing_explain(self, client):
        """Test the degraded package over the API."""
        response = client.post(
            "/api/query-package",
            json={"sql": "SELECT 1;", "dialect": "Oracle", "allow_missing_explain": True},
        )
        assert response.status_code == 200
        data = response.get_json()
        assert [d["kind"] for d in data["documents"]] == ["query", "guide"]
        assert data["notices"]

    def test_missing_body(self, client):
        """Test that an empty request is rejected."""
        response = client.post("/api/query-package", json={})
        assert response.status_code == 400

    def test_missing_sql(self, client):
        """Test that sql is required."""
        response = client.post("/api/query-package", json={"purpose": "x"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "sql is required"

    def test_non_object_body(self, client):
        """Test that a JSON array body is rejected."""
        response = client.post("/api/query-package", json=["SELECT 1"])
        assert response.status_code == 400
        assert response.get_json()["error"] == "Request body must be a JSON object"

    @pytest.mark.parametrize(
        "field,value",
        [("purpose", 42), ("environment", ["prod"]), ("dialect", {"name": "MySQL"})],
    )
    def test_non_string_hint(self, client, field, value):
        """Test that hint values must be strings."""
        response = client.post(
            "/api/query-package",
            json={"sql": "SELECT 1;", "dialect": "MySQL", field: value},
        )
        assert response.status_code == 400
        assert response.get_json()["fields"] == [field]

    @pytest.mark.parametrize("value", ["false", "true", 1, None])
    def test_allow_missing_explain_must_be_boolean(self, client, value):
        """Test that only JSON booleans enable the degraded package."""
        response = client.post(
            "/api/query-package",
            json={"sql": "SELECT 1;", "dialect": "Oracle", "allow_missing_explain": value},
        )
        assert response.status_code == 400
        assert response.get_json()["error"] == "allow_missing_explain must be a boolean"

    def test_long_in_list(self, client):
        """Test that a query with a very long IN list is packaged."""
        values = ", ".join(str(i) for i in range(5000))
        response = client.post(
            "/api/query-package",
            json={
                "sql": f"SELECT * FROM orders WHERE order_id IN ({values});",
                "dialect": "PostgreSQL",
            },
        )
        assert response.status_code == 200
        assert response.get_json()["classification"]["risk_tier"] == "safe"


class TestDialectsAndHealth:
    """Tests for the read-only endpoints."""

    def test_list_dialects(self, client):
        response = client.get("/api/query-package/dialects")
        assert response.status_code == 200
        names = {d["name"] for d in response.get_json()["dialects"]}
        assert names == {"postgresql", "mysql", "sqlite", "sqlserver"}

    def test_health(self, client):
        response = client.get("/api/query-package/health")
        assert response.status_code == 200
        assert response.get_json()["status"] == "healthy"


class TestCreateApp:
    """Tests for the application factory."""

    def test_blueprint_registered_under_api(self, pipeline, monkeypatch):
        from query_designer.api import query_package as query_package_api
        from query_designer.app import create_app

        monkeypatch.setattr(query_package_api, "_pipeline", pipeline)
        app = create_app()
        response = app.test_client().get("/api/query-package/health")
        assert response.status_code == 200
