from tests.conftest import API


class TestApplication:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_api_info(self, client):
        response = client.get(f"{API}/info")
        assert response.json()["endpoints"]["appointments"] == f"{API}/appointments"

    def test_response_headers(self, client):
        """Every response carries timing and security headers."""
        response = client.get("/health")
        assert "X-Process-Time" in response.headers
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_unknown_route(self, client):
        response = client.get(f"{API}/nowhere")
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": f"Route not found: GET {API}/nowhere",
        }

    def test_store_failure_is_generic_500(self, client, store, monkeypatch):
        from dental_api.core.exceptions import StoreError

        def fail(*args, **kwargs):
            raise StoreError("Document store unavailable")

        monkeypatch.setattr(store, "query", fail)
        response = client.get(f"{API}/treatments")
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Internal server error"}
