# backend/tests/routers/test_error_handling.py
"""
Integration tests for error handling across the API.

These tests verify:
- Consistent error response format (ErrorDetail schema)
- Rate limiting (429 with Retry-After)
- Generic service errors become 500 responses
"""

from unittest.mock import patch

from portfolio_tracker.middleware.rate_limit import limiter
from portfolio_tracker.services.exceptions import ServiceError

CSV = "account,symbol,quantity\nBrokerage,AAPL,1\n"


def _upload(client):
    return client.post("/upload", files={"file": ("h.csv", CSV, "text/csv")})


# =============================================================================
# ERROR RESPONSE FORMAT
# =============================================================================

class TestErrorFormat:
    """Every error body has error, message and details."""

    def test_validation_error_format(self, client):
        response = client.post("/upload")

        assert response.status_code == 400
        data = response.json()
        assert set(data) == {"error", "message", "details", "correlation_id"}
        assert data["error"] == "ValidationError"
        assert data["details"] == {"field": "file"}

    def test_error_body_carries_correlation_id(self, client):
        response = client.post("/upload", headers={"X-Correlation-ID": "trace-42"})

        assert response.status_code == 400
        assert response.json()["correlation_id"] == "trace-42"
        assert response.headers["X-Correlation-ID"] == "trace-42"

    def test_generated_correlation_id_matches_header(self, client):
        response = client.get("/nope")

        assert response.json()["correlation_id"] == response.headers["X-Correlation-ID"]

    def test_invalid_upload_carries_filename(self, client):
        response = client.post(
            "/upload",
            files={"file": ("bad.csv", "", "text/csv")},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "InvalidUploadError"
        assert data["details"]["filename"] == "bad.csv"

    def test_method_not_allowed_format(self, client):
        response = client.get("/clear")

        assert response.status_code == 405
        assert response.json()["error"] == "MethodNotAllowedError"
        assert "POST" in response.headers["Allow"]

    def test_unknown_path_format(self, client):
        response = client.get("/nope")

        assert response.status_code == 404
        assert response.json()["error"] == "NotFoundError"

    def test_service_error_is_500(self, client, stored_holdings, snapshot_service):
        with patch.object(
            snapshot_service, "take_snapshot", side_effect=ServiceError("boom")
        ):
            response = client.post("/snapshot")

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "ServiceError"
        assert data["message"] == "boom"
        assert data["details"] is None


# =============================================================================
# RATE LIMITING
# =============================================================================

class TestRateLimiting:
    """Write endpoints are limited per client address."""

    def test_upload_limit(self, client):
        for _ in range(5):
            assert _upload(client).status_code == 200

        response = _upload(client)

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        data = response.json()
        assert data["error"] == "RateLimitError"
        assert data["message"]
        assert data["correlation_id"] == response.headers["X-Correlation-ID"]

    def test_limits_reset_between_tests(self, client):
        # reset_rate_limits (autouse) clears the counters used above
        assert _upload(client).status_code == 200

    def test_limiter_can_be_disabled(self, client):
        limiter.enabled = False
        try:
            for _ in range(7):
                assert _upload(client).status_code == 200
        finally:
            limiter.enabled = True
