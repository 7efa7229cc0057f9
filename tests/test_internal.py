"""Tests for internal job endpoints (/internal/run_cycle)."""

from __future__ import annotations

from unittest.mock import patch

from fastapi.testclient import TestClient

from tests.test_constants import TEST_INTERNAL_JOB_TOKEN

VALID_TOKEN = TEST_INTERNAL_JOB_TOKEN  # matches conftest.py env setup

_SUMMARY = {
    "status": "completed",
    "job_run_id": 7,
    "series_inserted": 0,
    "series_updated": 1,
    "breaches_found": 1,
    "notifications_sent": 2,
    "notifications_failed": 0,
    "error": None,
}


class TestRunCycle:
    @patch("econwatch.services.cycle.run_cycle")
    def test_valid_token_runs_cycle(self, mock_cycle, client: TestClient):
        """POST /internal/run_cycle with valid token triggers a cycle."""
        mock_cycle.return_value = _SUMMARY

        response = client.post(
            "/internal/run_cycle",
            headers={"X-Internal-Token": VALID_TOKEN},
        )

        assert response.status_code == 200
        assert response.json() == _SUMMARY
        mock_cycle.assert_called_once()

    def test_missing_token_returns_422(self, client: TestClient):
        """POST /internal/run_cycle without token header returns 422."""
        response = client.post("/internal/run_cycle")
        assert response.status_code == 422

    def test_wrong_token_returns_403(self, client: TestClient):
        """POST /internal/run_cycle with wrong token returns 403."""
        response = client.post(
            "/internal/run_cycle",
            headers={"X-Internal-Token": "wrong-token"},
        )
        assert response.status_code == 403

    @patch("econwatch.services.cycle.run_cycle")
    def test_unexpected_error_returns_failed_status(self, mock_cycle, client: TestClient):
        """An exception escaping the cycle is reported, not raised."""
        mock_cycle.side_effect = RuntimeError("database gone")

        response = client.post(
            "/internal/run_cycle",
            headers={"X-Internal-Token": VALID_TOKEN},
        )

        assert response.status_code == 200
        assert response.json() == {"status": "failed", "error": "database gone"}

    def test_empty_configured_token_rejects_everything(self, client: TestClient):
        """With INTERNAL_JOB_TOKEN unset the endpoint is closed."""
        with patch("econwatch.api.internal.get_settings") as mock_settings:
            mock_settings.return_value.internal_job_token = ""
            response = client.post(
                "/internal/run_cycle",
                headers={"X-Internal-Token": "anything"},
            )
        assert response.status_code == 403
