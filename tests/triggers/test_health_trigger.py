"""
Health trigger tests.
"""

import json

import azure.functions as func

from tests.factories.fake_storage import RecordingBlobRepository
from triggers.health import HealthCheckTrigger


def make_request(method="GET"):
    return func.HttpRequest(method=method, url="http://localhost/health", headers={}, body=b"")


class TestHealthCheckTrigger:

    def test_reports_configuration(self, gateway):
        response = HealthCheckTrigger(gateway).handle_request(make_request())

        assert response.status_code == 200
        assert json.loads(response.get_body()) == {
            "status": "healthy",
            "storageAccount": "teststorage",
            "container": "uploaded-files",
            "sasExpiryMinutes": 60,
        }
        assert response.headers.get("X-Request-ID")

    def test_healthy_even_when_storage_is_broken(self, make_gateway):
        repo = RecordingBlobRepository(
            fail_container=RuntimeError("down"),
            fail_write=RuntimeError("down"),
            fail_sas=RuntimeError("down"),
        )
        response = HealthCheckTrigger(make_gateway(blob_repository=repo)).handle_request(make_request())

        assert response.status_code == 200
        assert repo.calls == []

    def test_post_not_allowed(self, gateway):
        response = HealthCheckTrigger(gateway).handle_request(make_request("POST"))
        assert response.status_code == 405
