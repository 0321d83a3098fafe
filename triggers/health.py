"""
Health Check HTTP Trigger.

GET /health - reports the configured storage account, container and SAS
window. Never contacts storage, so it answers 200 whenever the process
is up.

Exports:
    HealthCheckTrigger: Health check trigger class
"""

from typing import Dict, Any

import azure.functions as func

from services.upload_service import UploadGateway

from .http_base import SystemMonitoringTrigger


class HealthCheckTrigger(SystemMonitoringTrigger):
    """Health check HTTP trigger implementation."""

    def __init__(self, gateway: UploadGateway):
        super().__init__("health")
        self.gateway = gateway

    def process_request(self, req: func.HttpRequest, request_id: str) -> Dict[str, Any]:
        return self.gateway.health().to_response()
