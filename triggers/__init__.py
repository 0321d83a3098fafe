"""
Triggers Package.

Azure Functions HTTP trigger implementations.

HTTP Endpoints:
    /upload: Multipart file upload, returns a read-only SAS link
    /health: Configuration health check

Exports:
    BaseHttpTrigger, SystemMonitoringTrigger: Base classes
"""

# Trigger instances are built in function_app.py with an injected gateway
from .http_base import BaseHttpTrigger, SystemMonitoringTrigger

__all__ = [
    'BaseHttpTrigger',
    'SystemMonitoringTrigger',
]
