"""
HTTP Trigger Base Class.

Abstract base class for the Azure Functions HTTP triggers providing
consistent request/response handling.

Every response is JSON and carries an X-Request-ID header. Success bodies
are exactly what process_request returns; error bodies are
`{"error": ..., "details"?: ...}`.

Exports:
    BaseHttpTrigger: Base class for HTTP triggers
    SystemMonitoringTrigger: Base class for monitoring endpoints
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
import uuid
import json

import azure.functions as func

from core.errors import ErrorCode, create_error_response, get_http_status_code
from exceptions import UploadGatewayError
from util_logger import LoggerFactory, ComponentType, LogContext

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


class BaseHttpTrigger(ABC):
    """
    Abstract base class for Azure Functions HTTP triggers.

    Subclasses implement process_request and raise UploadGatewayError
    subclasses for expected failures; handle_request turns those into
    responses with the matching status code.
    """

    def __init__(self, trigger_name: str):
        """
        Args:
            trigger_name: Name of the trigger for logging (e.g., "upload", "health")
        """
        self.trigger_name = trigger_name
        self.logger = LoggerFactory.create_logger(ComponentType.TRIGGER, f"HttpTrigger.{trigger_name}")

    # ========================================================================
    # ABSTRACT METHODS - Must be implemented by concrete triggers
    # ========================================================================

    @abstractmethod
    def process_request(self, req: func.HttpRequest, request_id: str) -> Dict[str, Any]:
        """
        Process the HTTP request and return the response body.

        Args:
            req: Azure Functions HTTP request object
            request_id: Value of the X-Request-ID response header

        Raises:
            UploadGatewayError: Mapped to its own status code
            Exception: Anything else becomes a generic 500
        """
        pass

    @abstractmethod
    def get_allowed_methods(self) -> List[str]:
        """Return list of allowed HTTP methods for this trigger."""
        pass

    # ========================================================================
    # CONCRETE INFRASTRUCTURE METHODS
    # ========================================================================

    def handle_request(self, req: func.HttpRequest) -> func.HttpResponse:
        """
        Main entry point for HTTP request handling.

        Args:
            req: Azure Functions HTTP request object

        Returns:
            Azure Functions HTTP response with JSON content
        """
        request_id = self._generate_request_id()
        log = self.logger.with_context(LogContext(request_id=request_id))

        log.info(
            f"🌐 [{self.trigger_name}] Request {request_id} started: "
            f"{req.method} {req.url}"
        )

        try:
            if req.method.upper() not in self.get_allowed_methods():
                log.warning(f"❌ [{self.trigger_name}] Method {req.method} not allowed")
                return self._create_error_response(
                    error="Method not allowed",
                    details=f"Method {req.method} not allowed. Allowed: {', '.join(self.get_allowed_methods())}",
                    status_code=get_http_status_code(ErrorCode.METHOD_NOT_ALLOWED),
                    request_id=request_id
                )

            response_data = self.process_request(req, request_id)

            response = self._create_success_response(response_data, request_id)

            log.info(
                f"✅ [{self.trigger_name}] Request {request_id} completed successfully"
            )

            return response

        except UploadGatewayError as e:
            if e.http_status < 500:
                log.warning(f"❌ [{self.trigger_name}] Client error ({e.error_code.value}): {e.message}")
            else:
                log.error(
                    f"💥 [{self.trigger_name}] {e.error_code.value}: {e.message} ({e.details})"
                )
            return self._create_error_response(
                error=e.message,
                details=e.details,
                status_code=e.http_status,
                request_id=request_id
            )

        except Exception as e:
            log.error(f"💥 [{self.trigger_name}] Internal error: {e}", exc_info=True)
            return self._create_error_response(
                error=UNEXPECTED_ERROR_MESSAGE,
                details=None,
                status_code=500,
                request_id=request_id
            )

    # ========================================================================
    # PRIVATE INFRASTRUCTURE METHODS
    # ========================================================================

    def _generate_request_id(self) -> str:
        """Generate unique request ID for tracing."""
        return str(uuid.uuid4())[:8]

    def _create_success_response(self, data: Dict[str, Any], request_id: str) -> func.HttpResponse:
        return func.HttpResponse(
            json.dumps(data, default=str),
            status_code=200,
            mimetype="application/json",
            headers={"X-Request-ID": request_id}
        )

    def _create_error_response(self, error: str, details: Optional[str], status_code: int,
                               request_id: str) -> func.HttpResponse:
        return func.HttpResponse(
            json.dumps(create_error_response(error, details)),
            status_code=status_code,
            mimetype="application/json",
            headers={"X-Request-ID": request_id}
        )


# ============================================================================
# SPECIALIZED BASE CLASSES FOR COMMON PATTERNS
# ============================================================================

class SystemMonitoringTrigger(BaseHttpTrigger):
    """Base class for system monitoring triggers. GET only."""

    def get_allowed_methods(self) -> List[str]:
        return ["GET"]
