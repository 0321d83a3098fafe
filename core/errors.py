"""
Error Code Definitions and Classification.

Centralized error code management so the Functions triggers and the
container runtime return the same status codes and response bodies.

Exports:
    ErrorCode: Standardized error codes enum
    get_http_status_code: Map an error code to an HTTP status
    create_error_response: Build the `{error, details?}` response body
"""

from enum import Enum
from typing import Dict, Any, Optional


class ErrorCode(str, Enum):
    """
    Standardized error codes for all upload gateway failures.

    None of these are retried automatically; the caller resubmits.
    """

    # Client errors - user-correctable
    INVALID_REQUEST = "INVALID_REQUEST"  # No file, empty file, malformed multipart
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"  # Exceeds MAX_UPLOAD_SIZE_MB
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"

    # Downstream dependency failures
    STORE_WRITE_FAILED = "STORE_WRITE_FAILED"  # Container create or blob upload failed
    GRANT_ISSUANCE_FAILED = "GRANT_ISSUANCE_FAILED"  # Delegation key or SAS signing failed

    # Process-level
    CONFIG_ERROR = "CONFIG_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


_HTTP_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.INVALID_REQUEST: 400,
    ErrorCode.PAYLOAD_TOO_LARGE: 413,
    ErrorCode.METHOD_NOT_ALLOWED: 405,
    ErrorCode.STORE_WRITE_FAILED: 500,
    ErrorCode.GRANT_ISSUANCE_FAILED: 500,
    ErrorCode.CONFIG_ERROR: 500,
    ErrorCode.UNEXPECTED_ERROR: 500,
}


def get_http_status_code(error_code: ErrorCode) -> int:
    """
    Get the appropriate HTTP status code for an error code.

    Example:
        >>> get_http_status_code(ErrorCode.PAYLOAD_TOO_LARGE)
        413
    """
    return _HTTP_STATUS.get(error_code, 500)


def create_error_response(error: str, details: Optional[str] = None) -> Dict[str, Any]:
    """
    Create the error response body.

    `details` is omitted entirely when there is nothing diagnostic to add,
    so unexpected failures never leak internals.

    Example:
        >>> create_error_response("Failed to upload file. Please try again.", "AuthorizationFailure")
        {'error': 'Failed to upload file. Please try again.', 'details': 'AuthorizationFailure'}
    """
    response: Dict[str, Any] = {"error": error}
    if details:
        response["details"] = details
    return response
