# ============================================================================
# EXCEPTIONS
# ============================================================================
# STATUS: Shared - used by config, services and both HTTP runtimes
# PURPOSE: Exception hierarchy separating caller errors from dependency failures
# EXPORTS: BusinessLogicError, UploadGatewayError, InvalidRequestError,
#          PayloadTooLargeError, StoreWriteFailedError, GrantIssuanceFailedError,
#          ConfigurationError
# DEPENDENCIES: core.errors
# ============================================================================

"""
Custom Exception Hierarchy

Distinguishes between:
1. Request errors (the caller can fix and resubmit)
2. Dependency failures (blob store or credential authority refused)
3. Configuration errors (process must not start)

Every UploadGatewayError carries an ErrorCode, which fixes its HTTP status,
and a client-facing message. `details` holds upstream diagnostics that are
safe to return (the SDK error message, never a stack trace).
"""

from typing import Optional

from core.errors import ErrorCode, get_http_status_code


class BusinessLogicError(Exception):
    """
    Base class for expected runtime failures.

    These are normal failures that occur during operation and are turned
    into HTTP responses rather than crashing the worker.
    """
    pass


class UploadGatewayError(BusinessLogicError):
    """Base class for failures of a single upload request."""

    error_code: ErrorCode = ErrorCode.UNEXPECTED_ERROR

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    @property
    def http_status(self) -> int:
        return get_http_status_code(self.error_code)


class InvalidRequestError(UploadGatewayError):
    """
    No file, empty file, or malformed multipart body.

    Raised before any store interaction.
    """
    error_code = ErrorCode.INVALID_REQUEST


class PayloadTooLargeError(UploadGatewayError):
    """Declared or actual payload size exceeds the configured ceiling."""
    error_code = ErrorCode.PAYLOAD_TOO_LARGE

    def __init__(self, size_bytes: int, max_bytes: int):
        super().__init__(
            f"File too large: {size_bytes / (1024 * 1024):.2f} MB",
            details=f"Maximum file size is {max_bytes // (1024 * 1024)} MB"
        )
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes


class StoreWriteFailedError(UploadGatewayError):
    """
    Container creation or blob upload failed (network, auth, quota).

    Examples:
        - AuthorizationPermissionMismatch (missing Storage Blob Data Contributor)
        - Storage account unreachable
    """
    error_code = ErrorCode.STORE_WRITE_FAILED


class GrantIssuanceFailedError(UploadGatewayError):
    """
    User delegation key request or SAS signing failed.

    The blob has already been written when this is raised and is left in
    place; no compensating delete is attempted.
    """
    error_code = ErrorCode.GRANT_ISSUANCE_FAILED

    def __init__(self, message: str, details: Optional[str] = None, blob_name: Optional[str] = None):
        super().__init__(message, details)
        self.blob_name = blob_name


class ConfigurationError(BusinessLogicError):
    """
    Required configuration missing or malformed.

    Raised while loading configuration at process start. Never caught by
    the request handlers - the process must not start without storage.
    """
    error_code = ErrorCode.CONFIG_ERROR
