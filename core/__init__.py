"""
Core building blocks shared by every layer.

Exports:
    ErrorCode: Standardized error codes
    get_http_status_code: Error code to HTTP status
    create_error_response: Error response body builder
"""

from .errors import ErrorCode, get_http_status_code, create_error_response

__all__ = [
    'ErrorCode',
    'get_http_status_code',
    'create_error_response',
]
