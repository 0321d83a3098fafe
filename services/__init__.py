"""
Service Layer - Upload Gateway.

Business logic lives here, free of any HTTP runtime. Both the Azure
Functions triggers and the FastAPI container runtime call into
UploadGateway and translate its exceptions into responses.

Exports:
    UploadGateway: Upload → blob write → read-only SAS link
    UploadResult: Successful upload outcome
    HealthStatus: Health endpoint body
    sanitize_filename, generate_blob_name, resolve_content_type: Naming helpers
"""

from .blob_naming import (
    CONTENT_TYPES,
    sanitize_filename,
    generate_blob_name,
    resolve_content_type,
)
from .upload_service import UploadGateway, UploadResult, HealthStatus, format_utc_millis

__all__ = [
    'CONTENT_TYPES',
    'sanitize_filename',
    'generate_blob_name',
    'resolve_content_type',
    'UploadGateway',
    'UploadResult',
    'HealthStatus',
    'format_utc_millis',
]
