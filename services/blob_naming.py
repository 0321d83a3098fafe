# ============================================================================
# BLOB NAMING
# ============================================================================
# STATUS: Service layer - key derivation and content type lookup
# PURPOSE: Turn a client filename into a storage key and MIME type
# EXPORTS: CONTENT_TYPES, sanitize_filename, generate_blob_name, resolve_content_type
# DEPENDENCIES: config.defaults
# ============================================================================
"""
Blob Naming and Content Type Resolution.

Pure functions with no storage access:
    sanitize_filename: Replace every character outside [A-Za-z0-9.-] with "_"
    generate_blob_name: "{unix-ms}-{sanitized filename}"
    resolve_content_type: Extension lookup, case-insensitive

Exports:
    CONTENT_TYPES, sanitize_filename, generate_blob_name, resolve_content_type
"""

import os
import re
from typing import Optional

from config.defaults import UploadDefaults

# Extension → MIME type. Anything not listed is stored as application/octet-stream.
CONTENT_TYPES = {
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.xls': 'application/vnd.ms-excel',
    '.xlsx': 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    '.ppt': 'application/vnd.ms-powerpoint',
    '.pptx': 'application/vnd.openxmlformats-officedocument.presentationml.presentation',
    '.txt': 'text/plain',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.gif': 'image/gif',
    '.zip': 'application/zip',
    '.rar': 'application/x-rar-compressed',
}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.-]")


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Make a client filename safe for use in a blob name.

    Path separators are replaced like any other character, so directory
    components survive as part of the name. Idempotent.

    Example:
        >>> sanitize_filename("my report (final).pdf")
        'my_report__final_.pdf'
    """
    safe = _UNSAFE_CHARS.sub("_", filename or "")
    return safe or UploadDefaults.FALLBACK_FILENAME


def generate_blob_name(filename: Optional[str], timestamp_ms: int) -> str:
    """Build the stored object key: '{timestamp_ms}-{sanitized filename}'."""
    return f"{timestamp_ms}-{sanitize_filename(filename)}"


def resolve_content_type(filename: Optional[str]) -> str:
    """Content type from the file extension, or application/octet-stream."""
    ext = os.path.splitext(filename or "")[1].lower()
    return CONTENT_TYPES.get(ext, UploadDefaults.FALLBACK_CONTENT_TYPE)


__all__ = [
    'CONTENT_TYPES',
    'sanitize_filename',
    'generate_blob_name',
    'resolve_content_type',
]
