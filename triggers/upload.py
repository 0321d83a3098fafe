# ============================================================================
# UPLOAD HTTP TRIGGER
# ============================================================================
# STATUS: Trigger layer - POST /upload
# PURPOSE: Accept one multipart file and return a read-only SAS link
# EXPORTS: UploadTrigger, parse_multipart_file, MultipartFile
# DEPENDENCIES: azure.functions, services.upload_service
# ============================================================================
"""
Upload - store one file and return a time-limited link to it.

Route: POST /upload

Accepts multipart/form-data with:
    - file: The file to upload (required)

Example Usage:
    curl -X POST "https://{app-url}/upload" -F "file=@report.pdf"

Response (200):
    {"success": true, "message": "File uploaded successfully!",
     "fileName": "report.pdf", "blobName": "1714060800000-report.pdf",
     "sasUrl": "https://...?sv=...", "expiresAt": "2024-04-25T17:00:00.000Z",
     "expiresInMinutes": 60}
"""

import re
from typing import Dict, Any, List, NamedTuple, Optional

import azure.functions as func

from config.defaults import UploadDefaults
from exceptions import InvalidRequestError, PayloadTooLargeError
from services.upload_service import UploadGateway

from .http_base import BaseHttpTrigger

FILE_FIELD = "file"

_NAME_RE = re.compile(r';\s*name="([^"]*)"', re.IGNORECASE)
_FILENAME_RE = re.compile(r';\s*filename="([^"]*)"', re.IGNORECASE)
_PART_CONTENT_TYPE_RE = re.compile(r'^Content-Type:\s*(.+)$', re.IGNORECASE | re.MULTILINE)


class MultipartFile(NamedTuple):
    data: Optional[bytes]
    filename: Optional[str]
    content_type: Optional[str]


def _extract_boundary(content_type: str) -> str:
    # Format: multipart/form-data; boundary=----WebKitFormBoundary...
    for part in content_type.split(";"):
        part = part.strip()
        if part.lower().startswith("boundary="):
            boundary = part[9:]
            if boundary.startswith('"') and boundary.endswith('"'):
                boundary = boundary[1:-1]
            if boundary:
                return boundary
    raise InvalidRequestError(
        "No file uploaded. Please select a file.",
        details="Could not extract boundary from Content-Type"
    )


def parse_multipart_file(content_type: str, body: bytes, field_name: str = FILE_FIELD) -> MultipartFile:
    """
    Pull the first file part named `field_name` out of a multipart body.

    File bytes are returned exactly as sent; only the CRLF that belongs
    to the delimiter is removed.

    Returns:
        MultipartFile with data=None when no such file part exists

    Raises:
        InvalidRequestError: Not multipart/form-data, or no boundary
    """
    if "multipart/form-data" not in (content_type or "").lower():
        raise InvalidRequestError(
            "No file uploaded. Please select a file.",
            details="Content-Type must be multipart/form-data"
        )

    boundary = _extract_boundary(content_type)
    delimiter = b"\r\n--" + boundary.encode("utf-8")

    # Leading CRLF lets the first delimiter match like every other one
    segments = (b"\r\n" + (body or b"")).split(delimiter)

    for segment in segments[1:]:
        if segment.startswith(b"--"):
            break
        if segment.startswith(b"\r\n"):
            segment = segment[2:]

        header_end = segment.find(b"\r\n\r\n")
        if header_end == -1:
            continue

        headers = segment[:header_end].decode("utf-8", errors="replace")
        name_match = _NAME_RE.search(headers)
        filename_match = _FILENAME_RE.search(headers)

        if not name_match or name_match.group(1) != field_name or filename_match is None:
            continue

        type_match = _PART_CONTENT_TYPE_RE.search(headers)
        return MultipartFile(
            data=segment[header_end + 4:],
            filename=filename_match.group(1),
            content_type=type_match.group(1).strip() if type_match else None,
        )

    return MultipartFile(data=None, filename=None, content_type=None)


class UploadTrigger(BaseHttpTrigger):
    """POST /upload trigger."""

    def __init__(self, gateway: UploadGateway):
        super().__init__("upload")
        self.gateway = gateway

    def get_allowed_methods(self) -> List[str]:
        return ["POST"]

    def _check_content_length(self, req: func.HttpRequest) -> None:
        """Reject before touching the body when Content-Length is already too big."""
        raw = req.headers.get("Content-Length")
        if not raw:
            return
        try:
            declared = int(raw)
        except ValueError:
            return
        if declared > self.gateway.max_upload_bytes + UploadDefaults.MULTIPART_OVERHEAD_BYTES:
            raise PayloadTooLargeError(declared, self.gateway.max_upload_bytes)

    def process_request(self, req: func.HttpRequest, request_id: str) -> Dict[str, Any]:
        self._check_content_length(req)

        upload = parse_multipart_file(req.headers.get("Content-Type", ""), req.get_body())

        result = self.gateway.handle(
            data=upload.data,
            filename=upload.filename,
            declared_content_type=upload.content_type,
            request_id=request_id,
        )
        return result.to_response()
