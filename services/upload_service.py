# ============================================================================
# UPLOAD GATEWAY SERVICE
# ============================================================================
# STATUS: Service layer - one upload in, one read-only link out
# PURPOSE: Validate payload, write blob, mint user delegation SAS
# EXPORTS: UploadGateway, UploadResult, HealthStatus, format_utc_millis
# DEPENDENCIES: pydantic, infrastructure.blob (interface only), exceptions
# ============================================================================
"""
Upload Gateway Service.

Transport-agnostic core shared by the Functions triggers and the container
runtime. Each call to `handle` is independent:

    validate → name → content type → ensure container → write blob
             → user delegation SAS over [now - skew, now + window] → URL

The SAS is only requested after the write is acknowledged. If signing
fails the blob stays in the container; no compensating delete is made.

Usage:
    gateway = UploadGateway(
        blob_repository=RepositoryFactory.create_blob_repository(config),
        container_name=config.storage.container_name,
        expiry_minutes=config.upload.access_token_expiry_minutes,
        max_upload_bytes=config.upload.max_upload_bytes,
    )
    result = gateway.handle(data, "report.pdf")
    body = result.to_response()
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from exceptions import (
    InvalidRequestError,
    PayloadTooLargeError,
    StoreWriteFailedError,
    GrantIssuanceFailedError,
)
from infrastructure.blob import IBlobRepository
from util_logger import LoggerFactory, ComponentType, LogContext

from .blob_naming import generate_blob_name, resolve_content_type

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "UploadGateway")

UPLOAD_SUCCESS_MESSAGE = "File uploaded successfully!"
UPLOAD_FAILED_MESSAGE = "Failed to upload file. Please try again."
UPLOAD_SOURCE = "sharesafely_gateway"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def format_utc_millis(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _unix_millis(value: datetime) -> int:
    return (value - _EPOCH) // timedelta(milliseconds=1)


# ============================================================================
# RESULT MODELS
# ============================================================================

class UploadResult(BaseModel):
    """
    Outcome of a successful upload.

    `expires_at` is the exact expiry signed into the SAS.
    """

    file_name: str
    blob_name: str
    sas_url: str
    expires_at: datetime
    expires_in_minutes: int
    valid_from: datetime
    content_type: str
    size_bytes: int

    def to_response(self) -> Dict[str, Any]:
        """Client-facing body for POST /upload."""
        return {
            "success": True,
            "message": UPLOAD_SUCCESS_MESSAGE,
            "fileName": self.file_name,
            "blobName": self.blob_name,
            "sasUrl": self.sas_url,
            "expiresAt": format_utc_millis(self.expires_at),
            "expiresInMinutes": self.expires_in_minutes,
        }


class HealthStatus(BaseModel):
    """Body for GET /health. Built from configuration only."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = "healthy"
    storage_account: str = Field(..., alias="storageAccount")
    container: str
    sas_expiry_minutes: int = Field(..., alias="sasExpiryMinutes")

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# ============================================================================
# UPLOAD GATEWAY
# ============================================================================

class UploadGateway:
    """
    Accepts one file and returns a time-limited read-only link to it.

    Holds no per-request state; one instance serves every request in the
    process.
    """

    def __init__(
        self,
        blob_repository: IBlobRepository,
        container_name: str,
        expiry_minutes: int,
        max_upload_bytes: int,
        clock_skew_minutes: int = 10,
        storage_account: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            blob_repository: Store and credential authority
            container_name: Container every upload is written to
            expiry_minutes: SAS validity after the request time
            max_upload_bytes: Payload ceiling
            clock_skew_minutes: SAS start backdating
            storage_account: Reported by health(); defaults to the repository's account
            clock: Returns the current UTC time (injected by tests)
        """
        self.blob_repository = blob_repository
        self.container_name = container_name
        self.expiry_minutes = expiry_minutes
        self.max_upload_bytes = max_upload_bytes
        self.clock_skew_minutes = clock_skew_minutes
        self.storage_account = storage_account or getattr(blob_repository, "account_name", "")
        self._clock = clock or _utc_now

    @classmethod
    def from_config(cls, config, blob_repository: IBlobRepository) -> "UploadGateway":
        """Build a gateway from AppConfig and an already-constructed repository."""
        return cls(
            blob_repository=blob_repository,
            container_name=config.storage.container_name,
            expiry_minutes=config.upload.access_token_expiry_minutes,
            max_upload_bytes=config.upload.max_upload_bytes,
            clock_skew_minutes=config.upload.clock_skew_minutes,
            storage_account=config.storage.account_name,
        )

    # ------------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------------

    def check_declared_size(self, declared_size: Optional[int]) -> None:
        """Reject a payload whose declared size already exceeds the ceiling."""
        if declared_size is not None and declared_size > self.max_upload_bytes:
            raise PayloadTooLargeError(declared_size, self.max_upload_bytes)

    def _validate(self, data: Optional[bytes], declared_size: Optional[int]) -> None:
        if data is None:
            raise InvalidRequestError("No file uploaded. Please select a file.")
        self.check_declared_size(declared_size)
        if len(data) > self.max_upload_bytes:
            raise PayloadTooLargeError(len(data), self.max_upload_bytes)
        if len(data) == 0:
            raise InvalidRequestError(
                "No file uploaded. Please select a file.",
                details="The uploaded file is empty"
            )

    # ------------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------------

    def handle(
        self,
        data: Optional[bytes],
        filename: Optional[str],
        declared_size: Optional[int] = None,
        declared_content_type: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> UploadResult:
        """
        Store one file and issue a read-only link to it.

        Args:
            data: File bytes
            filename: Client-supplied original filename
            declared_size: Size the transport reported, if known
            declared_content_type: Client MIME type (logged, not stored)
            request_id: Caller request ID, attached to every log line

        Returns:
            UploadResult

        Raises:
            InvalidRequestError: No file or empty file
            PayloadTooLargeError: Over the ceiling
            StoreWriteFailedError: Container create or blob write failed
            GrantIssuanceFailedError: Delegation key or SAS signing failed
        """
        self._validate(data, declared_size)

        now = self._clock()
        original_name = filename or ""
        blob_name = generate_blob_name(original_name, _unix_millis(now))
        content_type = resolve_content_type(original_name)
        log = logger.with_context(LogContext(
            request_id=request_id, blob_name=blob_name, container=self.container_name
        ))

        log.info(
            f"📥 Upload received: {original_name!r} ({len(data) / 1024:.2f} KB, "
            f"declared type {declared_content_type or 'none'}) → {self.container_name}/{blob_name}"
        )

        try:
            self.blob_repository.ensure_container_exists(self.container_name)
            write_result = self.blob_repository.write_blob(
                container=self.container_name,
                blob_name=blob_name,
                data=data,
                content_type=content_type,
                metadata={
                    "upload_source": UPLOAD_SOURCE,
                    "upload_timestamp": now.isoformat(),
                    "original_filename": quote(original_name, safe=""),
                },
            )
        except Exception as e:
            log.error(f"❌ Blob write failed for {blob_name}: {e}")
            raise StoreWriteFailedError(UPLOAD_FAILED_MESSAGE, details=str(e)) from e

        log.info(
            f"✅ Blob written: {blob_name} (request_id={write_result.get('request_id')})"
        )

        valid_from = now - timedelta(minutes=self.clock_skew_minutes)
        expires_at = now + timedelta(minutes=self.expiry_minutes)

        try:
            sas_token = self.blob_repository.issue_read_sas(
                container=self.container_name,
                blob_name=blob_name,
                valid_from=valid_from,
                valid_until=expires_at,
            )
            blob_url = self.blob_repository.get_blob_url(self.container_name, blob_name)
        except Exception as e:
            log.warning(
                f"⚠️ SAS issuance failed; blob left in place without a link: "
                f"{self.container_name}/{blob_name}"
            )
            log.error(f"❌ SAS issuance failed for {blob_name}: {e}")
            raise GrantIssuanceFailedError(
                UPLOAD_FAILED_MESSAGE, details=str(e), blob_name=blob_name
            ) from e

        log.info(f"✅ Read-only link issued for {blob_name}, expires {format_utc_millis(expires_at)}")

        return UploadResult(
            file_name=original_name,
            blob_name=blob_name,
            sas_url=f"{blob_url}?{sas_token}",
            expires_at=expires_at,
            expires_in_minutes=self.expiry_minutes,
            valid_from=valid_from,
            content_type=content_type,
            size_bytes=len(data),
        )

    def health(self) -> HealthStatus:
        """Report configuration. Never contacts storage."""
        return HealthStatus(
            storage_account=self.storage_account,
            container=self.container_name,
            sas_expiry_minutes=self.expiry_minutes,
        )


__all__ = [
    'UploadGateway',
    'UploadResult',
    'HealthStatus',
    'format_utc_millis',
]
