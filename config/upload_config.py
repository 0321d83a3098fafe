"""
Upload Gateway Configuration.

Size ceiling and SAS grant window for the upload endpoint.

Exports:
    UploadConfig: Upload limits and SAS timing

Environment Variables:
    MAX_UPLOAD_SIZE_MB            - Payload ceiling in MiB (default 100)
    ACCESS_TOKEN_EXPIRY_MINUTES   - SAS validity after request time (default 60)
                                    falls back to SAS_TOKEN_EXPIRY_MINUTES
"""

from pydantic import BaseModel, Field

from .defaults import UploadDefaults, LegacyEnvNames
from .storage_config import read_env


class UploadConfig(BaseModel):
    """Upload limits and SAS grant window."""

    max_upload_size_mb: int = Field(
        default=UploadDefaults.MAX_UPLOAD_SIZE_MB,
        ge=1,
        le=5000,
        description="Maximum accepted payload size in MiB"
    )

    access_token_expiry_minutes: int = Field(
        default=UploadDefaults.ACCESS_TOKEN_EXPIRY_MINUTES,
        ge=1,
        # User delegation keys are valid for at most 7 days
        le=7 * 24 * 60,
        description="Minutes the read-only SAS stays valid after the request"
    )

    clock_skew_minutes: int = Field(
        default=UploadDefaults.CLOCK_SKEW_MINUTES,
        ge=0,
        description="Minutes the SAS start time is backdated"
    )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @classmethod
    def from_environment(cls) -> "UploadConfig":
        """Load upload configuration from environment variables."""
        return cls(
            max_upload_size_mb=read_env(
                "MAX_UPLOAD_SIZE_MB",
                default=str(UploadDefaults.MAX_UPLOAD_SIZE_MB),
            ),
            access_token_expiry_minutes=read_env(
                "ACCESS_TOKEN_EXPIRY_MINUTES",
                LegacyEnvNames.ACCESS_TOKEN_EXPIRY_MINUTES,
                str(UploadDefaults.ACCESS_TOKEN_EXPIRY_MINUTES),
            ),
        )
