# ============================================================================
# STORAGE CONFIGURATION
# ============================================================================
# STATUS: Configuration - Blob storage account and container
# PURPOSE: Resolve the single storage account/container uploads land in
# EXPORTS: StorageConfig, read_env
# DEPENDENCIES: pydantic, os
# SOURCE: STORAGE_ACCOUNT_NAME, STORAGE_CONTAINER_NAME (AZURE_* fallbacks)
# ============================================================================

"""
Azure Storage Configuration.

Uploads go to one container in one storage account. The account name has
no default: a deployment without it cannot do anything useful, so loading
fails with ConfigurationError and the process does not start.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from exceptions import ConfigurationError

from .defaults import StorageDefaults, LegacyEnvNames
from .env_validation import ENV_VAR_RULES


def read_env(name: str, legacy_name: Optional[str] = None, default: Optional[str] = None) -> Optional[str]:
    """
    Read an environment variable, falling back to its legacy name.

    Empty and whitespace-only values count as unset.
    """
    for candidate in (name, legacy_name):
        if not candidate:
            continue
        value = os.environ.get(candidate)
        if value is not None and value.strip():
            return value.strip()
    return default


class StorageConfig(BaseModel):
    """
    Storage account and container for uploaded files.

    Attributes:
        account_name: Azure storage account (3-24 lowercase alphanumerics)
        container_name: Container uploads are written to
        endpoint_suffix: Blob endpoint DNS suffix
    """

    account_name: str = Field(
        ...,
        description="Azure storage account name. Required - no default."
    )

    container_name: str = Field(
        default=StorageDefaults.CONTAINER_NAME,
        description="Blob container for uploads (created on first upload if absent)"
    )

    endpoint_suffix: str = Field(
        default=StorageDefaults.BLOB_ENDPOINT_SUFFIX,
        description="Blob service DNS suffix"
    )

    @field_validator("account_name")
    @classmethod
    def _validate_account_name(cls, value: str) -> str:
        if not (3 <= len(value) <= 24) or not value.isalnum() or value.lower() != value:
            raise ValueError(
                f"storage account name '{value}' must be 3-24 lowercase letters and digits"
            )
        return value

    @field_validator("container_name")
    @classmethod
    def _validate_container_name(cls, value: str) -> str:
        rule = ENV_VAR_RULES["STORAGE_CONTAINER_NAME"]
        if not rule.pattern.match(value):
            raise ValueError(f"'{value}' is not a valid {rule.pattern_description}")
        return value

    @property
    def account_url(self) -> str:
        """Blob service URL, e.g. https://myaccount.blob.core.windows.net"""
        return f"https://{self.account_name}.{self.endpoint_suffix}"

    @classmethod
    def from_environment(cls) -> "StorageConfig":
        """Load storage configuration from environment variables."""
        account_name = read_env("STORAGE_ACCOUNT_NAME", LegacyEnvNames.STORAGE_ACCOUNT_NAME)
        container_name = read_env(
            "STORAGE_CONTAINER_NAME",
            LegacyEnvNames.STORAGE_CONTAINER_NAME,
            StorageDefaults.CONTAINER_NAME,
        )
        if not account_name:
            raise ConfigurationError(
                "STORAGE_ACCOUNT_NAME environment variable is required"
            )
        return cls(account_name=account_name, container_name=container_name)

    def debug_dict(self) -> dict:
        """Return debug-friendly configuration showing resolved values."""
        return {
            "account": self.account_name,
            "container": self.container_name,
            "account_url": self.account_url,
        }
