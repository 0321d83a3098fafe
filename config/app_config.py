"""
Main Application Configuration.

Composes domain-specific configuration modules:
    - StorageConfig (account, container)
    - UploadConfig (size ceiling, SAS window)

Exports:
    AppConfig: Main configuration class

Dependencies:
    pydantic: BaseModel for configuration validation
    config.storage_config: StorageConfig
    config.upload_config: UploadConfig
    config.defaults: Default value constants

Pattern:
    Composition over inheritance - domain configs are composed, not inherited.
"""

from pydantic import BaseModel, Field, ValidationError, field_validator

from exceptions import ConfigurationError

from .storage_config import StorageConfig, read_env
from .upload_config import UploadConfig
from .defaults import AppDefaults


def _resolve_log_level() -> str:
    """DEBUG_LOGGING=true wins over LOG_LEVEL."""
    if (read_env("DEBUG_LOGGING") or "").lower() == "true":
        return "DEBUG"
    return read_env("LOG_LEVEL", default=AppDefaults.LOG_LEVEL)


class AppConfig(BaseModel):
    """
    Application configuration - composition of domain configs.
    """

    environment: str = Field(
        default=AppDefaults.ENVIRONMENT,
        description="Environment name (dev, qa, prod)",
        examples=["dev", "qa", "prod"]
    )

    log_level: str = Field(
        default=AppDefaults.LOG_LEVEL,
        description="Logging level for application diagnostics",
        examples=["DEBUG", "INFO", "WARNING", "ERROR"]
    )

    port: int = Field(
        default=AppDefaults.PORT,
        ge=1,
        le=65535,
        description="Listen port for the container runtime (docker_service.py)"
    )

    storage: StorageConfig = Field(
        ...,
        description="Storage account and container for uploads"
    )

    upload: UploadConfig = Field(
        default_factory=UploadConfig,
        description="Upload limits and SAS grant window"
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"log level '{value}' is not a Python logging level")
        return value

    # ========================================================================
    # Convenience accessors used by the HTTP layers
    # ========================================================================

    @property
    def storage_account_name(self) -> str:
        return self.storage.account_name

    @property
    def container_name(self) -> str:
        return self.storage.container_name

    @property
    def sas_expiry_minutes(self) -> int:
        return self.upload.access_token_expiry_minutes

    @classmethod
    def from_environment(cls) -> "AppConfig":
        """
        Load the full configuration from environment variables.

        Raises:
            ConfigurationError: If STORAGE_ACCOUNT_NAME is missing or any
                value fails validation.
        """
        try:
            return cls(
                environment=read_env("ENVIRONMENT", default=AppDefaults.ENVIRONMENT),
                log_level=_resolve_log_level(),
                port=read_env("PORT", default=str(AppDefaults.PORT)),
                storage=StorageConfig.from_environment(),
                upload=UploadConfig.from_environment(),
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
