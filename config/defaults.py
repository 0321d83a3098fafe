"""
Configuration Defaults - Single source of truth for all default values.

Organization:
    - StorageDefaults: container naming, account placeholder
    - UploadDefaults: size ceiling, SAS window, clock-skew tolerance
    - AppDefaults: environment, logging, HTTP port
    - LegacyEnvNames: variable names accepted as fallbacks

Usage:
    from config.defaults import StorageDefaults, UploadDefaults

    container: str = Field(default=StorageDefaults.CONTAINER_NAME, ...)
"""


# =============================================================================
# STORAGE DEFAULTS
# =============================================================================

class StorageDefaults:
    """
    Blob storage defaults.

    STORAGE_ACCOUNT_NAME has no default - absence is fatal at startup.
    """

    CONTAINER_NAME = "uploaded-files"

    # Public Azure cloud blob endpoint
    BLOB_ENDPOINT_SUFFIX = "blob.core.windows.net"


# =============================================================================
# UPLOAD DEFAULTS
# =============================================================================

class UploadDefaults:
    """
    Upload gateway limits and SAS grant window.
    """

    MAX_UPLOAD_SIZE_MB = 100

    # SAS validity after the request time
    ACCESS_TOKEN_EXPIRY_MINUTES = 60

    # SAS start is backdated by this much to tolerate clock skew
    CLOCK_SKEW_MINUTES = 10

    # Multipart boundaries and part headers on top of the file itself
    MULTIPART_OVERHEAD_BYTES = 64 * 1024

    FALLBACK_CONTENT_TYPE = "application/octet-stream"
    FALLBACK_FILENAME = "file"


# =============================================================================
# APPLICATION DEFAULTS
# =============================================================================

class AppDefaults:
    """
    Application-wide defaults.
    """

    ENVIRONMENT = "dev"
    LOG_LEVEL = "INFO"

    # Container runtime listen port
    PORT = 3000


# =============================================================================
# LEGACY ENVIRONMENT VARIABLE NAMES
# =============================================================================

class LegacyEnvNames:
    """
    Names used by the first ShareSafely deployment.

    Read only when the primary variable is unset.
    """

    STORAGE_ACCOUNT_NAME = "AZURE_STORAGE_ACCOUNT_NAME"
    STORAGE_CONTAINER_NAME = "AZURE_STORAGE_CONTAINER_NAME"
    ACCESS_TOKEN_EXPIRY_MINUTES = "SAS_TOKEN_EXPIRY_MINUTES"
