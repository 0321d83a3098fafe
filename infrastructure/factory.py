# ============================================================================
# REPOSITORY FACTORY
# ============================================================================
# STATUS: Infrastructure - Creation point for the blob repository
# PURPOSE: Build the process-wide BlobRepository from configuration
# EXPORTS: RepositoryFactory
# DEPENDENCIES: infrastructure.blob, infrastructure.auth, config, util_logger
# PATTERNS: Factory pattern, Dependency Injection
# ============================================================================

"""
Repository Factory - Central Creation Point

Builds the blob repository once at process start from AppConfig and the
ambient credential. Both runtimes (function_app.py and docker_service.py)
call this and hand the result to UploadGateway; nothing else constructs
storage clients.
"""

from typing import Optional, TYPE_CHECKING

from util_logger import LoggerFactory, ComponentType, log_exceptions

if TYPE_CHECKING:
    from azure.core.credentials import TokenCredential
    from config import AppConfig
    from .blob import BlobRepository

logger = LoggerFactory.create_logger(ComponentType.FACTORY, "RepositoryFactory")


class RepositoryFactory:
    """
    Factory for creating repository instances.

    There is one repository type: Azure Blob Storage authenticated with a
    token credential. Account keys and connection strings are not supported.
    """

    @staticmethod
    @log_exceptions(ComponentType.FACTORY, "RepositoryFactory")
    def create_blob_repository(
        config: Optional['AppConfig'] = None,
        credential: Optional['TokenCredential'] = None
    ) -> 'BlobRepository':
        """
        Create blob storage repository with token authentication.

        Args:
            config: Application config (loaded from environment if not provided)
            credential: Token credential (cached DefaultAzureCredential if not provided)

        Returns:
            New BlobRepository instance

        Raises:
            ConfigurationError: If config is omitted and the environment is incomplete

        Example:
            blob_repo = RepositoryFactory.create_blob_repository()
        """
        from .blob import BlobRepository

        if config is None:
            from config import get_config
            config = get_config()

        if credential is None:
            from .auth import get_azure_credential
            credential = get_azure_credential()

        logger.info("🏭 Creating Blob Storage repository")
        logger.debug(f"  Storage account: {config.storage.account_name}")
        logger.debug(f"  Account URL: {config.storage.account_url}")

        blob_repo = BlobRepository(
            account_name=config.storage.account_name,
            credential=credential,
            account_url=config.storage.account_url,
        )

        logger.info("✅ Blob repository created successfully")
        return blob_repo


__all__ = ['RepositoryFactory']
