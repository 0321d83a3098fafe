# ============================================================================
# BLOB REPOSITORY
# ============================================================================
# STATUS: Infrastructure - Azure Blob Storage repository
# PURPOSE: Blob writes and read-only user delegation SAS issuance
# EXPORTS: IBlobRepository, BlobRepository
# INTERFACES: IBlobRepository for dependency injection
# DEPENDENCIES: azure-storage-blob, azure-core, util_logger
# SCOPE: Every storage call the upload gateway makes
# PATTERNS: Repository, injected credential, cached container clients
# ============================================================================

"""
Blob Storage Repository

The one place that talks to Azure Blob Storage. The repository is
constructed once per process with a credential resolved from the
environment (see infrastructure.auth) and injected into the upload
gateway; it is not a module-level singleton, so tests substitute a fake
implementing IBlobRepository.

Operations:
    ensure_container_exists - create the upload container if absent
    write_blob              - upload bytes with a content type and metadata
    issue_read_sas          - user delegation SAS, read permission only, HTTPS only
    get_blob_url            - canonical blob URL (no query string)

User delegation SAS requires the identity to hold "Storage Blob Delegator"
(or Storage Blob Data Contributor, which includes it) on the account.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Any, Optional, Union, BinaryIO

from azure.core.credentials import TokenCredential
from azure.core.exceptions import ResourceExistsError
from azure.storage.blob import (
    BlobServiceClient,
    ContainerClient,
    BlobSasPermissions,
    ContentSettings,
    generate_blob_sas,
)

from util_logger import LoggerFactory, ComponentType

logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, __name__)


# ============================================================================
# BLOB REPOSITORY INTERFACE
# ============================================================================

class IBlobRepository(ABC):
    """
    Interface for the blob store and its credential authority.

    Implementations raise whatever their client raises; the upload gateway
    translates failures into its own error taxonomy.
    """

    @abstractmethod
    def ensure_container_exists(self, container: str) -> Dict[str, Any]:
        """Create container if absent. Returns {'container', 'created'}."""
        pass

    @abstractmethod
    def write_blob(self, container: str, blob_name: str, data: Union[bytes, BinaryIO],
                   content_type: str = "application/octet-stream",
                   metadata: Optional[Dict[str, str]] = None,
                   overwrite: bool = True) -> Dict[str, Any]:
        """Write blob from bytes or stream. Returns write acknowledgement."""
        pass

    @abstractmethod
    def issue_read_sas(self, container: str, blob_name: str,
                       valid_from: datetime, valid_until: datetime) -> str:
        """Return a read-only SAS query string for exactly one blob."""
        pass

    @abstractmethod
    def get_blob_url(self, container: str, blob_name: str) -> str:
        """Return the canonical blob URL."""
        pass


# ============================================================================
# BLOB REPOSITORY IMPLEMENTATION
# ============================================================================

class BlobRepository(IBlobRepository):
    """
    Azure Blob Storage repository authenticated with a token credential.

    Usage:
        from infrastructure.auth import get_azure_credential

        repo = BlobRepository(
            account_name="sharesafelystorage",
            credential=get_azure_credential(),
        )
    """

    def __init__(
        self,
        account_name: str,
        credential: Optional[TokenCredential] = None,
        account_url: Optional[str] = None,
        blob_service: Optional[BlobServiceClient] = None,
    ):
        """
        Build the blob service client. No network call happens here.

        Args:
            account_name: Storage account name (also signs the SAS)
            credential: Token credential (DefaultAzureCredential in production)
            account_url: Blob endpoint, defaults to the public cloud endpoint
            blob_service: Pre-built client, used instead of credential/account_url
        """
        self.account_name = account_name
        self.account_url = account_url or f"https://{account_name}.blob.core.windows.net"

        if blob_service is not None:
            self.blob_service = blob_service
        else:
            if credential is None:
                raise ValueError("BlobRepository requires a credential or a blob_service client")
            logger.info(f"Initializing BlobRepository with token credential for account: {account_name}")
            self.blob_service = BlobServiceClient(
                account_url=self.account_url,
                credential=credential
            )

        self._container_clients: Dict[str, ContainerClient] = {}
        logger.info(f"✅ BlobRepository initialized for account: {self.account_name}")

    def _get_container_client(self, container: str) -> ContainerClient:
        """Get or create cached container client."""
        if container not in self._container_clients:
            self._container_clients[container] = self.blob_service.get_container_client(container)
            logger.debug(f"Created new container client for: {container}")
        return self._container_clients[container]

    # ========================================================================
    # CORE BLOB OPERATIONS
    # ========================================================================

    def ensure_container_exists(self, container: str) -> Dict[str, Any]:
        """
        Create the container if it does not exist.

        Args:
            container: Container name

        Returns:
            Dict with container name and whether it was created by this call
        """
        container_client = self._get_container_client(container)
        try:
            container_client.create_container()
            logger.info(f"Created container: {container}")
            return {'container': container, 'created': True}
        except ResourceExistsError:
            logger.debug(f"Container already exists: {container}")
            return {'container': container, 'created': False}
        except Exception as e:
            logger.error(f"Failed to ensure container {container}: {e}")
            raise

    def write_blob(self, container: str, blob_name: str, data: Union[bytes, BinaryIO],
                   content_type: str = "application/octet-stream",
                   metadata: Optional[Dict[str, str]] = None,
                   overwrite: bool = True) -> Dict[str, Any]:
        """
        Write blob from bytes or stream.

        Args:
            container: Container name
            blob_name: Blob name
            data: Bytes or stream to write
            content_type: MIME type stored as the blob's Content-Type
            metadata: Optional metadata dictionary (ASCII values only)
            overwrite: Whether to overwrite an existing blob

        Returns:
            Dict with container, blob_name, etag, last_modified, request_id
        """
        try:
            blob_client = self._get_container_client(container).get_blob_client(blob_name)

            logger.debug(f"Writing blob: {container}/{blob_name} (overwrite={overwrite})")

            response = blob_client.upload_blob(
                data,
                overwrite=overwrite,
                content_settings=ContentSettings(content_type=content_type),
                metadata=metadata or {}
            )

            last_modified = response.get('last_modified')
            result = {
                'container': container,
                'blob_name': blob_name,
                'etag': response.get('etag'),
                'last_modified': last_modified.isoformat() if last_modified else None,
                'request_id': response.get('request_id'),
            }

            logger.info(f"✅ Wrote blob: {container}/{blob_name} (request_id={result['request_id']})")
            return result

        except Exception as e:
            logger.error(f"Failed to write blob {container}/{blob_name}: {e}")
            raise

    def issue_read_sas(self, container: str, blob_name: str,
                       valid_from: datetime, valid_until: datetime) -> str:
        """
        Generate a read-only user delegation SAS for one blob.

        The delegation key and the SAS share the same validity window.

        Args:
            container: Container name
            blob_name: Blob name
            valid_from: SAS start time (UTC)
            valid_until: SAS expiry time (UTC)

        Returns:
            SAS query string without the leading '?'
        """
        try:
            logger.debug(
                f"Generating read SAS for {container}/{blob_name} "
                f"(valid {valid_from.isoformat()} → {valid_until.isoformat()})"
            )

            user_delegation_key = self.blob_service.get_user_delegation_key(
                key_start_time=valid_from,
                key_expiry_time=valid_until
            )
            logger.debug("✅ User delegation key obtained successfully")

            sas_token = generate_blob_sas(
                account_name=self.account_name,
                container_name=container,
                blob_name=blob_name,
                user_delegation_key=user_delegation_key,
                permission=BlobSasPermissions(read=True),
                start=valid_from,
                expiry=valid_until,
                protocol="https"
            )

            logger.debug(f"✅ SAS generated (expires: {valid_until.isoformat()})")
            return sas_token

        except Exception as e:
            logger.error(f"Failed to generate SAS for {container}/{blob_name}: {e}")
            raise

    def get_blob_url(self, container: str, blob_name: str) -> str:
        """Canonical blob URL, percent-encoded by the SDK."""
        return self._get_container_client(container).get_blob_client(blob_name).url


__all__ = ['BlobRepository', 'IBlobRepository']
