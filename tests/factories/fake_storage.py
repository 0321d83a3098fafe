"""
In-memory blob repository for tests.

Records every call in order so tests can assert what reached storage
(and, more importantly, what did not).
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from infrastructure.blob import IBlobRepository


# 2024-04-25T16:00:00.123456Z
FROZEN_NOW = datetime(2024, 4, 25, 16, 0, 0, 123456, tzinfo=timezone.utc)
FROZEN_NOW_MS = 1714060800123

FAKE_SAS_TOKEN = "sv=2023-11-03&st=2024-04-25T15%3A50%3A00Z&se=2024-04-25T17%3A00%3A00Z&sr=b&sp=r&spr=https&sig=fake"


class RecordingBlobRepository(IBlobRepository):
    """
    IBlobRepository double.

    Pass an exception instance as fail_container / fail_write / fail_sas
    to make that operation raise it.
    """

    def __init__(
        self,
        account_name: str = "teststorage",
        fail_container: Optional[Exception] = None,
        fail_write: Optional[Exception] = None,
        fail_sas: Optional[Exception] = None,
    ):
        self.account_name = account_name
        self.fail_container = fail_container
        self.fail_write = fail_write
        self.fail_sas = fail_sas

        self.calls: List[Tuple[str, str]] = []
        self.containers = set()
        self.blobs: Dict[str, Dict[str, Any]] = {}
        self.sas_requests: List[Dict[str, Any]] = []

    def ensure_container_exists(self, container: str) -> Dict[str, Any]:
        self.calls.append(("ensure_container_exists", container))
        if self.fail_container:
            raise self.fail_container
        created = container not in self.containers
        self.containers.add(container)
        return {'container': container, 'created': created}

    def write_blob(self, container, blob_name, data, content_type="application/octet-stream",
                   metadata=None, overwrite=True) -> Dict[str, Any]:
        self.calls.append(("write_blob", blob_name))
        if self.fail_write:
            raise self.fail_write
        self.blobs[blob_name] = {
            'container': container,
            'data': bytes(data),
            'content_type': content_type,
            'metadata': dict(metadata or {}),
        }
        return {
            'container': container,
            'blob_name': blob_name,
            'etag': '"0x8DC0000000000"',
            'last_modified': None,
            'request_id': 'fake-request-id',
        }

    def issue_read_sas(self, container, blob_name, valid_from, valid_until) -> str:
        self.calls.append(("issue_read_sas", blob_name))
        if self.fail_sas:
            raise self.fail_sas
        self.sas_requests.append({
            'container': container,
            'blob_name': blob_name,
            'valid_from': valid_from,
            'valid_until': valid_until,
        })
        return FAKE_SAS_TOKEN

    def get_blob_url(self, container: str, blob_name: str) -> str:
        return f"https://{self.account_name}.blob.core.windows.net/{container}/{blob_name}"

    @property
    def write_count(self) -> int:
        return sum(1 for name, _ in self.calls if name == "write_blob")
