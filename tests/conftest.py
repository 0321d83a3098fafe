"""
Root conftest.py - sys.path, env vars, shared fixtures.

Sets up the test environment so all production code can be imported
without a storage account or Azure credentials.
"""

import os
import sys

import pytest

# Add project root to sys.path so 'config', 'services', 'triggers', etc. are importable
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tests.factories.fake_storage import RecordingBlobRepository, FROZEN_NOW


@pytest.fixture(autouse=True, scope="session")
def set_minimal_env_vars():
    """
    Set minimal environment variables to prevent import crashes.

    Nothing here points at real infrastructure.
    """
    defaults = {
        "STORAGE_ACCOUNT_NAME": "teststorage",
        "STORAGE_CONTAINER_NAME": "uploaded-files",
        "ENVIRONMENT": "test",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


@pytest.fixture
def frozen_now():
    return FROZEN_NOW


@pytest.fixture
def fake_repository():
    """Blob repository double that records every call."""
    return RecordingBlobRepository(account_name="teststorage")


@pytest.fixture
def make_gateway(fake_repository):
    """Factory fixture: UploadGateway over the fake repository with a frozen clock."""
    from services.upload_service import UploadGateway

    def _make(**overrides):
        kwargs = {
            "blob_repository": fake_repository,
            "container_name": "uploaded-files",
            "expiry_minutes": 60,
            "max_upload_bytes": 1024,
            "clock_skew_minutes": 10,
            "clock": lambda: FROZEN_NOW,
        }
        kwargs.update(overrides)
        return UploadGateway(**kwargs)
    return _make


@pytest.fixture
def gateway(make_gateway):
    return make_gateway()
