"""
Config test fixtures - clean environment via monkeypatch.
"""

import pytest


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all env vars that config modules might read, for isolation."""
    env_vars_to_clear = [
        "STORAGE_ACCOUNT_NAME", "AZURE_STORAGE_ACCOUNT_NAME",
        "STORAGE_CONTAINER_NAME", "AZURE_STORAGE_CONTAINER_NAME",
        "ACCESS_TOKEN_EXPIRY_MINUTES", "SAS_TOKEN_EXPIRY_MINUTES",
        "MAX_UPLOAD_SIZE_MB", "PORT", "ENVIRONMENT", "LOG_LEVEL", "DEBUG_LOGGING",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
