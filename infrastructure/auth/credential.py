# ============================================================================
# SHARED AZURE CREDENTIAL SINGLETON
# ============================================================================
# STATUS: Infrastructure - Canonical credential provider
# PURPOSE: Cached DefaultAzureCredential, resolved once per process
# DEPENDENCIES: azure.identity (no infrastructure dependencies)
# ============================================================================
"""
Shared Azure credential singleton.

Depends only on azure.identity. The credential is resolved from the
execution environment (Managed Identity in Azure, Azure CLI locally) and
held for the process lifetime; it is handed to the blob repository at
construction, never threaded through request handlers.
"""

from azure.identity import DefaultAzureCredential

_credential = None


def get_azure_credential() -> DefaultAzureCredential:
    """Get cached DefaultAzureCredential singleton."""
    global _credential
    if _credential is None:
        _credential = DefaultAzureCredential()
    return _credential


__all__ = ["get_azure_credential"]
