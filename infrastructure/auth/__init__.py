"""
Authentication Module.

Storage is accessed only through ambient workload identity: no account
keys, no connection strings, no secrets in configuration.
"""

from .credential import get_azure_credential

__all__ = ["get_azure_credential"]
