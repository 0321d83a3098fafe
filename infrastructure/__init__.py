"""
Infrastructure Package - Lazy Loading Implementation.

Azure SDK imports are deferred until a repository is first requested, so
importing this package never reads configuration or resolves credentials.

Exports:
    BlobRepository: Azure Blob Storage repository
    IBlobRepository: Repository interface (fakes implement this in tests)
    RepositoryFactory: Builds the process-wide blob repository
    get_azure_credential: Cached DefaultAzureCredential
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .blob import BlobRepository as _BlobRepository
    from .blob import IBlobRepository as _IBlobRepository
    from .factory import RepositoryFactory as _RepositoryFactory


_LAZY_IMPORTS = {
    'BlobRepository': ('.blob', 'BlobRepository'),
    'IBlobRepository': ('.blob', 'IBlobRepository'),
    'RepositoryFactory': ('.factory', 'RepositoryFactory'),
    'get_azure_credential': ('.auth', 'get_azure_credential'),
}


def __getattr__(name: str):
    """Import repository classes on first access."""
    if name in _LAZY_IMPORTS:
        from importlib import import_module
        module_name, attr = _LAZY_IMPORTS[name]
        module = import_module(module_name, package=__name__)
        return getattr(module, attr)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'BlobRepository',
    'IBlobRepository',
    'RepositoryFactory',
    'get_azure_credential',
]
