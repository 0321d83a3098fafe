# ============================================================================
# CONFIG PACKAGE INIT
# ============================================================================
# STATUS: Configuration package exports
# PURPOSE: Single import point for configuration and the process singleton
# EXPORTS: AppConfig, StorageConfig, UploadConfig, get_config, reset_config, debug_config
# DEPENDENCIES: domain config modules
# ============================================================================

"""
Configuration Package - Domain-Specific Configuration Modules

Structure:
    config/
    ├── __init__.py              # This file - exports and singleton
    ├── app_config.py            # Main config (composes domain configs)
    ├── storage_config.py        # Storage account and container
    ├── upload_config.py         # Size ceiling, SAS window
    ├── env_validation.py        # Startup regex validation of env vars
    └── defaults.py              # Default constants

Usage:
    from config import get_config
    config = get_config()
    container = config.storage.container_name

    from config import debug_config
    info = debug_config()
"""

from typing import Optional

from .storage_config import StorageConfig
from .upload_config import UploadConfig
from .app_config import AppConfig


# ============================================================================
# SINGLETON PATTERN
# ============================================================================

_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get global configuration singleton.

    Raises:
        ConfigurationError: On first call, if required variables are missing.
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = AppConfig.from_environment()
    return _config_instance


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads env."""
    global _config_instance
    _config_instance = None


def debug_config() -> dict:
    """
    Get configuration for debugging.

    Nothing here is secret - storage access uses managed identity.
    """
    try:
        config = get_config()
        return {
            'storage': config.storage.debug_dict(),
            'upload': {
                'max_upload_size_mb': config.upload.max_upload_size_mb,
                'access_token_expiry_minutes': config.upload.access_token_expiry_minutes,
                'clock_skew_minutes': config.upload.clock_skew_minutes,
            },
            'environment': config.environment,
            'log_level': config.log_level,
            'port': config.port,
        }
    except Exception as e:
        return {'error': f'Configuration validation failed: {e}'}


__all__ = [
    'AppConfig',
    'StorageConfig',
    'UploadConfig',
    'get_config',
    'reset_config',
    'debug_config',
]
