"""
Unified Logger System.

JSON-only structured logging for Azure Functions and the container runtime,
shaped so Application Insights can parse every line.

Design Principles:
    - Strong typing with dataclasses (stdlib only)
    - Enum safety for categories
    - Component-specific loggers
    - Clean factory pattern

Exports:
    ComponentType: Enum for component types
    LogLevel: Enum for log levels
    LogContext: Logging context dataclass
    JSONFormatter: Application Insights friendly formatter
    ContextLogger: LoggerAdapter carrying a LogContext
    LoggerFactory: Factory for creating loggers
    log_exceptions: Exception logging decorator
    quiet_azure_sdk_loggers: Lower Azure SDK chatter to WARNING

Dependencies:
    Standard library only (logging, enum, dataclasses, json)
"""

from enum import Enum
from typing import Optional, Dict, Any, Union
from datetime import datetime, timezone
from dataclasses import dataclass
import logging
import sys
import os
import json
import traceback
from functools import wraps


# ============================================================================
# COMPONENT TYPES - Aligned with layer architecture
# ============================================================================

class ComponentType(Enum):
    """
    Component types aligned with the service layers.

    Each layer has specific logging needs and levels.
    """
    TRIGGER = "trigger"        # HTTP entry point layer
    SERVICE = "service"        # Upload orchestration layer
    REPOSITORY = "repository"  # Blob storage access layer
    FACTORY = "factory"        # Object creation layer


# ============================================================================
# LOG LEVELS - Standard Python levels with enum safety
# ============================================================================

class LogLevel(Enum):
    """
    Standard Python log levels as enum for type safety.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)

    @classmethod
    def from_string(cls, level: str) -> 'LogLevel':
        """Create from string, case-insensitive."""
        return cls[level.upper()]


# ============================================================================
# LOG CONTEXT - Correlation and tracking
# ============================================================================

@dataclass
class LogContext:
    """
    Context for log correlation across one upload request.
    """
    request_id: Optional[str] = None  # HTTP request ID (X-Request-ID)
    correlation_id: Optional[str] = None  # Upstream correlation ID
    blob_name: Optional[str] = None  # Stored object reference
    container: Optional[str] = None  # Target container

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            k: v for k, v in {
                'request_id': self.request_id,
                'correlation_id': self.correlation_id,
                'blob_name': self.blob_name,
                'container': self.container,
            }.items() if v is not None
        }


# ============================================================================
# COMPONENT CONFIGURATION - Per-component settings
# ============================================================================

@dataclass
class ComponentConfig:
    """
    Configuration for component-specific logging.
    """
    component_type: ComponentType
    log_level: LogLevel = LogLevel.INFO


# ============================================================================
# JSON FORMATTER - Structured logging for Azure Functions
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    Outputs logs in a format that Application Insights can automatically parse.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON for Application Insights.

        Args:
            record: Python LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str)


# ============================================================================
# LOGGER FACTORY - Creates component-specific loggers
# ============================================================================

def _resolve_default_level() -> LogLevel:
    """DEBUG_LOGGING=true wins, otherwise LOG_LEVEL, otherwise INFO."""
    if os.getenv('DEBUG_LOGGING', '').lower() == 'true':
        return LogLevel.DEBUG
    try:
        return LogLevel.from_string(os.getenv('LOG_LEVEL', 'INFO'))
    except KeyError:
        return LogLevel.INFO


class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that adds component info and a LogContext as custom dimensions.

    Built per call around the cached logging.Logger, so two adapters for the
    same component name can carry different request contexts.
    """

    def __init__(self, logger: logging.Logger, component_type: ComponentType,
                 name: str, context: Optional[LogContext] = None):
        super().__init__(logger, {})
        self.component_type = component_type
        self.component_name = name
        self.context = context

    def process(self, msg, kwargs):
        custom_dims = self.context.to_dict() if self.context else {}
        custom_dims['component_type'] = self.component_type.value
        custom_dims['component_name'] = self.component_name

        extra = dict(kwargs.get('extra') or {})
        if 'custom_dimensions' in extra:
            custom_dims.update(extra['custom_dimensions'])
        extra['custom_dimensions'] = custom_dims
        kwargs['extra'] = extra
        return msg, kwargs

    def with_context(self, context: LogContext) -> 'ContextLogger':
        """Same underlying logger, different context."""
        return ContextLogger(self.logger, self.component_type, self.component_name, context)


class LoggerFactory:
    """
    Factory for creating component-specific loggers.

    Example:
        logger = LoggerFactory.create_logger(ComponentType.SERVICE, "UploadGateway")
        logger.info("Processing upload")

        request_logger = logger.with_context(LogContext(request_id="a1b2c3d4"))
        request_logger.info("Upload finished")
    """

    _default_level = _resolve_default_level()
    _logger_names: set = set()

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        context: Optional[LogContext] = None,
        config: Optional[ComponentConfig] = None
    ) -> ContextLogger:
        """
        Create a logger for a specific component.

        Args:
            component_type: Type of component
            name: Component name (e.g., "UploadGateway")
            context: Optional log context for correlation
            config: Optional custom configuration

        Returns:
            ContextLogger wrapping the named Python logger
        """
        if config is None:
            config = ComponentConfig(component_type=component_type, log_level=cls._default_level)

        logger_name = f"{component_type.value}.{name}"
        logger = logging.getLogger(logger_name)

        if isinstance(config.log_level, str):
            log_level = LogLevel.from_string(config.log_level).to_python_level()
        else:
            log_level = config.log_level.to_python_level()
        logger.setLevel(log_level)

        # One JSON handler per logger even when create_logger is called repeatedly
        has_json_handler = any(
            isinstance(h.formatter, JSONFormatter) for h in logger.handlers
        )
        if not has_json_handler:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)

        # Azure's root logger forwards to Application Insights
        logger.propagate = True
        cls._logger_names.add(logger_name)

        return ContextLogger(logger, component_type, name, context)

    @classmethod
    def set_level(cls, level: str) -> None:
        """
        Apply a configured level to every factory logger, existing and future.

        Loggers created at import time start from LOG_LEVEL/DEBUG_LOGGING;
        startup calls this once AppConfig is loaded.
        """
        cls._default_level = LogLevel.from_string(level)
        python_level = cls._default_level.to_python_level()
        for logger_name in cls._logger_names:
            logging.getLogger(logger_name).setLevel(python_level)


# ============================================================================
# EXCEPTION DECORATOR - Automatic exception logging with context
# ============================================================================

def log_exceptions(component_type: Optional[ComponentType] = None,
                   component_name: Optional[str] = None,
                   logger: Optional[Union[logging.Logger, logging.LoggerAdapter]] = None):
    """
    Decorator to automatically log exceptions with full context.

    Can be used in three ways:
    1. With existing logger: @log_exceptions(logger=my_logger)
    2. With component info: @log_exceptions(ComponentType.SERVICE, "UploadGateway")
    3. Simple: @log_exceptions() - uses function module and name

    The exception is always re-raised.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if logger:
                log = logger
            elif component_type and component_name:
                log = LoggerFactory.create_logger(component_type, component_name)
            else:
                log = LoggerFactory.create_logger(
                    ComponentType.SERVICE,
                    func.__module__ or "unknown"
                )

            try:
                return func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"Exception in {func.__name__}",
                    exc_info=True,
                    extra={
                        'custom_dimensions': {
                            'function_name': func.__name__,
                            'function_module': func.__module__,
                            'exception_type': type(e).__name__,
                            'exception_message': str(e),
                            'traceback': traceback.format_exc()
                        }
                    }
                )
                raise
        return wrapper
    return decorator


def quiet_azure_sdk_loggers() -> None:
    """Suppress Azure Identity and Azure SDK authentication/HTTP logging."""
    for name in (
        "azure.identity",
        "azure.identity._internal",
        "azure.core.pipeline.policies.http_logging_policy",
        "azure.storage",
        "azure.core",
        "msal",
    ):
        logging.getLogger(name).setLevel(logging.WARNING)
