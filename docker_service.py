#!/usr/bin/env python3
# ============================================================================
# DOCKER SERVICE - CONTAINER RUNTIME
# ============================================================================
# STATUS: Core Component - FastAPI/uvicorn runtime for the upload gateway
# PURPOSE: Same /upload and /health contract as function_app.py, on PORT
# EXPORTS: create_app, configure_azure_monitor_telemetry
# DEPENDENCIES: fastapi, uvicorn, python-multipart, azure-monitor-opentelemetry
# ============================================================================
"""
Docker Service - HTTP API for containers and local development.

Serves the same upload gateway as the Functions app, for App Service /
Container Apps deployments and for running locally against a real storage
account with `az login` credentials.

HTTP Endpoints:
    POST /upload  - multipart field "file"; returns link and expiry
    GET  /health  - configuration summary, no storage access

Usage:
    # Listen on $PORT (default 3000)
    python docker_service.py

    # Or through uvicorn's factory mode
    uvicorn docker_service:create_app --factory --host 0.0.0.0 --port 3000

    curl -F "file=@report.pdf" http://localhost:3000/upload
    curl http://localhost:3000/health
"""

import os
import sys
import uuid
import logging
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import Optional


# ============================================================================
# AZURE MONITOR OPENTELEMETRY SETUP
# ============================================================================
# Sends logs, requests and exceptions to Application Insights. Must run
# before the app is built so FastAPI requests are instrumented.
#
# Requires: APPLICATIONINSIGHTS_CONNECTION_STRING environment variable
# ============================================================================

def configure_azure_monitor_telemetry() -> bool:
    """
    Configure Azure Monitor OpenTelemetry when a connection string is set.

    Authentication:
    - If APPLICATIONINSIGHTS_AUTHENTICATION_STRING=Authorization=AAD is set,
      uses the managed identity credential for Entra ID auth.
    - Otherwise uses connection string auth.

    Returns:
        True if telemetry was configured
    """
    connection_string = os.environ.get("APPLICATIONINSIGHTS_CONNECTION_STRING")

    if not connection_string:
        print("⚠️ APPLICATIONINSIGHTS_CONNECTION_STRING not set - telemetry disabled")
        return False

    from azure.monitor.opentelemetry import configure_azure_monitor

    app_name = os.environ.get("APP_NAME", "sharesafely-gateway")
    environment = os.environ.get("ENVIRONMENT", "dev")

    auth_string = os.environ.get("APPLICATIONINSIGHTS_AUTHENTICATION_STRING", "")
    use_aad_auth = "Authorization=AAD" in auth_string

    configure_kwargs = {
        "connection_string": connection_string,
        "resource_attributes": {
            "service.name": app_name,
            "service.namespace": "sharesafely",
            "deployment.environment": environment,
        },
    }

    if use_aad_auth:
        from infrastructure.auth import get_azure_credential
        configure_kwargs["credential"] = get_azure_credential()
        print("🔐 Using Entra ID (AAD) authentication for Application Insights")

    try:
        configure_azure_monitor(**configure_kwargs)
    except Exception as e:
        print(f"⚠️ Azure Monitor setup failed: {e} - telemetry disabled")
        return False

    auth_mode = "AAD" if use_aad_auth else "connection_string"
    print(f"✅ Azure Monitor OpenTelemetry configured (app={app_name}, env={environment}, auth={auth_mode})")
    return True


_azure_monitor_enabled = configure_azure_monitor_telemetry()


from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import AppConfig, debug_config, get_config
from config.defaults import UploadDefaults
from config.env_validation import log_validation_results
from core.errors import ErrorCode, create_error_response, get_http_status_code
from exceptions import ConfigurationError, UploadGatewayError, PayloadTooLargeError
from services.upload_service import UploadGateway
from util_logger import LoggerFactory, ComponentType, JSONFormatter, LogContext, quiet_azure_sdk_loggers

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "docker_service")

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


# ============================================================================
# LOGGING SETUP
# ============================================================================

def configure_docker_logging():
    """Route uvicorn's loggers through the JSON formatter and quiet the Azure SDK."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

    for logger_name in ['uvicorn', 'uvicorn.error', 'uvicorn.access']:
        uvi_logger = logging.getLogger(logger_name)
        uvi_logger.handlers = []
        uvi_logger.addHandler(handler)
        uvi_logger.propagate = False

    quiet_azure_sdk_loggers()
    logging.getLogger("azure.monitor.opentelemetry").setLevel(logging.WARNING)


# ============================================================================
# APP FACTORY
# ============================================================================

def _build_gateway(config: AppConfig) -> UploadGateway:
    from infrastructure import RepositoryFactory, get_azure_credential

    blob_repository = RepositoryFactory.create_blob_repository(
        config=config,
        credential=get_azure_credential()
    )
    return UploadGateway.from_config(config, blob_repository)


def _error_json(status_code: int, error: str, details: Optional[str], request: Request) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())[:8]
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(error, details),
        headers={"X-Request-ID": request_id},
    )


def create_app(gateway: Optional[UploadGateway] = None, config: Optional[AppConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        gateway: Pre-built gateway (tests inject one over a fake repository)
        config: Configuration; loaded from the environment when omitted

    Raises:
        ConfigurationError: If no gateway is given and the environment is incomplete
    """
    configure_docker_logging()

    if gateway is None:
        if not log_validation_results(logger):
            raise ConfigurationError("Environment validation failed; see ENV VAR ERROR lines above")
        config = config or get_config()
        LoggerFactory.set_level(config.log_level)
        logger.debug(f"Configuration: {debug_config()}")
        gateway = _build_gateway(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 ShareSafely upload gateway is running")
        logger.info(f"   Storage Account: {gateway.storage_account}")
        logger.info(f"   Container: {gateway.container_name}")
        logger.info(f"   SAS Token Expiry: {gateway.expiry_minutes} minutes")
        logger.info(f"   Telemetry: {'Azure Monitor' if _azure_monitor_enabled else 'disabled'}")
        yield
        logger.info("ShareSafely upload gateway shutting down")

    app = FastAPI(
        title="ShareSafely Upload Gateway",
        description="Upload a file, get a time-limited read-only link",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.gateway = gateway

    # ------------------------------------------------------------------------
    # Middleware and exception handlers
    # ------------------------------------------------------------------------

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        logger.with_context(LogContext(request_id=request_id)).info(
            f"🌐 Request {request_id} started: {request.method} {request.url.path}"
        )
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(UploadGatewayError)
    async def handle_gateway_error(request: Request, exc: UploadGatewayError):
        log = logger.with_context(LogContext(request_id=getattr(request.state, "request_id", None)))
        if exc.http_status < 500:
            log.warning(f"❌ Client error ({exc.error_code.value}): {exc.message}")
        else:
            log.error(f"💥 {exc.error_code.value}: {exc.message} ({exc.details})")
        return _error_json(exc.http_status, exc.message, exc.details, request)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        try:
            title = HTTPStatus(exc.status_code).phrase
        except ValueError:
            title = "HTTP error"
        if exc.status_code == get_http_status_code(ErrorCode.METHOD_NOT_ALLOWED):
            title = "Method not allowed"
        return _error_json(exc.status_code, title, str(exc.detail), request)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(f"💥 Unhandled error: {exc}", exc_info=exc)
        return _error_json(500, UNEXPECTED_ERROR_MESSAGE, None, request)

    # ------------------------------------------------------------------------
    # Routes
    # ------------------------------------------------------------------------

    @app.post("/upload")
    async def upload(request: Request):
        """Upload one file and return a read-only SAS link."""
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            declared = int(content_length)
            if declared > gateway.max_upload_bytes + UploadDefaults.MULTIPART_OVERHEAD_BYTES:
                raise PayloadTooLargeError(declared, gateway.max_upload_bytes)

        form = await request.form()
        try:
            part = form.get("file")
            if isinstance(part, UploadFile):
                data = await part.read()
                filename = part.filename
                declared_content_type = part.content_type
            else:
                data = None
                filename = None
                declared_content_type = None
        finally:
            await form.close()

        result = await run_in_threadpool(
            gateway.handle,
            data=data,
            filename=filename,
            declared_content_type=declared_content_type,
            request_id=getattr(request.state, "request_id", None),
        )
        return result.to_response()

    @app.get("/health")
    def health():
        """Configuration summary; never contacts storage."""
        return gateway.health().to_response()

    return app


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(line_buffering=True)

    app_config = get_config()

    logger.info("=" * 60)
    logger.info("ShareSafely Upload Gateway - container runtime")
    logger.info(f"Port: {app_config.port}")
    logger.info("=" * 60)
    logger.info("  POST /upload  - Upload a file, get a read-only link")
    logger.info("  GET  /health  - Configuration health check")
    logger.info("=" * 60)

    uvicorn.run(create_app(config=app_config), host="0.0.0.0", port=app_config.port)
