"""
Azure Functions entry point for the ShareSafely upload gateway.

A client uploads one file; it is written to Azure Blob Storage and the
client gets back a read-only User Delegation SAS URL that expires after
ACCESS_TOKEN_EXPIRY_MINUTES. Storage is reached with the app's managed
identity; no account keys or connection strings are configured anywhere.

Architecture:
    HTTP trigger -> UploadGateway -> BlobRepository -> Blob Storage
                                         |
                               user delegation key -> SAS

Startup (once per worker process):
    validate env vars -> AppConfig -> DefaultAzureCredential
        -> BlobRepository -> UploadGateway -> triggers

A missing STORAGE_ACCOUNT_NAME raises ConfigurationError here, so the
worker fails to index functions instead of serving broken uploads.

Exports:
    app: Azure Function App instance

Endpoints (host.json routePrefix is empty):
    POST /upload - multipart field "file"; returns link and expiry
    GET  /health - configuration summary, no storage access

Environment Variables:
    STORAGE_ACCOUNT_NAME: Storage account (required)
    STORAGE_CONTAINER_NAME: Container (default uploaded-files)
    ACCESS_TOKEN_EXPIRY_MINUTES: SAS validity (default 60)
    MAX_UPLOAD_SIZE_MB: Payload ceiling (default 100)
    LOG_LEVEL / DEBUG_LOGGING: Log verbosity
"""

import azure.functions as func

from util_logger import LoggerFactory, ComponentType, quiet_azure_sdk_loggers

quiet_azure_sdk_loggers()

logger = LoggerFactory.create_logger(ComponentType.TRIGGER, "function_app")

# Fail fast with actionable messages before any client is built
from config.env_validation import log_validation_results
from exceptions import ConfigurationError

if not log_validation_results(logger):
    raise ConfigurationError("Environment validation failed; see ENV VAR ERROR lines above")

from config import debug_config, get_config
from infrastructure import RepositoryFactory, get_azure_credential
from services.upload_service import UploadGateway
from triggers.upload import UploadTrigger
from triggers.health import HealthCheckTrigger

# ============================================================================
# STARTUP WIRING
# ============================================================================

config = get_config()
LoggerFactory.set_level(config.log_level)
logger.debug(f"Configuration: {debug_config()}")

blob_repository = RepositoryFactory.create_blob_repository(
    config=config,
    credential=get_azure_credential()
)
gateway = UploadGateway.from_config(config, blob_repository)

upload_trigger = UploadTrigger(gateway)
health_check_trigger = HealthCheckTrigger(gateway)

logger.info("🚀 ShareSafely upload gateway initialized")
logger.info(f"   Storage Account: {config.storage.account_name}")
logger.info(f"   Container: {config.storage.container_name}")
logger.info(f"   SAS Token Expiry: {config.upload.access_token_expiry_minutes} minutes")
logger.info(f"   Max upload size: {config.upload.max_upload_size_mb} MB")

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)


# Every method reaches the trigger so non-POST requests get a JSON 405
@app.route(route="upload", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def upload(req: func.HttpRequest) -> func.HttpResponse:
    """Upload one file and return a read-only SAS link."""
    return upload_trigger.handle_request(req)


@app.route(route="health", methods=["GET"])
def health(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint using HTTP trigger base class."""
    return health_check_trigger.handle_request(req)
