# Application Configuration using Pydantic BaseSettings
from pydantic_settings import BaseSettings
from typing import Optional

class AppSettings(BaseSettings):
    # MongoDB
    MONGO_DETAILS: str = "mongodb://mongo:27017"
    DB_NAME: str = "webhook_sync_db"

    # Webhook verification and routing
    WEBHOOK_SHARED_SECRET: Optional[str] = None # Shopify app client secret
    WEBHOOK_SIGNATURE_HEADER: str = "X-Shopify-Hmac-Sha256"
    WEBHOOK_TOPIC_HEADER: str = "X-Shopify-Topic"
    WEBHOOK_KEY_FIELD: str = "id" # Field matched on upsert/delete, shared by every resource

    # Observability
    LOG_LEVEL: str = "INFO"
    OTEL_EXPORTER_OTLP_TRACES_ENDPOINT: Optional[str] = None
    OTEL_EXPORTER_OTLP_METRICS_ENDPOINT: Optional[str] = None
    SERVICE_NAME_API: str = "webhook-sync-api"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

# Instantiate settings to be imported by other modules
settings = AppSettings()

import logging
logger = logging.getLogger(__name__)
# Never dump settings here, WEBHOOK_SHARED_SECRET would end up in the logs.
logger.info("Application settings module initialized.")
