from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from webhook_sync_service.app.config import settings
from webhook_sync_service.app.service.exceptions import ConfigurationError
from webhook_sync_service.app.service.webhooks import SyncConfig, WebhookSync
from webhook_sync_service.infrastructure.database.connection import get_db

def build_sync_config(db: AsyncIOMotorDatabase) -> SyncConfig:
    if not settings.WEBHOOK_SHARED_SECRET:
        raise ConfigurationError("WEBHOOK_SHARED_SECRET is not set in application settings.")
    return SyncConfig(
        shared_secret=settings.WEBHOOK_SHARED_SECRET,
        db=db,
        key_field=settings.WEBHOOK_KEY_FIELD,
        signature_header=settings.WEBHOOK_SIGNATURE_HEADER,
        topic_header=settings.WEBHOOK_TOPIC_HEADER,
    )

async def get_webhook_sync(db: AsyncIOMotorDatabase = Depends(get_db)) -> WebhookSync:
    """
    FastAPI dependency provider for the webhook pipeline.
    The pipeline is stateless apart from its config, so building one per request is cheap.
    """
    return WebhookSync(build_sync_config(db))
