# API Router for Health Checks
from fastapi import APIRouter, Depends
import logging

from webhook_sync_service.infrastructure.database.connection import get_db
from webhook_sync_service.app.config import settings
from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)
router = APIRouter()

def webhook_pipeline_status() -> str:
    # Without a secret every delivery is refused, so the service cannot sync anything.
    return "ready" if settings.WEBHOOK_SHARED_SECRET else "missing_secret"

@router.get("/health", tags=["Monitoring"])
async def health_check(db: AsyncIOMotorDatabase = Depends(get_db)):
    mongodb_status = "connected"
    try:
        await db.command('ping') # Ping DB
    except Exception as e:
        logger.error(f"MongoDB health check ping failed: {e}")
        mongodb_status = "disconnected"

    pipeline_status = webhook_pipeline_status()
    status = "ok" if mongodb_status == "connected" and pipeline_status == "ready" else "degraded"
    return {
        "status": status,
        "components": {"mongodb": mongodb_status, "webhook_pipeline": pipeline_status},
        "service_name": settings.SERVICE_NAME_API,
    }
