# webhook_sync_service/app/__init__.py
import logging

logger = logging.getLogger(__name__)
logger.info("Webhook Sync App Initialized")
