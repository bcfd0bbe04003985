# API Router for Inbound Webhooks
from fastapi import APIRouter, Depends, HTTPException, Request
import logging

from webhook_sync_service.app.dependencies.webhook_sync import get_webhook_sync
from webhook_sync_service.app.service.exceptions import (
    AuthenticationError, ProtocolError, UnrecognizedTopicError, StoreError
)
from webhook_sync_service.app.service.webhooks import InboundWebhook, WebhookSync

logger = logging.getLogger(__name__)
router = APIRouter()

@router.post("/webhooks", tags=["Webhooks"]) # Path will be prefixed by main app
async def receive_webhook(request: Request, sync: WebhookSync = Depends(get_webhook_sync)):
    inbound = InboundWebhook(headers=dict(request.headers), body=await request.body())
    try:
        processed = await sync.process(inbound)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ProtocolError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UnrecognizedTopicError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StoreError as e:
        # Non-2xx makes the platform redeliver later.
        logger.error(f"Store failure while processing webhook: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail="Failed to persist webhook")

    return {
        "status": "ok",
        "topic": processed.topic,
        "resource": processed.resource,
        "action": processed.action,
    }
