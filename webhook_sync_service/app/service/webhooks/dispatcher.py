# Routes normalized payloads to an upsert or a delete on the resource's collection
import logging
import time
from typing import Any, Dict

from motor.motor_asyncio import AsyncIOMotorDatabase

from webhook_sync_service.app.observability import dispatch_latency_histogram, webhooks_dispatched_counter
from webhook_sync_service.app.service.exceptions import UnrecognizedTopicError
from webhook_sync_service.infrastructure.database import resource_store
from .models import ResourceIdentifier, WebhookAction

logger = logging.getLogger(__name__)

UPSERT_ACTIONS = frozenset({"create", "update", "updated", "success", "challenged", "failure"})
DELETE_ACTIONS = frozenset({"delete", "deleted", "revoke"})


def classify_action(action: str) -> WebhookAction:
    if action in UPSERT_ACTIONS:
        return WebhookAction.UPSERT
    if action in DELETE_ACTIONS:
        return WebhookAction.DELETE
    return WebhookAction.UNRECOGNIZED


async def dispatch(
    db: AsyncIOMotorDatabase,
    identifier: ResourceIdentifier,
    payload: Dict[str, Any],
    key_field: str = "id",
) -> WebhookAction:
    """Makes exactly one store call for a recognized action, none otherwise."""
    arm = classify_action(identifier.action)
    if arm is WebhookAction.UNRECOGNIZED:
        raise UnrecognizedTopicError(identifier.topic)

    start_time = time.monotonic()
    if arm is WebhookAction.UPSERT:
        await resource_store.upsert_resource_document(db, identifier.resource, key_field, payload)
    else:
        await resource_store.delete_resource_document(db, identifier.resource, key_field, payload)
    latency = time.monotonic() - start_time

    dispatch_latency_histogram.record(latency, attributes={"webhook.resource": identifier.resource, "webhook.arm": arm.value})
    webhooks_dispatched_counter.add(1, {"webhook.arm": arm.value})
    logger.info(f"Dispatched {identifier.topic} as {arm.value} in {latency:.4f}s")
    return arm
