# Webhook ingestion pipeline: verify, resolve, normalize, dispatch
import logging

from opentelemetry.trace import SpanKind
from opentelemetry.trace.status import Status, StatusCode

from webhook_sync_service.app.observability import tracer, webhooks_received_counter, webhooks_rejected_counter
from webhook_sync_service.app.service.exceptions import BaseWebhookSyncError
from .dispatcher import dispatch
from .models import InboundWebhook, ProcessedWebhook, SyncConfig
from .normalizer import decode_payload, normalize_payload
from .topics import resolve_topic
from .verifier import verify_signature

logger = logging.getLogger(__name__)


class WebhookSync:
    """
    Projects one webhook into MongoDB per call to process().

    Holds only the immutable SyncConfig, so a single instance can serve
    concurrent requests. Concurrent deliveries for the same resource id rely
    on update_one(upsert=True) being atomic in MongoDB.
    """

    def __init__(self, config: SyncConfig):
        self.config = config

    async def process(self, inbound: InboundWebhook) -> ProcessedWebhook:
        webhooks_received_counter.add(1)
        with tracer.start_as_current_span("process_webhook", kind=SpanKind.INTERNAL) as span:
            try:
                verify_signature(
                    inbound.body,
                    inbound.header(self.config.signature_header),
                    self.config.shared_secret.get_secret_value(),
                )

                identifier = resolve_topic(inbound.header(self.config.topic_header))
                span.set_attribute("webhook.topic", identifier.topic)
                span.set_attribute("webhook.resource", identifier.resource)
                span.set_attribute("webhook.action", identifier.action)

                payload = normalize_payload(decode_payload(inbound.body))

                arm = await dispatch(self.config.db, identifier, payload, self.config.key_field)
            except BaseWebhookSyncError as e:
                webhooks_rejected_counter.add(1, {"error.kind": type(e).__name__})
                span.record_exception(e)
                span.set_status(Status(StatusCode.ERROR, description=str(e)))
                logger.warning(f"Webhook rejected ({type(e).__name__}): {e}")
                raise

            span.set_attribute("webhook.dispatched_as", arm.value)

        return ProcessedWebhook(
            topic=identifier.topic,
            resource=identifier.resource,
            action=identifier.action,
            dispatched_as=arm,
            payload=payload,
        )
