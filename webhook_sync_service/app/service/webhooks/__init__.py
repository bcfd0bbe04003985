from .models import InboundWebhook, ProcessedWebhook, ResourceIdentifier, SyncConfig, WebhookAction
from .pipeline import WebhookSync
