"""
Custom exceptions for the Webhook Sync service.

Every pipeline stage raises one of these; the HTTP host maps the kind to a
status code and nothing below it catches them.
"""

class BaseWebhookSyncError(Exception):
    """Base class for exceptions in this module."""
    pass

class AuthenticationError(BaseWebhookSyncError):
    """Raised when the webhook signature is missing or does not match the body."""
    pass

class ProtocolError(BaseWebhookSyncError):
    """Raised when the topic header or the payload is missing or malformed."""
    pass

class UnrecognizedTopicError(BaseWebhookSyncError):
    """Raised when the topic's action is outside the known vocabulary."""
    def __init__(self, topic: str):
        self.topic = topic
        super().__init__(f"Unknown topic {topic}")

class StoreError(BaseWebhookSyncError):
    """Raised when the underlying MongoDB call fails."""
    def __init__(self, collection: str, operation: str, reason: str):
        self.collection = collection
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} on collection '{collection}' failed: {reason}")

class ConfigurationError(BaseWebhookSyncError):
    """Raised when a configuration issue is detected."""
    pass
