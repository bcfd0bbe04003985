# Pydantic models for the webhook ingestion pipeline
import enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class InboundWebhook(BaseModel):
    """The request as received: headers plus the untouched body bytes."""
    model_config = ConfigDict(frozen=True)

    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    @field_validator("headers")
    @classmethod
    def lowercase_header_names(cls, v: Dict[str, str]) -> Dict[str, str]:
        # HTTP header names are case-insensitive
        return {name.lower(): value for name, value in v.items()}

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())


class WebhookAction(str, enum.Enum):
    UPSERT = "UPSERT"
    DELETE = "DELETE"
    UNRECOGNIZED = "UNRECOGNIZED"


class ResourceIdentifier(BaseModel):
    model_config = ConfigDict(frozen=True)

    topic: str
    resource: str # Also the target collection name
    action: str


class ProcessedWebhook(BaseModel):
    """Read-only view of a completed pipeline run, for auditing by the host."""
    model_config = ConfigDict(frozen=True)

    topic: str
    resource: str
    action: str
    dispatched_as: WebhookAction
    payload: Dict[str, Any]


class SyncConfig(BaseModel):
    """Process-wide pipeline configuration, built once at startup."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    shared_secret: SecretStr
    db: Any # AsyncIOMotorDatabase in production
    key_field: str = "id"
    signature_header: str = "X-Shopify-Hmac-Sha256"
    topic_header: str = "X-Shopify-Topic"
