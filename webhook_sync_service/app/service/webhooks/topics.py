# Topic header parsing: "<resource>/<action>"
from typing import Optional

from webhook_sync_service.app.service.exceptions import ProtocolError
from .models import ResourceIdentifier


def resolve_topic(topic: Optional[str]) -> ResourceIdentifier:
    if topic is None:
        raise ProtocolError("missing topic header")

    parts = topic.split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ProtocolError("malformed topic header")

    resource, action = parts
    return ResourceIdentifier(topic=topic, resource=resource, action=action)
