# HMAC signature verification for inbound webhooks
import base64
import hashlib
import hmac
import logging
from typing import Optional

from webhook_sync_service.app.service.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def compute_signature(body: bytes, secret: str) -> str:
    """Returns base64(HMAC-SHA256(secret, body)) over the raw body bytes."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(body: bytes, signature: Optional[str], secret: str) -> None:
    """
    Checks the signature header against the body.
    Args:
        body: The request body exactly as received. Never re-encode it.
        signature: Value of the signature header, None when the header is absent.
        secret: The shared client secret.
    Raises:
        AuthenticationError: when the signature is missing or does not match.
    """
    if signature is None:
        raise AuthenticationError("missing signature")

    expected = compute_signature(body, secret)
    if not hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8")):
        logger.warning("Webhook signature mismatch.")
        raise AuthenticationError("signature verification failed")
