# Recursive date-literal normalization of decoded webhook payloads
import datetime
import json
from typing import Any, Dict, Optional

from webhook_sync_service.app.service.exceptions import ProtocolError


def decode_payload(body: bytes) -> Dict[str, Any]:
    """Decodes a verified body as a UTF-8 JSON object."""
    try:
        decoded = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ProtocolError("malformed payload") from e
    if not isinstance(decoded, dict):
        raise ProtocolError("malformed payload")
    return decoded


def looks_like_date(value: str) -> bool:
    # Loose on purpose: starts with "20" and has a "T" anywhere.
    return value.startswith("20") and "T" in value


def parse_timestamp(value: str) -> Optional[datetime.datetime]:
    """
    Parses a date-time string into an aware UTC datetime at millisecond precision,
    which is what MongoDB stores. Returns None when the string is not a date.
    """
    candidate = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.datetime.fromisoformat(candidate)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=datetime.timezone.utc)
    parsed = parsed.astimezone(datetime.timezone.utc)
    return parsed.replace(microsecond=(parsed.microsecond // 1000) * 1000)


def to_epoch_millis(value: datetime.datetime) -> int:
    epoch = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
    return (value - epoch) // datetime.timedelta(milliseconds=1)


def normalize_payload(value: Any) -> Any:
    """
    Returns a copy of a decoded JSON value where every date-shaped string leaf
    is replaced by a datetime. Strings that look like dates but do not parse are
    kept as they are.
    """
    if isinstance(value, dict):
        return {key: normalize_payload(item) for key, item in value.items()}
    if isinstance(value, list):
        return [normalize_payload(item) for item in value]
    if isinstance(value, str) and looks_like_date(value):
        parsed = parse_timestamp(value)
        return parsed if parsed is not None else value
    return value
