# Functions for Projecting Webhook Payloads into Resource Collections
import logging
from typing import Any, Dict

from motor.motor_asyncio import AsyncIOMotorDatabase
from bson.errors import BSONError
from pymongo.errors import PyMongoError

from webhook_sync_service.app.service.exceptions import StoreError

logger = logging.getLogger(__name__)

# BSON encoding happens client side and raises outside PyMongoError, e.g. OverflowError for ints wider than 8 bytes.
STORE_CALL_ERRORS = (PyMongoError, BSONError, OverflowError)

def _key_filter(collection: str, operation: str, key_field: str, document: Dict[str, Any]) -> Dict[str, Any]:
    if key_field not in document:
        raise StoreError(collection, operation, f"document has no '{key_field}' field")
    return {key_field: document[key_field]}

async def upsert_resource_document(db: AsyncIOMotorDatabase, collection: str, key_field: str, document: Dict[str, Any]) -> None:
    """Creates or updates the document matching document[key_field] in one atomic call."""
    key_filter = _key_filter(collection, "update_one", key_field, document)
    try:
        result = await db[collection].update_one(key_filter, {"$set": document}, upsert=True)
    except STORE_CALL_ERRORS as e:
        raise StoreError(collection, "update_one", str(e)) from e
    logger.info(f"Upserted document {key_field}={key_filter[key_field]!r} in '{collection}' (matched={result.matched_count}).")

async def delete_resource_document(db: AsyncIOMotorDatabase, collection: str, key_field: str, document: Dict[str, Any]) -> None:
    """Removes at most one document matching document[key_field]. Missing documents are not an error."""
    key_filter = _key_filter(collection, "delete_one", key_field, document)
    try:
        result = await db[collection].delete_one(key_filter)
    except STORE_CALL_ERRORS as e:
        raise StoreError(collection, "delete_one", str(e)) from e
    logger.info(f"Deleted {result.deleted_count} document(s) {key_field}={key_filter[key_field]!r} from '{collection}'.")
