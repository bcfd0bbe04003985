import pytest
from unittest.mock import AsyncMock, MagicMock

from webhook_sync_service.app.service.exceptions import UnrecognizedTopicError
from webhook_sync_service.app.service.webhooks.dispatcher import classify_action, dispatch
from webhook_sync_service.app.service.webhooks.models import ResourceIdentifier, WebhookAction


def identifier(topic: str) -> ResourceIdentifier:
    resource, action = topic.split("/")
    return ResourceIdentifier(topic=topic, resource=resource, action=action)


@pytest.mark.parametrize("action", ["create", "update", "updated", "success", "challenged", "failure"])
def test_classify_upsert_actions(action):
    assert classify_action(action) is WebhookAction.UPSERT


@pytest.mark.parametrize("action", ["delete", "deleted", "revoke"])
def test_classify_delete_actions(action):
    assert classify_action(action) is WebhookAction.DELETE


@pytest.mark.parametrize("action", ["archived", "Create", "paid", ""])
def test_classify_unknown_actions(action):
    assert classify_action(action) is WebhookAction.UNRECOGNIZED


@pytest.fixture
def mock_db_collection():
    return AsyncMock() # Motor collection methods are coroutines


@pytest.fixture
def mock_db(mock_db_collection):
    db = MagicMock()
    db.__getitem__.return_value = mock_db_collection
    return db


@pytest.mark.asyncio
async def test_dispatch_upsert_makes_single_atomic_call(mock_db, mock_db_collection):
    payload = {"id": 42, "name": "X"}

    arm = await dispatch(mock_db, identifier("products/update"), payload)

    assert arm is WebhookAction.UPSERT
    mock_db.__getitem__.assert_called_once_with("products")
    mock_db_collection.update_one.assert_called_once_with({"id": 42}, {"$set": payload}, upsert=True)
    mock_db_collection.find_one.assert_not_called()
    mock_db_collection.delete_one.assert_not_called()


@pytest.mark.asyncio
async def test_dispatch_delete_makes_single_call(mock_db, mock_db_collection):
    arm = await dispatch(mock_db, identifier("customers/delete"), {"id": 7})

    assert arm is WebhookAction.DELETE
    mock_db_collection.delete_one.assert_called_once_with({"id": 7})
    mock_db_collection.update_one.assert_not_called()


@pytest.mark.asyncio
async def test_dispatch_uses_configured_key_field(mock_db, mock_db_collection):
    payload = {"admin_graphql_api_id": "gid://shopify/Order/1", "name": "#1001"}

    await dispatch(mock_db, identifier("orders/create"), payload, key_field="admin_graphql_api_id")

    mock_db_collection.update_one.assert_called_once_with(
        {"admin_graphql_api_id": "gid://shopify/Order/1"}, {"$set": payload}, upsert=True
    )


@pytest.mark.asyncio
async def test_dispatch_unrecognized_action_makes_no_store_call(mock_db, mock_db_collection):
    with pytest.raises(UnrecognizedTopicError) as exc_info:
        await dispatch(mock_db, identifier("orders/archived"), {"id": 42})

    assert exc_info.value.topic == "orders/archived"
    mock_db.__getitem__.assert_not_called()
    mock_db_collection.update_one.assert_not_called()
    mock_db_collection.delete_one.assert_not_called()


@pytest.mark.asyncio
async def test_dispatch_update_on_empty_collection_inserts(store_db, mongomock_db):
    await dispatch(store_db, identifier("products/update"), {"id": 42, "name": "X"})

    docs = list(mongomock_db["products"].find({}, {"_id": 0}))
    assert docs == [{"id": 42, "name": "X"}]


@pytest.mark.asyncio
async def test_dispatch_update_redelivery_replaces_fields(store_db, mongomock_db):
    mongomock_db["products"].insert_one({"id": 42, "name": "X"})

    await dispatch(store_db, identifier("products/update"), {"id": 42, "name": "Y"})
    await dispatch(store_db, identifier("products/update"), {"id": 42, "name": "Y"})

    docs = list(mongomock_db["products"].find({"id": 42}, {"_id": 0}))
    assert docs == [{"id": 42, "name": "Y"}]


@pytest.mark.asyncio
async def test_dispatch_upsert_keeps_fields_missing_from_payload(store_db, mongomock_db):
    mongomock_db["products"].insert_one({"id": 42, "name": "X", "vendor": "Acme"})

    await dispatch(store_db, identifier("products/update"), {"id": 42, "name": "Y"})

    assert mongomock_db["products"].find_one({"id": 42}, {"_id": 0}) == {"id": 42, "name": "Y", "vendor": "Acme"}


@pytest.mark.asyncio
async def test_dispatch_deleted_is_idempotent(store_db, mongomock_db):
    mongomock_db["products"].insert_one({"id": 42, "name": "X"})
    mongomock_db["products"].insert_one({"id": 43, "name": "Z"})

    await dispatch(store_db, identifier("products/deleted"), {"id": 42})
    await dispatch(store_db, identifier("products/deleted"), {"id": 42}) # No error on repeat

    remaining = list(mongomock_db["products"].find({}, {"_id": 0}))
    assert remaining == [{"id": 43, "name": "Z"}]


@pytest.mark.asyncio
async def test_dispatch_archived_leaves_collection_untouched(store_db, mongomock_db):
    mongomock_db["products"].insert_one({"id": 42, "name": "X"})

    with pytest.raises(UnrecognizedTopicError):
        await dispatch(store_db, identifier("products/archived"), {"id": 42, "name": "Y"})

    assert store_db.store_calls() == []
    assert mongomock_db["products"].find_one({"id": 42}, {"_id": 0}) == {"id": 42, "name": "X"}
