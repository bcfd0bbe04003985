import base64
import hashlib
import hmac

import pytest
from mongomock import MongoClient as MongoMockClient

TEST_SECRET = "shpss_test_secret"


def _sign(body: bytes, secret: str = TEST_SECRET) -> str:
    return base64.b64encode(hmac.new(secret.encode("utf-8"), body, hashlib.sha256).digest()).decode("ascii")


class AwaitableCollection:
    """Exposes the mongomock collection calls the store makes as coroutines, like Motor."""

    def __init__(self, collection):
        self.collection = collection
        self.calls = []

    async def update_one(self, *args, **kwargs):
        self.calls.append(("update_one", args, kwargs))
        return self.collection.update_one(*args, **kwargs)

    async def delete_one(self, *args, **kwargs):
        self.calls.append(("delete_one", args, kwargs))
        return self.collection.delete_one(*args, **kwargs)


class AwaitableDatabase:
    def __init__(self, database):
        self.database = database
        self.collections = {}

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = AwaitableCollection(self.database[name])
        return self.collections[name]

    def store_calls(self):
        return [call for collection in self.collections.values() for call in collection.calls]


@pytest.fixture(scope="function")
def mongomock_db():
    """Provides a fresh mongomock database for each test."""
    client = MongoMockClient()
    yield client["webhook_sync_test_db"]
    client.close()


@pytest.fixture
def store_db(mongomock_db):
    return AwaitableDatabase(mongomock_db)


@pytest.fixture
def webhook_secret():
    return TEST_SECRET


@pytest.fixture
def sign():
    """Computes the base64 HMAC-SHA256 header value for a body."""
    return _sign
