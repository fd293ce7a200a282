"""Shared fixtures: an in-memory MongoDB behind the async collection API."""

from datetime import datetime, timedelta

import mongomock
import pytest
from fastapi.testclient import TestClient

from api.main import app
from config.settings import settings
from models.database import db


class AsyncCursor:
    """Awaitable view of a mongomock cursor, shaped like a Motor cursor."""

    def __init__(self, cursor):
        self._cursor = cursor

    def sort(self, *args, **kwargs):
        self._cursor = self._cursor.sort(*args, **kwargs)
        return self

    def skip(self, count):
        self._cursor = self._cursor.skip(count)
        return self

    def limit(self, count):
        self._cursor = self._cursor.limit(count)
        return self

    async def to_list(self, length=None):
        documents = list(self._cursor)
        return documents if length is None else documents[:length]


class AsyncCollection:
    def __init__(self, collection):
        self._collection = collection

    def find(self, *args, **kwargs):
        return AsyncCursor(self._collection.find(*args, **kwargs))

    def __getattr__(self, name):
        method = getattr(self._collection, name)

        async def call(*args, **kwargs):
            return method(*args, **kwargs)

        return call


class AsyncDatabase:
    def __init__(self, database):
        self._database = database

    def __getattr__(self, name):
        return AsyncCollection(self._database[name])

    def __getitem__(self, name):
        return AsyncCollection(self._database[name])


class AsyncAdmin:
    async def command(self, command):
        return {"ok": 1.0}


class AsyncMongoClient:
    def __init__(self):
        self._client = mongomock.MongoClient()
        self.admin = AsyncAdmin()

    def __getitem__(self, name):
        return AsyncDatabase(self._client[name])

    def close(self):
        self._client.close()


@pytest.fixture(autouse=True)
def mongo():
    """Fresh in-memory database for every test."""
    db.client = AsyncMongoClient()
    yield db.client
    db.client = None


@pytest.fixture
def raw_db(mongo):
    """Synchronous handle on the in-memory database for direct setup."""
    return mongo._client[settings.mongodb_db_name]


@pytest.fixture
def client():
    # No context manager: the lifespan would connect to a real server
    return TestClient(app)


def register(client, email="jane@example.com", **profile):
    body = {
        "name": "Jane",
        "email": email,
        "password": "secret123",
        "age": 30,
        "gender": "female",
        "height": 165,
        "weight": 60,
        "activity_level": "lightly_active",
        "fitness_goal": "lose_weight",
    }
    body.update(profile)
    response = client.post("/api/v1/auth/register", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.fixture
def register_user(client):
    def _register(**profile):
        return register(client, **profile)

    return _register


@pytest.fixture
def auth_headers(client):
    token = register(client)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers(client):
    token = register(client, email="john@example.com", name="John", gender="male")["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def challenge_body():
    start = datetime.utcnow() - timedelta(days=1)
    return {
        "title": "30 Day Push",
        "description": "Log as many workouts as you can",
        "challenge_type": "workout_count",
        "target_value": 10,
        "unit": "workouts",
        "duration": {
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(days=30)).isoformat(),
        },
        "tags": [" Strength ", "Beginner"],
    }
