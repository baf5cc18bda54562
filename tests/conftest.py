"""
Shared fixtures.

MongoDB and Redis are replaced through FastAPI dependency overrides with
small in-memory fakes; Judge0 is scripted with ``httpx.MockTransport``.
"""

import os

# must be set before core.config is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from types import SimpleNamespace

import httpx
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from db.redis_session import get_redis_client
from db.session import get_db
from execution.config import JudgeConfig
from execution.orchestrator import ExecutionOrchestrator
from main import app


class FakeCollection:
    def __init__(self):
        self.documents: list[dict] = []

    async def find_one(self, query: dict):
        for document in self.documents:
            if all(document.get(key) == value for key, value in query.items()):
                return dict(document)
        return None

    async def insert_one(self, document: dict):
        document.setdefault("_id", ObjectId())
        self.documents.append(dict(document))
        return SimpleNamespace(inserted_id=document["_id"])


class FakeDatabase:
    def __init__(self):
        self.users = FakeCollection()


class FakeRedis:
    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttl: dict[str, int] = {}

    async def set(self, key, value, ex=None):
        self.store[key] = value
        if ex is not None:
            self.ttl[key] = ex
        return True

    async def exists(self, *keys):
        return sum(1 for key in keys if key in self.store)


class VirtualClock:
    """Stands in for time.monotonic and asyncio.sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def judge_status(status_id: int, description: str | None = None, **fields) -> dict:
    payload = {"status": {"id": status_id, "description": description or ""}}
    payload.update(fields)
    return payload


class Judge0Stub:
    """
    Scripted Judge0 instance.

    The submit call answers ``submit_status`` with ``token``; each poll pops
    the next entry of ``polls`` (a dict body or a ready httpx.Response) and
    keeps repeating the last one once the script runs out. ``errors`` maps an
    HTTP method to an exception raised instead of answering, as a dropped
    connection would.
    """

    def __init__(
        self,
        polls=(),
        token="abc123",
        submit_status=201,
        submit_body=None,
        errors=None,
    ):
        self.polls = list(polls)
        self.token = token
        self.submit_status = submit_status
        self.submit_body = submit_body
        self.errors = errors or {}
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self.errors:
            raise self.errors[request.method]
        if request.method == "POST":
            if self.submit_body is not None:
                return httpx.Response(self.submit_status, text=self.submit_body)
            return httpx.Response(self.submit_status, json={"token": self.token})
        if request.method == "DELETE":
            return httpx.Response(204)

        entry = self.polls.pop(0) if len(self.polls) > 1 else self.polls[0]
        if isinstance(entry, httpx.Response):
            return entry
        return httpx.Response(200, json=entry)

    @property
    def poll_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def make_orchestrator(clock):
    def factory(stub: Judge0Stub, **config) -> ExecutionOrchestrator:
        return ExecutionOrchestrator(
            JudgeConfig(**config),
            transport=stub.transport,
            sleep=clock.sleep,
            clock=clock,
        )

    return factory


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(fake_db, fake_redis):
    async def override_db():
        return fake_db

    async def override_redis():
        return fake_redis

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_redis_client] = override_redis
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def registered_user(client):
    response = client.post(
        "/api/auth/register",
        json={
            "email": "ada@example.com",
            "password": "correct-horse",
            "displayName": "Ada",
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_headers(registered_user):
    return {"Authorization": f"Bearer {registered_user['token']}"}
