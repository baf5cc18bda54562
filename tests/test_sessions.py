import asyncio

from core.config import settings
from db.redis_session import (
    REVOKED_PREFIX,
    build_redis_client,
    is_token_revoked,
    revoke_token,
)
from db.session import mongo_client_options
from tests.conftest import FakeRedis


def test_mongo_client_options():
    options = mongo_client_options()

    assert options["server_api"].version == "1"
    assert options["server_api"].strict is True
    assert options["serverSelectionTimeoutMS"] == settings.MONGO_SERVER_SELECTION_TIMEOUT_MS
    assert options["appname"] == settings.PROJECT_NAME
    assert options["tz_aware"] is True


def test_redis_client_is_built_from_settings():
    client = build_redis_client()
    kwargs = client.connection_pool.connection_kwargs

    assert kwargs["decode_responses"] is True
    assert kwargs["socket_timeout"] == settings.REDIS_SOCKET_TIMEOUT_SECONDS
    assert kwargs["health_check_interval"] == 30


def test_revoked_token_expires_with_token():
    fake = FakeRedis()

    asyncio.run(revoke_token(fake, "abc", 120))

    assert fake.ttl[f"{REVOKED_PREFIX}abc"] == 120
    assert asyncio.run(is_token_revoked(fake, "abc")) is True
    assert asyncio.run(is_token_revoked(fake, "other")) is False


def test_already_expired_token_is_not_stored():
    fake = FakeRedis()

    asyncio.run(revoke_token(fake, "abc", 0))

    assert fake.store == {}
