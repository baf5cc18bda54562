from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt

from core.config import settings


def _secret_key() -> str:
    if not settings.SECRET_KEY:
        raise RuntimeError("SECRET_KEY is not configured")
    return settings.SECRET_KEY


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Sign a JWT carrying ``data`` plus ``exp`` and a unique ``jti``.
    The ``jti`` is what logout stores in Redis to revoke the token.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "jti": uuid4().hex})
    return jwt.encode(to_encode, _secret_key(), algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Raises ``jwt.InvalidTokenError`` (incl. expiry) on a bad token."""
    return jwt.decode(
        token,
        _secret_key(),
        algorithms=[settings.ALGORITHM],
        options={"require": ["exp", "sub", "jti"]},
    )


def seconds_until_expiry(payload: dict) -> int:
    exp = payload.get("exp")
    if exp is None:
        return 0
    remaining = int(exp - datetime.now(timezone.utc).timestamp())
    return max(remaining, 0)
