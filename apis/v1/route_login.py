import logging

import redis.asyncio as redis
from fastapi import APIRouter, Depends
from pymongo.asynchronous.database import AsyncDatabase

from apis.v1.route_user import issue_token
from core.security import seconds_until_expiry
from db.redis_session import get_redis_client, revoke_token
from db.session import get_db
from db.user import authenticate_user, get_token_data
from schemas.token import TokenData
from schemas.user import AuthResponse, UserLogin

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin, db: AsyncDatabase = Depends(get_db)
) -> AuthResponse:
    user = await authenticate_user(credentials.email, credentials.password, db)
    return AuthResponse(message="Logged in", user=user.to_out(), token=issue_token(user))


@router.post("/logout")
async def logout(
    token_data: TokenData = Depends(get_token_data),
    redis_client: redis.Redis = Depends(get_redis_client),
) -> dict[str, str]:
    await revoke_token(
        redis_client, token_data.jti, seconds_until_expiry(token_data.model_dump())
    )
    logger.info("Revoked token for user %s", token_data.sub)
    return {"message": "Logged out"}
