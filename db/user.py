import logging
from datetime import datetime, timezone

import jwt
import redis.asyncio as redis
from bson import ObjectId
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from core.hashing import Hasher
from core.security import decode_access_token
from db.redis_session import get_redis_client, is_token_revoked
from db.session import get_db
from schemas.token import TokenData
from schemas.user import UserIn, UserInDB

logger = logging.getLogger(__name__)


def _user_exists_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="User already exists",
    )


async def create_new_user(user: UserIn, db: AsyncDatabase) -> UserInDB:
    """
    Create a new user in the database.
    Raises HTTPException if a user with the same email already exists.
    """
    email = user.email.lower()
    query = await db.users.find_one({"email": email})
    if query:
        raise _user_exists_exception()

    document = {
        "email": email,
        "display_name": user.display_name,
        "role": user.role,
        "hashed_password": Hasher.get_password_hash(user.password),
        "is_verified": True,
        "created_at": datetime.now(timezone.utc),
    }
    try:
        result = await db.users.insert_one(document)
    except DuplicateKeyError:
        # lost a race against a concurrent registration
        raise _user_exists_exception()
    logger.info("Registered user %s", result.inserted_id)
    # insert_one may have already added _id to the document
    return UserInDB(**{**document, "_id": result.inserted_id})


async def authenticate_user(email: str, password: str, db: AsyncDatabase) -> UserInDB:
    """
    Authenticate user by email and password.
    """
    user = await get_user_by_email(email, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="User not found"
        )
    if not Hasher.verify_password(password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials"
        )
    return user


async def get_user_by_email(email: str, db: AsyncDatabase) -> UserInDB | None:
    query = await db.users.find_one({"email": email.lower()})
    if query:
        return UserInDB(**query)
    return None


async def get_user_by_id(user_id: str, db: AsyncDatabase) -> UserInDB | None:
    if not ObjectId.is_valid(user_id):
        return None
    query = await db.users.find_one({"_id": ObjectId(user_id)})
    if query:
        return UserInDB(**query)
    return None


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _credentials_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_token_data(
    token: str | None = Depends(oauth2_scheme),
    redis_client: redis.Redis = Depends(get_redis_client),
) -> TokenData:
    """
    Decode and validate the bearer token.
    Expired, malformed and revoked tokens all answer 401.
    """
    if not token:
        raise _credentials_exception()
    try:
        payload = decode_access_token(token)
        token_data = TokenData(
            sub=str(payload["sub"]), jti=str(payload["jti"]), exp=int(payload["exp"])
        )
    except jwt.InvalidTokenError:
        raise _credentials_exception()

    if await is_token_revoked(redis_client, token_data.jti):
        raise _credentials_exception()
    return token_data


async def get_current_user(
    token_data: TokenData = Depends(get_token_data),
    db: AsyncDatabase = Depends(get_db),
) -> UserInDB:
    """
    Retrieve the current user based on the provided JWT token.
    Raises HTTPException if the user no longer exists.
    """
    user = await get_user_by_id(token_data.sub, db)
    if user is None:
        raise _credentials_exception()
    return user
