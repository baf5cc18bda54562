import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from clients.liveblocks import LiveblocksClient, LiveblocksError
from core.config import settings
from db.user import get_current_user
from schemas.liveblocks import LiveblocksAuthRequest, LiveblocksAuthResponse
from schemas.user import UserInDB

logger = logging.getLogger(__name__)

router = APIRouter()


def get_liveblocks_client() -> LiveblocksClient:
    if not settings.LIVEBLOCKS_SECRET_KEY:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Collaboration service is not configured",
        )
    return LiveblocksClient(settings.LIVEBLOCKS_SECRET_KEY, settings.LIVEBLOCKS_API_URL)


@router.post("/auth", response_model=LiveblocksAuthResponse)
async def liveblocks_auth(
    request: LiveblocksAuthRequest,
    current_user: UserInDB = Depends(get_current_user),
    liveblocks: LiveblocksClient = Depends(get_liveblocks_client),
) -> LiveblocksAuthResponse:
    try:
        token = await liveblocks.authorize_user(
            current_user.id,
            request.room,
            user_info={"name": current_user.display_name},
        )
    except LiveblocksError as exc:
        logger.warning("Liveblocks rejected authorization: %s", exc.status_code)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Collaboration service error: {exc.status_code}",
        )
    except httpx.HTTPError as exc:
        logger.exception("Liveblocks request failed")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Collaboration service unavailable",
        ) from exc
    return LiveblocksAuthResponse(token=token)
