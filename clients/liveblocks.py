"""
Thin client for the Liveblocks REST API.

Only ID-token authorization is used: the backend vouches for the signed-in
user and Liveblocks returns a token the browser uses to join a room.
"""

import logging

import httpx

logger = logging.getLogger(__name__)

ROOM_WRITE = ["room:write"]


class LiveblocksError(Exception):
    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Liveblocks authorization failed: {status_code} - {body}")


class LiveblocksClient:
    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.liveblocks.io",
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self._secret_key = secret_key
        self._transport = transport
        self._timeout = timeout

    async def authorize_user(
        self, user_id: str, room: str, user_info: dict | None = None
    ) -> str:
        """Grant ``user_id`` full access to ``room`` and return the session token."""
        body = {
            "userId": user_id,
            "userInfo": user_info or {},
            "permissions": {room: ROOM_WRITE},
        }
        async with httpx.AsyncClient(
            transport=self._transport, timeout=self._timeout
        ) as client:
            response = await client.post(
                f"{self.base_url}/v2/authorize-user",
                json=body,
                headers={"Authorization": f"Bearer {self._secret_key}"},
            )
        if not response.is_success:
            raise LiveblocksError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            raise LiveblocksError(response.status_code, "response is not JSON") from exc
        token = payload.get("token") if isinstance(payload, dict) else None
        if not token or not isinstance(token, str):
            raise LiveblocksError(response.status_code, "response has no token")
        logger.debug("Authorized user %s for room %s", user_id, room)
        return token
