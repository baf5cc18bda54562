from pydantic import BaseModel, Field


class LiveblocksAuthRequest(BaseModel):
    room: str = Field(..., min_length=1)


class LiveblocksAuthResponse(BaseModel):
    token: str
