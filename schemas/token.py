from pydantic import BaseModel


class TokenData(BaseModel):
    sub: str
    jti: str
    exp: int
