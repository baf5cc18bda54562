from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

Role = Literal["student", "teacher"]


class APIModel(BaseModel):
    # the web client speaks camelCase (displayName)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserIn(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    display_name: str = Field(..., min_length=1)
    role: Role = "student"


class UserLogin(APIModel):
    email: EmailStr
    password: str


class UserOut(APIModel):
    id: str
    email: EmailStr
    display_name: str
    role: Role


class UserInDB(BaseModel):
    # using an alias to map MongoDB's _id to this id field
    id: str = Field(alias="_id")
    email: EmailStr
    display_name: str
    role: Role = "student"
    hashed_password: str
    is_verified: bool = True
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # This allows Pydantic to accept a dictionary where the key is "_id"
    # and map it to the attribute "id"
    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    @field_validator("id", mode="before")
    @classmethod
    def convert_objectid(cls, v: Any) -> str:
        return str(v) if v else v

    def to_out(self) -> UserOut:
        return UserOut(
            id=self.id, email=self.email, display_name=self.display_name, role=self.role
        )


class AuthResponse(APIModel):
    message: str
    user: UserOut
    token: str


class MeResponse(APIModel):
    user: UserOut
