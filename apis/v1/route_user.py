from fastapi import APIRouter, Depends, status
from pymongo.asynchronous.database import AsyncDatabase

from core.security import create_access_token
from db.session import get_db
from db.user import create_new_user, get_current_user
from schemas.user import AuthResponse, MeResponse, UserIn, UserInDB

router = APIRouter()


def issue_token(user: UserInDB) -> str:
    return create_access_token(
        data={
            "sub": user.id,
            "email": user.email,
            "role": user.role,
            "display_name": user.display_name,
        }
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserIn, db: AsyncDatabase = Depends(get_db)) -> AuthResponse:
    new_user = await create_new_user(user=user, db=db)
    return AuthResponse(
        message="User registered successfully",
        user=new_user.to_out(),
        token=issue_token(new_user),
    )


@router.get("/me", response_model=MeResponse)
async def get_user_profile(current_user: UserInDB = Depends(get_current_user)) -> MeResponse:
    return MeResponse(user=current_user.to_out())
