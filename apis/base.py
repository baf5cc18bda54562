from fastapi import APIRouter
from apis.v1.route_user import router as user_router
from apis.v1.route_login import router as login_router
from apis.v1.route_execute import router as execute_router
from apis.v1.route_liveblocks import router as liveblocks_router
from apis.v1.route_assistant import router as assistant_router

api_router = APIRouter()
api_router.include_router(user_router, prefix="/api/auth", tags=["auth"])
api_router.include_router(login_router, prefix="/api/auth", tags=["auth"])
api_router.include_router(execute_router, prefix="/api/execute", tags=["execute"])
api_router.include_router(liveblocks_router, prefix="/api/liveblocks", tags=["liveblocks"])
api_router.include_router(assistant_router, prefix="/api/assistant", tags=["assistant"])
