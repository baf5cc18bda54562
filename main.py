import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from apis.base import api_router
from core.config import settings
from core.logging_config import configure_logging
from db.redis_session import close_redis
from db.session import close_client, ensure_indexes, get_db

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.SECRET_KEY:
        raise RuntimeError("SECRET_KEY is not configured")
    await ensure_indexes(await get_db())
    logger.info("%s %s started", settings.PROJECT_NAME, settings.PROJECT_VERSION)
    yield
    await close_redis()
    await close_client()


app = FastAPI(
    title=settings.PROJECT_NAME, version=settings.PROJECT_VERSION, lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = time.perf_counter() - start_time
    logger.info(
        "%s %s -> %s in %.4fs",
        request.method,
        request.url.path,
        response.status_code,
        process_time,
    )
    return response


@app.get("/")
async def read_root():
    return {"message": settings.PROJECT_NAME, "version": settings.PROJECT_VERSION}


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(api_router)


def main():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
