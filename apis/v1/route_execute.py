import asyncio
import logging
from typing import Awaitable, TypeVar

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from db.user import get_current_user
from execution.config import JudgeConfig
from execution.errors import ExecutionFailed, UnsupportedLanguage
from execution.orchestrator import ExecutionOrchestrator
from schemas.code import CodeError, CodeOutput, CodeRequest
from schemas.user import UserInDB

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T")

# nginx convention, no standard code exists
HTTP_499_CLIENT_CLOSED_REQUEST = 499
DISCONNECT_CHECK_INTERVAL = 0.5


class ClientDisconnected(Exception):
    """The caller went away before the run finished."""


async def run_until_disconnect(
    request: Request,
    work: Awaitable[T],
    check_interval: float = DISCONNECT_CHECK_INTERVAL,
) -> T:
    """
    Await ``work`` while watching the connection.

    If the client disconnects first the work is cancelled, which lets the
    orchestrator withdraw the remote submission, and ClientDisconnected is
    raised.
    """
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=check_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                task.cancel()
                await asyncio.wait({task})
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()
            await asyncio.wait({task})


def get_orchestrator() -> ExecutionOrchestrator:
    # fresh config snapshot per request; no state is shared between runs
    return ExecutionOrchestrator(JudgeConfig.from_env())


def _error(status_code: int, message: str, error: str | None = None) -> JSONResponse:
    body = CodeError(message=message, error=error)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post(
    "",
    response_model=CodeOutput,
    responses={
        400: {"model": CodeError},
        499: {"model": CodeError},
        500: {"model": CodeError},
    },
)
async def execute_code(
    code_request: CodeRequest,
    request: Request,
    current_user: UserInDB = Depends(get_current_user),
    orchestrator: ExecutionOrchestrator = Depends(get_orchestrator),
):
    if not code_request.code or not code_request.language:
        return _error(status.HTTP_400_BAD_REQUEST, "Code and language are required")

    logger.info(
        "Execution request from %s: language=%s, code_length=%s",
        current_user.id,
        code_request.language,
        len(code_request.code),
    )

    try:
        outcome = await run_until_disconnect(
            request,
            orchestrator.execute(
                code_request.code, code_request.language, code_request.input or ""
            ),
        )
        outcome.raise_for_failure()
    except UnsupportedLanguage as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))
    except ExecutionFailed as exc:
        logger.info("Execution failed: language=%s, status=%s", code_request.language, exc.status_id)
        return _error(status.HTTP_400_BAD_REQUEST, "Code execution failed", exc.error)
    except ClientDisconnected:
        logger.info("Client left during %s execution, run cancelled", code_request.language)
        return _error(HTTP_499_CLIENT_CLOSED_REQUEST, "Client closed request")
    except Exception as exc:
        logger.exception("Execution error for %s", code_request.language)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            str(exc) or "Code execution service unavailable",
            type(exc).__name__,
        )

    logger.info("Execution successful: language=%s", code_request.language)
    return CodeOutput(output=outcome.output)
