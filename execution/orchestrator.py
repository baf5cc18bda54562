"""
Submit-then-poll execution against a Judge0 instance.

One ``execute`` call owns one submission token and walks it through the
states below until it either reaches a terminal judge status or runs out of
poll attempts::

    Submitted -> Polling(0) -> Polling(1) -> ... -> Terminal | TimedOut

The poll interval, attempt ceiling and the sleep function are constructor
arguments so tests can drive the loop with a virtual clock.
"""

import asyncio
import base64
import binascii
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from execution.config import JudgeConfig
from execution.errors import (
    ExecutionFailed,
    ExecutionTimeout,
    MalformedResponse,
    PollFailed,
    SubmissionFailed,
)
from execution.languages import resolve_language_id
from execution.providers import Judge0Provider, select_provider

logger = logging.getLogger(__name__)

# Judge0 status ids
STATUS_IN_QUEUE = 1
STATUS_PROCESSING = 2
STATUS_ACCEPTED = 3


@dataclass(frozen=True)
class ExecutionOutcome:
    success: bool
    output: str = ""
    error: str | None = None
    status_id: int | None = None
    status_description: str | None = None
    stdout: str = ""
    stderr: str = ""
    compile_output: str = ""

    def raise_for_failure(self) -> None:
        if not self.success:
            raise ExecutionFailed(self.error or "Unknown error", self.status_id)


@dataclass(frozen=True)
class Submitted:
    token: str


@dataclass(frozen=True)
class Polling:
    token: str
    attempt: int


@dataclass(frozen=True)
class Terminal:
    outcome: ExecutionOutcome


@dataclass(frozen=True)
class TimedOut:
    token: str
    attempts: int


State = Submitted | Polling | Terminal | TimedOut


def _b64encode(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _b64decode(value: str | None) -> str:
    if not value:
        return ""
    try:
        return base64.b64decode(value).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError) as exc:
        raise MalformedResponse(f"Judge0 returned invalid base64: {exc}") from exc


def _json(response: httpx.Response) -> dict:
    try:
        payload = response.json()
    except ValueError as exc:
        raise MalformedResponse(f"Judge0 returned invalid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedResponse("Judge0 returned a non-object JSON body")
    return payload


def _status_id(payload: dict) -> int:
    status = payload.get("status")
    if not isinstance(status, dict) or type(status.get("id")) is not int:
        raise MalformedResponse("Judge0 result is missing status.id")
    return status["id"]


def build_outcome(payload: dict) -> ExecutionOutcome:
    """Decode a terminal Judge0 submission into an ExecutionOutcome."""
    status_id = _status_id(payload)
    description = payload["status"].get("description") or None
    stdout = _b64decode(payload.get("stdout"))
    stderr = _b64decode(payload.get("stderr"))
    compile_output = _b64decode(payload.get("compile_output"))

    if status_id == STATUS_ACCEPTED:
        return ExecutionOutcome(
            success=True,
            output=stdout.strip(),
            status_id=status_id,
            status_description=description,
            stdout=stdout,
            stderr=stderr,
            compile_output=compile_output,
        )

    return ExecutionOutcome(
        success=False,
        error=stderr or compile_output or description or "Unknown error",
        status_id=status_id,
        status_description=description,
        stdout=stdout,
        stderr=stderr,
        compile_output=compile_output,
    )


class ExecutionOrchestrator:
    def __init__(
        self,
        config: JudgeConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.provider: Judge0Provider = select_provider(config)
        self.max_attempts = config.max_poll_attempts
        self.poll_interval = config.poll_interval
        self._transport = transport
        self._sleep = sleep
        self._clock = clock

    async def execute(
        self,
        code: str,
        language: str,
        stdin: str = "",
        deadline: float | None = None,
    ) -> ExecutionOutcome:
        """
        Run ``code`` on the judge and wait for the result.

        ``deadline`` is an optional budget in seconds and defaults to the
        configured ``execution_deadline``; once another poll interval would
        overrun it the call times out early.
        Raises UnsupportedLanguage before any request is made.
        """
        language_id = resolve_language_id(language)
        if deadline is None:
            deadline = self.config.execution_deadline
        expires_at = self._clock() + deadline if deadline is not None else None

        async with httpx.AsyncClient(
            transport=self._transport, timeout=self.config.request_timeout
        ) as client:
            state: State = await self._submit(client, language_id, code, stdin or "")
            logger.info(
                "Submitted %s code to %s provider (token=%s)",
                language,
                self.provider.name,
                state.token,
            )
            token = state.token
            try:
                while not isinstance(state, (Terminal, TimedOut)):
                    state = await self._advance(client, state, expires_at)
            except asyncio.CancelledError:
                await self._cancel_remote(client, token)
                raise

        if isinstance(state, TimedOut):
            logger.warning(
                "Submission %s still running after %s polls", state.token, state.attempts
            )
            raise ExecutionTimeout(state.attempts)
        return state.outcome

    async def _submit(
        self, client: httpx.AsyncClient, language_id: int, code: str, stdin: str
    ) -> Submitted:
        response = await self.provider.submit(
            client, language_id, _b64encode(code), _b64encode(stdin)
        )
        if not response.is_success:
            raise SubmissionFailed(response.status_code, response.text)
        token = _json(response).get("token")
        if not token or not isinstance(token, str):
            raise MalformedResponse("Judge0 submission response has no token")
        return Submitted(token=token)

    async def _advance(
        self, client: httpx.AsyncClient, state: State, expires_at: float | None
    ) -> State:
        if isinstance(state, Submitted):
            return Polling(token=state.token, attempt=0)

        if state.attempt >= self.max_attempts:
            return TimedOut(token=state.token, attempts=state.attempt)
        if expires_at is not None and self._clock() + self.poll_interval > expires_at:
            return TimedOut(token=state.token, attempts=state.attempt)

        await self._sleep(self.poll_interval)
        response = await self.provider.fetch(client, state.token)
        if not response.is_success:
            raise PollFailed(response.status_code)

        payload = _json(response)
        status_id = _status_id(payload)
        if status_id <= STATUS_PROCESSING:
            logger.debug(
                "Submission %s status %s (attempt %s)",
                state.token,
                status_id,
                state.attempt + 1,
            )
            return Polling(token=state.token, attempt=state.attempt + 1)
        return Terminal(outcome=build_outcome(payload))

    async def _cancel_remote(self, client: httpx.AsyncClient, token: str) -> None:
        try:
            response = await self.provider.cancel(client, token)
        except httpx.HTTPError as exc:
            logger.warning("Could not cancel submission %s: %s", token, exc)
            return
        if not response.is_success:
            logger.warning(
                "Judge0 refused to cancel submission %s: %s",
                token,
                response.status_code,
            )
