import os
from dataclasses import dataclass

from core.config import settings

# value shipped in the sample .env, never a real key
PLACEHOLDER_API_KEY = "your-rapidapi-key-here"


@dataclass(frozen=True)
class JudgeConfig:
    """Read-only view of the Judge0 settings handed to one orchestrator."""

    api_key: str | None = None
    rapidapi_url: str = "https://judge0-ce.p.rapidapi.com"
    rapidapi_host: str = "judge0-ce.p.rapidapi.com"
    public_url: str = "https://ce.judge0.com"
    max_poll_attempts: int = 30
    poll_interval: float = 1.0
    request_timeout: float = 10.0
    # seconds; None leaves only the poll ceiling
    execution_deadline: float | None = None

    @property
    def has_api_key(self) -> bool:
        key = (self.api_key or "").strip()
        return bool(key) and key != PLACEHOLDER_API_KEY

    @classmethod
    def from_env(cls) -> "JudgeConfig":
        # The key is read on every call so rotating it needs no restart.
        return cls(
            api_key=os.getenv("JUDGE0_API_KEY"),
            rapidapi_url=settings.JUDGE0_RAPIDAPI_URL,
            rapidapi_host=settings.JUDGE0_RAPIDAPI_HOST,
            public_url=settings.JUDGE0_PUBLIC_URL,
            max_poll_attempts=settings.JUDGE0_MAX_POLL_ATTEMPTS,
            poll_interval=settings.JUDGE0_POLL_INTERVAL_SECONDS,
            request_timeout=settings.JUDGE0_REQUEST_TIMEOUT_SECONDS,
            execution_deadline=settings.JUDGE0_EXECUTION_DEADLINE_SECONDS,
        )
