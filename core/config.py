import os
from dotenv import load_dotenv

load_dotenv()


def _optional_float(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    return float(value)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Code Class")
    PROJECT_VERSION: str = "1.0.0"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # MongoDB settings
    DATABASE_URI: str = os.getenv("DATABASE_URI", "mongodb://localhost:27017")
    DATABASE_NAME: str = os.getenv("DATABASE_NAME", "codeclass")
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = int(
        os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "5000")
    )

    # JWT settings
    # no default: tokens cannot be signed until this is set
    SECRET_KEY: str | None = os.getenv("SECRET_KEY")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    # one week, same lifetime the web client expects
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
        os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "10080")
    )
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Redis settings (revoked tokens)
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    REDIS_SOCKET_TIMEOUT_SECONDS: float = float(
        os.getenv("REDIS_SOCKET_TIMEOUT_SECONDS", "5")
    )

    # Judge0 settings. JUDGE0_API_KEY is read per request by JudgeConfig.from_env
    JUDGE0_RAPIDAPI_URL: str = os.getenv(
        "JUDGE0_RAPIDAPI_URL", "https://judge0-ce.p.rapidapi.com"
    )
    JUDGE0_RAPIDAPI_HOST: str = os.getenv(
        "JUDGE0_RAPIDAPI_HOST", "judge0-ce.p.rapidapi.com"
    )
    JUDGE0_PUBLIC_URL: str = os.getenv("JUDGE0_PUBLIC_URL", "https://ce.judge0.com")
    JUDGE0_MAX_POLL_ATTEMPTS: int = int(os.getenv("JUDGE0_MAX_POLL_ATTEMPTS", "30"))
    JUDGE0_POLL_INTERVAL_SECONDS: float = float(
        os.getenv("JUDGE0_POLL_INTERVAL_SECONDS", "1.0")
    )
    JUDGE0_REQUEST_TIMEOUT_SECONDS: float = float(
        os.getenv("JUDGE0_REQUEST_TIMEOUT_SECONDS", "10")
    )
    # overall budget for one run; unset means only the poll ceiling applies
    JUDGE0_EXECUTION_DEADLINE_SECONDS: float | None = _optional_float(
        os.getenv("JUDGE0_EXECUTION_DEADLINE_SECONDS")
    )

    # OpenAI settings
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
    OPENAI_CHAT_MODEL: str = os.getenv("OPENAI_CHAT_MODEL", "gpt-3.5-turbo")
    OPENAI_TRANSCRIBE_MODEL: str = os.getenv("OPENAI_TRANSCRIBE_MODEL", "whisper-1")
    OPENAI_TTS_MODEL: str = os.getenv("OPENAI_TTS_MODEL", "tts-1")
    OPENAI_TTS_VOICE: str = os.getenv("OPENAI_TTS_VOICE", "alloy")

    # Liveblocks settings
    LIVEBLOCKS_SECRET_KEY: str | None = os.getenv("LIVEBLOCKS_SECRET_KEY")
    LIVEBLOCKS_API_URL: str = os.getenv(
        "LIVEBLOCKS_API_URL", "https://api.liveblocks.io"
    )

    CORS_ORIGINS: list[str] = _split_csv(
        os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
    )


settings = Settings()
