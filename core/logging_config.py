import logging

from core.config import settings


def configure_logging(level: str | None = None) -> None:
    """
    Configure the root logger once for the whole application.
    Uvicorn keeps its own handlers; everything else goes through here.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # httpx logs every request line at INFO, which leaks query strings
    logging.getLogger("httpx").setLevel(logging.WARNING)
