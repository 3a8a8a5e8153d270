"""Runtime configuration loaded from the environment.

Values can be provided through a .env file in the working directory.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_STORE_DIR = "./flows"
DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    """Settings for the collaborator adapters and the editor session."""

    api_url: str = DEFAULT_API_URL
    store_dir: Path = Path(DEFAULT_STORE_DIR)
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL
    history_limit: int | None = None  # None keeps every snapshot


def _optional_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    return int(value)


def load_settings(dotenv_path: str | Path | None = None) -> Settings:
    """Build Settings from CREWFLOW_* environment variables."""
    load_dotenv(dotenv_path)  # load environment variables from .env file

    return Settings(
        api_url=os.getenv("CREWFLOW_API_URL", DEFAULT_API_URL).rstrip("/"),
        store_dir=Path(os.getenv("CREWFLOW_STORE_DIR", DEFAULT_STORE_DIR)),
        http_timeout=float(os.getenv("CREWFLOW_HTTP_TIMEOUT", str(DEFAULT_HTTP_TIMEOUT))),
        log_level=os.getenv("CREWFLOW_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        history_limit=_optional_int(os.getenv("CREWFLOW_HISTORY_LIMIT")),
    )


def configure_logging(level: str | int | None = None) -> None:
    """Install a basic log handler for the crewflow loggers."""
    if level is None:
        level = load_settings().log_level
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("crewflow").setLevel(level)
