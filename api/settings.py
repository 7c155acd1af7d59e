"""
Application settings.

Read once from the environment (a project-root `.env` is honored). Malformed
numeric values fall back to their defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _list_env(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    items = tuple(part.strip() for part in raw.split(",") if part.strip())
    return items or default


@dataclass(frozen=True)
class Settings:
    app_env: str
    redirect_timeout_seconds: float
    fallback_url: str
    cors_allow_origins: Tuple[str, ...]
    log_level: str


def load_settings() -> Settings:
    return Settings(
        app_env=os.getenv("APP_ENV", "development").strip(),
        redirect_timeout_seconds=max(0.1, min(30.0, _float_env("REDIRECT_TIMEOUT_SECONDS", 3.0))),
        fallback_url=os.getenv("REDIRECT_FALLBACK_URL", "/").strip() or "/",
        cors_allow_origins=_list_env("CORS_ALLOW_ORIGINS", ("*",)),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings, used as a FastAPI dependency."""
    return load_settings()
