from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com"
DEFAULT_TIMEOUT = 60.0
DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

API_KEY_VARIABLES = ("GEMINI_API_KEY", "API_KEY")


@dataclass(slots=True, frozen=True)
class Settings:
    api_key: str | None
    data_root: Path
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    timeout: float = DEFAULT_TIMEOUT
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"


def _read_api_key() -> str | None:
    for name in API_KEY_VARIABLES:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return None


def _read_timeout() -> float:
    raw = os.getenv("LINENGUARD_CLASSIFIER_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT
    return value if value > 0 else DEFAULT_TIMEOUT


def _data_root() -> Path:
    env_root = os.getenv("LINENGUARD_DATA_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[2] / "data"


def load_settings() -> Settings:
    """Read process configuration from the environment."""

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]

    return Settings(
        api_key=_read_api_key(),
        data_root=_data_root(),
        model=os.getenv("LINENGUARD_MODEL") or DEFAULT_MODEL,
        api_base=os.getenv("LINENGUARD_API_BASE") or DEFAULT_API_BASE,
        timeout=_read_timeout(),
        cors_origins=origins or list(DEFAULT_CORS_ORIGINS),
        log_level=(os.getenv("LINENGUARD_LOG_LEVEL") or "INFO").upper(),
    )
