"""
Application configuration from environment variables.

Every setting has a default suitable for local development, so the app
starts with no environment at all.
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    app_env: str
    port: int
    log_level: str
    db_path: Path
    ollama_base_url: str
    ollama_model: str
    ollama_timeout_ms: int

    @property
    def ollama_timeout_seconds(self) -> float:
        """Timeout in the unit ``requests`` expects."""
        return self.ollama_timeout_ms / 1000


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def load_settings() -> Settings:
    """
    Read settings from the environment.

    Raises:
        ValueError: If an integer variable (PORT, OLLAMA_TIMEOUT_MS) does not
            parse
    """
    return Settings(
        app_env=os.getenv("APP_ENV", "development"),
        port=_int_env("PORT", 3000),
        log_level=os.getenv("LOG_LEVEL", "DEBUG").upper(),
        db_path=Path(os.getenv("DB_PATH", "data/catalog.db")),
        ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://ollama:11434").rstrip("/"),
        ollama_model=os.getenv("OLLAMA_MODEL", "nomic-embed-text"),
        ollama_timeout_ms=_int_env("OLLAMA_TIMEOUT_MS", 30000),
    )
