"""
Tests for environment configuration.
"""

from pathlib import Path

import pytest

from library_catalog.config import load_settings

_VARS = (
    "APP_ENV",
    "PORT",
    "LOG_LEVEL",
    "DB_PATH",
    "OLLAMA_BASE_URL",
    "OLLAMA_MODEL",
    "OLLAMA_TIMEOUT_MS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()

    assert settings.app_env == "development"
    assert settings.port == 3000
    assert settings.log_level == "DEBUG"
    assert settings.db_path == Path("data/catalog.db")
    assert settings.ollama_base_url == "http://ollama:11434"
    assert settings.ollama_model == "nomic-embed-text"
    assert settings.ollama_timeout_ms == 30000
    assert settings.ollama_timeout_seconds == 30.0


def test_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "info")
    monkeypatch.setenv("OLLAMA_BASE_URL", "http://localhost:11434/")
    monkeypatch.setenv("OLLAMA_TIMEOUT_MS", "1500")

    settings = load_settings()

    assert settings.port == 8080
    assert settings.log_level == "INFO"
    assert settings.ollama_base_url == "http://localhost:11434"
    assert settings.ollama_timeout_seconds == 1.5


def test_invalid_integer_names_the_variable(monkeypatch):
    monkeypatch.setenv("OLLAMA_TIMEOUT_MS", "soon")

    with pytest.raises(ValueError, match="OLLAMA_TIMEOUT_MS"):
        load_settings()
