"""Application configuration.

Configuration is loaded from environment variables. For local development, you can provide a
`.env` file and set `AUSLAW_ENV_FILE` to point to it.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """auslaw settings.

    All fields are environment-configurable. Prefix is `AUSLAW_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="AUSLAW_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    log_level: str = Field(default="INFO")

    # Index search
    index_base_url: str = Field(default="https://classic.austlii.edu.au")
    index_search_path: str = Field(default="/cgi-bin/sinosrch.cgi")
    index_meta: str = Field(default="/austlii")
    source_name: str = Field(default="austlii")
    search_timeout_s: float = Field(default=15.0, ge=1.0, le=300.0)

    # Document fetch
    fetch_timeout_s: float = Field(default=60.0, ge=1.0, le=600.0)
    http_user_agent: str = Field(default="auslaw/0.1.0 (legal research tool)")

    # OCR fallback
    # Text layers with fewer non-whitespace characters than this are treated as missing.
    ocr_min_text_chars: int = Field(default=100, ge=0)
    ocr_command: str = Field(default="tesseract")
    ocr_language: str = Field(default="eng")
    ocr_dpi: int = Field(default=300, ge=72, le=600)
    ocr_page_timeout_s: float = Field(default=120.0, ge=1.0, le=1800.0)


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("AUSLAW_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()
