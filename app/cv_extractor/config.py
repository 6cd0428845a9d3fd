"""
Application configuration using Pydantic Settings.

Automatically loads environment variables from .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_UPLOAD_BYTES = 15 * 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI (mock mode only when debug is on and no key is set)
    openai_api_key: str | None = None
    openai_model: str = "gpt-4.1"

    # Upload limits
    max_upload_bytes: int = MAX_UPLOAD_BYTES

    # Candidate summary document
    summary_recipient_name: str = "Sarah"

    # Front-end origins allowed by CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",  # Vite development server
        "http://127.0.0.1:5173",
    ]

    debug: bool = False

    model_config = SettingsConfigDict(
        # Load from .env file in the package directory
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        # Case insensitive environment variable names
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration loaded from environment.
    """
    return Settings()
