from __future__ import annotations
"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Ebook AI Builder application settings.

    Loaded from environment variables or .env file.
    """

    # --- Application ---
    APP_NAME: str = "Ebook AI Builder"
    DEBUG: bool = True
    USE_MOCK_API: bool = False
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    # --- Database (MySQL 8.0+) ---
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "ebook_builder"
    # Full SQLAlchemy URL; overrides the DB_* parts when set
    DB_URL: str = ""
    DB_AUTO_CREATE: bool = False

    @property
    def DATABASE_URL(self) -> str:
        """Async connection string, asyncmy driver unless DB_URL is set."""
        if self.DB_URL:
            return self.DB_URL
        encoded_password = quote_plus(self.DB_PASSWORD)
        return (
            f"mysql+asyncmy://{self.DB_USER}:{encoded_password}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
            "?charset=utf8mb4"
        )

    # --- Media Volume (generated images, served under /media) ---
    MEDIA_VOLUME: str = "media_volume"

    # --- OpenAI-compatible provider (outline, content, images) ---
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_API_KEY: str = ""
    STORY_MODEL: str = "gpt-4o-mini"
    IMAGE_MODEL: str = "dall-e-3"
    IMAGE_SIZE: str = "1024x1024"
    LLM_TIMEOUT: int = 120
    LLM_MAX_RETRIES: int = 3
    OUTLINE_TEMPERATURE: float = 0.7
    CONTENT_TEMPERATURE: float = 0.8

    # --- Generation orchestrator ---
    GENERATOR_BASE_URL: str = "http://localhost:8000"
    GENERATION_CLOSE_DELAY: float = 2.0

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
