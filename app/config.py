"""Application configuration models."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


POSTER_SIZE_RE = re.compile(r"^w?(\d{2,4})$")


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Moodflix", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    openrouter_api_key: str | None = Field(
        default=None, alias="OPENROUTER_API_KEY"
    )
    openrouter_model: str = Field(
        default="google/gemini-2.5-flash-lite", alias="OPENROUTER_MODEL"
    )
    openrouter_api_url: HttpUrl = Field(
        default="https://openrouter.ai/api/v1", alias="OPENROUTER_API_URL"
    )

    recommendation_count: int = Field(
        default=18, alias="RECOMMENDATION_COUNT", ge=1, le=50
    )

    image_base_url: HttpUrl = Field(
        default="https://image.tmdb.org/t/p", alias="IMAGE_BASE_URL"
    )
    poster_size: str = Field(default="w780", alias="POSTER_SIZE")

    storage_key: str = Field(
        default="moodflix_data_v2", alias="STORAGE_KEY", min_length=1, max_length=120
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./moodflix.db", alias="DATABASE_URL"
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("poster_size", mode="before")
    @classmethod
    def _parse_poster_size(cls, value: object) -> str:
        """Normalise TMDB size tokens such as ``780`` into ``w780``."""

        if value is None:
            return "w780"
        cleaned = str(value).strip().lower()
        if not cleaned:
            return "w780"
        if cleaned == "original":
            return cleaned
        match = POSTER_SIZE_RE.match(cleaned)
        if not match:
            raise ValueError("POSTER_SIZE must look like 'w780' or 'original'")
        return f"w{match.group(1)}"

    @property
    def image_base(self) -> str:
        """Return the image host without a trailing slash."""

        return str(self.image_base_url).rstrip("/")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
