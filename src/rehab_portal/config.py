"""Portal settings read from the environment."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_API_BASE_URL = "http://localhost:3000/api/v1"
DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",  # Next.js dev server
    "http://127.0.0.1:3000",
)


class Settings(BaseSettings):
    """Runtime settings for the portal API.

    Each field is read from ``REHAB_PORTAL_<FIELD>``; CORS origins are a
    comma-separated list.
    """

    model_config = SettingsConfigDict(env_prefix="REHAB_PORTAL_", extra="ignore")

    api_base_url: str = DEFAULT_API_BASE_URL
    http_timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT, gt=0)
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS)
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            value = [origin.strip() for origin in value.split(",")]
        origins = [origin for origin in value if origin]
        if not origins:
            raise ValueError("at least one origin is required")
        return origins


def load_settings() -> Settings:
    """Build settings from REHAB_PORTAL_* environment variables.

    Raises:
        pydantic.ValidationError: If a variable does not parse.
    """
    return Settings()
