# codehire/core/config.py
from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string; sqlite:// works locally)
      - JWT_SECRET (session signing secret, no fallback in any environment)

    Optional:
      - SMTP_* (email relay used to deliver verification codes)
      - GROQ_API_KEY (analysis provider)
    """

    PROJECT_NAME: str = "CodeHire AI"
    API_PREFIX: str = "/api"
    ENVIRONMENT: Literal["development", "test", "production"] = "development"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Database
    DATABASE_URL: str
    DATABASE_REQUIRE_SSL: bool = False

    # Session tokens
    JWT_SECRET: str
    JWT_ALG: str = "HS256"
    SESSION_TTL_DAYS: int = 7
    SESSION_COOKIE_NAME: str = "auth"

    # Email verification
    OTP_TTL_MINUTES: int = 5

    # SMTP relay
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM_EMAIL: str | None = None
    SMTP_FROM_NAME: str = "CodeHire AI"
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False

    # Analysis provider
    GROQ_API_KEY: str | None = None
    GROQ_MODEL: str = "llama-3.3-70b-versatile"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("JWT_SECRET")
    @classmethod
    def require_secret(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("JWT_SECRET must be set to a non-empty value")
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def otp_ttl(self) -> timedelta:
        return timedelta(minutes=self.OTP_TTL_MINUTES)


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
