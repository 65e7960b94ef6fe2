"""Application settings using Pydantic Settings for typed configuration.

This module centralizes all configuration and provides type-safe access to settings.
Settings are loaded from environment variables with sensible defaults.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

_INSECURE_ENVS = {"dev", "development", "local", "test"}


class Settings(BaseSettings):
    """Application-wide settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env_name: str = Field(default="development", alias="ENV_NAME")
    app_name: str = Field(default="HD Notes", alias="APP_NAME")

    # Database
    database_url: str = Field(alias="DATABASE_URL")

    # Session tokens
    jwt_secret: str = Field(alias="JWT_SECRET")
    jwt_expire_days: int = Field(default=7, alias="JWT_EXPIRE_DAYS", ge=1, le=30)
    auth_cookie_name: str = Field(default="authToken", alias="AUTH_COOKIE_NAME")

    # One-time codes
    otp_length: int = Field(default=6, alias="OTP_LENGTH", ge=4, le=10)
    otp_expire_minutes: int = Field(
        default=5, alias="OTP_EXPIRE_MINUTES", ge=1, le=60
    )

    # CORS
    cors_origins: str = Field(default="http://localhost:5173", alias="CORS_ORIGINS")

    # Email (Resend)
    resend_api_key: str | None = Field(default=None, alias="RESEND_API_KEY")
    app_domain: str = Field(default="resend.dev", alias="APP_DOMAIN")
    client_url: str = Field(default="http://localhost:5173", alias="CLIENT_URL")

    # Google sign-in
    google_client_id: str | None = Field(default=None, alias="GOOGLE_CLIENT_ID")
    google_client_secret: str | None = Field(
        default=None, alias="GOOGLE_CLIENT_SECRET"
    )
    google_callback_url: str = Field(
        default="http://localhost:8000/auth/google/callback",
        alias="GOOGLE_CALLBACK_URL",
    )

    # Request ceiling (0 disables)
    rate_limit_max_requests: int = Field(
        default=100, alias="RATE_LIMIT_MAX_REQUESTS", ge=0
    )
    rate_limit_window_seconds: int = Field(
        default=900, alias="RATE_LIMIT_WINDOW_SECONDS", ge=1
    )

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        origins = []
        for o in self.cors_origins.split(","):
            trimmed = o.strip()
            if trimmed:
                origins.append(trimmed)
        return origins

    @computed_field
    @property
    def is_secure_cookie(self) -> bool:
        """Determine if cookies should be set with Secure flag."""
        return self.env_name.lower() not in _INSECURE_ENVS

    @computed_field
    @property
    def cookie_samesite(self) -> Literal["lax", "none"]:
        """Cross-site cookies are only allowed together with Secure."""
        return "none" if self.is_secure_cookie else "lax"

    @computed_field
    @property
    def jwt_expires_in(self) -> timedelta:
        """Get session token lifetime as timedelta."""
        return timedelta(days=self.jwt_expire_days)

    @computed_field
    @property
    def otp_expires_in(self) -> timedelta:
        """Get one-time code lifetime as timedelta."""
        return timedelta(minutes=self.otp_expire_minutes)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
