"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # MongoDB
    mongo_uri: str = "mongodb://mongodb:27017"

    # Redis
    redis_host: str = "redis"
    redis_port: int = 6379

    # JWT session tokens
    jwt_secret_key: str = "CHANGE_ME_IN_PRODUCTION_USE_STRONG_SECRET"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60

    # Password principals
    password_min_length: int = 6

    # Username registry: "exclusive" = create-if-absent, "overwrite" = last write wins
    username_claim_mode: Literal["exclusive", "overwrite"] = "exclusive"

    # Federated sign-in (Google ID tokens)
    google_client_id: str = ""
    google_jwks_url: str = "https://www.googleapis.com/oauth2/v3/certs"
    google_issuers: list[str] = ["accounts.google.com", "https://accounts.google.com"]

    # Rate limiting
    rate_limit_enabled: bool = True
    register_rate_limit_attempts: int = 10
    login_rate_limit_attempts: int = 5
    rate_limit_window_seconds: int = 60

    # Username reconciliation worker
    reconcile_grace_minutes: int = 30
    reconcile_interval_minutes: int = 15

    # HTTP
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:9002",
    ]

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
