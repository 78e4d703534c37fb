"""
Centralized configuration using Pydantic BaseSettings.
All environment variables are loaded here - no hardcoded values.
"""
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Movie Magic API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    CORS_ORIGINS: List[str] = ["*"]

    # Telemetry
    ENABLE_OTEL: bool = False  # Default to False to prevent gRPC errors in dev
    ENABLE_PROMETHEUS: bool = True

    # Store (unset -> in-memory store)
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_ECHO: bool = False

    # Identity provider
    AUTH_BACKEND: Literal["session", "jwt"] = "session"
    IDENTITY_PROVIDER_URL: str = "http://localhost:54321"
    IDENTITY_PROVIDER_API_KEY: str = ""
    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = "authenticated"
    AUTH_CACHE_TTL_SEC: int = 0  # 0 disables the principal cache
    IDENTITY_TIMEOUT_MS: int = 5000

    # External catalog
    CATALOG_BASE_URL: str = "https://api.themoviedb.org/3"
    CATALOG_API_KEY: str = ""
    CATALOG_TIMEOUT_MS: int = 5000
    CATALOG_APPEND_TO_RESPONSE: str = "credits,videos"

    # Circuit Breaker
    CIRCUIT_BREAKER_FAILURE_THRESHOLD: int = 5
    CIRCUIT_BREAKER_RECOVERY_TIMEOUT_SEC: int = 30

    # Pagination
    DEFAULT_PAGE: int = 1
    DEFAULT_PER_PAGE: int = 20
    TRENDING_LIMIT: int = 20

    # Ingestion job
    SEED_PAGES: int = 1

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance - singleton pattern."""
    return Settings()
