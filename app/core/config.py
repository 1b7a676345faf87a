# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string; sqlite:// for local/tests)
      - JWT_SECRET (shared HS256 secret the sign-in service signs tokens with)

    Optional:
      - CART_COOKIE_NAME / CART_COOKIE_MAX_AGE / CART_COOKIE_SECURE
      - CORS_ORIGINS (JSON list)
    """

    PROJECT_NAME: str = "Storefront API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str

    # JWT verification (backend-side)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    # Anonymous cart cookie
    CART_COOKIE_NAME: str = "sessionCartId"
    CART_COOKIE_MAX_AGE: int = 30 * 24 * 60 * 60  # 30 days
    CART_COOKIE_SECURE: bool = False

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
