"""Service settings loaded from environment variables or ``.env``."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the alert API.

    Precedence: env var > .env file > default value.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Alert API Backend"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Block list (PostgreSQL); unset keeps the in-memory block list
    DATABASE_URL: str | None = None
    DATABASE_POOL_SIZE: int = 5
    DATABASE_CONNECT_TIMEOUT_SEC: int = 5
    DATABASE_STATEMENT_TIMEOUT_MS: int = 3000

    # Devices, users and alert feeds
    STORAGE_BACKEND: Literal["firestore", "memory"] = "firestore"
    FIREBASE_PROJECT_ID: str = "sensor-app-2a69b"
    FIREBASE_PRIVATE_KEY: str | None = None
    FIREBASE_PRIVATE_KEY_ID: str | None = None
    FIREBASE_CLIENT_EMAIL: str | None = None
    FIREBASE_CLIENT_ID: str | None = None
    FIREBASE_CLIENT_CERT_URL: str | None = None
    FIREBASE_SERVICE_ACCOUNT_BASE64: str | None = None
    FIRESTORE_TIMEOUT_SEC: float = 10.0

    # Push delivery
    PUSH_GATEWAY: Literal["expo", "memory"] = "expo"
    EXPO_PUSH_URL: str = "https://exp.host/--/api/v2/push/send"
    PUSH_TIMEOUT_SEC: float = 10.0

    # Per-recipient fan-out
    FANOUT_MAX_WORKERS: int = 4
    RECIPIENT_TIMEOUT_SEC: float = 15.0

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
