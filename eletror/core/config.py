"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "sqlite://",
    "sqlite+pysqlite://",
    "postgresql://",
    "postgresql+psycopg2://",
)


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"

    # Backing database for the key-value store; a local SQLite file by default
    DATABASE_URL: str = "sqlite:///./eletror.db"

    # Sleep a fixed per-operation delay in the storage service to mimic remote I/O
    STORAGE_SIMULATE_LATENCY: bool = True

    # How often an admin session refreshes the pending registrations list
    PENDING_USERS_POLL_INTERVAL_SEC: float = 5.0

    # Seeded admin account. When ADMIN_PASSWORD_RESET_ON_LOAD is True the stored
    # admin password is put back to ADMIN_PASSWORD every time the users list loads.
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: SecretStr = SecretStr("paulo")
    ADMIN_PASSWORD_RESET_ON_LOAD: bool = True

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a SQLite or PostgreSQL URL (e.g. sqlite:///./eletror.db)"
            )
        return v.strip()

    @field_validator("PENDING_USERS_POLL_INTERVAL_SEC")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        if v <= 0 or v > 3600:
            raise ValueError(
                "PENDING_USERS_POLL_INTERVAL_SEC must be greater than 0 and at most 3600"
            )
        return v

    @field_validator("ADMIN_USERNAME")
    @classmethod
    def validate_admin_username(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("ADMIN_USERNAME must be set and non-empty")
        return v.strip()

    @field_validator("ADMIN_PASSWORD")
    @classmethod
    def validate_admin_password(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("ADMIN_PASSWORD must be set and non-empty")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
