"""Application configuration."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SQLITE_DEFAULT = "sqlite+aiosqlite:///./transactions.db"


def _normalize_database_url(url: str) -> str:
    """Hosted Postgres gives postgres:// or postgresql://; asyncpg needs postgresql+asyncpg://."""
    if not url or url == SQLITE_DEFAULT:
        return url
    if url.startswith("postgres://"):
        return "postgresql+asyncpg://" + url[len("postgres://") :]
    if url.startswith("postgresql://") and "+asyncpg" not in url:
        return "postgresql+asyncpg://" + url[len("postgresql://") :]
    return url


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Journal storage: set DATABASE_URL for Postgres; omit for SQLite
    database_url: str = SQLITE_DEFAULT

    # Account-of-record service
    account_service_url: str = "http://localhost:8081"
    account_service_timeout: float = 10.0

    # App
    app_name: str = "Transaction Service"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("database_url", mode="before")
    @classmethod
    def normalize_db_url(cls, v: str | None) -> str:
        if v is None or (isinstance(v, str) and v.strip() == ""):
            return SQLITE_DEFAULT
        return _normalize_database_url(v) if isinstance(v, str) else v

    @field_validator("account_service_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


settings = Settings()
