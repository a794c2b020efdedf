"""
Process-wide settings.

`Settings` is built once at startup (see `api/main.py`) and passed into
`core.context.build_context`; nothing below `main` reads the environment.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_database_url(url: str) -> str:
    # asyncpg rejects libpq's `sslmode` query param.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


# Local default keeps development simple; refused once a database is configured.
DEV_JWT_SECRET = "dev-change-this-secret"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    DATABASE_URL: str = ""

    JWT_SECRET: str = DEV_JWT_SECRET
    JWT_ALG: str = "HS256"
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    DB_POOL_MIN_SIZE: int = Field(default=1, ge=0)
    DB_POOL_MAX_SIZE: int = Field(default=5, ge=1)
    DB_COMMAND_TIMEOUT_S: float = 30.0
    DB_CONNECT_TIMEOUT_S: float = 10.0

    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    LOG_LEVEL: str = "INFO"

    @field_validator("DATABASE_URL")
    @classmethod
    def _clean_database_url(cls, value: str) -> str:
        return _sanitize_database_url(value.strip())

    @field_validator("JWT_SECRET", "JWT_ALG")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    def database_url(self) -> str:
        if not self.DATABASE_URL:
            raise RuntimeError("DATABASE_URL is not set.")
        if self.JWT_SECRET == DEV_JWT_SECRET:
            raise RuntimeError("JWT_SECRET is not set; refusing to sign tokens with the development default.")
        return self.DATABASE_URL
