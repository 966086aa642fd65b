"""
Configuration helpers for the accounts backend.

Exposes a Settings object that reads environment variables (database, signing
key, token lifetimes, hashing cost, SMTP) so that routers/services do not
fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    database_url: str
    secret_key: str
    session_ttl_seconds: int
    password_reset_ttl: int
    password_reset_url: str
    password_hash_time_cost: int
    password_hash_memory_cost: int
    smtp_host: str
    smtp_port: int
    smtp_user: str
    smtp_password: str
    smtp_from: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./accounts.db"),
        secret_key=os.getenv("SECRET_KEY", ""),
        session_ttl_seconds=_int(os.getenv("SESSION_TTL_SECONDS", "172800"), 172800),
        password_reset_ttl=_int(os.getenv("PASSWORD_RESET_TTL", "3600"), 3600),
        password_reset_url=os.getenv("PASSWORD_RESET_URL", "/reset-password"),
        password_hash_time_cost=_int(os.getenv("PASSWORD_HASH_TIME_COST", "3"), 3),
        password_hash_memory_cost=_int(os.getenv("PASSWORD_HASH_MEMORY_COST", "65536"), 65536),
        smtp_host=os.getenv("SMTP_HOST", ""),
        smtp_port=_int(os.getenv("SMTP_PORT", "465"), 465),
        smtp_user=os.getenv("SMTP_USER", ""),
        smtp_password=os.getenv("SMTP_PASSWORD", ""),
        smtp_from=os.getenv("SMTP_FROM", os.getenv("SMTP_USER", "")),
    )
