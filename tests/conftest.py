from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the accounts_api package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from accounts_api.core import config as core_config  # noqa: E402
from accounts_api.core import rate_limiter  # noqa: E402
from accounts_api.core import security  # noqa: E402
from accounts_api.core.mailer import MailStatus  # noqa: E402
from accounts_api.db import models  # noqa: E402
from accounts_api.db import session as db_session  # noqa: E402
from accounts_api.repositories.sql_repository import SQLRepository  # noqa: E402
from accounts_api.services.account_service import AccountService  # noqa: E402


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def settings_env(monkeypatch):
    """Cheap argon2 parameters and a fixed signing key for the whole test."""
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("PASSWORD_HASH_TIME_COST", "1")
    monkeypatch.setenv("PASSWORD_HASH_MEMORY_COST", "1024")
    monkeypatch.setenv("PASSWORD_RESET_TTL", "3600")
    monkeypatch.setenv("SESSION_TTL_SECONDS", "172800")
    for name in ("SMTP_HOST", "SMTP_USER", "SMTP_PASSWORD", "SMTP_FROM", "PASSWORD_RESET_URL", "PUBLIC_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    _clear_caches()
    yield core_config.get_settings()
    _clear_caches()


@pytest.fixture()
def db_env(tmp_path, monkeypatch, settings_env):
    """Point DATABASE_URL to a temporary SQLite file and create the schema."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield core_config.get_settings()

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    _clear_caches()


class FakeMailer:
    """Records reset mails instead of talking to SMTP."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []

    def __call__(self, token: str, email: str) -> MailStatus:
        self.sent.append((token, email))
        return MailStatus(response="250 2.0.0 OK", accepted=[email])


@pytest.fixture()
def mailer():
    return FakeMailer()


@pytest.fixture()
def repo(db_env):
    return SQLRepository()


@pytest.fixture()
def service(db_env, repo, mailer):
    return AccountService(settings=db_env, repository=repo, mailer=mailer)


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    rate_limiter.reset_limits()
    yield
    rate_limiter.reset_limits()
