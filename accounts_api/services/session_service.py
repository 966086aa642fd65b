"""Session helpers (issue signed tokens, read them back from requests)."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Request
from jose import JWTError, jwt

from accounts_api.core.config import Settings, get_settings

ALGORITHM = "HS256"
BEARER_PREFIX = "bearer "
_DEV_SECRET = "dev-only-secret"


def _signing_key(settings: Settings) -> str:
    if settings.secret_key:
        return settings.secret_key
    if settings.app_env == "prod":
        raise RuntimeError("SECRET_KEY must be configured in production.")
    return _DEV_SECRET


def issue_session(account_id: str, settings: Settings | None = None, now: datetime | None = None) -> str:
    """Sign a token whose subject is ``account_id``, valid for the session TTL (2 days by default)."""
    settings = settings or get_settings()
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(seconds=max(60, settings.session_ttl_seconds))
    claims = {
        "sub": account_id,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    return jwt.encode(claims, _signing_key(settings), algorithm=ALGORITHM)


def read_session(token: str | None, settings: Settings | None = None) -> Optional[str]:
    """Return the account id bound to ``token``, or None if it is invalid or expired."""
    if not token:
        return None
    settings = settings or get_settings()
    try:
        claims = jwt.decode(token, _signing_key(settings), algorithms=[ALGORITHM])
    except JWTError:
        return None
    subject = claims.get("sub")
    return str(subject) if subject else None


def current_account_id(request: Request, settings: Settings | None = None) -> Optional[str]:
    """Return the account id from the request's bearer token, if any."""
    header = request.headers.get("authorization") or ""
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    return read_session(header[len(BEARER_PREFIX):].strip(), settings)
