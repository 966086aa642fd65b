"""Single-use password reset tokens."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from .utils import as_utc

RESET_TOKEN_BYTES = 16
RESET_TOKEN_TTL_SECONDS = 3600


@dataclass(frozen=True)
class ResetToken:
    token: str
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return as_utc(self.expires_at) <= as_utc(now)


def issue_reset_token(ttl_seconds: int = RESET_TOKEN_TTL_SECONDS, now: Optional[datetime] = None) -> ResetToken:
    """Return a random 32 hex-char token valid for ``ttl_seconds`` from ``now``."""
    issued_at = as_utc(now) if now else datetime.now(timezone.utc)
    return ResetToken(
        token=secrets.token_hex(RESET_TOKEN_BYTES),
        expires_at=issued_at + timedelta(seconds=ttl_seconds),
    )
