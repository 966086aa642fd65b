from __future__ import annotations

import string
from datetime import datetime, timedelta, timezone

from accounts_api.core.tokens import ResetToken, issue_reset_token


def test_reset_token_is_32_hex_chars_and_random():
    tokens = {issue_reset_token().token for _ in range(50)}

    assert len(tokens) == 50
    for token in tokens:
        assert len(token) == 32
        assert set(token) <= set(string.hexdigits.lower())


def test_reset_token_expires_one_hour_after_issue():
    now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    reset = issue_reset_token(now=now)

    assert reset.expires_at == now + timedelta(hours=1)
    assert reset.is_expired(now + timedelta(minutes=59)) is False
    assert reset.is_expired(now + timedelta(hours=1)) is True


def test_custom_ttl_and_naive_timestamps():
    now = datetime(2024, 1, 1, 12, 0)
    reset = issue_reset_token(ttl_seconds=60, now=now)

    assert reset.expires_at == datetime(2024, 1, 1, 12, 1, tzinfo=timezone.utc)
    # naive datetimes are read as UTC, as SQLite returns them
    stored = ResetToken(token=reset.token, expires_at=datetime(2024, 1, 1, 12, 1))
    assert stored.is_expired(datetime(2024, 1, 1, 12, 0, 30, tzinfo=timezone.utc)) is False
