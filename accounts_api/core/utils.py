"""
Utility helpers shared across routers/services.
"""

from datetime import datetime, timezone
from typing import Optional


def absolute_url(path: str, base: str) -> str:
    """
    Turn a relative path into an absolute URL under ``base``.
    """
    base_url = (base or "").rstrip("/")
    if not path:
        return base_url + "/"
    if path.startswith("http://") or path.startswith("https://"):
        return path
    if not path.startswith("/"):
        path = "/" + path
    return base_url + path


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored timestamp is UTC.
    return value.astimezone(timezone.utc) if value.tzinfo else value.replace(tzinfo=timezone.utc)


def clean(value: Optional[str]) -> Optional[str]:
    """Strip a string input, mapping blank values to None."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None
