"""Database helpers (engine/session export)."""

from .session import Base, get_engine, get_session
from . import models  # noqa: F401  # ensure models are imported for metadata


def create_all() -> None:
    Base.metadata.create_all(bind=get_engine())


__all__ = ["Base", "get_engine", "get_session", "create_all"]
