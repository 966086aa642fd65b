"""
Persistence adapters.

Services depend on the repository helpers instead of touching SQLAlchemy
sessions directly.
"""

from .sql_repository import SQLRepository

__all__ = ["SQLRepository"]
