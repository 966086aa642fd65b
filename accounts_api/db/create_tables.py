"""Utility script to create the initial database schema."""
from __future__ import annotations

import sys

from sqlalchemy.exc import SQLAlchemyError

from . import create_all


def main() -> None:
    create_all()
    print("Database tables created successfully.")


if __name__ == "__main__":
    try:
        main()
    except SQLAlchemyError as exc:  # pragma: no cover - CLI usage
        sys.stderr.write(f"Failed to create tables: {exc}\n")
        raise SystemExit(1)
