from __future__ import annotations

from sqlalchemy import inspect

from accounts_api.core import config as core_config
from accounts_api.db import create_tables
from accounts_api.db import session as db_session


def test_create_tables_builds_schema(tmp_path, monkeypatch, settings_env, capsys):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'fresh.db'}")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()

    create_tables.main()

    engine = db_session.get_engine()
    tables = set(inspect(engine).get_table_names())
    engine.dispose()
    assert {"accounts", "orders"} <= tables
    assert "Database tables created successfully." in capsys.readouterr().out
