"""Fixtures for CLI tests: isolated config, a seeded record store."""

from __future__ import annotations

import pytest

from repochat.cli import common
from repochat.db.connection import Database
from repochat.db.models import RepositoryRecord
from repochat.db.repository import Store
from repochat.db.schema import initialize


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path, monkeypatch):
    """No user config, no credentials, cwd inside tmp_path, wide console."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(common.console, "width", 200)
    monkeypatch.setattr("repochat.config._GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml")
    for var in ("REPOCHAT_MODEL", "REPOCHAT_GITHUB_API", "REPOCHAT_DB", "GEMINI_API_KEY"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "chat.db"


@pytest.fixture
def seeded(db_path):
    """Insert one repository; return its id."""
    conn = Database(db_path).connect()
    initialize(conn)
    record = Store(conn).insert_repository(
        RepositoryRecord(
            repo_url="https://github.com/acme/widgets",
            repo_owner="acme",
            repo_name="widgets",
            code_content="\n\n--- FILE: src/app.py ---\nprint('hi')\n\n--- FILE: README.md ---\n# Widgets",
            file_structure={"src/app.py": "print('hi')", "README.md": "# Widgets"},
        )
    )
    conn.close()
    return record.id
