"""Tests for repochat list / show / history."""

from __future__ import annotations

from unittest.mock import patch

from typer.testing import CliRunner

from repochat.cli.main import app
from repochat.db.connection import Database
from repochat.db.models import Role
from repochat.db.repository import Store, StoreError

runner = CliRunner()


def test_list_empty(db_path):
    result = runner.invoke(app, ["list", "--db", str(db_path)])
    assert result.exit_code == 0
    assert "No repositories ingested yet." in result.output


def test_list_shows_repository(db_path, seeded):
    result = runner.invoke(app, ["list", "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    assert "acme/widgets" in result.output


def test_list_reads_db_from_env(db_path, seeded, monkeypatch):
    monkeypatch.setenv("REPOCHAT_DB", str(db_path))
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0, result.output
    assert "acme/widgets" in result.output


def test_show_lists_paths(db_path, seeded):
    result = runner.invoke(app, ["show", seeded, "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    assert "2 files" in result.output
    assert "src/app.py" in result.output
    assert "README.md" in result.output


def test_show_single_file(db_path, seeded):
    result = runner.invoke(app, ["show", seeded, "-f", "src/app.py", "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    assert "print" in result.output


def test_show_missing_file(db_path, seeded):
    result = runner.invoke(app, ["show", seeded, "-f", "nope.py", "--db", str(db_path)])
    assert result.exit_code == 1
    assert "nope.py" in result.output


def test_show_unknown_repository(db_path):
    result = runner.invoke(app, ["show", "missing", "--db", str(db_path)])
    assert result.exit_code == 1
    assert "Repository not found" in result.output


def test_history_empty(db_path, seeded):
    result = runner.invoke(app, ["history", seeded, "--db", str(db_path)])
    assert result.exit_code == 0
    assert "No conversation yet" in result.output


def test_history_prints_turns_in_order(db_path, seeded):
    conn = Database(db_path).connect()
    Store(conn).append_turns(seeded, [(Role.ASKER, "first question"), (Role.RESPONDER, "first answer")])
    conn.close()

    result = runner.invoke(app, ["history", seeded, "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    out = result.output
    assert out.index("first question") < out.index("first answer")
    assert "asker" in out
    assert "responder" in out


def test_list_store_read_failure(db_path, seeded):
    with patch(
        "repochat.cli.browse.Store.list_repositories",
        side_effect=StoreError("Failed to read from the record store: database is locked"),
    ):
        result = runner.invoke(app, ["list", "--db", str(db_path)])
    assert result.exit_code == 1
    assert "database is locked" in result.output
