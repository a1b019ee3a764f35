"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from repochat.db.connection import Database
from repochat.db.repository import Store
from repochat.db.schema import initialize
from repochat.ingest.github import FetchFailed, ListingFailed, RemoteEntry


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".repochat.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def store(tmp_db):
    return Store(tmp_db)


class FakeGitHub:
    """In-memory contents API.

    *tree* maps a directory path ("" for root) to a list of entry dicts in
    API order: {"name", "type", "content"?, "fail"?}. Paths are derived.
    Directories listed in *broken_dirs* fail to list.
    """

    def __init__(self, tree: dict[str, list[dict]], broken_dirs: set[str] | None = None):
        self.tree = tree
        self.broken_dirs = broken_dirs or set()
        self.listed: list[str] = []
        self.fetched: list[str] = []
        self._content: dict[str, dict] = {}

    def list_directory(self, owner: str, name: str, path: str = "") -> list[RemoteEntry]:
        self.listed.append(path)
        if path in self.broken_dirs or path not in self.tree:
            raise ListingFailed(f"GitHub API error: Not Found ({path})")
        entries = []
        for item in self.tree[path]:
            full = f"{path}/{item['name']}" if path else item["name"]
            url = None
            if item["type"] == "file" and not item.get("no_url"):
                url = f"https://raw.example/{owner}/{name}/{full}"
                self._content[url] = item
            entries.append(
                RemoteEntry(name=item["name"], path=full, kind=item["type"], download_url=url)
            )
        return entries

    def fetch_raw(self, url: str) -> str:
        self.fetched.append(url)
        item = self._content[url]
        if item.get("fail"):
            raise FetchFailed("500 Internal Server Error")
        return item.get("content", "")


@pytest.fixture
def fake_github():
    return FakeGitHub
