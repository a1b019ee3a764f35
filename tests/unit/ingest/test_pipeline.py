"""Tests for the end-to-end ingestion pipeline (resolve → crawl → aggregate → store)."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from repochat.db.repository import StoreError
from repochat.ingest.github import ListingFailed
from repochat.ingest.pipeline import ingest_repository
from repochat.ingest.resolver import NotAGitHubUrl


def _tree():
    return {
        "": [
            {"name": "a.py", "type": "file", "content": "A"},
            {"name": "b.png", "type": "file", "content": "PNG"},
            {"name": "c.ts", "type": "file", "fail": True},
            {"name": "docs", "type": "dir"},
        ],
        "docs": [{"name": "guide.md", "type": "file", "content": "G"}],
    }


def test_ingest_stores_one_record(store, fake_github):
    result = ingest_repository("https://github.com/acme/widgets.git", store, fake_github(_tree()))

    assert result.file_count == 2
    record = store.get_repository(result.record.id)
    assert record.repo_owner == "acme"
    assert record.repo_name == "widgets"
    assert record.repo_url == "https://github.com/acme/widgets.git"
    assert record.file_structure == {"a.py": "A", "docs/guide.md": "G"}
    assert record.code_content == "\n\n--- FILE: a.py ---\nA\n\n--- FILE: docs/guide.md ---\nG"


def test_ingest_result_to_dict(store, fake_github):
    result = ingest_repository("https://github.com/acme/widgets", store, fake_github(_tree()))
    data = result.to_dict()
    assert data["success"] is True
    assert data["fileCount"] == 2
    assert data["repository"]["id"] == result.record.id


def test_ingest_invalid_url_touches_nothing(store, fake_github):
    gh = fake_github(_tree())
    with pytest.raises(NotAGitHubUrl):
        ingest_repository("https://example.com/acme/widgets", store, gh)
    assert gh.listed == []
    assert store.list_repositories() == []


def test_ingest_listing_failure_persists_nothing(store, fake_github):
    gh = fake_github(_tree(), broken_dirs={"docs"})
    with pytest.raises(ListingFailed):
        ingest_repository("https://github.com/acme/widgets", store, gh)
    assert store.list_repositories() == []


def test_ingest_store_failure_propagates(store, fake_github):
    with patch.object(store, "insert_repository", side_effect=StoreError("disk full")):
        with pytest.raises(StoreError, match="disk full"):
            ingest_repository("https://github.com/acme/widgets", store, fake_github(_tree()))


def test_ingest_respects_custom_allowlist(store, fake_github):
    result = ingest_repository(
        "https://github.com/acme/widgets", store, fake_github(_tree()), extensions=["png"]
    )
    assert result.record.file_structure == {"b.png": "PNG"}


def test_repeated_ingest_creates_independent_records(store, fake_github):
    first = ingest_repository("https://github.com/acme/widgets", store, fake_github(_tree()))
    second = ingest_repository("https://github.com/acme/widgets", store, fake_github(_tree()))
    assert first.record.id != second.record.id
    assert len(store.list_repositories()) == 2
