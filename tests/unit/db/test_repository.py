"""Tests for the Store repository."""

from __future__ import annotations

import pytest

from repochat.db.models import RepositoryRecord, Role
from repochat.db.repository import Store, StoreError


def _record(owner="acme", name="widgets", mapping=None):
    mapping = mapping if mapping is not None else {"b.py": "B", "a.py": "A"}
    return RepositoryRecord(
        repo_url=f"https://github.com/{owner}/{name}",
        repo_owner=owner,
        repo_name=name,
        code_content="".join(f"\n\n--- FILE: {p} ---\n{c}" for p, c in mapping.items()),
        file_structure=mapping,
    )


# ------------------------------------------------------------------
# Repositories
# ------------------------------------------------------------------


def test_insert_assigns_id_and_timestamps(store):
    saved = store.insert_repository(_record())
    assert saved.id
    assert saved.created_at
    assert saved.created_at == saved.updated_at


def test_get_repository_roundtrips_mapping_order(store):
    saved = store.insert_repository(_record())
    loaded = store.get_repository(saved.id)
    assert loaded is not None
    assert loaded.full_name == "acme/widgets"
    assert list(loaded.file_structure) == ["b.py", "a.py"]
    assert loaded.code_content == saved.code_content


def test_get_repository_not_found(store):
    assert store.get_repository("missing") is None


def test_two_inserts_produce_two_records(store):
    first = store.insert_repository(_record())
    second = store.insert_repository(_record())
    assert first.id != second.id
    assert len(store.list_repositories()) == 2


def test_list_repositories_newest_first(store):
    old = store.insert_repository(_record(name="old"))
    new = store.insert_repository(_record(name="new"))
    ids = [r.id for r in store.list_repositories()]
    assert ids == [new.id, old.id]


def test_insert_failure_raises_store_error(tmp_db):
    store = Store(tmp_db)
    tmp_db.execute("DROP TABLE chat_messages")
    tmp_db.execute("DROP TABLE repositories")
    record = _record()
    with pytest.raises(StoreError):
        store.insert_repository(record)
    assert record.id is None


# ------------------------------------------------------------------
# Turns
# ------------------------------------------------------------------


def _add_turns(store: Store, repo_id: str, n: int) -> None:
    for i in range(n):
        role = Role.ASKER if i % 2 == 0 else Role.RESPONDER
        store.append_turns(repo_id, [(role, f"turn-{i}")])


def test_append_turns_keeps_order(store):
    repo_id = store.insert_repository(_record()).id
    store.append_turns(repo_id, [(Role.ASKER, "q"), (Role.RESPONDER, "a")])
    turns = store.list_turns(repo_id)
    assert [(t.role, t.content) for t in turns] == [(Role.ASKER, "q"), (Role.RESPONDER, "a")]


def test_append_turns_unknown_repository_raises(store):
    with pytest.raises(StoreError):
        store.append_turns("missing", [(Role.ASKER, "q"), (Role.RESPONDER, "a")])
    assert store.list_turns("missing") == []


def test_append_turns_is_atomic(store, tmp_db):
    repo_id = store.insert_repository(_record()).id
    tmp_db.execute(
        """
        CREATE TRIGGER reject_boom BEFORE INSERT ON chat_messages
        WHEN NEW.content = 'boom'
        BEGIN SELECT RAISE(ABORT, 'rejected'); END
        """
    )
    # Second row is rejected → the first must not survive either.
    with pytest.raises(StoreError, match="rejected"):
        store.append_turns(repo_id, [(Role.ASKER, "q"), (Role.RESPONDER, "boom")])
    assert store.list_turns(repo_id) == []


def test_recent_turns_returns_newest_oldest_first(store):
    repo_id = store.insert_repository(_record()).id
    _add_turns(store, repo_id, 15)
    recent = store.recent_turns(repo_id, 10)
    assert [t.content for t in recent] == [f"turn-{i}" for i in range(5, 15)]


def test_recent_turns_fewer_than_limit(store):
    repo_id = store.insert_repository(_record()).id
    _add_turns(store, repo_id, 3)
    assert [t.content for t in store.recent_turns(repo_id, 10)] == ["turn-0", "turn-1", "turn-2"]


def test_recent_turns_zero_limit(store):
    repo_id = store.insert_repository(_record()).id
    _add_turns(store, repo_id, 3)
    assert store.recent_turns(repo_id, 0) == []


def test_turns_scoped_to_repository(store):
    a = store.insert_repository(_record(name="a")).id
    b = store.insert_repository(_record(name="b")).id
    _add_turns(store, a, 2)
    assert store.list_turns(b) == []


def test_read_failure_raises_store_error(store, tmp_db):
    repo_id = store.insert_repository(_record()).id
    tmp_db.execute("DROP TABLE chat_messages")
    with pytest.raises(StoreError, match="no such table"):
        store.list_turns(repo_id)
    with pytest.raises(StoreError):
        store.recent_turns(repo_id, 10)


def test_get_repository_read_failure_raises_store_error(tmp_db):
    store = Store(tmp_db)
    tmp_db.execute("DROP TABLE chat_messages")
    tmp_db.execute("DROP TABLE repositories")
    with pytest.raises(StoreError):
        store.get_repository("anything")
    with pytest.raises(StoreError):
        store.list_repositories()
