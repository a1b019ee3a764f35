"""Repository pattern for all repochat record-store operations.

Single interface for: ingested repositories and their conversation turns.
Records are created once and never mutated; turns are append-only.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timezone

from repochat.db.models import ConversationTurn, RepositoryRecord, Role
from repochat.errors import RepoChatError

_REPO_COLUMNS = (
    "id, repo_url, repo_owner, repo_name, code_content, file_structure, created_at, updated_at"
)
_TURN_COLUMNS = "id, repository_id, role, content, created_at"


class StoreError(RepoChatError):
    """The record store failed a read or rejected a write."""

    status_code = 500


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


class Store:
    """Data access layer for repositories and chat transcripts.

    Wraps an open sqlite3.Connection. The connection is owned by the caller
    and must be closed after use. No state is cached between calls.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see repochat.db.schema.initialize).
        """
        self._conn = conn

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    def insert_repository(self, record: RepositoryRecord) -> RepositoryRecord:
        """Persist a freshly ingested repository and return it with id + timestamps.

        Raises:
            StoreError: If the insert fails; nothing is written in that case.
        """
        record.id = str(uuid.uuid4())
        record.created_at = record.updated_at = _now()
        try:
            with self._conn:
                self._conn.execute(
                    f"""
                    INSERT INTO repositories ({_REPO_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.id,
                        record.repo_url,
                        record.repo_owner,
                        record.repo_name,
                        record.code_content,
                        json.dumps(record.file_structure),
                        record.created_at,
                        record.updated_at,
                    ),
                )
        except sqlite3.Error as exc:
            record.id = record.created_at = record.updated_at = None
            raise StoreError(f"Failed to store repository: {exc}") from exc
        return record

    def get_repository(self, repository_id: str) -> RepositoryRecord | None:
        """Return a repository by ID, or None if not found.

        Raises:
            StoreError: If the read fails.
        """
        rows = self._read(
            f"SELECT {_REPO_COLUMNS} FROM repositories WHERE id = ?",
            (repository_id,),
        )
        return _row_to_repository(rows[0]) if rows else None

    def list_repositories(self) -> list[RepositoryRecord]:
        """Return all repositories, most recently ingested first."""
        rows = self._read(
            f"SELECT {_REPO_COLUMNS} FROM repositories ORDER BY created_at DESC, rowid DESC"
        )
        return [_row_to_repository(r) for r in rows]

    # ------------------------------------------------------------------
    # Conversation turns
    # ------------------------------------------------------------------

    def append_turns(self, repository_id: str, turns: list[tuple[Role, str]]) -> list[ConversationTurn]:
        """Append *turns* in order as one transaction.

        Args:
            repository_id: Owning repository.
            turns: (role, content) pairs, oldest first.

        Returns:
            The persisted ConversationTurn objects.

        Raises:
            StoreError: If any insert fails; the whole batch is rolled back.
        """
        stamp = _now()
        saved = [
            ConversationTurn(
                repository_id=repository_id,
                role=Role(role),
                content=content,
                id=str(uuid.uuid4()),
                created_at=stamp,
            )
            for role, content in turns
        ]
        try:
            with self._conn:
                self._conn.executemany(
                    f"INSERT INTO chat_messages ({_TURN_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                    [
                        (t.id, t.repository_id, t.role.value, t.content, t.created_at)
                        for t in saved
                    ],
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to record conversation turns: {exc}") from exc
        return saved

    def recent_turns(self, repository_id: str, limit: int) -> list[ConversationTurn]:
        """Return the newest *limit* turns for *repository_id*, oldest first."""
        if limit <= 0:
            return []
        rows = self._read(
            f"""
            SELECT {_TURN_COLUMNS} FROM chat_messages
            WHERE repository_id = ?
            ORDER BY created_at DESC, seq DESC
            LIMIT ?
            """,
            (repository_id, limit),
        )
        return [_row_to_turn(r) for r in reversed(rows)]

    def list_turns(self, repository_id: str) -> list[ConversationTurn]:
        """Return the full transcript for *repository_id*, oldest first."""
        rows = self._read(
            f"""
            SELECT {_TURN_COLUMNS} FROM chat_messages
            WHERE repository_id = ?
            ORDER BY created_at, seq
            """,
            (repository_id,),
        )
        return [_row_to_turn(r) for r in rows]

    def _read(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to read from the record store: {exc}") from exc


# ------------------------------------------------------------------
# Row mappers
# ------------------------------------------------------------------


def _row_to_repository(row: sqlite3.Row) -> RepositoryRecord:
    return RepositoryRecord(
        id=row["id"],
        repo_url=row["repo_url"],
        repo_owner=row["repo_owner"],
        repo_name=row["repo_name"],
        code_content=row["code_content"],
        file_structure=json.loads(row["file_structure"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_turn(row: sqlite3.Row) -> ConversationTurn:
    return ConversationTurn(
        id=row["id"],
        repository_id=row["repository_id"],
        role=Role(row["role"]),
        content=row["content"],
        created_at=row["created_at"],
    )
