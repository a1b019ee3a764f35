"""repochat record store."""

from repochat.db.connection import Database
from repochat.db.migrations import MIGRATIONS, run_migrations
from repochat.db.models import ConversationTurn, RepositoryRecord, Role
from repochat.db.repository import Store, StoreError
from repochat.db.schema import initialize

__all__ = [
    "ConversationTurn",
    "Database",
    "MIGRATIONS",
    "RepositoryRecord",
    "Role",
    "Store",
    "StoreError",
    "initialize",
    "run_migrations",
]
