"""Transcript writer: one question → exactly one asker + one responder turn."""

from __future__ import annotations

from repochat.db.models import ConversationTurn, Role
from repochat.db.repository import Store


def record(store: Store, repository_id: str, question: str, answer: str) -> list[ConversationTurn]:
    """Append the exchange as a single transaction.

    Raises:
        StoreError: If the store rejects the write; neither turn is kept.
    """
    return store.append_turns(
        repository_id,
        [(Role.ASKER, question), (Role.RESPONDER, answer)],
    )
