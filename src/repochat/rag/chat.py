"""Question-answering service: assemble, generate, record.

A transcript write failure never hides a computed answer: the StoreError
is logged and returned alongside the answer instead of being raised.
"""

from __future__ import annotations

from dataclasses import dataclass

from repochat.db.repository import Store, StoreError
from repochat.errors import RepoChatError
from repochat.log import get_logger
from repochat.rag import transcript
from repochat.rag.assembler import AssemblerConfig, answer

logger = get_logger(__name__)


class MissingCredential(RepoChatError, ValueError):
    status_code = 400


@dataclass
class ChatResult:
    answer: str
    transcript_error: StoreError | None = None

    @property
    def recorded(self) -> bool:
        return self.transcript_error is None

    def to_dict(self) -> dict:
        data: dict = {"success": True, "answer": self.answer}
        if self.transcript_error is not None:
            data["transcriptError"] = str(self.transcript_error)
        return data


def ask(
    store: Store,
    repository_id: str,
    question: str,
    api_key: str | None,
    config: AssemblerConfig | None = None,
) -> ChatResult:
    """Answer *question* and append the exchange to the transcript.

    Raises:
        MissingCredential: *api_key* is empty.
        RepositoryNotFound: Unknown *repository_id*.
        ProviderError: The model call failed (nothing is recorded).
    """
    if not api_key:
        raise MissingCredential("Gemini API key is required")
    config = config or AssemblerConfig()

    text = answer(store, repository_id, question, api_key, config)

    try:
        transcript.record(store, repository_id, question, text)
    except StoreError as exc:
        logger.error("Failed to record exchange for %s: %s", repository_id, exc)
        return ChatResult(answer=text, transcript_error=exc)
    return ChatResult(answer=text)
