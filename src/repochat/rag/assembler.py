"""Context assembler: repository blob + history window + question → answer.

Pipeline:
  1. Load the RepositoryRecord (RepositoryNotFound if absent).
  2. Load the newest ``history_window`` turns, oldest first. Older turns are
     dropped; there is no summarisation or token-aware truncation.
  3. Build one system-context message embedding the whole blob verbatim.
  4. Message list = system context, windowed history, new question.
  5. One provider call; first candidate's text or a literal fallback.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from repochat.config import DEFAULT_HISTORY_WINDOW
from repochat.db.models import ConversationTurn, RepositoryRecord, Role
from repochat.db.repository import Store
from repochat.errors import RepoChatError
from repochat.log import get_logger
from repochat.rag.llm_client import GenerationConfig, first_text, generate

logger = get_logger(__name__)

FALLBACK_ANSWER = "No response from AI"

SYSTEM_ROLE = "system"
USER_ROLE = "user"

# Turn roles → provider message roles. LiteLLM speaks OpenAI roles and
# translates "assistant" to each provider's own model role.
PROVIDER_ROLES: dict[Role, str] = {
    Role.ASKER: USER_ROLE,
    Role.RESPONDER: "assistant",
}


class RepositoryNotFound(RepoChatError, LookupError):
    status_code = 404


@dataclass
class AssemblerConfig:
    model: str = "gemini/gemini-2.0-flash"
    history_window: int = DEFAULT_HISTORY_WINDOW
    generation: GenerationConfig = field(default_factory=GenerationConfig)


_SYSTEM_TEMPLATE = """You are an AI assistant that helps developers understand codebases. You have access to the complete code from the repository "{full_name}".

Here is the codebase content:

{code_content}

Please answer questions about this codebase accurately and helpfully. Reference specific files and line numbers when relevant. Provide code examples when appropriate."""


def build_system_prompt(record: RepositoryRecord) -> str:
    """System-context text: repository name, full blob, answering instructions."""
    return _SYSTEM_TEMPLATE.format(
        full_name=record.full_name,
        code_content=record.code_content,
    )


def build_messages(
    record: RepositoryRecord,
    history: list[ConversationTurn],
    question: str,
) -> list[dict]:
    """Return the ordered provider message list for one question."""
    messages = [{"role": SYSTEM_ROLE, "content": build_system_prompt(record)}]
    messages.extend(
        {"role": PROVIDER_ROLES[turn.role], "content": turn.content} for turn in history
    )
    messages.append({"role": USER_ROLE, "content": question})
    return messages


def answer(
    store: Store,
    repository_id: str,
    question: str,
    api_key: str,
    config: AssemblerConfig,
) -> str:
    """Answer *question* about the stored repository *repository_id*.

    Raises:
        RepositoryNotFound: No repository with that id.
        ProviderError: The provider call failed.
    """
    record = store.get_repository(repository_id)
    if record is None:
        raise RepositoryNotFound(f"Repository not found: {repository_id}")

    history = store.recent_turns(repository_id, config.history_window)
    messages = build_messages(record, history, question)
    logger.debug(
        "Prompt for %s: %d history turns, %d messages",
        record.full_name,
        len(history),
        len(messages),
    )

    response = generate(config.model, messages, api_key, config.generation)
    text = first_text(response)
    if text is None:
        logger.warning("Unexpected response shape from %s — using fallback answer", config.model)
        return FALLBACK_ANSWER
    return text
