"""Domain models for the repochat record store."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Role(str, enum.Enum):
    """Author of a conversation turn."""

    ASKER = "asker"
    RESPONDER = "responder"


@dataclass
class RepositoryRecord:
    repo_url: str
    repo_owner: str
    repo_name: str
    code_content: str
    file_structure: dict[str, str] = field(default_factory=dict)
    id: str | None = None  # set on insert
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "repo_url": self.repo_url,
            "repo_owner": self.repo_owner,
            "repo_name": self.repo_name,
            "code_content": self.code_content,
            "file_structure": dict(self.file_structure),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class ConversationTurn:
    repository_id: str
    role: Role
    content: str
    id: str | None = None  # set on insert
    created_at: str | None = None
