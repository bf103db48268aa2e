"""Conversation state store interface."""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass
class ConversationState:
    session_id: UUID
    awaiting_notes: bool
    updated_at: float


class ConversationStateStore:
    """Keyed by chat id. Implementations must expire stale entries on their own."""

    def set(self, chat_id: str, session_id: UUID, *, awaiting_notes: bool) -> ConversationState:
        raise NotImplementedError

    def get(self, chat_id: str) -> ConversationState | None:
        raise NotImplementedError

    def clear(self, chat_id: str) -> None:
        raise NotImplementedError
