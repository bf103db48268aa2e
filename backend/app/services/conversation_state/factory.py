"""Conversation state store factory (FastAPI dependency)."""
from __future__ import annotations

from functools import lru_cache

from app.core.config import settings
from app.services.conversation_state.base import ConversationStateStore
from app.services.conversation_state.memory import TTLConversationStateStore


@lru_cache
def get_conversation_state_store() -> ConversationStateStore:
    # A shared backend (e.g. Redis) would be selected here for multi-process deployments.
    return TTLConversationStateStore(ttl_seconds=settings.conversation_state_ttl_seconds)
