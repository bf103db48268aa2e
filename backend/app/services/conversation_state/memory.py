"""In-process conversation state with a time-to-live."""
from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Callable, Dict
from uuid import UUID

from app.services.conversation_state.base import ConversationState, ConversationStateStore

logger = logging.getLogger(__name__)


class TTLConversationStateStore(ConversationStateStore):
    """Dict-backed store; entries older than ``ttl_seconds`` are swept on every access."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._states: Dict[str, ConversationState] = {}
        self._lock = Lock()

    def _sweep(self, now: float) -> None:
        expired = [chat_id for chat_id, state in self._states.items() if now - state.updated_at > self.ttl_seconds]
        for chat_id in expired:
            del self._states[chat_id]
        if expired:
            logger.debug("Expired %d conversation state(s)", len(expired))

    def set(self, chat_id: str, session_id: UUID, *, awaiting_notes: bool) -> ConversationState:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            state = ConversationState(session_id=session_id, awaiting_notes=awaiting_notes, updated_at=now)
            self._states[chat_id] = state
            return state

    def get(self, chat_id: str) -> ConversationState | None:
        with self._lock:
            self._sweep(self._clock())
            return self._states.get(chat_id)

    def clear(self, chat_id: str) -> None:
        with self._lock:
            self._states.pop(chat_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)
