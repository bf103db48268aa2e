from __future__ import annotations

from uuid import uuid4

from app.services.conversation_state.memory import TTLConversationStateStore


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_set_get_clear() -> None:
    store = TTLConversationStateStore(ttl_seconds=60, clock=_Clock())
    session_id = uuid4()

    store.set("chat-1", session_id, awaiting_notes=True)
    state = store.get("chat-1")

    assert state is not None
    assert state.session_id == session_id
    assert state.awaiting_notes is True

    store.clear("chat-1")
    assert store.get("chat-1") is None


def test_entries_expire_after_ttl() -> None:
    clock = _Clock()
    store = TTLConversationStateStore(ttl_seconds=60, clock=clock)
    store.set("chat-1", uuid4(), awaiting_notes=True)

    clock.now += 60
    assert store.get("chat-1") is not None

    clock.now += 1
    assert store.get("chat-1") is None
    assert len(store) == 0


def test_writes_sweep_other_stale_chats() -> None:
    clock = _Clock()
    store = TTLConversationStateStore(ttl_seconds=10, clock=clock)
    store.set("old", uuid4(), awaiting_notes=True)
    clock.now += 30
    store.set("new", uuid4(), awaiting_notes=False)

    assert len(store) == 1
    assert store.get("new") is not None


def test_stores_are_independent() -> None:
    first = TTLConversationStateStore(ttl_seconds=60)
    second = TTLConversationStateStore(ttl_seconds=60)
    first.set("chat", uuid4(), awaiting_notes=True)

    assert second.get("chat") is None
