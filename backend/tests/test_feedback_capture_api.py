from __future__ import annotations

from datetime import date
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.deps import get_db
from app.db.models.athlete import Athlete
from app.db.models.plan import PlanVersion
from app.db.models.session_record import SessionRecord
from app.main import app
from app.services.conversation_state.factory import get_conversation_state_store
from app.services.conversation_state.memory import TTLConversationStateStore
from app.services.plan_store import get_or_create_session

CHAT_ID = "chat-42"


@pytest.fixture()
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):  # pragma: no cover - sqlite setup
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Athlete.__table__.create(bind=engine)
    PlanVersion.__table__.create(bind=engine)
    SessionRecord.__table__.create(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    store = TTLConversationStateStore(ttl_seconds=3600)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_conversation_state_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal, store
    app.dependency_overrides.clear()


@pytest.fixture()
def session_id(client):
    _, session_factory, _ = client
    with session_factory() as db:
        athlete = Athlete(id=uuid4())
        db.add(athlete)
        db.flush()
        plan = PlanVersion(athlete_id=athlete.id, version=1, weeks=[])
        db.add(plan)
        db.commit()
        record = get_or_create_session(db, plan.id, "run", {"title": "Easy"}, on_date=date(2026, 10, 19))
        return record.id


def _callback(test_client: TestClient, data: str):
    return test_client.post("/feedback/callback", json={"chat_id": CHAT_ID, "data": data})


def test_get_or_create_session_reuses_existing_row(client, session_id):
    _, session_factory, _ = client
    with session_factory() as db:
        record = db.get(SessionRecord, session_id)
        again = get_or_create_session(db, record.plan_id, "swim", None, on_date=date(2026, 10, 19))

        assert again.id == session_id
        assert again.session_type == "run"
        assert again.status == "pending"


def test_completed_flow_with_notes(client, session_id):
    test_client, session_factory, store = client

    response = _callback(test_client, f"status:{session_id}:completed")
    assert response.status_code == 200
    assert response.json()["next_step"] == "awaiting_rpe"

    response = _callback(test_client, f"rpe:{session_id}:6-7")
    assert response.json()["next_step"] == "awaiting_notes"
    assert store.get(CHAT_ID).awaiting_notes is True

    response = test_client.post("/feedback/notes", json={"chat_id": CHAT_ID, "text": "  Felt strong  "})
    assert response.status_code == 200
    assert response.json()["next_step"] == "logged"
    assert response.json()["session_id"] == str(session_id)
    assert store.get(CHAT_ID) is None

    with session_factory() as db:
        record = db.get(SessionRecord, session_id)
        assert record.status == "completed"
        assert record.rpe == "6-7"
        assert record.notes == "  Felt strong  "
        assert record.completed_at is not None


def test_skipping_notes_completes_session(client, session_id):
    test_client, session_factory, store = client
    _callback(test_client, f"status:{session_id}:modified")
    _callback(test_client, f"rpe:{session_id}:8-9")

    response = test_client.post("/feedback/notes", json={"chat_id": CHAT_ID, "skip": True})

    assert response.json()["next_step"] == "logged"
    assert store.get(CHAT_ID) is None
    with session_factory() as db:
        record = db.get(SessionRecord, session_id)
        assert record.status == "modified"
        assert record.notes is None
        assert record.completed_at is not None


def test_skip_flow_records_reason(client, session_id):
    test_client, session_factory, _ = client

    response = _callback(test_client, f"status:{session_id}:skipped")
    assert response.json()["next_step"] == "awaiting_skip_reason"
    with session_factory() as db:
        assert db.get(SessionRecord, session_id).status == "pending"

    response = _callback(test_client, f"skip:{session_id}:tired")
    assert response.json()["next_step"] == "logged"
    with session_factory() as db:
        record = db.get(SessionRecord, session_id)
        assert record.status == "skipped"
        assert record.skip_reason == "tired"


def test_notes_without_pending_state_are_ignored(client, session_id):
    test_client, session_factory, _ = client

    response = test_client.post("/feedback/notes", json={"chat_id": CHAT_ID, "text": "hello"})

    assert response.status_code == 200
    assert response.json()["next_step"] == "ignored"
    assert response.json()["session_id"] is None
    with session_factory() as db:
        assert db.get(SessionRecord, session_id).notes is None


@pytest.mark.parametrize(
    "data",
    ["status:{id}:finished", "rpe:{id}:7", "skip:{id}:weather", "nudge:{id}:yes", "status:{id}", "status:not-a-uuid:completed"],
)
def test_invalid_callbacks_are_422(client, session_id, data):
    test_client, _, _ = client

    response = _callback(test_client, data.format(id=session_id))

    assert response.status_code == 422


def test_unknown_session_is_404(client):
    test_client, _, _ = client

    response = _callback(test_client, f"status:{uuid4()}:completed")

    assert response.status_code == 404
