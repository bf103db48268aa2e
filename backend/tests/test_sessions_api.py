from __future__ import annotations

import json
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
from app.services.plan_store import save_validated_plan
from app.services.session_delivery import deliver_today
from app.services.session_preview import WEEKDAYS

INTERVALS = {
    "session_type": "run",
    "title": "Threshold intervals",
    "duration_minutes": 50,
    "cue": "Smooth, not strained",
    "structure": [
        {"segment": "warmup", "minutes": 10},
        {"segment": "main", "reps": 6, "rep_duration": "5min", "intensity": "threshold"},
        {"segment": "cooldown", "minutes": 10},
    ],
}


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

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal
    app.dependency_overrides.clear()


def _two_week_plan() -> dict:
    return {
        "weeks": [
            {"week_number": 1, "days": {"monday": dict(INTERVALS), "tuesday": {"session_type": "rest", "cue": ""}}},
            {"week_number": 2, "days": {"monday": dict(INTERVALS, title="Long intervals")}},
        ]
    }


def test_delivery_creates_one_pending_row_per_day(client):
    _, session_factory = client
    athlete_id = uuid4()
    with session_factory() as db:
        save_validated_plan(db, athlete_id, _two_week_plan(), today=date(2026, 10, 19))

        first = deliver_today(db, athlete_id, today=date(2026, 10, 19))
        again = deliver_today(db, athlete_id, today=date(2026, 10, 19))

        assert first.week_number == 1
        assert first.day_name == "monday"
        assert first.preview == "Threshold intervals (50min)"
        assert first.structure == "10 min warmup → 6×5min threshold → 10 min cooldown"
        assert first.record.status == "pending"
        assert first.record.session_type == "run"
        assert first.record.prescribed["title"] == "Threshold intervals"
        assert again.record.id == first.record.id
        assert db.query(SessionRecord).count() == 1


def test_rest_and_empty_days_have_nothing_to_log(client):
    _, session_factory = client
    athlete_id = uuid4()
    with session_factory() as db:
        save_validated_plan(db, athlete_id, _two_week_plan(), today=date(2026, 10, 19))

        rest = deliver_today(db, athlete_id, today=date(2026, 10, 20))
        empty = deliver_today(db, athlete_id, today=date(2026, 10, 21))

        assert rest.preview == "Rest"
        assert rest.record is None
        assert empty.day is None
        assert empty.preview == "No session"
        assert empty.structure == ""
        assert db.query(SessionRecord).count() == 0


def test_delivery_follows_the_plan_week(client):
    _, session_factory = client
    athlete_id = uuid4()
    with session_factory() as db:
        save_validated_plan(db, athlete_id, _two_week_plan(), today=date(2026, 10, 19))

        delivered = deliver_today(db, athlete_id, today=date(2026, 10, 26))

        assert delivered.week_number == 2
        assert delivered.preview == "Long intervals (50min)"
        assert delivered.record.date == date(2026, 10, 26)


def test_today_endpoint_returns_session_card(client):
    test_client, _ = client
    athlete_id = uuid4()
    plan = {"weeks": [{"week_number": 1, "days": {name: dict(INTERVALS) for name in WEEKDAYS}}]}
    assert test_client.post(f"/athletes/{athlete_id}/plans", json={"text": json.dumps(plan)}).status_code == 201

    first = test_client.get(f"/athletes/{athlete_id}/sessions/today")
    second = test_client.get(f"/athletes/{athlete_id}/sessions/today")

    assert first.status_code == 200
    data = first.json()
    assert data["on_date"] == date.today().isoformat()
    assert data["day"] == WEEKDAYS[date.today().weekday()].capitalize()
    assert data["session"] == "Threshold intervals (50min)"
    assert data["structure"] == "10 min warmup → 6×5min threshold → 10 min cooldown"
    assert data["status"] == "pending"
    assert data["session_id"] == second.json()["session_id"]

    callback = test_client.post(
        "/feedback/callback",
        json={"chat_id": "chat-7", "data": f"status:{data['session_id']}:completed"},
    )
    assert callback.json()["next_step"] == "awaiting_rpe"


def test_today_without_plan_is_404(client):
    test_client, _ = client

    assert test_client.get(f"/athletes/{uuid4()}/sessions/today").status_code == 404
