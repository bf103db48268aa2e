"""Loads session records for an athlete and feeds them to the aggregator."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import asc, select
from sqlalchemy.orm import Session

from app.api.schemas.feedback import DateWindow, FeedbackSummary
from app.db.models.plan import PlanVersion
from app.db.models.session_record import SessionRecord
from app.services.feedback_aggregator import aggregate


@dataclass
class RecentFeedback:
    summary: FeedbackSummary
    window: DateWindow


def feedback_window(weeks: int, today: Optional[date] = None) -> DateWindow:
    today = today or date.today()
    return DateWindow(start=today - timedelta(days=7 * weeks), end=today)


def load_session_records(db: Session, athlete_id: UUID, start: date, end: date) -> List[SessionRecord]:
    """Sessions from every plan version of the athlete dated within ``[start, end]``."""
    plan_ids = select(PlanVersion.id).where(PlanVersion.athlete_id == athlete_id)
    return (
        db.query(SessionRecord)
        .filter(
            SessionRecord.plan_id.in_(plan_ids),
            SessionRecord.date >= start,
            SessionRecord.date <= end,
        )
        .order_by(asc(SessionRecord.date))
        .all()
    )


def aggregate_feedback(db: Session, athlete_id: UUID, start: date, end: date) -> FeedbackSummary:
    window = DateWindow(start=start, end=end)
    return aggregate(load_session_records(db, athlete_id, start, end), window)


def get_recent_feedback(
    db: Session,
    athlete_id: UUID,
    weeks: int = 2,
    today: Optional[date] = None,
) -> RecentFeedback:
    window = feedback_window(weeks, today)
    return RecentFeedback(summary=aggregate_feedback(db, athlete_id, window.start, window.end), window=window)
