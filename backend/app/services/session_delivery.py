"""Today's prescribed session for an athlete, ready for a session card."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.db.models.session_record import SessionRecord
from app.services.plan_store import (
    PlanNotFoundError,
    current_week_number,
    find_week,
    get_or_create_session,
    load_latest_plan,
)
from app.services.session_preview import WEEKDAYS, format_session_preview, structure_summary

logger = logging.getLogger(__name__)


@dataclass
class DeliveredSession:
    on_date: date
    week_number: int
    day_name: str
    day: Optional[Dict[str, Any]]
    # None on rest days and days the plan leaves empty; nothing to log there.
    record: Optional[SessionRecord] = None

    @property
    def preview(self) -> str:
        return format_session_preview(self.day)

    @property
    def structure(self) -> str:
        return structure_summary((self.day or {}).get("structure"))


def deliver_today(db: Session, athlete_id: UUID, today: Optional[date] = None) -> DeliveredSession:
    """Resolve today's plan day and make sure a loggable session row exists for it."""
    today = today or date.today()
    plan = load_latest_plan(db, athlete_id)
    if plan is None:
        raise PlanNotFoundError(f"No plan stored for athlete {athlete_id}")

    weeks = list(plan.weeks or [])
    week_number = current_week_number(plan.starts_on, len(weeks), today=today)
    week = find_week(weeks, week_number) or {}
    day_name = WEEKDAYS[today.weekday()]
    days = week.get("days") if isinstance(week.get("days"), dict) else {}
    day = days.get(day_name)
    if not isinstance(day, dict) or not day:
        return DeliveredSession(on_date=today, week_number=week_number, day_name=day_name, day=None)

    delivered = DeliveredSession(on_date=today, week_number=week_number, day_name=day_name, day=day)
    if day.get("session_type") != "rest":
        delivered.record = get_or_create_session(db, plan.id, day.get("session_type"), day, on_date=today)
        logger.info("Delivered week %d %s session %s", week_number, day_name, delivered.record.id)
    return delivered
