"""Versioned persistence of validated plans.

Plan rows are never updated. Every accepted submission inserts ``version + 1``;
a reprompt (the follow-up cycle that generates the next block of weeks) carries
the previous weeks forward and appends the new ones.
"""
from __future__ import annotations

import copy
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from app.db.models.plan import PlanVersion
from app.db.models.session_record import SessionRecord
from app.services.athlete_service import get_or_create_athlete

logger = logging.getLogger(__name__)


class PlanNotFoundError(LookupError):
    """Raised when an operation needs an existing plan version and there is none."""


def load_latest_plan(db: Session, athlete_id: UUID) -> Optional[PlanVersion]:
    return (
        db.query(PlanVersion)
        .filter(PlanVersion.athlete_id == athlete_id)
        .order_by(desc(PlanVersion.version))
        .first()
    )


def save_validated_plan(
    db: Session,
    athlete_id: UUID,
    plan: Dict[str, Any],
    *,
    reprompt: bool = False,
    today: Optional[date] = None,
) -> PlanVersion:
    """Insert the next plan version for ``athlete_id`` and commit.

    A fresh plan starts on ``today``; a reprompt keeps the start of the plan it extends.
    """
    get_or_create_athlete(db, athlete_id)
    latest = load_latest_plan(db, athlete_id)
    new_weeks = list(plan.get("weeks") or [])

    if reprompt:
        if latest is None:
            raise PlanNotFoundError(f"No existing plan to extend for athlete {athlete_id}")
        weeks = append_weeks(latest.weeks, new_weeks)
        macro_plan = plan.get("macro_plan") or latest.macro_plan
        starts_on = latest.starts_on
    else:
        weeks = new_weeks
        macro_plan = plan.get("macro_plan") or None
        starts_on = today or date.today()

    version = (latest.version if latest else 0) + 1
    record = PlanVersion(
        athlete_id=athlete_id,
        version=version,
        macro_plan=macro_plan,
        weeks=weeks,
        starts_on=starts_on,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(
        "Stored plan version %s for athlete %s (%d weeks, reprompt=%s)",
        version,
        athlete_id,
        len(weeks),
        reprompt,
    )
    return record


def append_weeks(existing: Any, new_weeks: List[Any]) -> List[Any]:
    """Existing weeks followed by ``new_weeks``, renumbered 1..N by position."""
    combined = [copy.deepcopy(week) for week in list(existing or []) + list(new_weeks)]
    for position, week in enumerate(combined, start=1):
        if isinstance(week, dict):
            week["week_number"] = position
    return combined


def current_week_number(starts_on: date | datetime, total_weeks: int, today: Optional[date] = None) -> int:
    """1-based week of the plan containing ``today``, clamped to ``[1, total_weeks]``."""
    today = today or date.today()
    started = starts_on.date() if isinstance(starts_on, datetime) else starts_on
    weeks_elapsed = (today - started).days // 7
    return min(max(1, weeks_elapsed + 1), max(total_weeks, 1))


def find_week(weeks: Any, week_number: int) -> Optional[Dict[str, Any]]:
    for week in weeks or []:
        if isinstance(week, dict) and week.get("week_number") == week_number:
            return week
    return None


def get_or_create_session(
    db: Session,
    plan_id: UUID,
    session_type: Optional[str],
    prescribed: Any,
    on_date: Optional[date] = None,
) -> SessionRecord:
    """Return the plan's session for ``on_date`` (default today), creating a pending one if needed."""
    on_date = on_date or date.today()
    existing = (
        db.query(SessionRecord)
        .filter(SessionRecord.plan_id == plan_id, SessionRecord.date == on_date)
        .first()
    )
    if existing:
        return existing

    record = SessionRecord(
        plan_id=plan_id,
        date=on_date,
        session_type=session_type,
        prescribed=prescribed,
        status="pending",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record
