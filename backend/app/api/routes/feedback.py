"""Feedback summary endpoint consumed by the next planning cycle."""
from __future__ import annotations

from time import perf_counter
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.api.schemas.feedback import FeedbackResponse, WeekRange
from app.core.config import settings
from app.db.deps import get_db
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.feedback_narrator import narrate
from app.services.feedback_service import get_recent_feedback
from app.services.plan_store import current_week_number, load_latest_plan

router = APIRouter()


def _week_range(db: Session, athlete_id: UUID, weeks: int) -> WeekRange:
    """Plan weeks covered by the feedback window, ending at the current week."""
    plan = load_latest_plan(db, athlete_id)
    if plan is None or not plan.weeks:
        return WeekRange(start=1, end=weeks)
    current = current_week_number(plan.starts_on, len(plan.weeks))
    return WeekRange(start=max(1, current - weeks + 1), end=current)


@router.get("/athletes/{athlete_id}/feedback", response_model=FeedbackResponse, tags=["feedback"])
def athlete_feedback(
    athlete_id: UUID,
    http_request: Request,
    weeks: Optional[int] = Query(None, ge=1, le=12, description="Look-back window in weeks"),
    db: Session = Depends(get_db),
) -> FeedbackResponse:
    request_id = getattr(http_request.state, "request_id", None)
    weeks = weeks or settings.feedback_window_weeks
    start = perf_counter()

    with trace(
        "feedback.summary",
        metadata={"weeks": weeks},
        athlete_id=str(athlete_id),
        request_id=request_id,
    ) as span:
        recent = get_recent_feedback(db, athlete_id, weeks=weeks)
        week_range = _week_range(db, athlete_id, weeks)
        narration = narrate(recent.summary, week_range)
        if span:
            span.update(
                metadata={
                    "total_sessions": recent.summary.total_sessions,
                    "completion_rate": recent.summary.completion_rate,
                }
            )

    athlete_meta = {"athlete_id": str(athlete_id)}
    log_metric("feedback.summary.completion_rate", recent.summary.completion_rate, metadata=athlete_meta)
    log_metric("feedback.summary.total_sessions", recent.summary.total_sessions, metadata=athlete_meta)
    log_metric("feedback.summary.latency_ms", (perf_counter() - start) * 1000, metadata=athlete_meta)

    return FeedbackResponse(
        athlete_id=athlete_id,
        window=recent.window,
        week_range=week_range,
        summary=recent.summary,
        narration=narration,
        request_id=request_id or "",
    )
