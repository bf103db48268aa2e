"""Daily session delivery endpoint."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.api.schemas.plan import TodaySessionResponse
from app.db.deps import get_db
from app.observability.tracing import trace
from app.services.plan_store import PlanNotFoundError
from app.services.session_delivery import deliver_today

router = APIRouter()


@router.get("/athletes/{athlete_id}/sessions/today", response_model=TodaySessionResponse, tags=["sessions"])
def today_session(
    athlete_id: UUID,
    http_request: Request,
    db: Session = Depends(get_db),
) -> TodaySessionResponse:
    """Session card data for today; creates the pending session row feedback is logged against."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace("session.today", athlete_id=str(athlete_id), request_id=request_id) as span:
        try:
            delivered = deliver_today(db, athlete_id)
        except PlanNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        if span:
            span.update(metadata={"week_number": delivered.week_number, "day": delivered.day_name})

    day = delivered.day or {}
    record = delivered.record
    return TodaySessionResponse(
        athlete_id=athlete_id,
        on_date=delivered.on_date,
        week_number=delivered.week_number,
        day=delivered.day_name.capitalize(),
        session_type=day.get("session_type"),
        session=delivered.preview,
        cue=day.get("cue") or "",
        structure=delivered.structure,
        session_id=record.id if record else None,
        status=record.status if record else None,
        request_id=request_id or "",
    )
