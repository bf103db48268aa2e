"""Plan validation and plan version endpoints."""
from __future__ import annotations

from time import perf_counter
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.schemas.plan import (
    PlanSubmitRequest,
    PlanSubmitResponse,
    PlanValidateRequest,
    PlanValidateResponse,
    PlanVersionResponse,
    ValidationResultPayload,
    WeekPreviewItem,
)
from app.db.deps import get_db
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.plan_store import (
    PlanNotFoundError,
    current_week_number,
    find_week,
    load_latest_plan,
    save_validated_plan,
)
from app.services.plan_validator import ValidationResult, validate_plan
from app.services.session_preview import get_week_preview

router = APIRouter()


def _record_validation_metrics(result: ValidationResult, latency_ms: float, athlete_id: UUID | None = None) -> None:
    metadata = {"athlete_id": str(athlete_id)} if athlete_id else None
    log_metric("plan.validate.tier", result.tier, metadata=metadata)
    log_metric("plan.validate.errors", len(result.errors), metadata=metadata)
    log_metric("plan.validate.warnings", len(result.warnings), metadata=metadata)
    log_metric("plan.validate.latency_ms", latency_ms, metadata=metadata)


@router.post("/plans/validate", response_model=PlanValidateResponse, tags=["plans"])
def validate_plan_text(payload: PlanValidateRequest, http_request: Request) -> PlanValidateResponse:
    """Validate pasted plan text without storing anything."""
    request_id = getattr(http_request.state, "request_id", None)
    start = perf_counter()
    with trace(
        "plan.validate",
        metadata={"text_length": len(payload.text)},
        request_id=request_id,
    ) as span:
        result = validate_plan(payload.text)
        if span:
            span.update(metadata={"tier": result.tier, "valid": result.valid})

    _record_validation_metrics(result, (perf_counter() - start) * 1000)
    return PlanValidateResponse(
        result=ValidationResultPayload(**result.to_dict()),
        request_id=request_id or "",
    )


@router.post(
    "/athletes/{athlete_id}/plans",
    response_model=PlanSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["plans"],
)
def submit_plan(
    athlete_id: UUID,
    payload: PlanSubmitRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> PlanSubmitResponse:
    """Validate a submission and store it as the athlete's next plan version."""
    request_id = getattr(http_request.state, "request_id", None)
    start = perf_counter()
    metadata = {"text_length": len(payload.text), "reprompt": payload.reprompt}

    with trace("plan.submit", metadata=metadata, athlete_id=str(athlete_id), request_id=request_id):
        result = validate_plan(payload.text)
        _record_validation_metrics(result, (perf_counter() - start) * 1000, athlete_id)
        if not result.valid:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=ValidationResultPayload(**result.to_dict()).model_dump(),
            )

        try:
            record = save_validated_plan(db, athlete_id, result.plan, reprompt=payload.reprompt)
        except PlanNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
        except IntegrityError as exc:
            db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A newer plan version was stored concurrently; resubmit.",
            ) from exc

    log_metric("plan.submit.version", record.version, metadata={"athlete_id": str(athlete_id)})
    return PlanSubmitResponse(
        athlete_id=athlete_id,
        plan_id=record.id,
        version=record.version,
        weeks_total=len(record.weeks or []),
        result=ValidationResultPayload(**result.to_dict()),
        request_id=request_id or "",
    )


@router.get("/athletes/{athlete_id}/plans/latest", response_model=PlanVersionResponse, tags=["plans"])
def latest_plan(
    athlete_id: UUID,
    http_request: Request,
    db: Session = Depends(get_db),
) -> PlanVersionResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("plan.latest", athlete_id=str(athlete_id), request_id=request_id):
        record = load_latest_plan(db, athlete_id)
        if record is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No plan stored for athlete")

    weeks = list(record.weeks or [])
    week_number = current_week_number(record.starts_on, len(weeks))
    return PlanVersionResponse(
        athlete_id=athlete_id,
        plan_id=record.id,
        version=record.version,
        created_at=record.created_at,
        starts_on=record.starts_on,
        macro_plan=record.macro_plan,
        weeks=weeks,
        current_week_number=week_number,
        current_week_preview=[WeekPreviewItem(**item) for item in get_week_preview(find_week(weeks, week_number))],
        request_id=request_id or "",
    )
