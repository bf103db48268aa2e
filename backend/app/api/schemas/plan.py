"""Schemas for plan validation and plan versions."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PlanValidateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=200_000)


class PlanSubmitRequest(PlanValidateRequest):
    reprompt: bool = False


class ValidationResultPayload(BaseModel):
    valid: bool
    tier: Literal[1, 2, 3]
    warnings: List[str]
    errors: List[str]
    plan: Optional[Dict[str, Any]] = None
    repair_prompt: Optional[str] = None


class PlanValidateResponse(BaseModel):
    result: ValidationResultPayload
    request_id: str


class PlanSubmitResponse(BaseModel):
    athlete_id: UUID
    plan_id: UUID
    version: int
    weeks_total: int
    result: ValidationResultPayload
    request_id: str


class WeekPreviewItem(BaseModel):
    day: str
    session: str
    cue: str


class PlanVersionResponse(BaseModel):
    athlete_id: UUID
    plan_id: UUID
    version: int
    created_at: Optional[datetime] = None
    starts_on: date
    macro_plan: Optional[Any] = None
    weeks: List[Dict[str, Any]]
    current_week_number: int
    current_week_preview: List[WeekPreviewItem]
    request_id: str


class TodaySessionResponse(BaseModel):
    athlete_id: UUID
    on_date: date
    week_number: int
    day: str
    session_type: Optional[str] = None
    session: str
    cue: str = ""
    structure: str = ""
    session_id: Optional[UUID] = None
    status: Optional[str] = None
    request_id: str
