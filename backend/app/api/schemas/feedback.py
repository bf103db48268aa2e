"""Schemas for feedback aggregation and session feedback capture."""
from __future__ import annotations

from datetime import date
from typing import Dict, List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field

SessionStatus = Literal["completed", "modified", "skipped"]
SkipReason = Literal["life", "tired", "injured", "didnt_want_to"]
RpeLabel = Literal["1", "2-3", "4-5", "6-7", "8-9", "10"]


class SkipReasons(BaseModel):
    life: int = 0
    tired: int = 0
    injured: int = 0
    didnt_want_to: int = 0


class SkipPatterns(BaseModel):
    by_day: Dict[str, int] = Field(default_factory=dict)
    by_session_type: Dict[str, int] = Field(default_factory=dict)


class RpeAverages(BaseModel):
    overall: Optional[float] = None
    by_session_type: Dict[str, float] = Field(default_factory=dict)


class FeedbackSummary(BaseModel):
    total_sessions: int = 0
    completed: int = 0
    modified: int = 0
    skipped: int = 0
    completion_rate: int = 0
    skip_reasons: SkipReasons = Field(default_factory=SkipReasons)
    skip_patterns: SkipPatterns = Field(default_factory=SkipPatterns)
    rpe_averages: RpeAverages = Field(default_factory=RpeAverages)
    notes: List[str] = Field(default_factory=list)


class DateWindow(BaseModel):
    start: date
    end: date


class WeekRange(BaseModel):
    start: int
    end: int


class FeedbackResponse(BaseModel):
    athlete_id: UUID
    window: DateWindow
    week_range: WeekRange
    summary: FeedbackSummary
    narration: str
    request_id: str


class FeedbackCallbackRequest(BaseModel):
    chat_id: str = Field(..., min_length=1)
    data: str = Field(..., min_length=1, max_length=128)


class FeedbackNotesRequest(BaseModel):
    chat_id: str = Field(..., min_length=1)
    text: Optional[str] = Field(default=None, max_length=4000)
    skip: bool = False


class FeedbackStepResponse(BaseModel):
    session_id: Optional[UUID] = None
    next_step: Literal["awaiting_skip_reason", "awaiting_rpe", "awaiting_notes", "logged", "ignored"]
    request_id: str
