"""Session outcome statistics for a window of delivered sessions.

``aggregate`` is pure: it takes records that were already fetched (ORM
``SessionRecord`` rows or ``SessionOutcome`` values, anything exposing the same
attributes) and returns a ``FeedbackSummary``. Two lossy rules are kept on
purpose because historical summaries were computed with them: skip reasons
outside the four known categories are not counted anywhere, and RPE labels
outside the bucket map are left out of every average.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Union

from app.api.schemas.feedback import (
    DateWindow,
    FeedbackSummary,
    RpeAverages,
    SkipPatterns,
    SkipReasons,
)

RPE_BUCKETS: Dict[str, float] = {
    "1": 1,
    "2-3": 2.5,
    "4-5": 4.5,
    "6-7": 6.5,
    "8-9": 8.5,
    "10": 10,
}
SKIP_REASONS = ("life", "tired", "injured", "didnt_want_to")
WEEKDAYS_SUNDAY_FIRST = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")
UNKNOWN_SESSION_TYPE = "unknown"


@dataclass
class SessionOutcome:
    status: str
    date: Union[date, str, None] = None
    session_type: Optional[str] = None
    rpe: Optional[str] = None
    skip_reason: Optional[str] = None
    notes: Optional[str] = None


def round_half_up(value: float, places: int = 0) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def rpe_to_number(label: Optional[str]) -> Optional[float]:
    if label is None:
        return None
    return RPE_BUCKETS.get(str(label))


def weekday_name(value: Union[date, str]) -> str:
    """Calendar weekday of ``value`` (a date or ISO ``YYYY-MM-DD`` text), lowercase."""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return WEEKDAYS_SUNDAY_FIRST[(value.weekday() + 1) % 7]


def _as_date(value: Union[date, str, None]) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    return value


def _in_window(record, window: Optional[DateWindow]) -> bool:
    if window is None:
        return True
    record_date = _as_date(getattr(record, "date", None))
    return record_date is not None and window.start <= record_date <= window.end


def empty_summary() -> FeedbackSummary:
    return FeedbackSummary()


def aggregate(records: Iterable, window: Optional[DateWindow] = None) -> FeedbackSummary:
    """Summarize ``records``; when ``window`` is given, records dated outside it are ignored."""
    sessions = [record for record in records if _in_window(record, window)]
    if not sessions:
        return empty_summary()

    total = len(sessions)
    completed = sum(1 for s in sessions if s.status == "completed")
    modified = sum(1 for s in sessions if s.status == "modified")
    skipped_sessions = [s for s in sessions if s.status == "skipped"]
    completion_rate = int(round_half_up(100 * (completed + modified) / total))

    skip_reasons = {reason: 0 for reason in SKIP_REASONS}
    by_day = {day: 0 for day in WEEKDAYS_SUNDAY_FIRST}
    skips_by_type: Dict[str, int] = {}
    for session in skipped_sessions:
        if session.skip_reason in skip_reasons:
            skip_reasons[session.skip_reason] += 1
        if session.date:
            by_day[weekday_name(session.date)] += 1
        session_type = session.session_type or UNKNOWN_SESSION_TYPE
        skips_by_type[session_type] = skips_by_type.get(session_type, 0) + 1

    rpe_values: List[float] = []
    rpe_by_type: Dict[str, List[float]] = {}
    for session in sessions:
        value = rpe_to_number(session.rpe) if session.rpe else None
        if value is None:
            continue
        rpe_values.append(value)
        rpe_by_type.setdefault(session.session_type or UNKNOWN_SESSION_TYPE, []).append(value)

    overall = round_half_up(sum(rpe_values) / len(rpe_values), 1) if rpe_values else None
    by_type_averages = {
        session_type: round_half_up(sum(values) / len(values), 1)
        for session_type, values in rpe_by_type.items()
    }

    notes = [s.notes for s in sessions if s.notes and s.notes.strip()]

    return FeedbackSummary(
        total_sessions=total,
        completed=completed,
        modified=modified,
        skipped=len(skipped_sessions),
        completion_rate=completion_rate,
        skip_reasons=SkipReasons(**skip_reasons),
        skip_patterns=SkipPatterns(by_day=by_day, by_session_type=skips_by_type),
        rpe_averages=RpeAverages(overall=overall, by_session_type=by_type_averages),
        notes=notes,
    )
