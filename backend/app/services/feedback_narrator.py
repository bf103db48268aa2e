"""Turns a FeedbackSummary into the execution-data block of the next planning prompt."""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from app.api.schemas.feedback import FeedbackSummary, SkipReasons, WeekRange

LOW_COMPLETION_RATE = 70
HIGH_RPE = 8
NOTES_DIGEST_ITEMS = 3
NOTE_MAX_CHARS = 100
# Session types whose average stands in for "threshold work", in preference order.
THRESHOLD_TYPES = ("threshold", "tempo")


def _strict_max(values: Dict[str, float]) -> Optional[Tuple[str, float]]:
    """Key holding the single largest positive value; a tie for first place has no winner."""
    ranked = sorted(((value, key) for key, value in values.items() if value > 0), reverse=True)
    if not ranked:
        return None
    if len(ranked) > 1 and ranked[0][0] == ranked[1][0]:
        return None
    value, key = ranked[0]
    return key, value


def find_problem_day(by_day: Dict[str, int]) -> Optional[str]:
    winner = _strict_max(by_day)
    return winner[0] if winner else None


def find_high_rpe_type(by_type: Dict[str, float]) -> Optional[Tuple[str, float]]:
    return _strict_max(by_type)


def top_skip_reason(skip_reasons: SkipReasons) -> Optional[str]:
    counts = skip_reasons.model_dump()
    best: Optional[str] = None
    for reason, count in counts.items():
        # Ties go to the reason listed first.
        if count > 0 and (best is None or count > counts[best]):
            best = reason
    return best.replace("_", " ") if best else None


def describe_skip_patterns(by_day: Dict[str, int], skip_reasons: SkipReasons) -> str:
    problem_day = find_problem_day(by_day)
    if not problem_day:
        return "No consistent pattern"

    description = f"{problem_day.capitalize()}s: {by_day[problem_day]} skips"
    reason = top_skip_reason(skip_reasons)
    if reason:
        description += f', mostly "{reason}"'
    return description


def summarize_notes(notes: List[str], max_items: int = NOTES_DIGEST_ITEMS) -> str:
    if not notes:
        return "None provided"

    digest = "; ".join(
        f'"{note[:NOTE_MAX_CHARS]}{"..." if len(note) > NOTE_MAX_CHARS else ""}"' for note in notes[:max_items]
    )
    if len(notes) > max_items:
        digest += f" (+{len(notes) - max_items} more)"
    return digest


def threshold_rpe(summary: FeedbackSummary) -> Optional[float]:
    by_type = summary.rpe_averages.by_session_type
    for session_type in THRESHOLD_TYPES:
        if by_type.get(session_type) is not None:
            return by_type[session_type]
    return summary.rpe_averages.overall


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def narrate(summary: FeedbackSummary, week_range: WeekRange) -> str:
    header = f"EXECUTION DATA (Weeks {week_range.start}-{week_range.end}):"
    if summary.total_sessions == 0:
        return (
            f"{header}\n"
            "No sessions completed yet. Build the plan based on the athlete's stated capacity "
            "and adjust conservatively."
        )

    by_day = summary.skip_patterns.by_day
    rpe_line = threshold_rpe(summary)
    lines = [
        header,
        f"- Sessions completed: {summary.completed} of {summary.total_sessions} ({summary.completion_rate}%)",
        f"- Sessions modified: {summary.modified}",
        f"- Sessions skipped: {summary.skipped}",
        f"- Skip patterns: {describe_skip_patterns(by_day, summary.skip_reasons)}",
        f"- Average RPE on threshold work: {_format_number(rpe_line) if rpe_line is not None else 'N/A'}",
        f"- Athlete notes: {summarize_notes(summary.notes)}",
        "",
        "Adjust the next two weeks based on this data.",
    ]

    problem_day = find_problem_day(by_day)
    if summary.completion_rate < LOW_COMPLETION_RATE and problem_day:
        lines.append(
            f"If compliance is low on {problem_day.capitalize()}s, consider moving or modifying that session."
        )

    high_rpe = find_high_rpe_type(summary.rpe_averages.by_session_type)
    if high_rpe and high_rpe[1] >= HIGH_RPE:
        session_type, average = high_rpe
        lines.append(
            f"If RPE is consistently high on {session_type} sessions (avg {_format_number(average)}), "
            "reduce intensity or volume."
        )

    return "\n".join(lines)
