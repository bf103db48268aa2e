"""Short text renderings of plan days for previews and session cards."""
from __future__ import annotations

from typing import Any, Dict, List

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def format_session_preview(day: Any) -> str:
    if not isinstance(day, dict) or not day:
        return "No session"
    if day.get("session_type") == "rest":
        return "Rest"
    return f"{day.get('title') or 'Untitled'} ({day.get('duration_minutes') or '?'}min)"


def get_week_preview(week: Any) -> List[Dict[str, str]]:
    """Monday-first list of ``{day, session, cue}`` for the days the week defines."""
    if not isinstance(week, dict) or not isinstance(week.get("days"), dict):
        return []

    preview: List[Dict[str, str]] = []
    for day_name in WEEKDAYS:
        day = week["days"].get(day_name)
        if day:
            preview.append(
                {
                    "day": day_name.capitalize(),
                    "session": format_session_preview(day),
                    "cue": day.get("cue") or "",
                }
            )
    return preview


def structure_summary(structure: Any) -> str:
    """E.g. ``10 min warmup → 6×5min threshold → 10 min cooldown``."""
    if not isinstance(structure, list):
        return ""

    parts: List[str] = []
    for segment in structure:
        if not isinstance(segment, dict):
            continue
        label = segment.get("segment") or segment.get("type") or "main"
        part = ""
        if segment.get("reps") and segment.get("rep_duration"):
            part = f"{segment['reps']}×{segment['rep_duration']}"
            intensity = segment.get("intensity")
            if intensity and intensity != "easy":
                part += f" {intensity}"
        elif segment.get("minutes"):
            part = f"{segment['minutes']} min {label}"
        elif segment.get("description"):
            part = str(segment["description"])
        if part:
            parts.append(part)
    return " → ".join(parts)
