"""Clean-up pass applied to pasted LLM plan output before validation.

The normalizer never raises on bad input. The only failure it reports is a
document that cannot be parsed as JSON at all; everything else is repaired in
place (numeric strings coerced, optional day fields defaulted, weeks sorted and
renumbered, long cues truncated) and the repairs are reported back as facts for
the consistency checks.
"""
from __future__ import annotations

import copy
import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

NUMERIC_FIELDS = frozenset(
    {"duration_minutes", "minutes", "reps", "week_number", "days_per_week", "weeks_in_plan"}
)
CUE_MAX_WORDS = 15
CUE_ELLIPSIS = "..."
STRENGTH_TIMINGS = ("none", "pre", "post", "standalone")
STRENGTH_DEFAULTS: Dict[str, Any] = {
    "timing": "none",
    "duration_minutes": None,
    "focus": None,
    "exercises": None,
}

_FENCE_OPEN = re.compile(r"^```(?:json)?[ \t]*\n?", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\n?```\s*$")
_INT_TEXT = re.compile(r"^[+-]?\d+$")
_FLOAT_TEXT = re.compile(r"^[+-]?(?:\d+\.\d*|\.\d+)$")


@dataclass
class NormalizedPlan:
    plan: Any
    was_reordered: bool = False
    truncated_cues: int = 0


@dataclass
class ParseFailure:
    message: str
    detail: str = ""


NormalizeOutcome = Union[NormalizedPlan, ParseFailure]


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {name}")


def normalize(raw: str) -> NormalizeOutcome:
    """Run every normalization step over ``raw`` in order."""
    cleaned = strip_code_fence(raw or "")
    try:
        document = json.loads(cleaned, parse_constant=_reject_constant)
        document = coerce_numbers(document)
    except (ValueError, RecursionError) as exc:
        # Nesting deep enough to exhaust the stack is reported as unparseable too.
        return ParseFailure(message="Invalid JSON format - could not parse", detail=str(exc))

    fill_day_defaults(document)
    was_reordered = sort_and_renumber_weeks(document)
    truncated = truncate_long_cues(document)
    return NormalizedPlan(plan=document, was_reordered=was_reordered, truncated_cues=truncated)


def strip_code_fence(text: str) -> str:
    """Remove one surrounding ```/```json fence; unfenced text only loses outer whitespace."""
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
    cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def coerce_numbers(value: Any) -> Any:
    """Return a copy of ``value`` with numeric-looking strings under NUMERIC_FIELDS converted."""
    if isinstance(value, list):
        return [coerce_numbers(item) for item in value]
    if isinstance(value, dict):
        result: Dict[str, Any] = {}
        for key, item in value.items():
            if key in NUMERIC_FIELDS and isinstance(item, str):
                result[key] = _parse_number(item)
            else:
                result[key] = coerce_numbers(item)
        return result
    return value


def _parse_number(text: str) -> Union[int, float, str]:
    stripped = text.strip()
    if _INT_TEXT.match(stripped):
        return int(stripped)
    if _FLOAT_TEXT.match(stripped):
        return float(stripped)
    return text


def iter_days(plan: Any):
    """Yield ``(week, day_name, day)`` for every dict-shaped day in every week."""
    if not isinstance(plan, dict) or not isinstance(plan.get("weeks"), list):
        return
    for week in plan["weeks"]:
        if not isinstance(week, dict) or not isinstance(week.get("days"), dict):
            continue
        for day_name, day in week["days"].items():
            if isinstance(day, dict):
                yield week, day_name, day


def fill_day_defaults(plan: Any) -> None:
    for _week, _name, day in iter_days(plan):
        if "cue" not in day:
            day["cue"] = ""
        strength = day.get("strength")
        if "strength" not in day or not isinstance(strength, dict):
            day["strength"] = dict(STRENGTH_DEFAULTS)
            continue
        for field_name, default in STRENGTH_DEFAULTS.items():
            # Field by field: a partial block keeps whatever it already has.
            if field_name not in strength:
                strength[field_name] = default


def _sort_key(week: Any) -> float:
    number = week.get("week_number") if isinstance(week, dict) else None
    if isinstance(number, bool) or not isinstance(number, (int, float)):
        return 0
    return number


def sort_and_renumber_weeks(plan: Any) -> bool:
    """Sort weeks by week_number, renumber from 1, and report whether the order changed."""
    if not isinstance(plan, dict) or not isinstance(plan.get("weeks"), list):
        return False

    weeks: List[Any] = plan["weeks"]
    original_keys = [_sort_key(week) for week in weeks]
    # sorted() is stable, so weeks sharing a number keep their submitted order.
    weeks.sort(key=_sort_key)
    was_reordered = original_keys != sorted(original_keys)

    for position, week in enumerate(weeks, start=1):
        if isinstance(week, dict):
            week["week_number"] = position
    return was_reordered


def renumber(plan: Any) -> Any:
    """Copying wrapper around sort_and_renumber_weeks."""
    result = copy.deepcopy(plan)
    sort_and_renumber_weeks(result)
    return result


def truncate_cue(cue: str, max_words: int = CUE_MAX_WORDS) -> Tuple[str, bool]:
    """Cut ``cue`` to ``max_words`` words plus an ellipsis.

    Returns the text and whether it was cut. Already-truncated output has exactly
    ``max_words`` words so a second pass leaves it alone.
    """
    words = cue.split()
    if len(words) <= max_words:
        return cue, False
    return " ".join(words[:max_words]) + CUE_ELLIPSIS, True


def truncate_long_cues(plan: Any) -> int:
    truncated = 0
    for _week, _name, day in iter_days(plan):
        cue = day.get("cue")
        if not isinstance(cue, str) or not cue:
            continue
        day["cue"], was_cut = truncate_cue(cue)
        if was_cut:
            truncated += 1
    return truncated
