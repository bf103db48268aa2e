"""Tiered validation of pasted training plans.

Tier 1: clean plan. Tier 2: usable plan with warnings. Tier 3: rejected, either
because the text is not JSON or because required structure is missing; tier 3
results carry a repair prompt instead of a plan.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from app.services.plan_normalizer import NormalizedPlan, ParseFailure, normalize
from app.services.repair_prompt import build_repair_prompt

logger = logging.getLogger(__name__)

TIER_CLEAN = 1
TIER_WARNINGS = 2
TIER_REJECTED = 3

MOSTLY_REST_RATIO = 0.8


@dataclass
class ValidationResult:
    valid: bool
    tier: int
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    plan: Optional[Dict[str, Any]] = None
    repair_prompt: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "tier": self.tier,
            "warnings": self.warnings,
            "errors": self.errors,
            "plan": self.plan,
            "repair_prompt": self.repair_prompt,
        }


def validate_plan(raw_text: str) -> ValidationResult:
    """Normalize, check structure, then check consistency."""
    outcome = normalize(raw_text)
    if isinstance(outcome, ParseFailure):
        logger.info("Plan rejected: unparseable submission (%s)", outcome.detail)
        return _rejected([outcome.message])

    errors = check_structure(outcome.plan)
    if errors:
        logger.info("Plan rejected with %d structural error(s)", len(errors))
        return _rejected(errors)

    warnings = check_consistency(outcome.plan, outcome)
    tier = TIER_WARNINGS if warnings else TIER_CLEAN
    logger.info("Plan accepted at tier %d with %d warning(s)", tier, len(warnings))
    return ValidationResult(valid=True, tier=tier, warnings=warnings, plan=outcome.plan)


def _rejected(errors: List[str]) -> ValidationResult:
    return ValidationResult(
        valid=False,
        tier=TIER_REJECTED,
        errors=list(errors),
        repair_prompt=build_repair_prompt(errors),
    )


def check_structure(plan: Any) -> List[str]:
    """Return every fatal structural problem; an empty list means the plan passes."""
    errors: List[str] = []
    weeks = plan.get("weeks") if isinstance(plan, dict) else None

    if not isinstance(weeks, list):
        errors.append("Missing weeks array")
        return errors
    if not weeks:
        errors.append("Weeks array is empty")
        return errors

    weeks_without_days = 0
    total_days = 0
    days_without_session_type = 0
    for week in weeks:
        days = week.get("days") if isinstance(week, dict) else None
        if not isinstance(days, dict) or not days:
            weeks_without_days += 1
            continue
        for day in days.values():
            total_days += 1
            if not isinstance(day, dict) or not day.get("session_type"):
                days_without_session_type += 1

    if weeks_without_days == len(weeks):
        errors.append("No weeks have days defined")

    if total_days and days_without_session_type > total_days / 2:
        errors.append(f"{days_without_session_type} of {total_days} days missing session_type")

    return errors


def check_consistency(plan: Dict[str, Any], facts: NormalizedPlan) -> List[str]:
    """Non-fatal checks; only run on plans that passed check_structure."""
    warnings: List[str] = []

    if not plan.get("macro_plan"):
        warnings.append("Missing macro_plan - plan will work but lacks phase structure")

    if facts.was_reordered:
        warnings.append("Weeks were out of order and have been renumbered")

    if facts.truncated_cues > 0:
        warnings.append(f"{facts.truncated_cues} cues were truncated to 15 words")

    total_sessions = 0
    rest_days = 0
    without_structure = 0
    for week in plan["weeks"]:
        days = week.get("days") if isinstance(week, dict) else None
        if not isinstance(days, dict):
            continue
        for day in days.values():
            total_sessions += 1
            day = day if isinstance(day, dict) else {}
            if day.get("session_type") == "rest":
                rest_days += 1
            elif not isinstance(day.get("structure"), list) or not day["structure"]:
                without_structure += 1

    if without_structure:
        warnings.append(f"{without_structure} sessions missing structure array")

    if total_sessions and rest_days == total_sessions:
        warnings.append("Plan contains only rest days - no training sessions found")
    elif total_sessions and rest_days > total_sessions * MOSTLY_REST_RATIO:
        warnings.append(f"Plan is mostly rest days ({rest_days}/{total_sessions})")

    return warnings
