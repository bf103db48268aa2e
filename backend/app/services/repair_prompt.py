"""Correction request sent back to the plan generator after a rejected submission."""
from __future__ import annotations

from typing import Iterable

REPAIR_INSTRUCTIONS = """Please regenerate following the schema exactly. Remember:
- Return ONLY valid JSON
- No markdown, no explanation
- Every session needs: session_type, title, duration_minutes, structure, cue
- The weeks array must contain week objects with days
- Each day must have a session_type"""


def build_repair_prompt(errors: Iterable[str]) -> str:
    """List ``errors`` verbatim followed by the fixed schema reminder.

    Only the error descriptions are echoed; nothing from the rejected submission
    itself is repeated back to the generator.
    """
    error_list = "\n".join(f"- {error}" for error in errors)
    return f"The plan you generated had these issues:\n{error_list}\n\n{REPAIR_INSTRUCTIONS}"
