"""Recording the athlete's answers to the post-session check-in.

The chat flow is: status (done / modified / skipped), then either an RPE bucket
followed by optional free-text notes, or a skip reason. Each step returns the
name of the next step the chat surface should ask for.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.db.models.session_record import SessionRecord
from app.services.conversation_state.base import ConversationStateStore
from app.services.feedback_aggregator import RPE_BUCKETS, SKIP_REASONS

logger = logging.getLogger(__name__)

AWAITING_SKIP_REASON = "awaiting_skip_reason"
AWAITING_RPE = "awaiting_rpe"
AWAITING_NOTES = "awaiting_notes"
LOGGED = "logged"

STATUSES = ("completed", "modified", "skipped")


class SessionNotFoundError(LookupError):
    pass


class InvalidFeedbackError(ValueError):
    pass


@dataclass
class CallbackData:
    kind: str
    session_id: str
    value: str


def parse_callback_data(data: str) -> Optional[CallbackData]:
    """Split ``kind:session_id:value``; anything without exactly three parts is None."""
    parts = data.split(":")
    if len(parts) != 3:
        return None
    return CallbackData(kind=parts[0], session_id=parts[1], value=parts[2])


def _load(db: Session, session_id: UUID) -> SessionRecord:
    record = db.get(SessionRecord, session_id)
    if record is None:
        raise SessionNotFoundError(f"Session {session_id} not found")
    return record


def _now() -> datetime:
    return datetime.now(timezone.utc)


def record_status(db: Session, session_id: UUID, status: str) -> str:
    if status not in STATUSES:
        raise InvalidFeedbackError(f"Unknown session status: {status}")
    record = _load(db, session_id)
    if status == "skipped":
        # Status is written together with the reason.
        return AWAITING_SKIP_REASON

    record.status = status
    db.commit()
    logger.info("Session %s marked %s", session_id, status)
    return AWAITING_RPE


def record_rpe(
    db: Session,
    store: ConversationStateStore,
    chat_id: str,
    session_id: UUID,
    rpe: str,
) -> str:
    if rpe not in RPE_BUCKETS:
        raise InvalidFeedbackError(f"Unknown RPE bucket: {rpe}")
    record = _load(db, session_id)
    record.rpe = rpe
    db.commit()
    store.set(chat_id, session_id, awaiting_notes=True)
    return AWAITING_NOTES


def record_skip(
    db: Session,
    store: ConversationStateStore,
    chat_id: str,
    session_id: UUID,
    reason: str,
) -> str:
    if reason not in SKIP_REASONS:
        raise InvalidFeedbackError(f"Unknown skip reason: {reason}")
    record = _load(db, session_id)
    record.status = "skipped"
    record.skip_reason = reason
    record.completed_at = _now()
    db.commit()
    store.clear(chat_id)
    logger.info("Session %s skipped (%s)", session_id, reason)
    return LOGGED


def record_notes(
    db: Session,
    store: ConversationStateStore,
    chat_id: str,
    session_id: UUID,
    notes: str,
) -> str:
    record = _load(db, session_id)
    record.notes = notes
    record.completed_at = _now()
    db.commit()
    store.clear(chat_id)
    return LOGGED


def complete_without_notes(db: Session, store: ConversationStateStore, chat_id: str, session_id: UUID) -> str:
    record = _load(db, session_id)
    record.completed_at = _now()
    db.commit()
    store.clear(chat_id)
    return LOGGED


def handle_callback(db: Session, store: ConversationStateStore, chat_id: str, data: str) -> tuple[UUID, str]:
    """Dispatch a ``status:``/``rpe:``/``skip:`` callback payload."""
    parsed = parse_callback_data(data)
    if parsed is None:
        raise InvalidFeedbackError("Callback data must look like kind:session_id:value")
    try:
        session_id = UUID(parsed.session_id)
    except ValueError as exc:
        raise InvalidFeedbackError(f"Invalid session id: {parsed.session_id}") from exc

    if parsed.kind == "status":
        return session_id, record_status(db, session_id, parsed.value)
    if parsed.kind == "rpe":
        return session_id, record_rpe(db, store, chat_id, session_id, parsed.value)
    if parsed.kind == "skip":
        return session_id, record_skip(db, store, chat_id, session_id, parsed.value)
    raise InvalidFeedbackError(f"Unknown callback kind: {parsed.kind}")
