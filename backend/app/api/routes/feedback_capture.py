"""Chat-facing endpoints for the post-session check-in."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.api.schemas.feedback import FeedbackCallbackRequest, FeedbackNotesRequest, FeedbackStepResponse
from app.db.deps import get_db
from app.observability.metrics import log_metric
from app.observability.tracing import trace
from app.services.conversation_state.base import ConversationStateStore
from app.services.conversation_state.factory import get_conversation_state_store
from app.services.session_feedback import (
    InvalidFeedbackError,
    SessionNotFoundError,
    complete_without_notes,
    handle_callback,
    record_notes,
)

router = APIRouter()


@router.post("/feedback/callback", response_model=FeedbackStepResponse, tags=["feedback"])
def feedback_callback(
    payload: FeedbackCallbackRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    store: ConversationStateStore = Depends(get_conversation_state_store),
) -> FeedbackStepResponse:
    """Apply one button press (``status:``, ``rpe:`` or ``skip:``) to its session."""
    request_id = getattr(http_request.state, "request_id", None)
    with trace("feedback.callback", metadata={"data": payload.data}, request_id=request_id):
        try:
            session_id, next_step = handle_callback(db, store, payload.chat_id, payload.data)
        except InvalidFeedbackError as exc:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
        except SessionNotFoundError as exc:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    log_metric("feedback.callback.step", 1, metadata={"next_step": next_step})
    return FeedbackStepResponse(session_id=session_id, next_step=next_step, request_id=request_id or "")


@router.post("/feedback/notes", response_model=FeedbackStepResponse, tags=["feedback"])
def feedback_notes(
    payload: FeedbackNotesRequest,
    http_request: Request,
    db: Session = Depends(get_db),
    store: ConversationStateStore = Depends(get_conversation_state_store),
) -> FeedbackStepResponse:
    """Free text from a chat; only stored when the chat is waiting for notes."""
    request_id = getattr(http_request.state, "request_id", None)
    state = store.get(payload.chat_id)
    if state is None or not state.awaiting_notes:
        return FeedbackStepResponse(next_step="ignored", request_id=request_id or "")

    with trace("feedback.notes", metadata={"skip": payload.skip}, request_id=request_id):
        try:
            text = (payload.text or "").strip()
            if payload.skip or not text:
                next_step = complete_without_notes(db, store, payload.chat_id, state.session_id)
            else:
                next_step = record_notes(db, store, payload.chat_id, state.session_id, payload.text)
        except SessionNotFoundError as exc:
            store.clear(payload.chat_id)
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    return FeedbackStepResponse(session_id=state.session_id, next_step=next_step, request_id=request_id or "")
