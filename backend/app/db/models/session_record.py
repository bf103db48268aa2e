"""Delivered training sessions and the athlete's feedback on them."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base
from app.db.types import JSONBCompat


class SessionRecord(Base):
    __tablename__ = "sessions"
    __table_args__ = (
        Index("ix_sessions_plan_id", "plan_id"),
        Index("ix_sessions_date", "date"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    plan_id = Column(UUID(as_uuid=True), ForeignKey("plans.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=True)
    session_type = Column(String(length=32), nullable=True)
    prescribed = Column(JSONBCompat, nullable=True)
    # pending | completed | modified | skipped
    status = Column(String(length=16), nullable=False, default="pending", server_default="pending")
    rpe = Column(String(length=8), nullable=True)
    skip_reason = Column(String(length=32), nullable=True)
    cue_feedback = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
