"""Versioned training plan snapshots."""
from __future__ import annotations

from datetime import date
from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, Integer, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base
from app.db.types import JSONBCompat


class PlanVersion(Base):
    """One immutable plan version; resubmissions insert a new row with ``version + 1``."""

    __tablename__ = "plans"
    __table_args__ = (
        UniqueConstraint("athlete_id", "version", name="uq_plans_athlete_version"),
        Index("ix_plans_athlete_id", "athlete_id"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    athlete_id = Column(UUID(as_uuid=True), ForeignKey("athletes.id", ondelete="CASCADE"), nullable=False)
    version = Column(Integer, nullable=False, default=1)
    macro_plan = Column(JSONBCompat, nullable=True)
    weeks = Column(JSONBCompat, nullable=False, default=list)
    # First day of week 1. Reprompt versions inherit it so week numbers keep counting.
    starts_on = Column(Date, nullable=False, default=date.today)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
