"""Helpers for working with athletes."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.models.athlete import Athlete


def get_or_create_athlete(db: Session, athlete_id: UUID) -> Athlete:
    """Fetch the athlete row, inserting a bare one on first contact."""
    athlete = db.get(Athlete, athlete_id)
    if athlete:
        return athlete

    athlete = Athlete(id=athlete_id)
    db.add(athlete)
    try:
        db.flush()
        return athlete
    except IntegrityError:
        db.rollback()
        existing = db.get(Athlete, athlete_id)
        if existing:
            return existing
        raise
