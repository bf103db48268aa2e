"""ORM models exposed for metadata discovery."""
from app.db.models.athlete import Athlete
from app.db.models.plan import PlanVersion
from app.db.models.session_record import SessionRecord

__all__ = [
    "Athlete",
    "PlanVersion",
    "SessionRecord",
]
