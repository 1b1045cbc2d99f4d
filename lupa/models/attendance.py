"""
Attendance data models.

Records a politician's presence at a session or committee meeting.
"""
from datetime import datetime
from typing import Optional

from bson import ObjectId

from lupa.config.constants import COLLECTION_ATTENDANCE
from lupa.models.fact import FactRecord


class Attendance(FactRecord):
    """Presence of a politician at one event."""
    collection = COLLECTION_ATTENDANCE
    natural_key_fields = ("politician_id", "event_id")

    politician_id: ObjectId
    event_id: str

    date: Optional[datetime] = None
    session_type: str = ""  # e.g. "Sessão Deliberativa", "Reunião Deliberativa"
    body: Optional[str] = None
    present: bool = True
