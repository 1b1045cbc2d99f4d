"""
Vote data models.

Defines how a politician voted on a roll call.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from bson import ObjectId
from pydantic import Field

from lupa.config.constants import COLLECTION_VOTES
from lupa.models.fact import FactRecord


class VoteChoice(str, Enum):
    """How a legislator voted."""
    YES = "YES"
    NO = "NO"
    ABSTENTION = "ABSTENTION"
    ABSENT = "ABSENT"
    OBSTRUCTION = "OBSTRUCTION"


class Vote(FactRecord):
    """
    How a specific politician voted on a specific roll call.

    Links a politician to a roll call (and, when known, the proposition voted).
    """
    collection = COLLECTION_VOTES
    natural_key_fields = ("politician_id", "vote_id", "date", "session")

    politician_id: ObjectId
    vote_id: str = Field(..., description="Roll call id from the source")
    proposition_id: Optional[ObjectId] = None

    choice: VoteChoice
    date: Optional[datetime] = None
    session: str = Field("", description="Chamber or committee code, e.g. PLEN")
    description: Optional[str] = None
