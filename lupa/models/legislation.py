"""
Legislation data models.

Defines structures for propositions (bills, amendments, requests).
"""
from datetime import datetime
from enum import Enum
from typing import Optional, List

from bson import ObjectId
from pydantic import BaseModel, Field

from lupa.config.constants import COLLECTION_PROPOSITIONS
from lupa.models.fact import FactRecord


class PropositionStatus(str, Enum):
    """Current status of a proposition."""
    IN_PROGRESS = "IN_PROGRESS"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ARCHIVED = "ARCHIVED"
    WITHDRAWN = "WITHDRAWN"


class ProgressItem(BaseModel):
    """One step of a proposition's tramitation."""
    date: Optional[datetime] = None
    description: str = ""
    body: str = ""  # Committee / organ acronym


class Proposition(FactRecord):
    """
    A legislative proposition.

    Identified by type + number + year (e.g. PL 1234/2024).
    """
    collection = COLLECTION_PROPOSITIONS
    natural_key_fields = ("type", "number", "year")

    # Unique identifier
    type: str = Field(..., description="Type acronym, e.g. PL, PEC, REQ")
    number: int
    year: int

    # Content
    summary: str = ""
    keywords: Optional[str] = None
    full_text_url: Optional[str] = None
    presented_at: Optional[datetime] = None

    # Authorship (canonical politician ids)
    author_id: Optional[ObjectId] = None
    coauthor_ids: List[ObjectId] = Field(default_factory=list)

    # Status
    status: PropositionStatus = PropositionStatus.IN_PROGRESS
    themes: List[str] = Field(default_factory=list)
    progress: List[ProgressItem] = Field(default_factory=list)

    # Source
    camara_id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.type} {self.number}/{self.year}"
