"""Data models module."""

from lupa.models.politician import (
    OfficeType,
    Sphere,
    Gender,
    Office,
    Party,
    Contact,
    SocialMedia,
    PersonIdentity,
    Politician,
    PoliticianObservation,
)

from lupa.models.fact import FactRecord
from lupa.models.finance import Expense
from lupa.models.vote import Vote, VoteChoice
from lupa.models.legislation import Proposition, PropositionStatus, ProgressItem
from lupa.models.attendance import Attendance

__all__ = [
    # Politician
    "OfficeType",
    "Sphere",
    "Gender",
    "Office",
    "Party",
    "Contact",
    "SocialMedia",
    "PersonIdentity",
    "Politician",
    "PoliticianObservation",
    # Facts
    "FactRecord",
    "Expense",
    "Vote",
    "VoteChoice",
    "Proposition",
    "PropositionStatus",
    "ProgressItem",
    "Attendance",
]
