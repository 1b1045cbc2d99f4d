"""Config module - settings and constants."""

from lupa.config.settings import settings, Settings
from lupa.config.constants import (
    COLLECTION_POLITICIANS,
    COLLECTION_EXPENSES,
    COLLECTION_VOTES,
    COLLECTION_PROPOSITIONS,
    COLLECTION_ATTENDANCE,
)

__all__ = [
    "settings",
    "Settings",
    "COLLECTION_POLITICIANS",
    "COLLECTION_EXPENSES",
    "COLLECTION_VOTES",
    "COLLECTION_PROPOSITIONS",
    "COLLECTION_ATTENDANCE",
]
