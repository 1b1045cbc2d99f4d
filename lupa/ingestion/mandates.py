"""
Mandate history: how a politician's current and past offices change when a
source reports an office.

Everything here is pure. Callers load the stored offices into a
MandateState, apply observations, and write the state back.

Two offices are "the same mandate" when they share (type, state, start
date). Across the current office and the history no key appears twice.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from lupa.database.normalization import normalize_name
from lupa.models.politician import Office, OfficeType, PersonIdentity

logger = logging.getLogger(__name__)


class Transition(str, Enum):
    KEEP = "KEEP"        # same mandate, still held
    REPLACE = "REPLACE"  # a different mandate is now held
    RETIRE = "RETIRE"    # same mandate, no longer held
    ARCHIVE = "ARCHIVE"  # a different mandate, not held


@dataclass
class MandateState:
    current: Optional[Office] = None
    history: List[Office] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc: Optional[dict]) -> "MandateState":
        if not doc:
            return cls()
        current = doc.get("current_office")
        return cls(
            current=Office.model_validate(current) if current else None,
            history=[Office.model_validate(o) for o in doc.get("office_history") or []],
        )

    def keys(self) -> list[tuple]:
        keys = [office_key(o) for o in self.history]
        if self.current is not None:
            keys.append(office_key(self.current))
        return keys


def office_key(office: Office) -> tuple:
    """Identity of a mandate: (type, state, start date)."""
    start = office.start_date.date() if office.start_date else None
    return (office.type, office.state, start)


def close_office(office: Office, now: datetime) -> Office:
    """Copy of `office` marked as no longer held, ended now unless it already has an end."""
    return office.model_copy(update={
        "in_office": False,
        "end_date": office.end_date or now,
    })


def decide_transition(current: Optional[Office], observed: Office) -> Transition:
    same = current is not None and office_key(current) == office_key(observed)
    if observed.in_office:
        return Transition.KEEP if same else Transition.REPLACE
    return Transition.RETIRE if same else Transition.ARCHIVE


def _append_unique(history: List[Office], office: Office) -> None:
    key = office_key(office)
    if any(office_key(o) == key for o in history):
        return
    history.append(office)


def apply_observation(state: MandateState, observed: Office, now: datetime) -> MandateState:
    """
    Apply one reported office to a politician's offices.

    Args:
        state: Stored offices (not modified)
        observed: Office as the source reports it
        now: End date for offices closed by this observation

    Returns:
        The new MandateState
    """
    current = state.current
    history = list(state.history)
    transition = decide_transition(current, observed)

    if current is not None and transition is not Transition.KEEP:
        if transition is not Transition.RETIRE:
            _append_unique(history, close_office(current, now))
        current = None

    if observed.in_office:
        current = observed
        key = office_key(current)
        history = [o for o in history if office_key(o) != key]
    else:
        _append_unique(history, close_office(observed, now))

    return MandateState(current=current, history=history)


def demote_head_of_state(state: MandateState, now: datetime) -> MandateState:
    """
    Take the presidency away from a politician.

    The presidential office is closed into history. The most recent
    non-presidential office in the history, if any, becomes current again.
    """
    history = list(state.history)
    if state.current is not None:
        _append_unique(history, close_office(state.current, now))

    current = None
    for i in range(len(history) - 1, -1, -1):
        if history[i].type != OfficeType.PRESIDENT.value:
            current = history.pop(i)
            break

    return MandateState(current=current, history=history)


def is_same_person(stored: dict, identity: PersonIdentity) -> bool:
    """
    Whether a stored head of state is the person being written.

    Tax ids decide when both sides have one. Otherwise civil names are
    compared by case-insensitive containment, which tolerates a missing
    middle name on one side.
    """
    stored_tax_id = stored.get("tax_id")
    if stored_tax_id and identity.tax_id:
        return stored_tax_id == identity.tax_id

    stored_name = stored.get("civil_name_normalized") or normalize_name(stored.get("civil_name"))
    incoming = identity.normalized_name
    if not stored_name or not incoming:
        return False
    return stored_name in incoming or incoming in stored_name
