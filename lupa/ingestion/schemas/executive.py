"""
Schema of the curated executive roster (president and governors).

There is no machine-readable federal source for executive office holders,
so they are maintained by hand in a YAML file:

    president:
      name: Lula
      civil_name: Luiz Inácio Lula da Silva
      birth_date: 1945-10-27
      ...
    governors:
      - name: ...
        state: SP
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class ExecutiveEntry(BaseModel):
    name: str
    civil_name: str
    tax_id: Optional[str] = None
    birth_date: Optional[date] = None
    gender: Optional[str] = None
    party: Optional[str] = None
    state: Optional[str] = None
    start_date: date
    photo_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    education: Optional[str] = None
    birth_city: Optional[str] = None
    birth_state: Optional[str] = None


class ExecutiveRoster(BaseModel):
    president: Optional[ExecutiveEntry] = None
    governors: List[ExecutiveEntry] = Field(default_factory=list)
