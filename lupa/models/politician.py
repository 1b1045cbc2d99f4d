"""
Politician data models.

Defines the canonical person record, the embedded office record, and the
observation shape every source adapter produces.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, model_validator

from lupa.database.normalization import normalize_name


class OfficeType(str, Enum):
    """Elected or appointed office."""
    FEDERAL_DEPUTY = "FEDERAL_DEPUTY"
    STATE_DEPUTY = "STATE_DEPUTY"
    DISTRICT_DEPUTY = "DISTRICT_DEPUTY"
    SENATOR = "SENATOR"
    COUNCILLOR = "COUNCILLOR"
    MAYOR = "MAYOR"
    GOVERNOR = "GOVERNOR"
    PRESIDENT = "PRESIDENT"  # Head of state, at most one in office


class Sphere(str, Enum):
    """Government sphere an office belongs to."""
    FEDERAL = "FEDERAL"
    STATE = "STATE"
    MUNICIPAL = "MUNICIPAL"


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"
    OTHER = "OTHER"


class Office(BaseModel):
    """
    An office held (or previously held) by a politician.

    Embedded in Politician, never stored on its own.
    """
    model_config = ConfigDict(use_enum_values=True)

    type: OfficeType
    sphere: Sphere
    state: str = ""
    municipality: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    in_office: bool = True

    @model_validator(mode="after")
    def _held_office_has_no_end(self) -> "Office":
        if self.in_office and self.end_date is not None:
            raise ValueError("an office in exercise cannot have an end date")
        return self


class Party(BaseModel):
    abbreviation: str = ""
    name: str = ""
    color: str = ""


class Contact(BaseModel):
    email: Optional[str] = None
    phone: Optional[str] = None
    office: Optional[str] = None  # Cabinet address


class SocialMedia(BaseModel):
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None


class PersonIdentity(BaseModel):
    """
    Identity attributes a source declares for a person.

    A tax id (CPF) is authoritative; otherwise civil name plus birth date.
    """
    tax_id: Optional[str] = None
    civil_name: Optional[str] = None
    birth_date: Optional[datetime] = None

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.civil_name)

    @property
    def is_usable(self) -> bool:
        return bool(self.tax_id) or bool(self.normalized_name and self.birth_date)

    def creation_filter(self) -> dict:
        """Filter used to upsert a person that the resolver did not find."""
        if self.tax_id:
            return {"tax_id": self.tax_id}
        return {
            "civil_name_normalized": self.normalized_name,
            "birth_date": self.birth_date,
        }

    def __str__(self) -> str:
        if self.tax_id:
            return f"CPF {self.tax_id}"
        born = self.birth_date.date().isoformat() if self.birth_date else "?"
        return f"{self.civil_name} (born {born})"


# Attributes an observation may overwrite on the canonical record
OBSERVED_FIELDS = (
    "tax_id",
    "name",
    "civil_name",
    "photo_url",
    "birth_date",
    "gender",
    "party",
    "gross_salary",
    "net_salary",
    "education",
    "birth_city",
    "birth_state",
    "website",
    "camara_id",
    "senado_code",
)


class PoliticianObservation(BaseModel):
    """
    What one source says about one person in one sync run.

    Produced by the source adapters' pure mapping functions. Attributes left
    as None are "not reported" and never overwrite stored values.
    """
    model_config = ConfigDict(use_enum_values=True)

    office: Office

    tax_id: Optional[str] = None
    name: Optional[str] = None
    civil_name: Optional[str] = None
    photo_url: Optional[str] = None
    birth_date: Optional[datetime] = None
    gender: Optional[Gender] = None
    party: Optional[Party] = None
    contact: Contact = Field(default_factory=Contact)
    social_media: SocialMedia = Field(default_factory=SocialMedia)
    gross_salary: Optional[float] = None
    net_salary: Optional[float] = None
    education: Optional[str] = None
    birth_city: Optional[str] = None
    birth_state: Optional[str] = None
    website: Optional[str] = None
    camara_id: Optional[int] = None
    senado_code: Optional[str] = None

    @property
    def identity(self) -> PersonIdentity:
        return PersonIdentity(
            tax_id=self.tax_id or None,
            civil_name=self.civil_name,
            birth_date=self.birth_date,
        )


class Politician(BaseModel):
    """
    The canonical person: one real individual across all sources.

    Created on first sighting, mutated on every later sync that resolves to
    the same identity, never deleted.
    """
    model_config = ConfigDict(
        use_enum_values=True,
        validate_default=True,
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )

    id: Optional[ObjectId] = Field(None, alias="_id")

    # Identity
    tax_id: Optional[str] = None
    name: str = ""
    civil_name: str = ""
    civil_name_normalized: str = ""
    birth_date: Optional[datetime] = None

    # Biography
    photo_url: Optional[str] = None
    gender: Gender = Gender.OTHER
    party: Party = Field(default_factory=Party)
    education: Optional[str] = None
    birth_city: Optional[str] = None
    birth_state: Optional[str] = None
    website: Optional[str] = None

    # Offices
    current_office: Optional[Office] = None
    office_history: List[Office] = Field(default_factory=list)

    # Contact
    contact: Contact = Field(default_factory=Contact)
    social_media: SocialMedia = Field(default_factory=SocialMedia)
    gross_salary: Optional[float] = None
    net_salary: Optional[float] = None

    # External ids
    camara_id: Optional[int] = None
    senado_code: Optional[str] = None

    # Metadata
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def merge(self, observation: PoliticianObservation) -> "Politician":
        """
        Overwrite attributes the observation reports (last writer wins).

        Offices are not touched here, see lupa.ingestion.mandates.
        """
        updates = {}
        for field in OBSERVED_FIELDS:
            value = getattr(observation, field)
            if value is not None and value != "":
                updates[field] = value

        contact = {k: v for k, v in observation.contact.model_dump().items() if v}
        if contact:
            updates["contact"] = self.contact.model_copy(update=contact)
        social = {k: v for k, v in observation.social_media.model_dump().items() if v}
        if social:
            updates["social_media"] = self.social_media.model_copy(update=social)

        merged = self.model_copy(update=updates)
        merged.civil_name_normalized = normalize_name(merged.civil_name)
        return merged

    def to_document(self) -> dict:
        """Fields written with $set; identity and timestamps are handled by the writer."""
        return self.model_dump(exclude={"id", "created_at", "updated_at"})

    def __str__(self) -> str:
        office = self.current_office.type if self.current_office else "no office"
        party = self.party.abbreviation or "?"
        return f"{self.name or self.civil_name} ({party}) - {office}"
