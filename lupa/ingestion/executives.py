"""
Ingester for executive office holders (president and governors).

Reads the curated roster (lupa/config/executives.yaml, or EXECUTIVES_FILE).
Writing a president in office demotes whoever held the presidency before,
see PoliticianSync.enforce_head_of_state.
"""
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

import yaml

from lupa.config.constants import NATIONAL_JURISDICTION, office_salary, party_color, party_name
from lupa.config.settings import settings
from lupa.database.normalization import normalize_gender, normalize_state
from lupa.ingestion.base import PoliticianIngester
from lupa.ingestion.schemas.executive import ExecutiveEntry, ExecutiveRoster
from lupa.models.politician import Contact, Office, OfficeType, Party, PoliticianObservation, Sphere

DEFAULT_ROSTER = Path(__file__).resolve().parent.parent / "config" / "executives.yaml"


def load_roster(path: Optional[Path] = None) -> ExecutiveRoster:
    """
    Load and validate the executive roster.

    Raises:
        OSError: if the file cannot be read
        yaml.YAMLError: if it is not valid YAML
        pydantic.ValidationError: if entries are malformed
    """
    path = path or settings.EXECUTIVES_FILE or DEFAULT_ROSTER
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return ExecutiveRoster.model_validate(data)


def _as_datetime(value: Optional[date]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime(value.year, value.month, value.day)


def executive_observation(entry: ExecutiveEntry, office_type: OfficeType) -> PoliticianObservation:
    """Map a roster entry onto an observation of a held executive office."""
    if office_type == OfficeType.PRESIDENT:
        sphere, jurisdiction = Sphere.FEDERAL, NATIONAL_JURISDICTION
    else:
        sphere, jurisdiction = Sphere.STATE, normalize_state(entry.state) or ""

    party = None
    if entry.party:
        party = Party(
            abbreviation=entry.party,
            name=party_name(entry.party),
            color=party_color(entry.party),
        )

    gross, net = office_salary(office_type.value)

    return PoliticianObservation(
        office=Office(
            type=office_type,
            sphere=sphere,
            state=jurisdiction,
            start_date=_as_datetime(entry.start_date),
            in_office=True,
        ),
        tax_id=entry.tax_id,
        name=entry.name,
        civil_name=entry.civil_name,
        photo_url=entry.photo_url,
        birth_date=_as_datetime(entry.birth_date),
        gender=normalize_gender(entry.gender) if entry.gender else None,
        party=party,
        contact=Contact(email=entry.email, phone=entry.phone),
        gross_salary=gross,
        net_salary=net,
        education=entry.education,
        birth_city=entry.birth_city,
        birth_state=normalize_state(entry.birth_state),
        website=entry.website,
    )


class ExecutivesIngester(PoliticianIngester[PoliticianObservation]):
    """
    Ingest the president and/or the governors from the roster.

    Usage:
        ingester = ExecutivesIngester(db)
        stats = await ingester.run(president=True, governors=False)
    """

    workers = 1

    def __init__(self, *args, roster_path: Optional[Path] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.roster_path = roster_path

    async def fetch_data(self, president: bool = True, governors: bool = True, **kwargs) -> List[PoliticianObservation]:
        roster = load_roster(self.roster_path)
        observations = []
        if president and roster.president is not None:
            observations.append(executive_observation(roster.president, OfficeType.PRESIDENT))
        if governors:
            observations.extend(
                executive_observation(entry, OfficeType.GOVERNOR) for entry in roster.governors
            )
        if governors and not roster.governors:
            self.logger.info("No governors in the roster")
        return observations

    async def transform(self, raw_data: PoliticianObservation) -> PoliticianObservation:
        return raw_data

    def describe(self, raw_item: PoliticianObservation) -> str:
        return f"{raw_item.office.type} {raw_item.name}"
