"""
Ingester for federal deputies from the Câmara dos Deputados open data API.

Lists every deputy of the configured legislature, fetches each one's detail
record, and reconciles it into the politicians collection. A deputy whose
status is anything other than "Exercício" is recorded as no longer holding
the mandate.
"""
from typing import List, Optional

from lupa.config.constants import (
    CAMARA_IN_OFFICE_STATUS,
    office_salary,
    party_color,
    party_name,
)
from lupa.config.settings import settings
from lupa.database.normalization import (
    normalize_gender,
    normalize_state,
    parse_date,
    social_handles,
    utcnow,
)
from lupa.ingestion.base import PoliticianIngester
from lupa.ingestion.pagination import collect_linked
from lupa.ingestion.schemas.camara import (
    DeputyDetail,
    DeputyDetailResponse,
    DeputyListResponse,
    DeputySummary,
)
from lupa.models.politician import (
    Contact,
    Office,
    OfficeType,
    Party,
    PoliticianObservation,
    SocialMedia,
    Sphere,
)


def deputy_observation(summary: DeputySummary, detail: DeputyDetail) -> PoliticianObservation:
    """
    Map a Câmara deputy onto our observation shape.

    Pure: no I/O, so it can be tested against captured payloads.
    """
    status = detail.ultimo_status
    in_office = status.situacao == CAMARA_IN_OFFICE_STATUS

    # Câmara reports the date of the latest status, not the mandate start
    start_date = parse_date(status.data)
    office = Office(
        type=OfficeType.FEDERAL_DEPUTY,
        sphere=Sphere.FEDERAL,
        state=normalize_state(status.sigla_uf or summary.sigla_uf) or "",
        start_date=start_date,
        end_date=None if in_office else utcnow(),
        in_office=in_office,
    )

    party_abbreviation = status.sigla_partido or summary.sigla_partido
    party = None
    if party_abbreviation:
        party = Party(
            abbreviation=party_abbreviation,
            name=party_name(party_abbreviation),
            color=party_color(party_abbreviation),
        )

    contact = Contact(email=status.email or summary.email)
    if in_office and status.gabinete is not None:
        contact.phone = status.gabinete.telefone or None
        contact.office = status.gabinete.address()

    gross, net = office_salary(OfficeType.FEDERAL_DEPUTY.value)

    return PoliticianObservation(
        office=office,
        tax_id=detail.cpf or None,
        name=status.nome_eleitoral or status.nome or summary.nome,
        civil_name=detail.nome_civil,
        photo_url=status.url_foto or summary.url_foto,
        birth_date=parse_date(detail.data_nascimento),
        gender=normalize_gender(detail.sexo) if detail.sexo else None,
        party=party,
        contact=contact,
        social_media=SocialMedia(**social_handles(detail.rede_social)),
        gross_salary=gross,
        net_salary=net,
        education=detail.escolaridade,
        birth_city=detail.municipio_nascimento,
        birth_state=normalize_state(detail.uf_nascimento),
        website=detail.url_website,
        camara_id=detail.id,
    )


class CamaraDeputiesIngester(PoliticianIngester[DeputySummary]):
    """
    Ingest federal deputies of one legislature.

    Usage:
        ingester = CamaraDeputiesIngester(db, client)
        stats = await ingester.run()
    """

    workers = settings.DEPUTY_WORKERS

    def __init__(self, *args, legislature: Optional[int] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.legislature = legislature or settings.CAMARA_LEGISLATURE
        self.base_url = settings.CAMARA_BASE_URL

    async def fetch_data(self, **kwargs) -> List[DeputySummary]:
        url = (
            f"{self.base_url}/deputados?idLegislatura={self.legislature}"
            f"&itens=100&ordem=ASC&ordenarPor=nome"
        )
        self.logger.info(f"Fetching deputies of legislature {self.legislature}...")
        return await collect_linked(self.client, url, DeputyListResponse)

    async def transform(self, raw_data: DeputySummary) -> PoliticianObservation:
        response = await self.client.get_json(
            f"{self.base_url}/deputados/{raw_data.id}",
            DeputyDetailResponse,
        )
        return deputy_observation(raw_data, response.dados)

    def describe(self, raw_item: DeputySummary) -> str:
        return f"deputy {raw_item.nome} ({raw_item.id})"
