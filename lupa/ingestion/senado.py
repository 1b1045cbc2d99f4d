"""
Ingester for senators from the Senado Federal open data API.

The listing only returns senators in office, so every observation is a
held SENATOR mandate. The per-senator detail (birth date, phones, address)
is best effort: when it fails the listing data is used alone.
"""
from typing import List, Optional

from lupa.config.constants import office_salary, party_color, party_name
from lupa.config.settings import settings
from lupa.database.normalization import normalize_gender, normalize_state, parse_date
from lupa.ingestion.base import PoliticianIngester
from lupa.ingestion.client import FetchError
from lupa.ingestion.schemas.senado import (
    SenatorDetail,
    SenatorDetailResponse,
    SenatorListResponse,
    SenatorSummary,
)
from lupa.models.politician import Contact, Office, OfficeType, Party, PoliticianObservation, Sphere


def senator_observation(summary: SenatorSummary, detail: Optional[SenatorDetail] = None) -> PoliticianObservation:
    """Map a Senado senator (and its detail, when available) onto our observation shape."""
    ident = summary.identificacao_parlamentar

    start_date = None
    if summary.mandato and summary.mandato.primeira_legislatura_do_mandato:
        start_date = parse_date(summary.mandato.primeira_legislatura_do_mandato.data_inicio)

    state = ident.uf_parlamentar or (summary.mandato.uf_parlamentar if summary.mandato else None)
    office = Office(
        type=OfficeType.SENATOR,
        sphere=Sphere.FEDERAL,
        state=normalize_state(state) or "",
        start_date=start_date,
        in_office=True,
    )

    party = None
    if ident.sigla_partido_parlamentar:
        party = Party(
            abbreviation=ident.sigla_partido_parlamentar,
            name=party_name(ident.sigla_partido_parlamentar),
            color=party_color(ident.sigla_partido_parlamentar),
        )

    contact = Contact(email=ident.email_parlamentar)
    birth_date = None
    birth_city = None
    birth_state = None
    if detail is not None:
        basic = detail.dados_basicos_parlamentar
        birth_date = parse_date(basic.data_nascimento)
        birth_city = basic.naturalidade
        birth_state = normalize_state(basic.uf_naturalidade)
        contact.office = basic.endereco_parlamentar or None
        contact.phone = detail.first_phone

    gross, net = office_salary(OfficeType.SENATOR.value)

    return PoliticianObservation(
        office=office,
        name=ident.nome_parlamentar,
        civil_name=ident.nome_completo_parlamentar,
        photo_url=ident.url_foto_parlamentar,
        birth_date=birth_date,
        gender=normalize_gender(ident.sexo_parlamentar) if ident.sexo_parlamentar else None,
        party=party,
        contact=contact,
        gross_salary=gross,
        net_salary=net,
        birth_city=birth_city,
        birth_state=birth_state,
        website=ident.url_pagina_parlamentar,
        senado_code=ident.codigo_parlamentar,
    )


class SenadoIngester(PoliticianIngester[SenatorSummary]):
    """
    Ingest senators in office.

    Usage:
        ingester = SenadoIngester(db, client)
        stats = await ingester.run()
    """

    workers = settings.SENATOR_WORKERS

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.base_url = settings.SENADO_BASE_URL

    async def fetch_data(self, **kwargs) -> List[SenatorSummary]:
        self.logger.info("Fetching senators in office...")
        response = await self.client.get_json(
            f"{self.base_url}/senador/lista/atual.json",
            SenatorListResponse,
        )
        return response.senators

    async def transform(self, raw_data: SenatorSummary) -> PoliticianObservation:
        code = raw_data.identificacao_parlamentar.codigo_parlamentar
        detail = None
        try:
            response = await self.client.get_json(
                f"{self.base_url}/senador/{code}.json",
                SenatorDetailResponse,
            )
            detail = response.senator
        except FetchError as e:
            self.logger.warning(f"Using listing data only for senator {code}: {e}")

        return senator_observation(raw_data, detail)

    def describe(self, raw_item: SenatorSummary) -> str:
        ident = raw_item.identificacao_parlamentar
        return f"senator {ident.nome_parlamentar} ({ident.codigo_parlamentar})"
