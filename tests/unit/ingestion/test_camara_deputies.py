"""Unit tests for the Câmara deputies mapping and ingester."""

from datetime import datetime

import pytest

from lupa.ingestion.camara_deputies import CamaraDeputiesIngester, deputy_observation
from lupa.ingestion.schemas.camara import DeputyDetailResponse, DeputyListResponse

CAMARA = "https://dadosabertos.camara.leg.br/api/v2"


def summary_payload(deputy_id=204554, nome="Fulana Deputada"):
    return {
        "id": deputy_id,
        "uri": f"{CAMARA}/deputados/{deputy_id}",
        "nome": nome,
        "siglaPartido": "PSOL",
        "siglaUf": "SP",
        "idLegislatura": 57,
        "urlFoto": f"https://www.camara.leg.br/internet/deputado/bandep/{deputy_id}.jpg",
        "email": f"dep.{deputy_id}@camara.leg.br",
    }


def detail_payload(deputy_id=204554, situacao="Exercício", **overrides):
    dados = {
        "id": deputy_id,
        "nomeCivil": "Fulana de Tal Souza",
        "cpf": "",
        "sexo": "F",
        "urlWebsite": None,
        "redeSocial": ["https://twitter.com/fulana", "https://www.instagram.com/fulana/"],
        "dataNascimento": "1980-04-02",
        "ufNascimento": "SP",
        "municipioNascimento": "Campinas",
        "escolaridade": "Superior",
        "ultimoStatus": {
            "id": deputy_id,
            "nome": "Fulana",
            "siglaPartido": "PSOL",
            "siglaUf": "SP",
            "idLegislatura": 57,
            "urlFoto": f"https://www.camara.leg.br/internet/deputado/bandep/{deputy_id}.jpg",
            "email": f"dep.{deputy_id}@camara.leg.br",
            "data": "2023-02-01",
            "nomeEleitoral": "Fulana Deputada",
            "situacao": situacao,
            "condicaoEleitoral": "Titular",
            "gabinete": {
                "nome": "601",
                "predio": "4",
                "sala": "601",
                "andar": "6",
                "telefone": "3215-5601",
                "email": f"dep.{deputy_id}@camara.leg.br",
            },
        },
    }
    dados.update(overrides)
    return {"dados": dados, "links": []}


def mapped(situacao="Exercício", **overrides):
    summary = DeputyListResponse.model_validate({"dados": [summary_payload()]}).dados[0]
    detail = DeputyDetailResponse.model_validate(detail_payload(situacao=situacao, **overrides)).dados
    return deputy_observation(summary, detail)


class TestDeputyObservation:
    """Tests for deputy_observation()."""

    def test_deputy_in_office(self):
        obs = mapped()

        assert obs.office.type == "FEDERAL_DEPUTY"
        assert obs.office.sphere == "FEDERAL"
        assert obs.office.state == "SP"
        assert obs.office.start_date == datetime(2023, 2, 1)
        assert obs.office.in_office is True
        assert obs.office.end_date is None

        assert obs.name == "Fulana Deputada"
        assert obs.civil_name == "Fulana de Tal Souza"
        assert obs.birth_date == datetime(1980, 4, 2)
        assert obs.gender == "F"
        assert obs.camara_id == 204554
        assert obs.tax_id is None

        assert obs.party.abbreviation == "PSOL"
        assert obs.party.name == "Partido Socialismo e Liberdade"
        assert obs.party.color == "#FFD700"

        assert obs.contact.email == "dep.204554@camara.leg.br"
        assert obs.contact.phone == "3215-5601"
        assert obs.contact.office == "4, 6, Sala 601"
        assert obs.social_media.twitter == "@fulana"
        assert obs.social_media.instagram == "@fulana"
        assert obs.gross_salary == 33763.00

    def test_deputy_out_of_office(self):
        obs = mapped(situacao="Fim de Mandato")

        assert obs.office.in_office is False
        assert obs.office.end_date is not None
        assert obs.contact.phone is None
        assert obs.contact.office is None
        assert obs.contact.email == "dep.204554@camara.leg.br"

    def test_missing_gender_is_not_reported(self):
        assert mapped(sexo=None).gender is None

    def test_tax_id_is_used_when_published(self):
        obs = mapped(cpf="12345678901")
        assert obs.tax_id == "12345678901"
        assert obs.identity.creation_filter() == {"tax_id": "12345678901"}


class TestCamaraDeputiesIngester:
    """End-to-end tests against a mocked Câmara API."""

    @pytest.mark.asyncio
    async def test_run_creates_and_reruns_idempotently(self, db, fake_api, make_client):
        fake_api.add(f"{CAMARA}/deputados", {
            "dados": [summary_payload(204554), summary_payload(204555, "Beltrano")],
            "links": [],
        })
        fake_api.add(f"{CAMARA}/deputados/204554", detail_payload(204554))
        fake_api.add(f"{CAMARA}/deputados/204555", detail_payload(
            204555, situacao="Fim de Mandato", nomeCivil="Beltrano da Costa", dataNascimento="1975-01-09"
        ))

        async with make_client() as client:
            stats = await CamaraDeputiesIngester(db, client).run()
            rerun = await CamaraDeputiesIngester(db, client).run()

        assert stats["fetched"] == 2
        assert stats["inserted"] == 2
        assert stats["errors"] == 0
        assert rerun["inserted"] == 0
        assert rerun["updated"] == 2

        assert await db.politicians.count_documents({}) == 2
        retired = await db.politicians.find_one({"camara_id": 204555})
        assert retired["current_office"] is None
        assert retired["office_history"][0]["in_office"] is False
        assert len(retired["office_history"]) == 1

        listing = fake_api.urls()[0]
        assert "idLegislatura=57" in listing
        assert "ordenarPor=nome" in listing

    @pytest.mark.asyncio
    async def test_failed_detail_is_counted_and_skipped(self, db, fake_api, make_client):
        fake_api.add(f"{CAMARA}/deputados", {
            "dados": [summary_payload(204554), summary_payload(204555, "Beltrano")],
            "links": [],
        })
        fake_api.add(f"{CAMARA}/deputados/204554", detail_payload(204554))
        fake_api.add(f"{CAMARA}/deputados/204555", 500)

        async with make_client() as client:
            stats = await CamaraDeputiesIngester(db, client).run()

        assert stats["inserted"] == 1
        assert stats["errors"] == 1
        assert await db.politicians.count_documents({}) == 1
