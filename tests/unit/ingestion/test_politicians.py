"""Unit tests for politician reconciliation."""

from datetime import datetime

import pytest

from lupa.ingestion.politicians import IdentityError, PoliticianSync
from lupa.models.politician import Office, PoliticianObservation


def strip_updated(doc):
    return {k: v for k, v in doc.items() if k != "updated_at"}


class TestSync:
    """Tests for PoliticianSync.sync()."""

    @pytest.mark.asyncio
    async def test_creates_then_updates(self, db, make_observation):
        sync = PoliticianSync(db)
        obs = make_observation(camara_id=204554, party={"abbreviation": "PT", "name": "Partido dos Trabalhadores"})

        assert await sync.sync(obs) is True
        created = await db.politicians.find_one({})

        assert created["civil_name_normalized"] == "maria da silva"
        assert created["current_office"]["type"] == "FEDERAL_DEPUTY"
        assert created["current_office"]["in_office"] is True
        assert created["office_history"] == []
        assert created["camara_id"] == 204554

        assert await sync.sync(obs) is False
        rerun = await db.politicians.find_one({})

        assert await db.politicians.count_documents({}) == 1
        assert strip_updated(rerun) == strip_updated(created)

    @pytest.mark.asyncio
    async def test_two_sources_one_person(self, db, make_observation):
        sync = PoliticianSync(db)
        await sync.sync(make_observation(camara_id=204554, start=datetime(2019, 2, 1)))
        await sync.sync(make_observation(
            office_type="SENATOR",
            start=datetime(2023, 2, 1),
            civil_name="MARIA DA SILVA",
            birth_date=datetime(1970, 5, 18),
            senado_code="5012",
        ))

        docs = await db.politicians.find({}).to_list(length=None)
        assert len(docs) == 1
        doc = docs[0]
        assert doc["camara_id"] == 204554
        assert doc["senado_code"] == "5012"
        assert doc["current_office"]["type"] == "SENATOR"
        assert [o["type"] for o in doc["office_history"]] == ["FEDERAL_DEPUTY"]
        assert doc["office_history"][0]["in_office"] is False

    @pytest.mark.asyncio
    async def test_unreported_attributes_are_kept(self, db, make_observation):
        sync = PoliticianSync(db)
        await sync.sync(make_observation(gender="F", photo_url="https://example.org/maria.jpg"))
        await sync.sync(make_observation())

        doc = await db.politicians.find_one({})
        assert doc["gender"] == "F"
        assert doc["photo_url"] == "https://example.org/maria.jpg"

    @pytest.mark.asyncio
    async def test_unusable_identity(self, db, make_observation):
        obs = make_observation(civil_name=None)
        with pytest.raises(IdentityError):
            await PoliticianSync(db).sync(obs)
        assert await db.politicians.count_documents({}) == 0


class TestHeadOfState:
    """Tests for the single head-of-state rule."""

    @staticmethod
    def president(civil_name, birth_date, start, **fields):
        return PoliticianObservation(
            office=Office(type="PRESIDENT", sphere="FEDERAL", state="BR", start_date=start),
            civil_name=civil_name,
            name=civil_name.split()[0],
            birth_date=birth_date,
            **fields,
        )

    @pytest.mark.asyncio
    async def test_new_president_demotes_previous(self, db, make_observation):
        sync = PoliticianSync(db)
        bolsonaro_birth = datetime(1955, 3, 21)

        await sync.sync(make_observation(
            civil_name="Jair Messias Bolsonaro", birth_date=bolsonaro_birth, state="RJ", start=datetime(2015, 2, 1)
        ))
        await sync.sync(self.president("Jair Messias Bolsonaro", bolsonaro_birth, datetime(2019, 1, 1)))
        await sync.sync(self.president("Luiz Inácio Lula da Silva", datetime(1945, 10, 27), datetime(2023, 1, 1)))

        holders = await db.politicians.find({
            "current_office.type": "PRESIDENT",
            "current_office.in_office": True,
        }).to_list(length=None)
        assert [h["civil_name"] for h in holders] == ["Luiz Inácio Lula da Silva"]

        former = await db.politicians.find_one({"civil_name_normalized": "jair messias bolsonaro"})
        assert former["current_office"]["type"] == "FEDERAL_DEPUTY"
        assert [o["type"] for o in former["office_history"]] == ["PRESIDENT"]
        assert former["office_history"][0]["in_office"] is False
        assert former["office_history"][0]["end_date"] is not None

    @pytest.mark.asyncio
    async def test_same_president_is_not_demoted(self, db):
        sync = PoliticianSync(db)
        obs = self.president("Luiz Inácio Lula da Silva", datetime(1945, 10, 27), datetime(2023, 1, 1))

        await sync.sync(obs)
        await sync.sync(obs)

        doc = await db.politicians.find_one({})
        assert await db.politicians.count_documents({}) == 1
        assert doc["current_office"]["in_office"] is True
        assert doc["office_history"] == []

    @pytest.mark.asyncio
    async def test_fuller_name_reuses_sitting_president(self, db):
        sync = PoliticianSync(db)
        birth = datetime(1945, 10, 27)

        assert await sync.sync(self.president("Lula da Silva", birth, datetime(2023, 1, 1))) is True
        assert await sync.sync(self.president("Luiz Inácio Lula da Silva", birth, datetime(2023, 1, 1))) is False

        holders = await db.politicians.find({
            "current_office.type": "PRESIDENT",
            "current_office.in_office": True,
        }).to_list(length=None)
        assert len(holders) == 1
        assert holders[0]["civil_name"] == "Luiz Inácio Lula da Silva"
        assert holders[0]["office_history"] == []
        assert await db.politicians.count_documents({}) == 1

    @pytest.mark.asyncio
    async def test_enforce_counts_demotions(self, db):
        sync = PoliticianSync(db)
        await sync.sync(self.president("Dilma Vana Rousseff", datetime(1947, 12, 14), datetime(2011, 1, 1)))

        incoming = self.president("Luiz Inácio Lula da Silva", datetime(1945, 10, 27), datetime(2023, 1, 1))
        assert await sync.enforce_head_of_state(incoming) == 1
        assert await sync.enforce_head_of_state(incoming) == 0
