"""
Ingester for roll-call votes from the Câmara API.

Year-scoped. Roll calls are listed with the adaptive pager (the listing is
large and does not always expose a "last" link); each roll call's
individual votes are then fetched and stored as one Vote per known deputy.
"""
from collections import Counter
from typing import Dict, List, Optional

from bson import ObjectId

from lupa.config.constants import COLLECTION_PROPOSITIONS, vote_choice
from lupa.config.settings import settings
from lupa.database.normalization import parse_date, trailing_id
from lupa.ingestion.base import FactIngester
from lupa.ingestion.pagination import collect_adaptive
from lupa.ingestion.schemas.camara import (
    DeputyVote,
    DeputyVoteListResponse,
    RollCall,
    RollCallListResponse,
)
from lupa.models.vote import Vote


def vote_record(
    roll_call: RollCall,
    deputy_vote: DeputyVote,
    politician_id: ObjectId,
    proposition_id: Optional[ObjectId] = None,
) -> Vote:
    """Map one deputy's vote in a roll call onto a Vote fact."""
    return Vote(
        politician_id=politician_id,
        vote_id=roll_call.id,
        proposition_id=proposition_id,
        choice=vote_choice(deputy_vote.tipo_voto),
        date=parse_date(roll_call.data),
        session=roll_call.sigla_orgao or "",
        description=roll_call.descricao,
    )


class CamaraVotesIngester(FactIngester[RollCall]):
    """
    Ingest every roll call of a year.

    Usage:
        ingester = CamaraVotesIngester(db, client)
        stats = await ingester.run(year=2024)
        stats["choices"]  # {"YES": ..., "NO": ...}
    """

    workers = settings.VOTE_WORKERS

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.base_url = settings.CAMARA_BASE_URL
        self.propositions: Dict[int, ObjectId] = {}

    def reset_stats(self):
        super().reset_stats()
        self.stats["choices"] = Counter()
        self.stats["unknown_deputies"] = 0
        self.stats["failed_pages"] = []

    async def fetch_data(self, year: int, **kwargs) -> List[RollCall]:
        await self.load_known_deputies()
        await self._load_propositions()

        def page_url(page: int) -> str:
            return (
                f"{self.base_url}/votacoes?dataInicio={year}-01-01&dataFim={year}-12-31"
                f"&itens=200&ordem=ASC&ordenarPor=dataHoraRegistro&pagina={page}"
            )

        result = await collect_adaptive(self.client, page_url, RollCallListResponse)
        self.stats["failed_pages"] = result.failed_pages
        if result.failed_pages:
            self.logger.warning(f"Roll call listing incomplete, failed pages: {result.failed_pages}")
        return result.items

    async def transform(self, raw_data: RollCall) -> List[Vote]:
        response = await self.client.get_json(
            f"{self.base_url}/votacoes/{raw_data.id}/votos",
            DeputyVoteListResponse,
        )

        proposition_id = None
        proposition_ref = trailing_id(raw_data.uri_proposicao_objeto)
        if proposition_ref and proposition_ref.isdigit():
            proposition_id = self.propositions.get(int(proposition_ref))

        votes = []
        unknown = 0
        for deputy_vote in response.dados:
            politician_id = self.known_deputies.get(deputy_vote.deputado.id)
            if politician_id is None:
                unknown += 1
                continue
            votes.append(vote_record(raw_data, deputy_vote, politician_id, proposition_id))

        async with self._stats_lock:
            self.stats["choices"].update(vote.choice for vote in votes)
            self.stats["unknown_deputies"] += unknown

        return votes

    async def _load_propositions(self) -> None:
        """Câmara proposition id -> stored proposition id, for linking votes."""
        cursor = self.db[COLLECTION_PROPOSITIONS].find(
            {"camara_id": {"$ne": None}},
            {"camara_id": 1},
        )
        self.propositions = {doc["camara_id"]: doc["_id"] async for doc in cursor}

    def describe(self, raw_item: RollCall) -> str:
        return f"roll call {raw_item.id}"
