"""
Ingester for legislative propositions from the Câmara API.

Year-scoped. For every proposition presented in the year:
    - detail and authors are required (the proposition is skipped without them)
    - tramitations and themes are optional and only waited on for
      ENRICHMENT_TIMEOUT seconds; a slow or failing enrichment is dropped
Authors are linked to canonical politicians through their Câmara ids.
"""
import asyncio
from typing import Awaitable, List, Optional, TypeVar

from bson import ObjectId

from lupa.config.constants import proposition_status
from lupa.config.settings import settings
from lupa.database.normalization import parse_date, trailing_id
from lupa.ingestion.base import FactIngester
from lupa.ingestion.client import FetchError
from lupa.ingestion.pagination import collect_adaptive
from lupa.ingestion.schemas.camara import (
    Author,
    AuthorListResponse,
    PropositionDetail,
    PropositionDetailResponse,
    PropositionListResponse,
    PropositionSummary,
    ThemeListResponse,
    Tramitation,
    TramitationListResponse,
    Theme,
)
from lupa.models.legislation import ProgressItem, Proposition

E = TypeVar("E")


def author_ids(authors: List[Author], known_deputies: dict[int, ObjectId]) -> List[ObjectId]:
    """Canonical ids of the authors that are known deputies, in signature order."""
    ordered = sorted(
        authors,
        key=lambda a: a.ordem_assinatura if a.ordem_assinatura is not None else float("inf"),
    )
    ids: List[ObjectId] = []
    for author in ordered:
        ref = trailing_id(author.uri)
        if not ref or not ref.isdigit():
            continue
        politician_id = known_deputies.get(int(ref))
        if politician_id is not None and politician_id not in ids:
            ids.append(politician_id)
    return ids


def proposition_record(
    detail: PropositionDetail,
    authors: List[ObjectId],
    tramitations: Optional[List[Tramitation]] = None,
    themes: Optional[List[Theme]] = None,
) -> Proposition:
    """Map a Câmara proposition and its sub-resources onto a Proposition fact."""
    situation = detail.status_proposicao.descricao_situacao if detail.status_proposicao else None

    progress = [
        ProgressItem(
            date=parse_date(t.data_hora),
            description=t.descricao_tramitacao or t.despacho or "",
            body=t.sigla_orgao or "",
        )
        for t in tramitations or []
    ]

    return Proposition(
        type=detail.sigla_tipo,
        number=detail.numero,
        year=detail.ano,
        summary=detail.ementa or "",
        keywords=detail.keywords or None,
        full_text_url=detail.url_inteiro_teor,
        presented_at=parse_date(detail.data_apresentacao),
        author_id=authors[0] if authors else None,
        coauthor_ids=authors[1:],
        status=proposition_status(situation),
        themes=[t.label for t in themes or [] if t.label],
        progress=progress,
        camara_id=detail.id,
    )


class CamaraPropositionsIngester(FactIngester[PropositionSummary]):
    """
    Ingest the propositions presented in a year.

    Usage:
        ingester = CamaraPropositionsIngester(db, client)
        stats = await ingester.run(year=2024)
    """

    workers = settings.PROPOSITION_WORKERS

    def __init__(self, *args, enrichment_timeout: Optional[float] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.base_url = settings.CAMARA_BASE_URL
        self.enrichment_timeout = (
            enrichment_timeout if enrichment_timeout is not None else settings.ENRICHMENT_TIMEOUT
        )

    def reset_stats(self):
        super().reset_stats()
        self.stats["enrichments_dropped"] = 0
        self.stats["failed_pages"] = []

    async def fetch_data(self, year: int, **kwargs) -> List[PropositionSummary]:
        await self.load_known_deputies()

        def page_url(page: int) -> str:
            return (
                f"{self.base_url}/proposicoes?ano={year}"
                f"&itens=100&ordem=ASC&ordenarPor=id&pagina={page}"
            )

        result = await collect_adaptive(self.client, page_url, PropositionListResponse)
        self.stats["failed_pages"] = result.failed_pages
        if result.failed_pages:
            self.logger.warning(f"Proposition listing incomplete, failed pages: {result.failed_pages}")
        return result.items

    async def transform(self, raw_data: PropositionSummary) -> Proposition:
        url = f"{self.base_url}/proposicoes/{raw_data.id}"

        detail, authors = await asyncio.gather(
            self.client.get_json(url, PropositionDetailResponse),
            self.client.get_json(f"{url}/autores", AuthorListResponse),
        )
        tramitations, themes = await asyncio.gather(
            self._enrichment(self.client.get_json(f"{url}/tramitacoes", TramitationListResponse)),
            self._enrichment(self.client.get_json(f"{url}/temas", ThemeListResponse)),
        )

        return proposition_record(
            detail.dados,
            author_ids(authors.dados, self.known_deputies),
            tramitations.dados if tramitations else None,
            themes.dados if themes else None,
        )

    async def _enrichment(self, fetch: Awaitable[E]) -> Optional[E]:
        """Await an optional sub-fetch for a bounded time; None when it fails or is too slow."""
        try:
            return await asyncio.wait_for(fetch, timeout=self.enrichment_timeout)
        except (asyncio.TimeoutError, FetchError) as e:
            async with self._stats_lock:
                self.stats["enrichments_dropped"] += 1
            self.logger.debug(f"Dropped optional enrichment: {e!r}")
            return None

    def describe(self, raw_item: PropositionSummary) -> str:
        return f"proposition {raw_item.sigla_tipo} {raw_item.numero}/{raw_item.ano} ({raw_item.id})"
