"""
Ingester for session and committee attendance from the Câmara API.

Year-scoped: lists the events of the year with the adaptive pager, then
records one Attendance per known deputy present at each event.
"""
from typing import List

from bson import ObjectId

from lupa.config.settings import settings
from lupa.database.normalization import parse_date
from lupa.ingestion.base import FactIngester
from lupa.ingestion.pagination import collect_adaptive
from lupa.ingestion.schemas.camara import AttendeeListResponse, Event, EventListResponse
from lupa.models.attendance import Attendance


def attendance_record(event: Event, politician_id: ObjectId) -> Attendance:
    return Attendance(
        politician_id=politician_id,
        event_id=str(event.id),
        date=parse_date(event.data_hora_inicio),
        session_type=event.descricao_tipo or "",
        body=event.orgaos[0].sigla if event.orgaos else None,
    )


class CamaraAttendanceIngester(FactIngester[Event]):
    """
    Ingest attendance for every event of a year.

    Usage:
        ingester = CamaraAttendanceIngester(db, client)
        stats = await ingester.run(year=2024)
    """

    workers = settings.ATTENDANCE_WORKERS

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.base_url = settings.CAMARA_BASE_URL

    def reset_stats(self):
        super().reset_stats()
        self.stats["failed_pages"] = []

    async def fetch_data(self, year: int, **kwargs) -> List[Event]:
        await self.load_known_deputies()

        def page_url(page: int) -> str:
            return (
                f"{self.base_url}/eventos?dataInicio={year}-01-01&dataFim={year}-12-31"
                f"&itens=100&ordem=ASC&ordenarPor=dataHoraInicio&pagina={page}"
            )

        result = await collect_adaptive(self.client, page_url, EventListResponse)
        self.stats["failed_pages"] = result.failed_pages
        if result.failed_pages:
            self.logger.warning(f"Event listing incomplete, failed pages: {result.failed_pages}")
        return result.items

    async def transform(self, raw_data: Event) -> List[Attendance]:
        response = await self.client.get_json(
            f"{self.base_url}/eventos/{raw_data.id}/deputados",
            AttendeeListResponse,
        )

        records = []
        for attendee in response.dados:
            politician_id = self.known_deputies.get(attendee.deputy_id)
            if politician_id is not None:
                records.append(attendance_record(raw_data, politician_id))
        return records

    def describe(self, raw_item: Event) -> str:
        return f"event {raw_item.id}"
