"""
Ingester for parliamentary quota expenses (CEAP) from the Câmara API.

Year-scoped: for every politician we know a Câmara id for, lists that
deputy's expenses of the year and upserts each one on its natural key.
"""
from typing import List, Optional, Tuple

from bson import ObjectId

from lupa.config.settings import settings
from lupa.database.normalization import parse_date
from lupa.ingestion.base import FactIngester
from lupa.ingestion.pagination import collect_linked
from lupa.ingestion.schemas.camara import ExpenseItem, ExpenseListResponse
from lupa.models.finance import Expense


def expense_record(politician_id: ObjectId, item: ExpenseItem) -> Expense:
    """Map one Câmara expense line onto an Expense fact."""
    # Net value is what was reimbursed; some lines only carry the document value
    amount = item.valor_liquido if item.valor_liquido and item.valor_liquido > 0 else item.valor_documento

    return Expense(
        politician_id=politician_id,
        reference_year=item.ano,
        reference_month=item.mes,
        type=item.tipo_despesa or "",
        description=item.tipo_documento,
        supplier=item.nome_fornecedor or "",
        supplier_tax_id=item.cnpj_cpf_fornecedor or "",
        amount=round(amount or 0.0, 2),
        date=parse_date(item.data_documento),
        document_number=item.num_documento,
        document_url=item.url_documento,
    )


class CamaraExpensesIngester(FactIngester[Tuple[int, ObjectId]]):
    """
    Ingest one year of expenses for every known deputy.

    Usage:
        ingester = CamaraExpensesIngester(db, client)
        stats = await ingester.run(year=2024)
    """

    workers = settings.EXPENSE_WORKERS

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.base_url = settings.CAMARA_BASE_URL
        self.year: Optional[int] = None

    async def fetch_data(self, year: int, **kwargs) -> List[Tuple[int, ObjectId]]:
        """The work items are the deputies themselves: (camara_id, politician_id)."""
        self.year = year
        known = await self.load_known_deputies()
        return sorted(known.items())

    async def transform(self, raw_data: Tuple[int, ObjectId]) -> List[Expense]:
        camara_id, politician_id = raw_data
        url = f"{self.base_url}/deputados/{camara_id}/despesas?ano={self.year}&itens=100"
        items = await collect_linked(self.client, url, ExpenseListResponse)
        return [expense_record(politician_id, item) for item in items]

    def describe(self, raw_item: Tuple[int, ObjectId]) -> str:
        return f"expenses of deputy {raw_item[0]}"
