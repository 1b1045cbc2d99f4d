"""
Pydantic models for expense data.

These models represent the parliamentary quota expenses (CEAP) published
by the Câmara for each deputy.
"""
from datetime import datetime
from typing import Optional

from bson import ObjectId
from pydantic import Field

from lupa.config.constants import COLLECTION_EXPENSES
from lupa.models.fact import FactRecord


class Expense(FactRecord):
    """
    One reimbursed expense of a politician.

    Deduplicated on person + reference month + category + supplier + amount.
    """
    collection = COLLECTION_EXPENSES
    natural_key_fields = (
        "politician_id",
        "reference_year",
        "reference_month",
        "type",
        "supplier_tax_id",
        "amount",
    )

    politician_id: ObjectId

    # Reference period
    reference_year: int
    reference_month: int

    # Expense details
    type: str = Field(..., description="Expense category (tipoDespesa)")
    description: Optional[str] = Field(None, description="Document type")
    supplier: str = ""
    supplier_tax_id: str = Field("", description="CNPJ or CPF of the supplier")
    amount: float
    date: Optional[datetime] = None

    # Source document
    document_number: Optional[str] = None
    document_url: Optional[str] = None
