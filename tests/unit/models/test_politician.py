"""Unit tests for the politician and fact models."""

from datetime import datetime

from bson import ObjectId

from lupa.models import Attendance, Expense
from lupa.models.politician import (
    Contact,
    Office,
    PersonIdentity,
    Politician,
    PoliticianObservation,
)


def observation(**fields):
    return PoliticianObservation(
        office=Office(type="SENATOR", sphere="FEDERAL", state="PA", start_date=datetime(2023, 2, 1)),
        **fields,
    )


class TestPersonIdentity:
    """Tests for PersonIdentity."""

    def test_tax_id_is_enough(self):
        identity = PersonIdentity(tax_id="11122233344")
        assert identity.is_usable
        assert identity.creation_filter() == {"tax_id": "11122233344"}

    def test_name_needs_birth_date(self):
        assert not PersonIdentity(civil_name="Maria").is_usable
        assert not PersonIdentity(birth_date=datetime(1970, 1, 1)).is_usable
        assert not PersonIdentity(civil_name="   ", birth_date=datetime(1970, 1, 1)).is_usable

    def test_name_filter_is_normalized(self):
        identity = PersonIdentity(civil_name=" Maria  DA Silva", birth_date=datetime(1970, 5, 17))
        assert identity.creation_filter() == {
            "civil_name_normalized": "maria da silva",
            "birth_date": datetime(1970, 5, 17),
        }


class TestPoliticianMerge:
    """Tests for Politician.merge()."""

    def test_reported_fields_overwrite(self):
        stored = Politician(name="Antigo", civil_name="Maria da Silva", education="Médio")
        merged = stored.merge(observation(name="Novo", education="Superior", civil_name="MARIA DA SILVA"))

        assert merged.name == "Novo"
        assert merged.education == "Superior"
        assert merged.civil_name_normalized == "maria da silva"

    def test_unreported_fields_are_kept(self):
        stored = Politician(
            name="Maria",
            photo_url="https://example.org/a.jpg",
            gender="F",
            contact=Contact(email="a@b.c", phone="123"),
        )
        merged = stored.merge(observation(contact=Contact(phone="456")))

        assert merged.photo_url == "https://example.org/a.jpg"
        assert merged.gender == "F"
        assert merged.contact.email == "a@b.c"
        assert merged.contact.phone == "456"

    def test_offices_are_not_touched(self):
        merged = Politician(name="Maria").merge(observation())
        assert merged.current_office is None
        assert merged.office_history == []

    def test_document_excludes_identity_and_timestamps(self):
        politician = Politician(id=ObjectId(), name="Maria", created_at=datetime(2024, 1, 1))
        document = politician.to_document()
        assert "id" not in document
        assert "_id" not in document
        assert "created_at" not in document
        assert document["gender"] == "OTHER"


class TestFactRecords:
    """Tests for the natural keys of fact records."""

    def test_expense_key(self):
        pid = ObjectId()
        expense = Expense(
            politician_id=pid,
            reference_year=2024,
            reference_month=1,
            type="TELEFONIA",
            supplier_tax_id="123",
            amount=10.5,
        )
        assert expense.natural_key() == {
            "politician_id": pid,
            "reference_year": 2024,
            "reference_month": 1,
            "type": "TELEFONIA",
            "supplier_tax_id": "123",
            "amount": 10.5,
        }
        assert Expense.collection == "expenses"

    def test_attendance_document(self):
        record = Attendance(politician_id=ObjectId(), event_id="1")
        document = record.to_document()
        assert document["present"] is True
        assert "created_at" not in document
