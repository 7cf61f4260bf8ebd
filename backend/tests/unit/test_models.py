"""
Domain values: schedule token mapping, snapshots, transaction payloads.

Pure Python, no service needed.
"""
import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

from csinventory.models import (
    AddDetails,
    DistributeDetails,
    Drug,
    DrugForm,
    DrugSchedule,
    HospitalUnit,
    StockSource,
    Transaction,
    TransactionType,
)


def _drug(**overrides):
    fields = dict(
        id=1, brand_name="DILAUDID", generic_name="Hydromorphone Hcl",
        strength="2mg", form=DrugForm.TABLET, schedule=DrugSchedule.CII, stock=100,
    )
    fields.update(overrides)
    return Drug(**fields)


def _transaction(type_, details, quantity=5):
    return Transaction(
        id="t1",
        drug=_drug().snapshot(),
        type=type_,
        quantity=quantity,
        details=details,
        timestamp=datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc),
    )


class TestDrugSchedule:

    @pytest.mark.parametrize("token,expected", [
        ("II", DrugSchedule.CII),
        ("III", DrugSchedule.CIII),
        ("IV", DrugSchedule.CIV),
        ("V", DrugSchedule.CV),
        (" iv ", DrugSchedule.CIV),
    ])
    def test_known_tokens(self, token, expected):
        assert DrugSchedule.from_token(token) is expected

    @pytest.mark.parametrize("token", ["N/A", "I", "VI", "", None, "Schedule II", 2])
    def test_anything_else_is_unrecognized(self, token):
        assert DrugSchedule.from_token(token) is None

    def test_label(self):
        assert DrugSchedule.CIII.label == "C-III"


class TestDrug:

    def test_snapshot_has_only_display_fields(self):
        snap = _drug().snapshot()
        assert snap.brand_name == "DILAUDID"
        assert snap.strength == "2mg"
        assert not hasattr(snap, "stock")
        assert not hasattr(snap, "schedule")
        assert not hasattr(snap, "id")

    def test_drug_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            _drug().stock = 5

    def test_display_name(self):
        assert _drug().display_name == "DILAUDID (Hydromorphone Hcl)"


class TestTransaction:

    def test_add_exposes_source_and_invoice(self):
        t = _transaction(TransactionType.ADD, AddDetails(StockSource.WHOLESALER, "INV-7"))
        assert t.source is StockSource.WHOLESALER
        assert t.invoice_number == "INV-7"
        assert t.unit is None
        assert t.signed_quantity == 5

    def test_distribute_exposes_unit_only(self):
        t = _transaction(TransactionType.DISTRIBUTE, DistributeDetails(HospitalUnit.U2NS))
        assert t.unit is HospitalUnit.U2NS
        assert t.source is None
        assert t.invoice_number is None
        assert t.signed_quantity == -5

    def test_mismatched_payload_cannot_be_built(self):
        with pytest.raises(ValueError):
            _transaction(TransactionType.ADD, DistributeDetails(HospitalUnit.U1NS))
        with pytest.raises(ValueError):
            _transaction(TransactionType.DISTRIBUTE, AddDetails(StockSource.UNIT))

    def test_describe_add_with_invoice(self):
        t = _transaction(TransactionType.ADD, AddDetails(StockSource.WHOLESALER, " INV-1 "))
        assert t.describe() == "Stock added from Wholesaler (Invoice: INV-1)"

    def test_describe_add_without_invoice(self):
        t = _transaction(TransactionType.ADD, AddDetails(StockSource.UNIT))
        assert t.describe() == "Stock added from Unit"

    def test_describe_distribution(self):
        t = _transaction(TransactionType.DISTRIBUTE, DistributeDetails(HospitalUnit.U3EW))
        assert t.describe() == "Distributed to 3EW"
