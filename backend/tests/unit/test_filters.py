"""
Transaction log filtering and day grouping.

Ledger fixture (most recent first, FakeClock in UTC-5):

    Oct 20 14:00  DISTRIBUTE  5 ATIVAN    -> 2EW
    Oct 20 10:00  ADD        40 ATIVAN    <- Wholesaler  INV-2
    Oct 19 23:30  DISTRIBUTE 30 DILAUDID  -> 2NS
    Oct 19 09:00  ADD       100 DILAUDID  <- Wholesaler  (conftest)
"""
import pytest
from datetime import date

from csinventory.models import DrugForm, HospitalUnit, StockSource, TransactionType
from csinventory.services.filters import (
    DayGroup,
    StockLevel,
    TransactionFilter,
    TransactionTypeFilter,
    build_log_view,
    drug_filter_options,
    filter_transactions,
    format_day_label,
    group_by_day,
    stock_level,
    transaction_date,
)
from tests.conftest import catalog_entry


@pytest.fixture
def ledger(service, clock, dilaudid, ativan):
    clock.set(2026, 10, 19, 23, 30)
    service.distribute(dilaudid.id, 30, HospitalUnit.U2NS)
    clock.set(2026, 10, 20, 10, 0)
    service.add_stock(ativan.id, 40, StockSource.WHOLESALER, invoice_number="INV-2")
    clock.set(2026, 10, 20, 14, 0)
    service.distribute(ativan.id, 5, HospitalUnit.U2EW)
    return service.transactions()


def _summary(transactions):
    return [(t.drug.brand_name, t.type.value, t.quantity) for t in transactions]


class TestStockLevel:

    @pytest.mark.parametrize("stock,expected", [
        (0, StockLevel.LOW),
        (49, StockLevel.LOW),
        (50, StockLevel.MODERATE),
        (99, StockLevel.MODERATE),
        (100, StockLevel.ADEQUATE),
    ])
    def test_bands(self, stock, expected):
        assert stock_level(stock, 50) is expected


class TestDrugFilterOptions:

    def test_one_option_per_generic_ordered_by_brand(self, service):
        drugs = service.import_drugs([
            catalog_entry("Sublimaze", "Fentanyl Citrate", "50mcg/mL", DrugForm.INJECTION),
            catalog_entry("Ativan", "Lorazepam", "1mg"),
            catalog_entry("Ativan", "Lorazepam", "2mg"),
        ])
        assert drug_filter_options(drugs) == [
            ("Lorazepam", "ATIVAN (Lorazepam)"),
            ("Fentanyl Citrate", "SUBLIMAZE (Fentanyl Citrate)"),
        ]


class TestTransactionFilter:

    def test_default_is_empty(self):
        assert TransactionFilter().is_empty

    def test_coerces_loose_input(self):
        spec = TransactionFilter(
            drug_filters=["Lorazepam"],
            start="2026-10-19",
            end=" 2026-10-20 ",
            transaction_type="DISTRIBUTE",
            hospital_unit="2NS",
            search_text=None,
        )
        assert spec.drug_filters == frozenset({"Lorazepam"})
        assert spec.start == date(2026, 10, 19)
        assert spec.end == date(2026, 10, 20)
        assert spec.transaction_type is TransactionTypeFilter.DISTRIBUTE
        assert spec.hospital_unit is HospitalUnit.U2NS
        assert spec.search_text == ""

    def test_unit_filter_disabled_for_add(self):
        spec = TransactionFilter(transaction_type=TransactionTypeFilter.ADD, hospital_unit=HospitalUnit.U2NS)
        assert not spec.unit_filter_enabled


class TestFilterTransactions:

    def test_no_filter_returns_everything(self, ledger):
        assert filter_transactions(ledger) == ledger
        assert filter_transactions(ledger, TransactionFilter()) == ledger

    def test_drug_filter(self, ledger):
        result = filter_transactions(ledger, TransactionFilter(drug_filters={"Lorazepam"}))
        assert _summary(result) == [("ATIVAN", "DISTRIBUTE", 5), ("ATIVAN", "ADD", 40)]

    def test_drug_filter_with_several_generics(self, ledger):
        spec = TransactionFilter(drug_filters={"Lorazepam", "Hydromorphone Hcl"})
        assert filter_transactions(ledger, spec) == ledger

    def test_date_range_is_inclusive(self, ledger):
        spec = TransactionFilter(start=date(2026, 10, 19), end=date(2026, 10, 19))
        assert _summary(filter_transactions(ledger, spec)) == [
            ("DILAUDID", "DISTRIBUTE", 30),
            ("DILAUDID", "ADD", 100),
        ]

    def test_late_evening_stays_on_local_day(self, ledger):
        # 23:30 at UTC-5 is already Oct 20 in UTC.
        late = ledger[2]
        assert transaction_date(late) == date(2026, 10, 19)

    def test_start_only(self, ledger):
        result = filter_transactions(ledger, TransactionFilter(start="2026-10-20"))
        assert len(result) == 2

    def test_end_only(self, ledger):
        result = filter_transactions(ledger, TransactionFilter(end="2026-10-19"))
        assert len(result) == 2

    def test_empty_date_strings_ignored(self, ledger):
        assert filter_transactions(ledger, TransactionFilter(start="", end="")) == ledger

    def test_type_filter(self, ledger):
        spec = TransactionFilter(transaction_type=TransactionTypeFilter.ADD)
        result = filter_transactions(ledger, spec)
        assert {t.type for t in result} == {TransactionType.ADD}
        assert len(result) == 2

    def test_unit_filter(self, ledger):
        result = filter_transactions(ledger, TransactionFilter(hospital_unit=HospitalUnit.U2NS))
        assert _summary(result) == [("DILAUDID", "DISTRIBUTE", 30)]

    def test_unit_filter_ignored_when_showing_adds(self, ledger):
        spec = TransactionFilter(
            transaction_type=TransactionTypeFilter.ADD,
            hospital_unit=HospitalUnit.U2NS,
        )
        assert len(filter_transactions(ledger, spec)) == 2

    @pytest.mark.parametrize("text,expected", [
        ("dilaudid", 2),
        ("LORAZ", 2),
        ("2mg", 2),
        ("wholesaler", 2),
        ("2ew", 1),
        ("inv-2", 1),
        ("nothing like this", 0),
    ])
    def test_search(self, ledger, text, expected):
        assert len(filter_transactions(ledger, TransactionFilter(search_text=text))) == expected

    def test_search_matches_values_not_field_names(self, ledger):
        result = filter_transactions(ledger, TransactionFilter(search_text="unit"))
        assert result == ()

    def test_predicates_are_and_combined(self, ledger):
        spec = TransactionFilter(
            drug_filters={"Lorazepam"},
            transaction_type=TransactionTypeFilter.DISTRIBUTE,
            search_text="2ew",
        )
        assert _summary(filter_transactions(ledger, spec)) == [("ATIVAN", "DISTRIBUTE", 5)]

    def test_result_equals_intersection_of_predicates(self, ledger):
        spec = TransactionFilter(
            start="2026-10-19",
            transaction_type=TransactionTypeFilter.DISTRIBUTE,
            search_text="n",
        )
        expected = set(ledger)
        for predicate in spec.predicates():
            expected &= {t for t in ledger if predicate(t)}
        result = filter_transactions(ledger, spec)
        assert set(result) == expected
        assert list(result) == [t for t in ledger if t in expected]

    def test_order_preserved(self, ledger):
        result = filter_transactions(ledger, TransactionFilter(search_text="a"))
        positions = [ledger.index(t) for t in result]
        assert positions == sorted(positions)


class TestGrouping:

    def test_groups_by_day_in_order(self, ledger):
        groups = group_by_day(ledger)
        assert [g.day for g in groups] == [date(2026, 10, 20), date(2026, 10, 19)]
        assert [len(g.transactions) for g in groups] == [2, 2]

    def test_groups_partition_the_input(self, ledger):
        groups = group_by_day(ledger)
        flattened = [t for g in groups for t in g.transactions]
        assert flattened == list(ledger)

    def test_every_member_is_on_its_day(self, ledger):
        for group in group_by_day(ledger):
            assert all(transaction_date(t) == group.day for t in group.transactions)

    def test_empty_input(self):
        assert group_by_day([]) == []

    def test_label(self):
        assert format_day_label(date(2026, 10, 19)) == "Monday, October 19, 2026"
        assert DayGroup(day=date(2026, 11, 1), transactions=()).label == "Sunday, November 1, 2026"


class TestLogView:

    def test_empty_ledger_message(self):
        view = build_log_view(())
        assert view.is_ledger_empty
        assert view.empty_message == "No transactions yet."

    def test_no_match_message(self, ledger):
        view = build_log_view(ledger, TransactionFilter(search_text="zzz"))
        assert view.total_count == 4
        assert view.match_count == 0
        assert view.groups == []
        assert view.empty_message == "No matching transactions found."

    def test_matches_have_no_message(self, ledger):
        view = build_log_view(ledger, TransactionFilter(transaction_type="DISTRIBUTE"))
        assert view.match_count == 2
        assert view.empty_message is None
        assert [g.day for g in view.groups] == [date(2026, 10, 20), date(2026, 10, 19)]

    def test_service_log_view(self, service, ledger):
        view = service.transaction_log(TransactionFilter(drug_filters={"Hydromorphone Hcl"}))
        assert view.total_count == 4
        assert view.match_count == 2
