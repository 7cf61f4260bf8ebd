"""
Query side of the inventory: catalog views and transaction log filtering.

Everything here is a pure function of its arguments. Callers pass the
current snapshots (catalog tuple, ledger tuple) and get new tuples back, so
repeated calls over the same data always agree and nothing can go stale.

Transaction log filter
----------------------
All predicates are optional and AND-combined:

    drug_filters      generic names; empty set = every drug
    start / end       inclusive calendar days, compared with the local date
                      the transaction was recorded on
    transaction_type  ALL | ADD | DISTRIBUTE
    hospital_unit     None = every unit; ignored when filtering ADD only
    search_text       case-insensitive substring over brand, generic,
                      strength, source, unit and invoice number

Order is never changed: the ledger is most-recent-first and so is every
filtered view. Grouping by day keeps that order across and within groups.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple, Union

from csinventory.models import Drug, DrugSchedule, HospitalUnit, Transaction, TransactionType


class ScheduleFilter(str, Enum):
    ALL = "all"
    SCHEDULE_II_ONLY = "II"
    SCHEDULES_III_IV_V = "III-V"

    def matches(self, schedule: DrugSchedule) -> bool:
        if self is ScheduleFilter.SCHEDULE_II_ONLY:
            return schedule is DrugSchedule.CII
        if self is ScheduleFilter.SCHEDULES_III_IV_V:
            return schedule in (DrugSchedule.CIII, DrugSchedule.CIV, DrugSchedule.CV)
        return True


class SortKey(str, Enum):
    BRAND_NAME = "brand_name"
    GENERIC_NAME = "generic_name"


class TransactionTypeFilter(str, Enum):
    ALL = "all"
    ADD = "ADD"
    DISTRIBUTE = "DISTRIBUTE"


class StockLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    ADEQUATE = "adequate"


def stock_level(stock: int, threshold: int) -> StockLevel:
    """Badge colour for a stock count: red below threshold, yellow below 2x."""
    if stock < threshold:
        return StockLevel.LOW
    if stock < threshold * 2:
        return StockLevel.MODERATE
    return StockLevel.ADEQUATE


def _collation_key(value: str) -> Tuple[str, str]:
    # Case-insensitive first, then exact text so "abc" < "ABC" stays stable.
    return value.casefold(), value


# ==============================================================================
# CATALOG VIEW
# ==============================================================================

def list_drugs(
    drugs: Iterable[Drug],
    schedule_filter: ScheduleFilter = ScheduleFilter.ALL,
    sort_key: SortKey = SortKey.BRAND_NAME,
) -> Tuple[Drug, ...]:
    """Drugs on the chosen schedules, ascending by brand or generic name."""
    schedule_filter = ScheduleFilter(schedule_filter)
    sort_key = SortKey(sort_key)
    matching = [d for d in drugs if schedule_filter.matches(d.schedule)]
    matching.sort(key=lambda d: _collation_key(getattr(d, sort_key.value)))
    return tuple(matching)


def drug_filter_options(drugs: Iterable[Drug]) -> List[Tuple[str, str]]:
    """(generic_name, "BRAND (Generic)") choices for the log's drug picker."""
    seen: Dict[str, str] = {}
    for drug in sorted(drugs, key=lambda d: _collation_key(d.brand_name)):
        seen.setdefault(drug.generic_name, drug.display_name)
    return list(seen.items())


# ==============================================================================
# TRANSACTION LOG
# ==============================================================================

DateLike = Union[date, str, None]


def _as_date(value: DateLike) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(value.strip())


def transaction_date(transaction: Transaction) -> date:
    """Local calendar day of a transaction (its recorded offset, not UTC)."""
    return transaction.timestamp.date()


@dataclass(frozen=True)
class TransactionFilter:
    drug_filters: FrozenSet[str] = frozenset()
    start: Optional[date] = None
    end: Optional[date] = None
    transaction_type: TransactionTypeFilter = TransactionTypeFilter.ALL
    hospital_unit: Optional[HospitalUnit] = None
    search_text: str = ""

    def __post_init__(self):
        # Accept the loose shapes a form or query string hands over.
        object.__setattr__(self, "drug_filters", frozenset(self.drug_filters or ()))
        object.__setattr__(self, "start", _as_date(self.start))
        object.__setattr__(self, "end", _as_date(self.end))
        object.__setattr__(self, "transaction_type", TransactionTypeFilter(self.transaction_type))
        if self.hospital_unit is not None:
            object.__setattr__(self, "hospital_unit", HospitalUnit(self.hospital_unit))
        object.__setattr__(self, "search_text", self.search_text or "")

    @property
    def unit_filter_enabled(self) -> bool:
        # Receipts carry no unit, so a unit filter means nothing for ADD.
        return (
            self.hospital_unit is not None
            and self.transaction_type is not TransactionTypeFilter.ADD
        )

    @property
    def is_empty(self) -> bool:
        return (
            not self.drug_filters
            and self.start is None
            and self.end is None
            and self.transaction_type is TransactionTypeFilter.ALL
            and not self.unit_filter_enabled
            and not self.search_text
        )

    def matches_drug(self, t: Transaction) -> bool:
        return not self.drug_filters or t.drug.generic_name in self.drug_filters

    def matches_dates(self, t: Transaction) -> bool:
        day = transaction_date(t)
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    def matches_type(self, t: Transaction) -> bool:
        if self.transaction_type is TransactionTypeFilter.ALL:
            return True
        return t.type is TransactionType(self.transaction_type.value)

    def matches_unit(self, t: Transaction) -> bool:
        if not self.unit_filter_enabled:
            return True
        return t.unit is self.hospital_unit

    def matches_search(self, t: Transaction) -> bool:
        query = self.search_text.casefold()
        if not query:
            return True
        fields = [t.drug.brand_name, t.drug.generic_name, t.drug.strength]
        if t.source is not None:
            fields.append(t.source.value)
        if t.unit is not None:
            fields.append(t.unit.value)
        if t.invoice_number:
            fields.append(t.invoice_number)
        return any(query in value.casefold() for value in fields)

    def predicates(self):
        return (
            self.matches_drug,
            self.matches_dates,
            self.matches_type,
            self.matches_unit,
            self.matches_search,
        )

    def matches(self, t: Transaction) -> bool:
        return all(predicate(t) for predicate in self.predicates())


def filter_transactions(
    transactions: Sequence[Transaction],
    spec: Optional[TransactionFilter] = None,
) -> Tuple[Transaction, ...]:
    """Matching transactions in their original (most-recent-first) order."""
    if spec is None or spec.is_empty:
        return tuple(transactions)
    return tuple(t for t in transactions if spec.matches(t))


@dataclass(frozen=True)
class DayGroup:
    day: date
    transactions: Tuple[Transaction, ...]

    @property
    def label(self) -> str:
        return format_day_label(self.day)


def format_day_label(day: date) -> str:
    """e.g. "Monday, October 19, 2026"."""
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


def group_by_day(transactions: Iterable[Transaction]) -> List[DayGroup]:
    """Partition by local calendar day, days in first-seen order."""
    buckets: Dict[date, List[Transaction]] = {}
    for t in transactions:
        buckets.setdefault(transaction_date(t), []).append(t)
    return [DayGroup(day=day, transactions=tuple(items)) for day, items in buckets.items()]


@dataclass(frozen=True)
class TransactionLogView:
    total_count: int
    matched: Tuple[Transaction, ...]
    groups: List[DayGroup] = field(default_factory=list)

    @property
    def match_count(self) -> int:
        return len(self.matched)

    @property
    def is_ledger_empty(self) -> bool:
        return self.total_count == 0

    @property
    def has_matches(self) -> bool:
        return bool(self.matched)

    @property
    def empty_message(self) -> Optional[str]:
        if self.is_ledger_empty:
            return "No transactions yet."
        if not self.has_matches:
            return "No matching transactions found."
        return None


def build_log_view(
    transactions: Sequence[Transaction],
    spec: Optional[TransactionFilter] = None,
) -> TransactionLogView:
    matched = filter_transactions(transactions, spec)
    return TransactionLogView(
        total_count=len(transactions),
        matched=matched,
        groups=group_by_day(matched),
    )
