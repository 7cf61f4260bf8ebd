"""Drug catalog: the set of known drugs and their live stock levels.

Stock is only changed by the Ledger, which holds the catalog lock while it
swaps the stock value and appends its transaction.
"""
import itertools
import logging
import threading
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Optional, Tuple

from csinventory.core.exceptions import UnknownDrugError, UnrecognizedScheduleError, ValidationFailure
from csinventory.models import Drug, DrugForm, DrugSchedule
from csinventory.services.filters import ScheduleFilter, SortKey, list_drugs

logger = logging.getLogger(__name__)


def format_brand_name(name: str) -> str:
    """Upper-case brand name: Dilaudid -> DILAUDID."""
    return name.strip().upper()


def format_generic_name(name: str) -> str:
    """Capitalize each space-separated word: "oxycodone HCL" -> "Oxycodone Hcl"."""
    return " ".join(word[:1].upper() + word[1:] for word in name.strip().lower().split(" "))


@dataclass(frozen=True)
class CatalogEntry:
    """An already-classified drug for bulk import (seed data).

    There is no opening stock: imported drugs start at zero and receive
    stock through the ledger like any other drug.
    """

    brand_name: str
    generic_name: str
    strength: str
    form: DrugForm
    schedule: DrugSchedule


class CatalogStore:
    def __init__(self):
        self._drugs: Dict[int, Drug] = {}
        self._ids = itertools.count(1)
        # Shared with the Ledger: stock swap + transaction append happen under it.
        self.lock = threading.RLock()

    def __len__(self) -> int:
        with self.lock:
            return len(self._drugs)

    @staticmethod
    def _validated(
        brand_name: str,
        generic_name: str,
        strength: str,
        form: DrugForm,
        schedule: DrugSchedule,
    ) -> CatalogEntry:
        if not isinstance(schedule, DrugSchedule):
            raise UnrecognizedScheduleError(schedule)
        brand_name = (brand_name or "").strip()
        generic_name = (generic_name or "").strip()
        if not brand_name or not generic_name:
            raise ValidationFailure("Brand name and generic name are required.")
        try:
            form = DrugForm(form)
        except ValueError:
            raise ValidationFailure(f"Unknown dosage form: {form!r}")
        return CatalogEntry(brand_name, generic_name, (strength or "").strip(), form, schedule)

    def _insert(self, entry: CatalogEntry) -> Drug:
        with self.lock:
            drug = Drug(
                id=next(self._ids),
                brand_name=entry.brand_name,
                generic_name=entry.generic_name,
                strength=entry.strength,
                form=entry.form,
                schedule=entry.schedule,
                stock=0,
            )
            self._drugs[drug.id] = drug
        logger.info(f"Registered drug {drug.id}: {drug.display_name} {drug.schedule.label}")
        return drug

    def register(
        self,
        brand_name: str,
        generic_name: str,
        strength: str,
        form: DrugForm,
        schedule: DrugSchedule,
    ) -> Drug:
        """Add a classified drug with zero stock.

        Names are stored as given; canonical formatting is the classifier's job.
        """
        return self._insert(self._validated(brand_name, generic_name, strength, form, schedule))

    def import_drugs(self, entries: Iterable[CatalogEntry]) -> List[Drug]:
        """Bulk-load classified entries, canonicalizing their names.

        All entries are checked first; one bad entry imports nothing.
        """
        checked = [
            self._validated(
                format_brand_name(entry.brand_name or ""),
                format_generic_name(entry.generic_name or ""),
                entry.strength,
                entry.form,
                entry.schedule,
            )
            for entry in entries
        ]
        with self.lock:
            return [self._insert(entry) for entry in checked]

    def get(self, drug_id: int) -> Optional[Drug]:
        with self.lock:
            return self._drugs.get(drug_id)

    def require(self, drug_id: int) -> Drug:
        drug = self.get(drug_id)
        if drug is None:
            raise UnknownDrugError(drug_id)
        return drug

    def remove(self, drug_id: int) -> Optional[Drug]:
        """Delete a drug. Unknown ids are ignored. Transactions are kept."""
        with self.lock:
            drug = self._drugs.pop(drug_id, None)
        if drug is not None:
            logger.info(f"Removed drug {drug_id}: {drug.display_name}")
        return drug

    def all(self) -> Tuple[Drug, ...]:
        """Every drug, in registration order."""
        with self.lock:
            return tuple(self._drugs.values())

    def list_drugs(
        self,
        schedule_filter: ScheduleFilter = ScheduleFilter.ALL,
        sort_key: SortKey = SortKey.BRAND_NAME,
    ) -> Tuple[Drug, ...]:
        return list_drugs(self.all(), schedule_filter, sort_key)

    def _set_stock(self, drug_id: int, stock: int) -> Drug:
        """Swap in a new stock value. Caller must hold the lock."""
        drug = replace(self._drugs[drug_id], stock=stock)
        self._drugs[drug_id] = drug
        return drug
