"""Inventory service: the one object that owns the catalog and the ledger.

Construct one per application (the HTTP app keeps it on app.state) and pass
it around. There is no module-level instance.

    service = InventoryService(gateway=GroqClassificationGateway())
    drug = await service.register_drug("Ativan", "lorazepam", "1mg", DrugForm.TABLET)
    service.add_stock(drug.id, 100, StockSource.WHOLESALER, invoice_number="INV-1")
    service.distribute(drug.id, 30, HospitalUnit.U2NS)
    view = service.transaction_log(TransactionFilter(search_text="2ns"))
"""
import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Tuple

from classifier import ClassificationGateway, GroqClassificationGateway
from csinventory.core.audit import AuditLog
from csinventory.core.config import settings
from csinventory.core.exceptions import ClassificationError, UnrecognizedScheduleError, ValidationFailure
from csinventory.models import (
    Drug,
    DrugForm,
    HospitalUnit,
    StockSource,
    Transaction,
    TransactionDetails,
    TransactionType,
)
from csinventory.services.catalog_service import CatalogEntry, CatalogStore
from csinventory.services.filters import (
    ScheduleFilter,
    SortKey,
    StockLevel,
    TransactionFilter,
    TransactionLogView,
    build_log_view,
    drug_filter_options,
    stock_level,
)
from csinventory.services.ledger_service import Ledger, local_now

logger = logging.getLogger(__name__)


class InventoryService:
    def __init__(
        self,
        gateway: Optional[ClassificationGateway] = None,
        clock: Callable[[], datetime] = local_now,
        low_stock_threshold: Optional[int] = None,
    ):
        self.catalog = CatalogStore()
        self.ledger = Ledger(self.catalog, clock=clock)
        self.gateway = gateway if gateway is not None else GroqClassificationGateway()
        self.low_stock_threshold = (
            settings.LOW_STOCK_THRESHOLD if low_stock_threshold is None else low_stock_threshold
        )

    # ==========================================================================
    # CATALOG
    # ==========================================================================

    async def register_drug(
        self,
        brand_name: str,
        generic_name: str,
        strength: str,
        form: DrugForm,
    ) -> Drug:
        """Classify a new drug and add it to the catalog with zero stock.

        Nothing is added unless the classifier answers with a schedule
        between II and V.

        Raises:
            ValidationFailure: blank name or unknown dosage form
            ClassificationError: classifier unreachable or answer malformed
            UnrecognizedScheduleError: answer was "N/A" or not a schedule
        """
        brand_name = (brand_name or "").strip()
        generic_name = (generic_name or "").strip()
        if not brand_name or not generic_name:
            raise ValidationFailure("Brand name and generic name are required.")
        try:
            form = DrugForm(form)
        except ValueError:
            raise ValidationFailure(f"Unknown dosage form: {form!r}")

        try:
            response = await self.gateway.classify(brand_name, generic_name)
        except ClassificationError as e:
            AuditLog.log_classification_failed(brand_name, generic_name, e.message)
            raise
        except Exception as e:
            logger.error(f"Classification gateway raised {type(e).__name__}: {e}")
            AuditLog.log_classification_failed(brand_name, generic_name, type(e).__name__)
            raise ClassificationError("Classification service request failed") from e

        schedule = response.drug_schedule()
        if schedule is None:
            AuditLog.log_classification_failed(
                brand_name, generic_name, f"unrecognized schedule {response.schedule!r}"
            )
            raise UnrecognizedScheduleError(response.schedule)

        drug = self.catalog.register(
            response.formatted_brand_name,
            response.formatted_generic_name,
            strength,
            form,
            schedule,
        )
        AuditLog.log_drug_registered(drug)
        return drug

    def import_drugs(self, entries: Iterable[CatalogEntry], source: str = "seed") -> List[Drug]:
        drugs = self.catalog.import_drugs(entries)
        for drug in drugs:
            AuditLog.log_drug_registered(drug, source=source)
        return drugs

    def remove_drug(self, drug_id: int) -> Optional[Drug]:
        """Delete a drug; its transactions stay in the ledger."""
        drug = self.catalog.remove(drug_id)
        if drug is not None:
            AuditLog.log_drug_removed(drug)
        return drug

    def get_drug(self, drug_id: int) -> Optional[Drug]:
        return self.catalog.get(drug_id)

    def list_drugs(
        self,
        schedule_filter: ScheduleFilter = ScheduleFilter.ALL,
        sort_key: SortKey = SortKey.BRAND_NAME,
    ) -> Tuple[Drug, ...]:
        return self.catalog.list_drugs(schedule_filter, sort_key)

    def stock_level(self, drug: Drug) -> StockLevel:
        return stock_level(drug.stock, self.low_stock_threshold)

    def drug_filter_options(self) -> List[Tuple[str, str]]:
        return drug_filter_options(self.catalog.all())

    # ==========================================================================
    # LEDGER
    # ==========================================================================

    def record(
        self,
        drug_id: int,
        quantity: int,
        transaction_type: TransactionType,
        details: TransactionDetails,
    ) -> Transaction:
        return self.ledger.record(drug_id, quantity, transaction_type, details)

    def add_stock(
        self,
        drug_id: int,
        quantity: int,
        source: StockSource,
        invoice_number: Optional[str] = None,
    ) -> Transaction:
        return self.ledger.add_stock(drug_id, quantity, source, invoice_number)

    def distribute(self, drug_id: int, quantity: int, unit: HospitalUnit) -> Transaction:
        return self.ledger.distribute(drug_id, quantity, unit)

    def transactions(self) -> Tuple[Transaction, ...]:
        return self.ledger.transactions()

    def transaction_log(self, spec: Optional[TransactionFilter] = None) -> TransactionLogView:
        return build_log_view(self.ledger.transactions(), spec)
