"""Ledger: append-only stock movements.

record() is the only way stock changes. Under the catalog lock it checks the
request, swaps the drug's stock and prepends the transaction, so no reader
ever sees a stock level without the entry that explains it (or the reverse).

Transactions are never edited or removed. A mistake is corrected with a new
transaction in the opposite direction.
"""
import itertools
import logging
from collections import deque
from dataclasses import replace
from datetime import datetime
from typing import Callable, Deque, Optional, Tuple

from csinventory.core.audit import AuditLog
from csinventory.core.exceptions import InsufficientStockError, InvalidQuantityError, ValidationFailure
from csinventory.models import (
    AddDetails,
    DistributeDetails,
    HospitalUnit,
    StockSource,
    Transaction,
    TransactionDetails,
    TransactionType,
)
from csinventory.services.catalog_service import CatalogStore

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    """Current time as an aware datetime in the server's local offset."""
    return datetime.now().astimezone()


def validate_quantity(quantity) -> int:
    """Positive whole number or InvalidQuantityError. Same rule for ADD and DISTRIBUTE."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(
            "Please enter a valid positive quantity.",
            detail={"quantity": str(quantity)},
        )
    return quantity


def _normalize_details(transaction_type: TransactionType, details) -> TransactionDetails:
    if transaction_type is TransactionType.ADD:
        if not isinstance(details, AddDetails):
            raise ValidationFailure("Adding stock requires a stock source.")
        try:
            source = StockSource(details.source)
        except ValueError:
            raise ValidationFailure(f"Unknown stock source: {details.source!r}")
        invoice = (details.invoice_number or "").strip() or None
        return replace(details, source=source, invoice_number=invoice)

    if not isinstance(details, DistributeDetails):
        raise ValidationFailure("Distributing stock requires a hospital unit.")
    try:
        unit = HospitalUnit(details.unit)
    except ValueError:
        raise ValidationFailure(f"Unknown hospital unit: {details.unit!r}")
    return replace(details, unit=unit)


class Ledger:
    def __init__(self, catalog: CatalogStore, clock: Callable[[], datetime] = local_now):
        self._catalog = catalog
        self._clock = clock
        self._entries: Deque[Transaction] = deque()
        self._seq = itertools.count(1)

    def _next_id(self, timestamp: datetime) -> str:
        # Timestamp prefix for readability, sequence number for uniqueness.
        return f"{timestamp:%Y%m%dT%H%M%S%f}-{next(self._seq):06d}"

    def record(
        self,
        drug_id: int,
        quantity: int,
        transaction_type: TransactionType,
        details: TransactionDetails,
    ) -> Transaction:
        """Apply one stock movement and log it.

        Raises:
            InvalidQuantityError: quantity is not a positive integer
            ValidationFailure: unknown type, or details that do not match it
            UnknownDrugError: drug_id is not in the catalog
            InsufficientStockError: distributing more than is on hand
        """
        quantity = validate_quantity(quantity)
        try:
            transaction_type = TransactionType(transaction_type)
        except ValueError:
            raise ValidationFailure(f"Unknown transaction type: {transaction_type!r}")
        details = _normalize_details(transaction_type, details)

        with self._catalog.lock:
            drug = self._catalog.require(drug_id)
            if transaction_type is TransactionType.DISTRIBUTE and quantity > drug.stock:
                logger.info(
                    f"Rejected distribution of {quantity} {drug.display_name}: only {drug.stock} on hand"
                )
                raise InsufficientStockError(requested=quantity, available=drug.stock)

            timestamp = self._clock()
            transaction = Transaction(
                id=self._next_id(timestamp),
                drug=drug.snapshot(),
                type=transaction_type,
                quantity=quantity,
                details=details,
                timestamp=timestamp,
            )
            updated = self._catalog._set_stock(drug_id, drug.stock + transaction.signed_quantity)
            self._entries.appendleft(transaction)

        logger.info(
            f"{transaction_type.value} {quantity} x {drug.display_name}: stock {drug.stock} -> {updated.stock}"
        )
        AuditLog.log_stock_movement(transaction, drug_id=drug_id, stock_after=updated.stock)
        return transaction

    def add_stock(
        self,
        drug_id: int,
        quantity: int,
        source: StockSource,
        invoice_number: Optional[str] = None,
    ) -> Transaction:
        return self.record(
            drug_id, quantity, TransactionType.ADD,
            AddDetails(source=source, invoice_number=invoice_number),
        )

    def distribute(self, drug_id: int, quantity: int, unit: HospitalUnit) -> Transaction:
        return self.record(drug_id, quantity, TransactionType.DISTRIBUTE, DistributeDetails(unit=unit))

    def transactions(self) -> Tuple[Transaction, ...]:
        """All transactions, most recent first."""
        with self._catalog.lock:
            return tuple(self._entries)

    def count(self, generic_name: Optional[str] = None) -> int:
        """All transactions, or those for one generic name.

        Counts by generic name, so every strength of a generic is included.
        """
        with self._catalog.lock:
            if generic_name is None:
                return len(self._entries)
            return sum(1 for t in self._entries if t.drug.generic_name == generic_name)

    def __len__(self) -> int:
        return self.count()
