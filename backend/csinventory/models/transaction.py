"""Ledger transactions.

A transaction carries exactly one payload shape: AddDetails for stock
receipts, DistributeDetails for stock sent to a hospital unit. The pairing
is checked when the transaction is built.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from csinventory.models.drug import DrugSnapshot


class TransactionType(str, Enum):
    ADD = "ADD"
    DISTRIBUTE = "DISTRIBUTE"


class HospitalUnit(str, Enum):
    U1NS = "1NS"
    U2NS = "2NS"
    U2EW = "2EW"
    U3EW = "3EW"
    U4EW = "4EW"


class StockSource(str, Enum):
    WHOLESALER = "Wholesaler"
    UNIT = "Unit"


@dataclass(frozen=True)
class AddDetails:
    source: StockSource
    invoice_number: Optional[str] = None

    transaction_type = TransactionType.ADD


@dataclass(frozen=True)
class DistributeDetails:
    unit: HospitalUnit

    transaction_type = TransactionType.DISTRIBUTE


TransactionDetails = Union[AddDetails, DistributeDetails]


@dataclass(frozen=True)
class Transaction:
    id: str
    drug: DrugSnapshot
    type: TransactionType
    quantity: int
    details: TransactionDetails
    timestamp: datetime

    def __post_init__(self):
        if self.details.transaction_type is not self.type:
            raise ValueError(
                f"{type(self.details).__name__} cannot describe a {self.type.value} transaction"
            )

    @property
    def unit(self) -> Optional[HospitalUnit]:
        if isinstance(self.details, DistributeDetails):
            return self.details.unit
        return None

    @property
    def source(self) -> Optional[StockSource]:
        if isinstance(self.details, AddDetails):
            return self.details.source
        return None

    @property
    def invoice_number(self) -> Optional[str]:
        if isinstance(self.details, AddDetails):
            return self.details.invoice_number
        return None

    @property
    def signed_quantity(self) -> int:
        """Stock delta: positive for receipts, negative for distributions."""
        return self.quantity if self.type is TransactionType.ADD else -self.quantity

    def describe(self) -> str:
        """One-line summary for the transaction log."""
        if self.type is TransactionType.ADD:
            detail = f"Stock added from {self.source.value}"
            if self.invoice_number and self.invoice_number.strip():
                detail += f" (Invoice: {self.invoice_number.strip()})"
            return detail
        return f"Distributed to {self.unit.value}"
