from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime, date

from csinventory.models import DrugForm, HospitalUnit, StockSource, Transaction, TransactionType
from csinventory.services.filters import DayGroup, TransactionLogView


class StockAddRequest(BaseModel):
    quantity: int
    source: StockSource = StockSource.WHOLESALER
    invoice_number: Optional[str] = None


class DistributionRequest(BaseModel):
    quantity: int
    unit: HospitalUnit


class DrugSnapshotResponse(BaseModel):
    brand_name: str
    generic_name: str
    strength: str
    form: DrugForm

    class Config:
        from_attributes = True


class TransactionResponse(BaseModel):
    id: str
    drug: DrugSnapshotResponse
    type: TransactionType
    quantity: int
    unit: Optional[HospitalUnit] = None
    source: Optional[StockSource] = None
    invoice_number: Optional[str] = None
    timestamp: datetime
    description: str

    @classmethod
    def from_transaction(cls, t: Transaction) -> "TransactionResponse":
        return cls(
            id=t.id,
            drug=DrugSnapshotResponse.model_validate(t.drug),
            type=t.type,
            quantity=t.quantity,
            unit=t.unit,
            source=t.source,
            invoice_number=t.invoice_number,
            timestamp=t.timestamp,
            description=t.describe(),
        )


class DayGroupResponse(BaseModel):
    day: date
    label: str
    transactions: List[TransactionResponse]

    @classmethod
    def from_group(cls, group: DayGroup) -> "DayGroupResponse":
        return cls(
            day=group.day,
            label=group.label,
            transactions=[TransactionResponse.from_transaction(t) for t in group.transactions],
        )


class TransactionLogResponse(BaseModel):
    total_count: int
    match_count: int
    empty_message: Optional[str] = None
    groups: List[DayGroupResponse]

    @classmethod
    def from_view(cls, view: TransactionLogView) -> "TransactionLogResponse":
        return cls(
            total_count=view.total_count,
            match_count=view.match_count,
            empty_message=view.empty_message,
            groups=[DayGroupResponse.from_group(g) for g in view.groups],
        )
