from csinventory.models.drug import Drug, DrugForm, DrugSchedule, DrugSnapshot
from csinventory.models.transaction import (
    AddDetails,
    DistributeDetails,
    HospitalUnit,
    StockSource,
    Transaction,
    TransactionDetails,
    TransactionType,
)

__all__ = [
    "Drug", "DrugForm", "DrugSchedule", "DrugSnapshot",
    "AddDetails", "DistributeDetails", "HospitalUnit", "StockSource",
    "Transaction", "TransactionDetails", "TransactionType",
]
