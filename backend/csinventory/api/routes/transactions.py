"""Transaction log: filtered, searched and grouped by day."""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from csinventory.api.deps import get_inventory
from csinventory.models import HospitalUnit
from csinventory.schemas.transactions import TransactionLogResponse
from csinventory.services.filters import TransactionFilter, TransactionTypeFilter
from csinventory.services.inventory_service import InventoryService

router = APIRouter()


@router.get("", response_model=TransactionLogResponse)
def get_transaction_log(
    drug: List[str] = Query(default=[], description="Generic names; repeat for several"),
    start: Optional[date] = Query(None, description="First day, YYYY-MM-DD"),
    end: Optional[date] = Query(None, description="Last day, YYYY-MM-DD"),
    type: TransactionTypeFilter = Query(TransactionTypeFilter.ALL),
    unit: Optional[HospitalUnit] = Query(None, description="Hospital unit; ignored for type=ADD"),
    search: str = Query(""),
    inventory: InventoryService = Depends(get_inventory),
):
    """
    Most-recent-first log grouped by day.

    total_count is the size of the whole ledger so the page can tell
    "No transactions yet." from "No matching transactions found."
    """
    spec = TransactionFilter(
        drug_filters=frozenset(drug),
        start=start,
        end=end,
        transaction_type=type,
        hospital_unit=unit,
        search_text=search,
    )
    return TransactionLogResponse.from_view(inventory.transaction_log(spec))
