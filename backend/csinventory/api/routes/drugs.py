"""Drug catalog and stock movements for the pharmacy stock page."""
import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status

from csinventory.api.deps import get_inventory
from csinventory.core.exceptions import BusinessError, InventoryError, to_http_exception
from csinventory.core.permissions import authorize_deletion
from csinventory.schemas.drugs import DrugCreate, DrugDeleteResponse, DrugFilterOption, DrugResponse
from csinventory.schemas.transactions import DistributionRequest, StockAddRequest, TransactionResponse
from csinventory.services.filters import ScheduleFilter, SortKey
from csinventory.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

router = APIRouter()


def _drug_response(inventory: InventoryService, drug) -> DrugResponse:
    return DrugResponse.from_drug(drug, inventory.stock_level(drug))


@router.get("", response_model=List[DrugResponse])
def list_drugs(
    schedule: ScheduleFilter = Query(ScheduleFilter.ALL, description="all | II | III-V"),
    sort_by: SortKey = Query(SortKey.BRAND_NAME),
    inventory: InventoryService = Depends(get_inventory),
):
    """Catalog cards, filtered by schedule and sorted by name."""
    return [_drug_response(inventory, d) for d in inventory.list_drugs(schedule, sort_by)]


@router.post("", response_model=DrugResponse, status_code=status.HTTP_201_CREATED)
async def create_drug(
    payload: DrugCreate,
    inventory: InventoryService = Depends(get_inventory),
):
    """Register a drug. The classifier supplies schedule and name formatting."""
    try:
        drug = await inventory.register_drug(
            payload.brand_name, payload.generic_name, payload.strength, payload.form
        )
    except InventoryError as e:
        raise to_http_exception(e)
    return _drug_response(inventory, drug)


@router.get("/filter-options", response_model=List[DrugFilterOption])
def get_filter_options(inventory: InventoryService = Depends(get_inventory)):
    """Choices for the transaction log's drug multi-select."""
    return [
        DrugFilterOption(generic_name=generic, label=label)
        for generic, label in inventory.drug_filter_options()
    ]


@router.get("/{drug_id}", response_model=DrugResponse)
def get_drug(drug_id: int, inventory: InventoryService = Depends(get_inventory)):
    drug = inventory.get_drug(drug_id)
    if drug is None:
        raise BusinessError.not_found("Drug")
    return _drug_response(inventory, drug)


@router.delete(
    "/{drug_id}",
    response_model=DrugDeleteResponse,
    dependencies=[Depends(authorize_deletion)],
)
def delete_drug(drug_id: int, inventory: InventoryService = Depends(get_inventory)):
    """Remove a drug from the catalog. Its transactions stay in the log."""
    drug = inventory.remove_drug(drug_id)
    if drug is None:
        return DrugDeleteResponse(id=drug_id, removed=False, message=f"Drug {drug_id} was not in the catalog")
    return DrugDeleteResponse(id=drug_id, removed=True, message=f"Deleted {drug.display_name}")


@router.post("/{drug_id}/stock", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def add_stock(
    drug_id: int,
    payload: StockAddRequest,
    inventory: InventoryService = Depends(get_inventory),
):
    """Receive stock from a wholesaler or a returning unit."""
    try:
        transaction = inventory.add_stock(drug_id, payload.quantity, payload.source, payload.invoice_number)
    except InventoryError as e:
        raise to_http_exception(e)
    return TransactionResponse.from_transaction(transaction)


@router.post("/{drug_id}/distributions", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
def distribute_stock(
    drug_id: int,
    payload: DistributionRequest,
    inventory: InventoryService = Depends(get_inventory),
):
    """Send stock to a hospital unit. Never more than is on hand."""
    try:
        transaction = inventory.distribute(drug_id, payload.quantity, payload.unit)
    except InventoryError as e:
        raise to_http_exception(e)
    return TransactionResponse.from_transaction(transaction)
