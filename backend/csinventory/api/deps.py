"""FastAPI dependencies: the inventory service owned by the running app."""
from fastapi import Request

from csinventory.services.inventory_service import InventoryService


def get_inventory(request: Request) -> InventoryService:
    """The InventoryService created in the app lifespan (or passed to create_app)."""
    return request.app.state.inventory
