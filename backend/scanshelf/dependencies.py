"""
ScanShelf Backend: Service Dependencies
========================================

What:  FastAPI dependencies returning the services owned by the running app.
How:   create_app() places one InventoryStore, ScanWorkflow and
       InventoryService on `app.state`; these functions read them back
       from the request so every route works on the same instances.

Usage:
    @router.get("/api/inventory")
    async def list_items(service: InventoryService = Depends(get_inventory_service)):
        ...
"""

from fastapi import Request

from scanshelf.services.inventory_service import InventoryService
from scanshelf.services.inventory_store import InventoryStore
from scanshelf.services.scan_service import ScanWorkflow


def get_store(request: Request) -> InventoryStore:
    return request.app.state.store


def get_scan_workflow(request: Request) -> ScanWorkflow:
    return request.app.state.scan_workflow


def get_inventory_service(request: Request) -> InventoryService:
    return request.app.state.inventory_service
