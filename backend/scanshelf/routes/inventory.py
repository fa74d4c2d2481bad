"""
ScanShelf Backend: Inventory Route Handlers
============================================

What:  Endpoints behind the "all items" screen: list, lookup, delete,
       export and import.
How:   Extracts request data, delegates to InventoryService, returns JSON
       (or the raw export document).

Codes are matched with a `:path` converter because QR payloads are often
URLs and contain slashes.
"""

import logging

from fastapi import APIRouter, Depends, File, Response, UploadFile

from scanshelf.dependencies import get_inventory_service
from scanshelf.schemas.inventory import (
    DeleteResponse,
    ErrorResponse,
    ImportResponse,
    InventoryListResponse,
    ItemResponse,
)
from scanshelf.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/inventory", tags=["Inventory"])

EXPORT_FILENAME = "scanData.json"


@router.get(
    "",
    response_model=InventoryListResponse,
    summary="List all inventory items",
)
async def list_items(
    response: Response,
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryListResponse:
    items = [ItemResponse.from_record(code, record) for code, record in service.list_items()]
    response.headers["X-Total-Count"] = str(len(items))
    return InventoryListResponse(items=items, total_count=len(items))


@router.get(
    "/export",
    response_class=Response,
    responses={200: {"content": {"application/json": {}}, "description": "Inventory file"}},
    summary="Download the inventory as JSON",
)
async def export_inventory(
    service: InventoryService = Depends(get_inventory_service),
) -> Response:
    """
    Returns the same bytes the data file holds, as an attachment the client
    can hand to its share sheet.
    """
    payload = service.export()
    return Response(
        content=payload,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post(
    "/import",
    response_model=ImportResponse,
    responses={
        400: {"description": "Bad upload or not an inventory file", "model": ErrorResponse},
        500: {"description": "Merged in memory but not saved", "model": ErrorResponse},
    },
    summary="Merge an exported inventory file",
)
async def import_inventory(
    file: UploadFile = File(..., description="A file previously produced by /export"),
    service: InventoryService = Depends(get_inventory_service),
) -> ImportResponse:
    """
    Imported codes overwrite existing ones; codes missing from the file are
    kept. A file that is not an inventory document is rejected as a whole.
    """
    content = await file.read()
    logger.info(
        "Received import: filename=%s, size=%d bytes",
        file.filename or "unknown",
        len(content),
    )
    try:
        result = await service.import_upload(
            filename=file.filename,
            content=content,
            content_length=file.size,
        )
    finally:
        await file.close()

    return ImportResponse(
        message=f"Imported {result.added + result.replaced} items",
        added=result.added,
        replaced=result.replaced,
        total_count=result.total_count,
    )


@router.get(
    "/items/{code:path}",
    response_model=ItemResponse,
    responses={404: {"description": "Unknown code", "model": ErrorResponse}},
    summary="Get one item by code",
)
async def get_item(
    code: str,
    service: InventoryService = Depends(get_inventory_service),
) -> ItemResponse:
    return ItemResponse.from_record(code, service.get_item(code))


@router.delete(
    "/items/{code:path}",
    response_model=DeleteResponse,
    responses={500: {"description": "Deleted in memory but not saved", "model": ErrorResponse}},
    summary="Delete one item by code",
)
async def delete_item(
    code: str,
    service: InventoryService = Depends(get_inventory_service),
) -> DeleteResponse:
    """Deleting an unknown code succeeds with deleted=false."""
    deleted = await service.delete(code)
    return DeleteResponse(code=code, deleted=deleted)
