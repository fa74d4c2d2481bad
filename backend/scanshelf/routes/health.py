"""
ScanShelf Backend: Health Check Route
======================================

What:  Health check endpoint for monitoring and container probes.
How:   Reports whether the data file exists and whether its directory is
       writable, plus the size of the in-memory inventory.

    Status levels:
    - healthy:   data file present (or creatable) and writable
    - degraded:  saves would fail; reads still served from memory
"""

import logging
import os
import time

from fastapi import APIRouter, Depends

from scanshelf import __version__
from scanshelf.dependencies import get_store
from scanshelf.schemas.inventory import HealthResponse
from scanshelf.services.inventory_store import InventoryStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


def _data_file_status(store: InventoryStore) -> str:
    path = store.path
    if path.exists():
        return "present" if os.access(path, os.W_OK) else "not_writable"
    # Nearest existing ancestor decides whether save() can create the file
    parent = path.parent
    while not parent.exists() and parent != parent.parent:
        parent = parent.parent
    return "missing" if os.access(parent, os.W_OK) else "not_writable"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(store: InventoryStore = Depends(get_store)) -> HealthResponse:
    data_file = _data_file_status(store)
    overall = "healthy"
    if data_file == "not_writable":
        overall = "degraded"
        logger.warning("Health check: data file %s is not writable", store.path)

    return HealthResponse(
        status=overall,
        version=__version__,
        data_file=data_file,
        item_count=len(store),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
