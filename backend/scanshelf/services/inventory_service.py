"""
ScanShelf Backend: Inventory Service (List, Delete, Import, Export)
====================================================================

What:  Operations of the "all items" screen over the shared InventoryStore.
Who:   Called by the /api/inventory route handlers.

Import flow:
    ┌──────────┐    ┌──────────────┐    ┌─────────────────┐    ┌──────────┐
    │  Upload  │───▶│  Validate    │───▶│ parse_inventory │───▶│  Merge   │
    │  (Route) │    │  (FileServ)  │    │  (shape check)  │    │  & Save  │
    └──────────┘    └──────────────┘    └─────────────────┘    └──────────┘

    ValidationError or FormatError stop the flow before the merge, so a
    rejected file never changes the inventory or the data file.
"""

import logging
from typing import List, Optional, Tuple

from scanshelf.exceptions import NotFoundError
from scanshelf.models.record import Record
from scanshelf.services.file_service import FileService
from scanshelf.services.inventory_store import ImportResult, InventoryStore, parse_inventory

logger = logging.getLogger(__name__)


class InventoryService:
    """Listing and bulk operations on the inventory."""

    def __init__(self, store: InventoryStore, file_service: Optional[FileService] = None):
        self.store = store
        self.file_service = file_service or FileService()

    def list_items(self) -> List[Tuple[str, Record]]:
        return sorted(self.store.snapshot().items())

    def get_item(self, code: str) -> Record:
        record = self.store.get(code)
        if record is None:
            raise NotFoundError(resource="item", resource_id=code)
        return record

    async def delete(self, code: str) -> bool:
        return await self.store.delete(code)

    def export(self) -> bytes:
        """The current inventory exactly as the data file stores it."""
        return self.store.serialize()

    async def import_bytes(self, data: bytes) -> ImportResult:
        """
        Merge an exported inventory into the current one.

        Raises:
            FormatError: the bytes are not an inventory document; nothing changed.
            StorageError: the merge is in memory but the file was not written.
        """
        imported = parse_inventory(data)
        result = await self.store.import_inventory(imported)
        logger.info("Import finished: %d added, %d replaced", result.added, result.replaced)
        return result

    async def import_upload(
        self,
        filename: Optional[str],
        content: bytes,
        content_length: Optional[int] = None,
    ) -> ImportResult:
        """Validate an uploaded file, then import it."""
        data = self.file_service.validate_upload(filename, content, content_length)
        return await self.import_bytes(data)
