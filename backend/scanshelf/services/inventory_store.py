"""
ScanShelf Backend: Inventory Store
===================================

What:  Owns the in-memory inventory and the JSON data file behind it.
How:   The whole inventory is loaded once at startup and rewritten in full
       after every mutation (insert, delete, import-merge). Writes go to a
       temporary file in the same directory that then replaces the data file,
       so a reader never sees a half-written document.
Who:   Built once by the application factory; shared by ScanWorkflow and
       InventoryService.

Consistency model:
    memory ──mutate──▶ memory' ──save──▶ file'
    If the save fails, memory' is kept and StorageError is raised. The next
    successful save rewrites the file from memory, which reconciles it.

    Load never fails: a missing, unreadable, malformed or wrongly shaped file
    gives an empty inventory and a WARNING log line.
"""

import asyncio
import json
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import aiofiles
from pydantic import ValidationError as PydanticValidationError

from scanshelf.config import settings
from scanshelf.exceptions import FormatError, StorageError
from scanshelf.models.record import Inventory, Record
from scanshelf.schemas.inventory import InventoryDocument

logger = logging.getLogger(__name__)

# Reported in FormatError context; a broken file can produce thousands
MAX_REPORTED_ERRORS = 10


@dataclass(frozen=True)
class ImportResult:
    added: int
    replaced: int
    total_count: int


# ══════════════════════════════════════════════════════════════════════════
# Pure helpers: merge, serialize, parse
# ══════════════════════════════════════════════════════════════════════════


def merge(inventory: Inventory, imported: Inventory) -> Inventory:
    """
    Apply `imported` on top of `inventory` and return the result as a new dict.

    Collisions are resolved per key in favour of `imported`; keys that only
    exist in `inventory` are kept. Neither argument is modified.
    """
    merged = dict(inventory)
    merged.update(imported)
    return merged


def serialize(inventory: Inventory, indent: Optional[int] = None) -> bytes:
    """Encode an inventory in its persisted form (UTF-8 JSON)."""
    if indent is None:
        indent = settings.json_indent
    document = {code: record.to_json() for code, record in inventory.items()}
    text = json.dumps(document, indent=indent or None, ensure_ascii=False)
    return text.encode("utf-8")


def _describe_errors(exc: PydanticValidationError) -> List[str]:
    described = []
    for error in exc.errors()[:MAX_REPORTED_ERRORS]:
        location = ".".join(str(part) for part in error["loc"])
        described.append(f"{location}: {error['msg']}" if location else error["msg"])
    return described


def parse_inventory(data: bytes) -> Inventory:
    """
    Decode bytes in the persisted form.

    Raises:
        FormatError: invalid JSON, a top level that is not an object, a
            blank code, a value without string "title" and "des", or text
            that cannot be encoded as UTF-8.
    """
    try:
        document = InventoryDocument.validate_json(data)
    except PydanticValidationError as e:
        errors = _describe_errors(e)
        if any(err["type"] == "json_invalid" for err in e.errors()):
            message = "The file is not valid JSON"
        else:
            message = (
                'The file is not an inventory export. Expected an object mapping '
                'codes to {"title": ..., "des": ...}'
            )
        raise FormatError(message=message, errors=errors) from e

    inventory = {code: value.to_record() for code, value in document.items()}
    try:
        serialize(inventory)
    except UnicodeEncodeError as e:
        raise FormatError(
            message="The file contains text that cannot be stored as UTF-8",
            errors=[str(e)],
        ) from e
    return inventory


# ══════════════════════════════════════════════════════════════════════════
# Store
# ══════════════════════════════════════════════════════════════════════════


class InventoryStore:
    """
    The single owner of the inventory.

    Mutating methods are coroutines that hold `_lock` across both the change
    and the file write, so one mutation finishes (including its save) before
    the next starts.
    """

    def __init__(self, path: Optional[str] = None, indent: Optional[int] = None):
        self.path = Path(path or settings.data_file)
        self.indent = settings.json_indent if indent is None else indent
        self._inventory: Inventory = {}
        self._lock = asyncio.Lock()

    # ── Reading ───────────────────────────────────────────────────────────

    def __len__(self) -> int:
        return len(self._inventory)

    def __contains__(self, code: object) -> bool:
        return code in self._inventory

    def get(self, code: str) -> Optional[Record]:
        return self._inventory.get(code)

    def snapshot(self) -> Inventory:
        """A shallow copy; records are immutable so this is safe to hand out."""
        return dict(self._inventory)

    # ── Load / Save ───────────────────────────────────────────────────────

    def load(self) -> Inventory:
        """
        Read the data file into memory and return a copy of the result.

        Called once at startup. Read errors and bad content are logged and
        yield an empty inventory; nothing is raised.
        """
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            logger.info("No data file at %s; starting with an empty inventory", self.path)
            self._inventory = {}
            return self.snapshot()
        except OSError as e:
            logger.warning("Could not read data file %s: %s; starting empty", self.path, e)
            self._inventory = {}
            return self.snapshot()

        try:
            self._inventory = parse_inventory(data)
        except FormatError as e:
            logger.warning(
                "Data file %s is not a valid inventory (%s); starting empty",
                self.path,
                e.message,
            )
            self._inventory = {}
        else:
            logger.info("Loaded %d items from %s", len(self._inventory), self.path)
        return self.snapshot()

    def serialize(self) -> bytes:
        return serialize(self._inventory, indent=self.indent)

    async def save(self) -> None:
        """
        Overwrite the data file with the full in-memory inventory.

        Raises:
            StorageError: the inventory could not be encoded or the file
                could not be written. The in-memory inventory is left as
                it is.
        """
        tmp_path = self.path.with_name(f".{self.path.name}.{uuid.uuid4().hex[:8]}.tmp")
        try:
            payload = self.serialize()
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(payload)
            os.replace(tmp_path, self.path)
        except (OSError, UnicodeEncodeError) as e:
            logger.error("Failed to write data file %s: %s", self.path, e)
            try:
                tmp_path.unlink()
            except FileNotFoundError:
                pass
            except OSError as cleanup_error:
                logger.warning("Could not remove %s: %s", tmp_path, cleanup_error)
            raise StorageError(
                message="The change was applied but could not be saved to disk. "
                        "It will be written with the next successful save.",
                context={"path": str(self.path), "cause": str(e)},
            )
        logger.debug("Wrote %d items (%d bytes) to %s", len(self._inventory), len(payload), self.path)

    # ── Mutations ─────────────────────────────────────────────────────────

    async def insert(self, code: str, record: Record) -> None:
        async with self._lock:
            self._inventory[code] = record
            logger.info("Stored item %r", code)
            await self.save()

    async def delete(self, code: str) -> bool:
        """Remove `code` and save. Unknown codes are a no-op without a write."""
        async with self._lock:
            if code not in self._inventory:
                logger.debug("Delete of unknown code %r ignored", code)
                return False
            del self._inventory[code]
            logger.info("Deleted item %r", code)
            await self.save()
            return True

    async def import_inventory(self, imported: Inventory) -> ImportResult:
        """Merge `imported` into the inventory and save, counting added and replaced codes."""
        async with self._lock:
            added = sum(1 for code in imported if code not in self._inventory)
            self._inventory = merge(self._inventory, imported)
            logger.info(
                "Merged %d imported items; inventory now holds %d",
                len(imported),
                len(self._inventory),
            )
            await self.save()
            return ImportResult(
                added=added,
                replaced=len(imported) - added,
                total_count=len(self._inventory),
            )
