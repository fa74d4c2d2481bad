"""
ScanShelf Backend: Scan Workflow (Lookup-or-Create)
====================================================

What:  Turns a scanned code into either a displayed record or a prompt for a new one.
How:   A two-state machine driven by the scan routes.
Who:   One instance per application, holding a reference to the InventoryStore.

State machine:
                     receive_scan(known code)
            ┌────────────────────────────────────────┐
            │                                        ▼
        ┌───────┐  receive_scan(new code)   ┌───────────────────┐
        │ idle  │ ────────────────────────▶ │ awaiting_decision │
        └───────┘ ◀──────────────────────── └───────────────────┘
                   confirm(title, description)
                   cancel()

    confirm() with an empty field raises ValidationError and stays in
    awaiting_decision. A confirm whose save fails still ends in idle: the
    record is already in memory.

The "current" record is what the scan screen displays. It is resolved from
the store on every read, so deletes made through the list view clear it
without any callback between the two.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from scanshelf.exceptions import ScanStateError, ValidationError
from scanshelf.models.record import Record
from scanshelf.services.inventory_store import InventoryStore

logger = logging.getLogger(__name__)

IDLE = "idle"
AWAITING_DECISION = "awaiting_decision"

FOUND = "found"


def _require_storable(value: str, field: str) -> None:
    """Reject strings the UTF-8 data file cannot hold (lone surrogates)."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValidationError(
            message=f"{field.capitalize()} contains characters that cannot be stored",
            field=field,
        ) from e


@dataclass(frozen=True)
class ScanOutcome:
    """What the client should show after a scan."""

    code: str
    status: str
    record: Optional[Record] = None

    @property
    def found(self) -> bool:
        return self.status == FOUND


class ScanWorkflow:
    """
    Lookup-or-create workflow for scanned codes.

    Methods:
        receive_scan():   idle/awaiting_decision → found (idle) or awaiting_decision
        confirm():        awaiting_decision → idle, inserting a record
        cancel():         awaiting_decision → idle, no mutation
        delete_current(): removes the displayed record from the inventory
    """

    def __init__(self, store: InventoryStore):
        self.store = store
        self._state = IDLE
        self._pending_code: Optional[str] = None
        self._current_code: Optional[str] = None
        # Bumped whenever a found scan changes the displayed code
        self._display_count = 0

    @property
    def state(self) -> str:
        return self._state

    @property
    def pending_code(self) -> Optional[str]:
        return self._pending_code

    def receive_scan(self, code: str) -> ScanOutcome:
        """
        Look up a scanned code.

        Raises:
            ValidationError: the code is blank or cannot be stored as UTF-8.
        """
        if not code or not code.strip():
            raise ValidationError(message="Scanned code must not be empty", field="code")
        _require_storable(code, "code")

        if self._state == AWAITING_DECISION:
            logger.info("Discarding pending code %r for new scan %r", self._pending_code, code)
        self._pending_code = None

        record = self.store.get(code)
        if record is not None:
            self._state = IDLE
            self._current_code = code
            self._display_count += 1
            logger.info("Scan %r found: %s", code, record.title)
            return ScanOutcome(code=code, status=FOUND, record=record)

        self._state = AWAITING_DECISION
        self._pending_code = code
        logger.info("Scan %r not in inventory; awaiting title and description", code)
        return ScanOutcome(code=code, status=AWAITING_DECISION)

    async def confirm(self, title: str, description: str) -> Record:
        """
        Create a record for the pending code and persist it.

        Raises:
            ScanStateError: no code is awaiting a decision.
            ValidationError: title or description is empty; nothing changes.
            StorageError: the record was stored in memory but not written.
        """
        if self._state != AWAITING_DECISION or self._pending_code is None:
            raise ScanStateError(state=self._state)

        title = (title or "").strip()
        description = (description or "").strip()
        if not title:
            raise ValidationError(message="Title must not be empty", field="title")
        if not description:
            raise ValidationError(message="Description must not be empty", field="description")
        _require_storable(title, "title")
        _require_storable(description, "description")

        # Leave awaiting_decision before the write; a scan arriving during
        # the await then starts a fresh prompt that this confirm won't reset.
        code = self._pending_code
        self._state = IDLE
        self._pending_code = None
        display_count = self._display_count

        record = Record(title=title, description=description)
        try:
            await self.store.insert(code, record)
        finally:
            if self._display_count == display_count:
                self._current_code = code
        return record

    def cancel(self) -> None:
        if self._state == AWAITING_DECISION:
            logger.info("Cancelled entry for code %r", self._pending_code)
        self._state = IDLE
        self._pending_code = None

    def current(self) -> Optional[Tuple[str, Record]]:
        """The displayed (code, record), or None once the record is gone."""
        if self._current_code is None:
            return None
        record = self.store.get(self._current_code)
        if record is None:
            self._current_code = None
            return None
        return self._current_code, record

    async def delete_current(self) -> Optional[str]:
        """
        Delete the displayed record and clear the display.

        Returns the deleted code, or None when nothing was displayed.
        """
        shown = self.current()
        if shown is None:
            return None
        code = shown[0]
        self._current_code = None
        await self.store.delete(code)
        return code
