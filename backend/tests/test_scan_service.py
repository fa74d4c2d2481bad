"""
ScanShelf Backend: Scan Workflow Unit Tests
============================================

What:  Tests for the lookup-or-create state machine.
How:   Real InventoryStore on a temp file, so persistence is checked end-to-end.

What we test:
    ✅ Unknown code → awaiting_decision → confirm inserts and persists
    ✅ Known code → record shown, no mutation
    ✅ Empty title/description never mutates and keeps the prompt open
    ✅ Cancel returns to idle without mutation
    ✅ Current record follows deletes made elsewhere
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from conftest import SAMPLE_RECORDS, read_document
from scanshelf.exceptions import ScanStateError, StorageError, ValidationError
from scanshelf.models.record import Record
from scanshelf.services.scan_service import AWAITING_DECISION, FOUND, IDLE, ScanWorkflow


class TestReceiveScan:
    """Tests for receive_scan()."""

    def test_unknown_code_awaits_decision(self, scan_workflow):
        outcome = scan_workflow.receive_scan("123")

        assert outcome.status == AWAITING_DECISION
        assert outcome.record is None
        assert scan_workflow.state == AWAITING_DECISION
        assert scan_workflow.pending_code == "123"

    @pytest.mark.asyncio
    async def test_known_code_is_shown_without_mutation(self, seeded_store, data_file):
        workflow = ScanWorkflow(seeded_store)
        before = data_file.read_bytes()

        outcome = workflow.receive_scan("A")

        assert outcome.status == FOUND
        assert outcome.found
        assert outcome.record == Record(title="Stapler", description="Office use")
        assert workflow.state == IDLE
        assert workflow.current() == ("A", SAMPLE_RECORDS["A"])
        assert seeded_store.snapshot() == SAMPLE_RECORDS
        assert data_file.read_bytes() == before

    @pytest.mark.parametrize("code", ["", "   "])
    def test_empty_code_rejected(self, scan_workflow, code):
        with pytest.raises(ValidationError):
            scan_workflow.receive_scan(code)
        assert scan_workflow.state == IDLE

    def test_new_scan_replaces_pending_code(self, scan_workflow):
        scan_workflow.receive_scan("first")
        scan_workflow.receive_scan("second")

        assert scan_workflow.pending_code == "second"

    def test_unencodable_code_rejected(self, scan_workflow):
        """A lone surrogate can't be written to the UTF-8 data file."""
        with pytest.raises(ValidationError) as exc_info:
            scan_workflow.receive_scan("\ud800")

        assert exc_info.value.field == "code"
        assert scan_workflow.state == IDLE
        assert scan_workflow.pending_code is None


class TestConfirm:
    """Tests for confirm() on a pending code."""

    @pytest.mark.asyncio
    async def test_confirm_inserts_and_persists(self, scan_workflow, store, data_file):
        scan_workflow.receive_scan("123")

        record = await scan_workflow.confirm("Stapler", "Office use")

        assert record == Record(title="Stapler", description="Office use")
        assert store.snapshot() == {"123": record}
        assert read_document(data_file) == {"123": {"title": "Stapler", "des": "Office use"}}
        assert scan_workflow.state == IDLE
        assert scan_workflow.current() == ("123", record)

    @pytest.mark.asyncio
    async def test_confirm_strips_whitespace(self, scan_workflow, store):
        scan_workflow.receive_scan("123")
        await scan_workflow.confirm("  Stapler ", " Office use\n")

        assert store.get("123") == Record(title="Stapler", description="Office use")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "title,description",
        [("", "Office use"), ("Stapler", ""), ("   ", "Office use"), ("", "")],
    )
    async def test_confirm_empty_field_never_mutates(
        self, scan_workflow, store, data_file, title, description
    ):
        scan_workflow.receive_scan("123")

        with pytest.raises(ValidationError):
            await scan_workflow.confirm(title, description)

        assert len(store) == 0
        assert not data_file.exists()
        assert scan_workflow.state == AWAITING_DECISION
        assert scan_workflow.pending_code == "123"

    @pytest.mark.asyncio
    async def test_confirm_unencodable_field_never_mutates(self, scan_workflow, store, data_file):
        scan_workflow.receive_scan("123")

        with pytest.raises(ValidationError) as exc_info:
            await scan_workflow.confirm("Stapler", "Office \udc80")

        assert exc_info.value.field == "description"
        assert len(store) == 0
        assert not data_file.exists()
        assert scan_workflow.state == AWAITING_DECISION

    @pytest.mark.asyncio
    async def test_confirm_without_pending_scan(self, scan_workflow):
        with pytest.raises(ScanStateError):
            await scan_workflow.confirm("Stapler", "Office use")

    @pytest.mark.asyncio
    async def test_confirm_save_failure_returns_to_idle(self, scan_workflow, store):
        scan_workflow.receive_scan("123")

        with patch.object(store, "save", AsyncMock(side_effect=StorageError())):
            with pytest.raises(StorageError):
                await scan_workflow.confirm("Stapler", "Office use")

        assert scan_workflow.state == IDLE
        assert store.get("123") == Record(title="Stapler", description="Office use")

    @pytest.mark.asyncio
    async def test_scan_during_confirm_write_keeps_new_prompt(self, scan_workflow, store):
        scan_workflow.receive_scan("first")

        async def scan_while_saving():
            await asyncio.sleep(0)
            return scan_workflow.receive_scan("second")

        record, outcome = await asyncio.gather(
            scan_workflow.confirm("Stapler", "Office use"),
            scan_while_saving(),
        )

        assert outcome.status == AWAITING_DECISION
        assert scan_workflow.state == AWAITING_DECISION
        assert scan_workflow.pending_code == "second"
        assert scan_workflow.current() == ("first", record)

        second = await scan_workflow.confirm("Drill", "Garage shelf")

        assert store.snapshot() == {"first": record, "second": second}
        assert scan_workflow.current() == ("second", second)


class TestCancelAndCurrent:
    """Tests for cancel(), current() and delete_current()."""

    def test_cancel_returns_to_idle(self, scan_workflow, store):
        scan_workflow.receive_scan("123")
        scan_workflow.cancel()

        assert scan_workflow.state == IDLE
        assert scan_workflow.pending_code is None
        assert len(store) == 0

    def test_cancel_while_idle_is_noop(self, scan_workflow):
        scan_workflow.cancel()
        assert scan_workflow.state == IDLE

    @pytest.mark.asyncio
    async def test_current_cleared_after_external_delete(self, seeded_store):
        workflow = ScanWorkflow(seeded_store)
        workflow.receive_scan("A")

        await seeded_store.delete("A")

        assert workflow.current() is None

    @pytest.mark.asyncio
    async def test_delete_current(self, seeded_store, data_file):
        workflow = ScanWorkflow(seeded_store)
        workflow.receive_scan("A")

        assert await workflow.delete_current() == "A"
        assert "A" not in seeded_store
        assert "A" not in read_document(data_file)
        assert workflow.current() is None

    @pytest.mark.asyncio
    async def test_delete_current_with_nothing_shown(self, scan_workflow):
        assert await scan_workflow.delete_current() is None
