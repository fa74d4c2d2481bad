"""
ScanShelf Backend: Inventory Service Unit Tests
================================================

What:  Tests for listing, deleting, exporting and merge-importing.

What we test:
    ✅ Delete one of two entries leaves exactly the other, on disk too
    ✅ Import replaces colliding codes, adds new ones, keeps the rest
    ✅ Invalid or wrongly shaped import changes nothing
    ✅ Export bytes equal the data file
    ✅ Import counts are taken against the inventory the merge applies to
"""

import asyncio
import json

import pytest

from conftest import SAMPLE_RECORDS, read_document
from scanshelf.exceptions import FormatError, NotFoundError, ValidationError
from scanshelf.models.record import Record
from scanshelf.services.inventory_service import InventoryService


class TestListAndGet:

    @pytest.mark.asyncio
    async def test_list_items_sorted_by_code(self, seeded_store):
        service = InventoryService(seeded_store)
        assert [code for code, _ in service.list_items()] == ["A", "B"]

    def test_list_items_empty(self, inventory_service):
        assert inventory_service.list_items() == []

    def test_get_item_missing(self, inventory_service):
        with pytest.raises(NotFoundError):
            inventory_service.get_item("nope")


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_one_of_two(self, seeded_store, data_file):
        service = InventoryService(seeded_store)

        assert await service.delete("A") is True

        assert seeded_store.snapshot() == {"B": SAMPLE_RECORDS["B"]}
        assert read_document(data_file) == {"B": {"title": "Drill", "des": "Garage shelf"}}

    @pytest.mark.asyncio
    async def test_delete_absent(self, seeded_store):
        service = InventoryService(seeded_store)
        assert await service.delete("Z") is False
        assert seeded_store.snapshot() == SAMPLE_RECORDS


class TestExport:

    @pytest.mark.asyncio
    async def test_export_matches_data_file(self, seeded_store, data_file):
        service = InventoryService(seeded_store)
        assert service.export() == data_file.read_bytes()

    def test_export_empty(self, inventory_service):
        assert json.loads(inventory_service.export()) == {}


class TestImport:

    @pytest.mark.asyncio
    async def test_import_merges(self, seeded_store, data_file):
        service = InventoryService(seeded_store)
        payload = json.dumps({
            "B": {"title": "X", "des": "Y"},
            "C": {"title": "Tape", "des": "Packing"},
        }).encode()

        result = await service.import_bytes(payload)

        assert result.added == 1
        assert result.replaced == 1
        assert result.total_count == 3
        assert seeded_store.snapshot() == {
            "A": SAMPLE_RECORDS["A"],
            "B": Record(title="X", description="Y"),
            "C": Record(title="Tape", description="Packing"),
        }
        assert read_document(data_file)["B"] == {"title": "X", "des": "Y"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            b"not json at all",
            b'["A", "B"]',
            b'{"B": {"title": "X"}}',
            b'{"B": {"title": "X", "des": null}}',
        ],
    )
    async def test_import_rejects_bad_documents(self, seeded_store, data_file, payload):
        service = InventoryService(seeded_store)
        before = data_file.read_bytes()

        with pytest.raises(FormatError):
            await service.import_bytes(payload)

        assert seeded_store.snapshot() == SAMPLE_RECORDS
        assert data_file.read_bytes() == before

    @pytest.mark.asyncio
    async def test_import_own_export_is_noop(self, seeded_store):
        service = InventoryService(seeded_store)

        result = await service.import_bytes(service.export())

        assert result.added == 0
        assert result.replaced == 2
        assert seeded_store.snapshot() == SAMPLE_RECORDS

    @pytest.mark.asyncio
    async def test_import_counts_follow_queued_delete(self, seeded_store):
        """Counts reflect the inventory the merge actually applied to."""
        service = InventoryService(seeded_store)
        payload = json.dumps({
            "A": {"title": "Stapler", "des": "Office use"},
            "C": {"title": "Tape", "des": "Packing"},
        }).encode()

        # insert holds the store lock while saving; delete queues before the import
        _, _, result = await asyncio.gather(
            seeded_store.insert("X", Record(title="Lamp", description="Desk")),
            seeded_store.delete("A"),
            service.import_bytes(payload),
        )

        assert result.added == 2
        assert result.replaced == 0
        assert result.total_count == 4
        assert set(seeded_store.snapshot()) == {"A", "B", "C", "X"}

    @pytest.mark.asyncio
    async def test_import_upload_checks_extension(self, inventory_service, store):
        with pytest.raises(ValidationError):
            await inventory_service.import_upload("items.csv", b"{}")
        assert len(store) == 0
