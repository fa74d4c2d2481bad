"""
ScanShelf Backend: Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── data_file: Path of a not-yet-existing data file in tmp_path
    ├── store: InventoryStore bound to data_file, loaded (empty)
    ├── seeded_store: store holding the sample records, saved to disk
    ├── scan_workflow / inventory_service: services over `store`
    └── test_client: HTTPX AsyncClient talking to a fresh app
"""

import json
import os
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Settings are read at import time; keep tests away from ./data
os.environ["DATA_FILE"] = os.path.join(tempfile.mkdtemp(prefix="scanshelf_test_"), "scanData.json")
os.environ["LOG_LEVEL"] = "WARNING"

from scanshelf.config import Settings  # noqa: E402
from scanshelf.models.record import Record  # noqa: E402
from scanshelf.services.inventory_service import InventoryService  # noqa: E402
from scanshelf.services.inventory_store import InventoryStore  # noqa: E402
from scanshelf.services.scan_service import ScanWorkflow  # noqa: E402


SAMPLE_RECORDS = {
    "A": Record(title="Stapler", description="Office use"),
    "B": Record(title="Drill", description="Garage shelf"),
}


def read_document(path):
    """The data file decoded as plain JSON."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "scanData.json"


@pytest.fixture
def store(data_file):
    store = InventoryStore(path=str(data_file), indent=2)
    store.load()
    return store


@pytest_asyncio.fixture
async def seeded_store(store):
    await store.import_inventory(dict(SAMPLE_RECORDS))
    return store


@pytest.fixture
def scan_workflow(store):
    return ScanWorkflow(store)


@pytest.fixture
def inventory_service(store):
    return InventoryService(store)


@pytest.fixture
def app_settings(data_file):
    return Settings(data_file=str(data_file), log_level="WARNING", max_import_size=4096)


@pytest.fixture
def app(app_settings):
    """
    A fresh application per test.

    ASGITransport does not run the lifespan handler, so the store is loaded
    here the same way startup would.
    """
    from scanshelf.main import create_app
    application = create_app(app_settings)
    application.state.store.load()
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
