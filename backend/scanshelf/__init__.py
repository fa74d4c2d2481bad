"""
ScanShelf Backend: Application Package Initializer
===================================================

What: Marks the `scanshelf` directory as a Python package.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is layered the same way on every path:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Scan workflow, Lists)   │  ← Orchestration, validation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Record dataclass + Pydantic
    ├─────────────────────────────────────┤
    │    Inventory Store (Persistence)    │  ← One JSON file, full rewrites
    └─────────────────────────────────────┘

    One InventoryStore instance owns the inventory. The application factory
    builds it and hands it to the services; routes reach the services
    through FastAPI dependencies.
"""

__version__ = "1.0.0"
