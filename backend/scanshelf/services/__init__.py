# Services package init
"""
ScanShelf Backend: Services Layer
==================================

What:  Business logic sitting between routes (HTTP) and the data file.
How:   Services receive the shared InventoryStore in their constructor and
       are reached by routes through FastAPI dependencies.

Service Inventory:
    - InventoryStore: in-memory inventory, load/save/merge of the JSON data file
    - ScanWorkflow: lookup-or-create state machine for scanned codes
    - InventoryService: list, delete, export and merge-import
    - FileService: validation of uploaded import files
"""
