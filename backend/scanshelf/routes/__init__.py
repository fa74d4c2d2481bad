# Routes package init
"""
ScanShelf Backend: API Routes Package
======================================

Route Inventory:
    - scan.py:       POST   /api/scans              (submit a scanned code)
                     POST   /api/scans/confirm      (create record for pending code)
                     POST   /api/scans/cancel       (drop pending code)
                     GET    /api/scans/current      (scan screen state)
                     DELETE /api/scans/current      (delete displayed record)
    - inventory.py:  GET    /api/inventory          (list all items)
                     GET    /api/inventory/items/{code}
                     DELETE /api/inventory/items/{code}
                     GET    /api/inventory/export   (download JSON)
                     POST   /api/inventory/import   (merge uploaded JSON)
    - health.py:     GET    /health                 (service health check)

Routes are thin: extract request data, call a service, shape the response.
"""
