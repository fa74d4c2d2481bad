"""
ScanShelf Backend: FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       owning one InventoryStore and the services built on it.
Who:   Called by uvicorn to start the server (uvicorn scanshelf.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │ Req ID   │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────┐ ┌────────────────┐ ┌────────────┐   │
    │  │ /api/scans │ │ /api/inventory │ │ GET /health│   │
    │  └────────────┘ └────────────────┘ └────────────┘   │
    │                                                     │
    │  app.state:                                         │
    │    store ─┬─▶ scan_workflow                         │
    │           └─▶ inventory_service                     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, load the data file once
    Shutdown: nothing to release; every change is already on disk (or
              its StorageError was reported)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scanshelf import __version__
from scanshelf.config import Settings, settings
from scanshelf.exceptions import (
    FormatError,
    NotFoundError,
    ScanShelfError,
    ScanStateError,
    StorageError,
    ValidationError,
)
from scanshelf.middleware.logging import RequestLoggingMiddleware
from scanshelf.middleware.request_id import RequestIDMiddleware, request_id_var
from scanshelf.routes import health, inventory, scan
from scanshelf.services.file_service import FileService
from scanshelf.services.inventory_service import InventoryService
from scanshelf.services.inventory_store import InventoryStore
from scanshelf.services.scan_service import ScanWorkflow

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before the data file is loaded.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("ScanShelf Backend starting up...")

    store: InventoryStore = app.state.store
    store.load()
    logger.info("Data file: %s (%d items)", store.path.resolve(), len(store))

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("ScanShelf Backend shut down with %d items", len(store))


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error, "message": message}
    if details:
        body["details"] = details
    body["request_id"] = request_id_var.get("")
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler table:
        ValidationError  → 400 validation_error
        FormatError      → 400 format_error
        NotFoundError    → 404 not_found
        ScanStateError   → 409 scan_state_error
        StorageError     → 500 storage_error (message shown to the user)
        ScanShelfError   → 500 server_error
        Exception        → 500 internal_server_error (logged with traceback)
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("Validation error: %s", exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(FormatError)
    async def handle_format_error(request: Request, exc: FormatError):
        logger.warning("Rejected import: %s", exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("format_error", exc.message, exc.context),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(ScanStateError)
    async def handle_scan_state(request: Request, exc: ScanStateError):
        return JSONResponse(
            status_code=409,
            content=_error_body("scan_state_error", exc.message, exc.context),
        )

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        # File paths and OS errors stay in the log
        logger.error("Storage error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("storage_error", exc.message),
        )

    @app.exception_handler(ScanShelfError)
    async def handle_app_error(request: Request, exc: ScanShelfError):
        logger.error("Application error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", exc.message),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Builds the InventoryStore for `app_settings.data_file` and the two
    services that share it. The store is loaded by the lifespan handler,
    not here, so importing this module does not touch the disk.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="ScanShelf API",
        description=(
            "Barcode/QR inventory: look up scanned codes, record a title and "
            "description for new ones, and import or export the whole inventory as JSON."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    store = InventoryStore(path=app_settings.data_file, indent=app_settings.json_indent)
    app.state.settings = app_settings
    app.state.store = store
    app.state.scan_workflow = ScanWorkflow(store)
    app.state.inventory_service = InventoryService(
        store,
        file_service=FileService(max_size=app_settings.max_import_size),
    )

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Content-Disposition"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(scan.router)
    app.include_router(inventory.router)
    app.include_router(health.router)

    return app


app = create_app()
