"""
ScanShelf Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the inventory's error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    ScanShelfError (base)
    ├── ValidationError   → 400 Bad Request (empty field, bad upload)
    ├── FormatError       → 400 Bad Request (import file has the wrong shape)
    ├── NotFoundError     → 404 Not Found
    ├── ScanStateError    → 409 Conflict (no scan is waiting for a decision)
    └── StorageError      → 500 Internal Server Error (data file not written)

Failures while *loading* the data file are not represented here: the store
logs them and starts from an empty inventory.
"""

from typing import Any, Dict, Optional


class ScanShelfError(Exception):
    """
    Base exception for all ScanShelf application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where the handler says so)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ScanShelfError):
    """
    Raised when client input fails validation.

    When:    Empty scanned code, empty title or description on creation,
             import upload with the wrong extension or size.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Title must not be empty",
            "details": {"field": "title"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class FormatError(ScanShelfError):
    """
    Raised when imported bytes are not an inventory document.

    When:    Invalid JSON, a top level that is not an object, or an entry
             without string "title" and "des" fields.
    HTTP:    400 Bad Request

    The import that raised it has not touched the inventory or the data file.
    """

    def __init__(
        self,
        message: str = "The file is not a valid inventory export",
        errors: Optional[list] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if errors:
            ctx["errors"] = errors
        super().__init__(message=message, context=ctx)
        self.errors = errors or []


class NotFoundError(ScanShelfError):
    """
    Raised when a requested code is not in the inventory.

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "item",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with code '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ScanStateError(ScanShelfError):
    """
    Raised when a workflow action does not fit the current scan state.

    When:    Confirming a new record while no scanned code is awaiting a decision.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "No scanned code is waiting for a title and description",
        state: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if state:
            ctx["state"] = state
        super().__init__(message=message, context=ctx)
        self.state = state


class StorageError(ScanShelfError):
    """
    Raised when the data file could not be written.

    When:    Disk full, permission denied, directory not writable, I/O error.
    HTTP:    500 Internal Server Error

    The in-memory inventory keeps the change that triggered the write; the
    next successful save brings the file back in line.
    """

    def __init__(
        self,
        message: str = "The inventory could not be saved to disk",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
