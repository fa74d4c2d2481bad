"""
ScanShelf Backend: Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between the scanner app and backend,
       plus the document schema used to validate imported inventory files.
How:   FastAPI uses the request/response models to validate bodies, serialize responses,
       and generate OpenAPI documentation. `InventoryDocument` is applied to raw
       import bytes by the inventory store.
"""

from typing import Annotated, Dict, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, Field, StrictStr, StringConstraints, TypeAdapter

from scanshelf.models.record import Record


# ══════════════════════════════════════════════════════════════════════════
# Persisted Document: what the data file and import files contain
# ══════════════════════════════════════════════════════════════════════════


class PersistedRecord(BaseModel):
    """
    One value of the inventory document.

    Both fields must be JSON strings; numbers or nulls are rejected rather
    than coerced. Extra keys in the object are ignored. Empty strings are
    accepted here: content rules apply to manual creation only.
    """
    title: StrictStr
    des: StrictStr

    def to_record(self) -> Record:
        return Record(title=self.title, description=self.des)


def _check_code(code: str) -> str:
    if not code.strip():
        raise ValueError("code must not be blank")
    return code


# Keys are scanned codes; blank ones could never be scanned again
CodeKey = Annotated[str, StringConstraints(min_length=1), AfterValidator(_check_code)]

InventoryDocument: TypeAdapter[Dict[str, PersistedRecord]] = TypeAdapter(
    Dict[CodeKey, PersistedRecord]
)


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class ScanRequest(BaseModel):
    """A decoded code delivered by the client's camera scanner."""
    code: str = Field(description="Decoded barcode/QR payload, used as the inventory key")


class ConfirmRequest(BaseModel):
    """
    Title and description typed by the user for an unknown code.

    Emptiness is checked by the scan workflow, not here, so that an empty
    field produces the same 400 validation_error as every other rule.
    """
    title: str = Field(default="", description="Item name")
    description: str = Field(default="", description="What the item is used for")


# ══════════════════════════════════════════════════════════════════════════
# Response Models: what the API returns
# ══════════════════════════════════════════════════════════════════════════


class ItemResponse(BaseModel):
    """One inventory entry."""
    code: str = Field(description="Scanned code (inventory key)")
    title: str = Field(description="Item name")
    description: str = Field(description="Item description")
    label: str = Field(description='List row text, "<title> - <description>"')

    @classmethod
    def from_record(cls, code: str, record: Record) -> "ItemResponse":
        return cls(
            code=code,
            title=record.title,
            description=record.description,
            label=record.label,
        )


class ScanResponse(BaseModel):
    """
    Result of submitting a scanned code.

    status:
        found:              the code is known; `item` holds its record
        awaiting_decision:  the code is new; send title/description to
                            /api/scans/confirm or call /api/scans/cancel
    """
    code: str = Field(description="The scanned code")
    status: Literal["found", "awaiting_decision"] = Field(description="Lookup result")
    item: Optional[ItemResponse] = Field(default=None, description="Existing record, if found")


class ScanStateResponse(BaseModel):
    """The scan screen: workflow state plus the record currently on display."""
    state: Literal["idle", "awaiting_decision"] = Field(description="Workflow state")
    pending_code: Optional[str] = Field(
        default=None,
        description="Code waiting for title/description (awaiting_decision only)",
    )
    current: Optional[ItemResponse] = Field(
        default=None,
        description="Record shown after the last successful lookup or creation",
    )


class InventoryListResponse(BaseModel):
    """All inventory entries, sorted by code."""
    items: List[ItemResponse] = Field(description="Inventory entries")
    total_count: int = Field(description="Number of entries")


class DeleteResponse(BaseModel):
    """Outcome of a delete. Deleting an unknown code is not an error."""
    code: Optional[str] = Field(default=None, description="Code that was targeted")
    deleted: bool = Field(description="Whether an entry was removed")


class ImportResponse(BaseModel):
    """Summary of a merge-import."""
    message: str = Field(default="Inventory imported", description="Human-readable summary")
    added: int = Field(description="Codes that were not in the inventory before")
    replaced: int = Field(description="Existing codes overwritten by imported values")
    total_count: int = Field(description="Inventory size after the merge")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "format_error",
            "message": "The file is not a valid inventory export",
            "details": {"errors": ["B.des: Field required"]},
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and data file status."""
    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    data_file: str = Field(description="Data file status: present, missing, not_writable")
    item_count: int = Field(description="Entries currently held in memory")
    uptime_seconds: float = Field(description="Seconds since service started")
