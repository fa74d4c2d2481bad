"""
ScanShelf Backend: Scan Route Handlers
=======================================

What:  Endpoints behind the scan screen of the client app.
How:   Each handler forwards to the application's ScanWorkflow.
Who:   Called by the client after its camera decodes a code, and by the
       title/description prompt it shows for unknown codes.

Typical flow for a new code:
    POST /api/scans {"code": "123"}                 → status=awaiting_decision
    POST /api/scans/confirm {"title": ..., ...}     → 201 with the stored item

For a known code:
    POST /api/scans {"code": "123"}                 → status=found, item=...
"""

import logging

from fastapi import APIRouter, Depends

from scanshelf.dependencies import get_scan_workflow
from scanshelf.schemas.inventory import (
    ConfirmRequest,
    DeleteResponse,
    ErrorResponse,
    ItemResponse,
    ScanRequest,
    ScanResponse,
    ScanStateResponse,
)
from scanshelf.services.scan_service import ScanWorkflow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/scans", tags=["Scans"])


def _state_response(workflow: ScanWorkflow) -> ScanStateResponse:
    shown = workflow.current()
    return ScanStateResponse(
        state=workflow.state,
        pending_code=workflow.pending_code,
        current=ItemResponse.from_record(*shown) if shown else None,
    )


@router.post(
    "",
    response_model=ScanResponse,
    responses={
        400: {"description": "Empty code", "model": ErrorResponse},
    },
    summary="Submit a scanned code",
)
async def submit_scan(
    body: ScanRequest,
    workflow: ScanWorkflow = Depends(get_scan_workflow),
) -> ScanResponse:
    """
    Look up a scanned code.

    Known codes return their record and nothing changes. Unknown codes put
    the workflow into awaiting_decision until confirm or cancel is called.
    """
    outcome = workflow.receive_scan(body.code)
    return ScanResponse(
        code=outcome.code,
        status=outcome.status,
        item=ItemResponse.from_record(outcome.code, outcome.record) if outcome.found else None,
    )


@router.post(
    "/confirm",
    status_code=201,
    response_model=ItemResponse,
    responses={
        400: {"description": "Empty title or description", "model": ErrorResponse},
        409: {"description": "No scan awaiting a decision", "model": ErrorResponse},
        500: {"description": "Record kept in memory but not saved", "model": ErrorResponse},
    },
    summary="Create a record for the pending code",
)
async def confirm_scan(
    body: ConfirmRequest,
    workflow: ScanWorkflow = Depends(get_scan_workflow),
) -> ItemResponse:
    code = workflow.pending_code
    record = await workflow.confirm(body.title, body.description)
    return ItemResponse.from_record(code, record)


@router.post(
    "/cancel",
    response_model=ScanStateResponse,
    summary="Dismiss the title/description prompt",
)
async def cancel_scan(workflow: ScanWorkflow = Depends(get_scan_workflow)) -> ScanStateResponse:
    workflow.cancel()
    return _state_response(workflow)


@router.get(
    "/current",
    response_model=ScanStateResponse,
    summary="Workflow state and the record on display",
)
async def current_scan(workflow: ScanWorkflow = Depends(get_scan_workflow)) -> ScanStateResponse:
    return _state_response(workflow)


@router.delete(
    "/current",
    response_model=DeleteResponse,
    responses={
        500: {"description": "Deleted in memory but not saved", "model": ErrorResponse},
    },
    summary="Delete the record on display",
)
async def delete_current(workflow: ScanWorkflow = Depends(get_scan_workflow)) -> DeleteResponse:
    code = await workflow.delete_current()
    return DeleteResponse(code=code, deleted=code is not None)
