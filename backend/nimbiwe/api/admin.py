"""Admin endpoints - review of pending price entries"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from nimbiwe.core.database import get_db
from nimbiwe.core.errors import EntryNotFoundError
from nimbiwe.core.logging import get_logger
from nimbiwe.core.security import require_admin
from nimbiwe.models.agent import Agent
from nimbiwe.schemas.entry import (
    EntryResponse,
    PendingEntryListResponse,
    PendingEntryResponse,
    ValidateEntryRequest,
)
from nimbiwe.services.entry_validation import EntryValidationService

router = APIRouter()
logger = get_logger("services.entry_validation")


@router.get("/entries", response_model=PendingEntryListResponse)
async def list_pending_entries(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin: Agent = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List entries awaiting validation, newest first."""
    service = EntryValidationService(db, logger)
    entries, total = await service.list_pending(page=page, limit=limit)

    return PendingEntryListResponse(
        entries=[PendingEntryResponse.model_validate(e) for e in entries],
        page=page,
        limit=limit,
        total=total,
    )


@router.post(
    "/entries/{entry_id}/validate",
    response_model=EntryResponse,
    responses={404: {"description": "Entry not found"}},
)
async def validate_entry(
    entry_id: str,
    data: ValidateEntryRequest,
    admin: Agent = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Validate or reject an entry. Each call leaves an audit record."""
    service = EntryValidationService(db, logger)
    try:
        entry = await service.validate_entry(
            entry_id=entry_id,
            decision=data.decision,
            reason=data.reason,
            admin_id=admin.id,
        )
    except EntryNotFoundError:
        raise HTTPException(status_code=404, detail="Entry not found")

    return EntryResponse.model_validate(entry)
