"""Sync endpoint - batched price entry submissions from the mobile app"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from nimbiwe.core.config import settings
from nimbiwe.core.database import get_db
from nimbiwe.core.logging import get_logger
from nimbiwe.core.rate_limit import limiter
from nimbiwe.core.security import get_current_agent
from nimbiwe.models.agent import Agent
from nimbiwe.schemas.entry import EntrySubmission, SyncOutcome
from nimbiwe.services.entry_sync import EntrySyncService

router = APIRouter()
logger = get_logger("services.entry_sync")


@router.post(
    "/entries",
    response_model=List[SyncOutcome],
    response_model_exclude_none=True,
    status_code=201,
    responses={400: {"description": "Invalid payload"}, 401: {"description": "Not authenticated"}},
)
@limiter.limit(f"{settings.RATE_LIMIT_PER_MINUTE}/minute")
async def sync_entries(
    request: Request,
    entries: List[EntrySubmission],
    agent: Agent = Depends(get_current_agent),
    db: AsyncSession = Depends(get_db),
):
    """
    Synchronise price entries captured offline (idempotent).

    Every item gets its own outcome, in request order: accepted, rejected,
    duplicate or limit_exceeded. A malformed item rejects the whole request
    with 400 before anything is stored.
    """
    if len(entries) > settings.SYNC_MAX_BATCH_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Batch too large. Max {settings.SYNC_MAX_BATCH_SIZE} entries per request.",
        )

    service = EntrySyncService(db, logger)
    return await service.sync_entries(entries, default_agent_id=agent.id)
