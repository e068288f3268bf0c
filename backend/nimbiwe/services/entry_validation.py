"""Entry Validation Service - admin review of pending entries"""
import logging
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from nimbiwe.core.errors import EntryNotFoundError
from nimbiwe.models.entry import PriceEntry
from nimbiwe.models.enums import EntryStatus, ValidationDecision
from nimbiwe.models.validation import Validation


class EntryValidationService:
    """
    Resolve pending entries to validated/rejected.

    Each decision updates the entry status and appends a Validation audit
    row in the same transaction. Decisions are not idempotent: deciding
    twice leaves two audit rows and the latest status.
    """

    def __init__(self, db: AsyncSession, logger: logging.Logger):
        self.db = db
        self.logger = logger

    async def list_pending(self, page: int = 1, limit: int = 10) -> tuple[List[PriceEntry], int]:
        """Pending entries newest first, with product/market/agent loaded, and the pending total."""
        offset = (page - 1) * limit

        result = await self.db.execute(
            select(PriceEntry)
            .options(
                joinedload(PriceEntry.product),
                joinedload(PriceEntry.market),
                joinedload(PriceEntry.agent),
            )
            .where(PriceEntry.status == EntryStatus.pending)
            .order_by(PriceEntry.created_at.desc(), PriceEntry.id.desc())
            .offset(offset)
            .limit(limit)
        )
        entries = list(result.scalars().all())

        total_result = await self.db.execute(
            select(func.count()).select_from(PriceEntry).where(PriceEntry.status == EntryStatus.pending)
        )
        return entries, total_result.scalar_one()

    async def validate_entry(
        self,
        entry_id: str,
        decision: ValidationDecision,
        reason: Optional[str],
        admin_id: str,
    ) -> PriceEntry:
        result = await self.db.execute(select(PriceEntry).where(PriceEntry.id == entry_id))
        entry = result.scalar_one_or_none()

        if entry is None:
            raise EntryNotFoundError(entry_id)

        entry.status = (
            EntryStatus.validated if decision == ValidationDecision.validated else EntryStatus.rejected
        )
        self.db.add(Validation(
            price_entry_id=entry.id,
            admin_id=admin_id,
            decision=decision,
            reason=reason,
        ))

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        await self.db.refresh(entry)

        self.logger.info(
            "Entry validated",
            extra={
                "action": "VALIDATE" if decision == ValidationDecision.validated else "REJECT",
                "entryId": entry.id,
                "adminId": admin_id,
                "decision": decision.value,
                "reason": reason,
                "productId": entry.product_id,
                "marketId": entry.market_id,
                "priceValue": str(entry.price_value),
            },
        )
        return entry
