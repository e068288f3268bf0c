"""Entry Sync Service - idempotent, quota-limited ingestion of mobile batches"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Awaitable, Callable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nimbiwe.core.config import settings
from nimbiwe.models.entry import PriceEntry
from nimbiwe.models.enums import EntryStatus
from nimbiwe.schemas.entry import EntrySubmission, SyncOutcome

ALREADY_PROCESSED = "Already processed"
CONTENT_DUPLICATE = "Entry with same product/market/unit/date/price already exists"


def local_now() -> datetime:
    """Current time in the server's local time zone."""
    return datetime.now().astimezone()


def day_bounds(now: datetime) -> tuple[datetime, datetime]:
    """UTC bounds of the local calendar day containing ``now``: [midnight, next midnight)."""
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Timestamps without an offset are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EntrySyncService:
    """
    Ingest batches of price entries submitted by field agents.

    Every item is processed on its own and gets exactly one outcome. The
    rules below run in order and the first one that yields an outcome wins:

    1. idempotent replay of a known clientId
    2. daily quota per agent/product/market
    3. insert, mapping unique-constraint conflicts to a replay or a
       content duplicate

    Anything else that goes wrong is logged and reported as ``rejected`` for
    that item only. Items run sequentially and commit one at a time, so the
    quota seen by an item includes rows inserted earlier in the same batch.
    """

    def __init__(
        self,
        db: AsyncSession,
        logger: logging.Logger,
        clock: Callable[[], datetime] = local_now,
        daily_limit: Optional[int] = None,
    ):
        self.db = db
        self.logger = logger
        self.clock = clock
        self.daily_limit = daily_limit if daily_limit is not None else settings.DAILY_ENTRY_LIMIT
        self._rules: tuple[Callable[[EntrySubmission, str], Awaitable[Optional[SyncOutcome]]], ...] = (
            self._check_idempotency,
            self._check_daily_quota,
            self._create_entry,
        )

    async def sync_entries(
        self,
        submissions: List[EntrySubmission],
        default_agent_id: Optional[str] = None,
    ) -> List[SyncOutcome]:
        """Process ``submissions`` in order, returning one outcome per item."""
        outcomes: List[SyncOutcome] = []
        for submission in submissions:
            outcomes.append(await self._process(submission, default_agent_id))
        return outcomes

    async def _process(self, submission: EntrySubmission, default_agent_id: Optional[str]) -> SyncOutcome:
        agent_id = str(submission.agent_id) if submission.agent_id else default_agent_id
        try:
            if not agent_id:
                raise ValueError("agentId is required")

            for rule in self._rules:
                outcome = await rule(submission, agent_id)
                if outcome is not None:
                    return outcome

            raise RuntimeError("No sync rule produced an outcome")
        except Exception as exc:
            await self.db.rollback()
            message = str(getattr(exc, "orig", None) or exc) or "Internal server error"
            self.logger.error(
                "Error creating entry",
                exc_info=True,
                extra={
                    "clientId": submission.client_id,
                    "agentId": agent_id,
                    "productId": str(submission.product_id),
                    "marketId": str(submission.market_id),
                    "error": message,
                },
            )
            return SyncOutcome(client_id=submission.client_id, status='rejected', reason=message)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    async def _check_idempotency(self, submission: EntrySubmission, agent_id: str) -> Optional[SyncOutcome]:
        if not submission.client_id:
            return None

        existing = await self._find_by_client_id(submission.client_id)
        if existing is None:
            return None

        self.logger.info(
            "Idempotent request - returning cached result",
            extra={"clientId": submission.client_id, "entryId": existing.id},
        )
        return self._replay_outcome(submission.client_id, existing)

    async def _check_daily_quota(self, submission: EntrySubmission, agent_id: str) -> Optional[SyncOutcome]:
        start, end = day_bounds(self.clock())

        result = await self.db.execute(
            select(func.count()).select_from(PriceEntry).where(
                PriceEntry.agent_id == agent_id,
                PriceEntry.product_id == str(submission.product_id),
                PriceEntry.market_id == str(submission.market_id),
                PriceEntry.captured_at >= start,
                PriceEntry.captured_at < end,
            )
        )
        today_count = result.scalar_one()

        if today_count < self.daily_limit:
            return None

        self.logger.warning(
            "Daily limit exceeded",
            extra={
                "clientId": submission.client_id,
                "agentId": agent_id,
                "productId": str(submission.product_id),
                "marketId": str(submission.market_id),
                "todayCount": today_count,
            },
        )
        return SyncOutcome(
            client_id=submission.client_id,
            status='limit_exceeded',
            reason=f"Daily limit reached: {self.daily_limit} entries per agent/product/market/day",
        )

    async def _create_entry(self, submission: EntrySubmission, agent_id: str) -> Optional[SyncOutcome]:
        captured_at = as_utc(submission.captured_at)
        entry = PriceEntry(
            client_id=submission.client_id,
            agent_id=agent_id,
            product_id=str(submission.product_id),
            market_id=str(submission.market_id),
            unit=submission.unit,
            price_value=submission.price_value,
            currency=submission.currency,
            photo_url=submission.photo_url,
            lat=submission.lat,
            lon=submission.lon,
            captured_at=captured_at,
            captured_day=self._local_day(captured_at),
            status=EntryStatus.pending,
        )

        self.db.add(entry)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            return await self._resolve_conflict(submission, agent_id, captured_at, exc)

        self.logger.info(
            "Entry created",
            extra={
                "clientId": submission.client_id,
                "entryId": entry.id,
                "agentId": agent_id,
                "productId": entry.product_id,
                "marketId": entry.market_id,
            },
        )
        return SyncOutcome(client_id=submission.client_id, status='accepted', id=entry.id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _resolve_conflict(
        self,
        submission: EntrySubmission,
        agent_id: str,
        captured_at: datetime,
        exc: IntegrityError,
    ) -> SyncOutcome:
        """Work out which unique constraint a failed insert ran into."""
        # A concurrent request with the same clientId won the race
        existing = await self._find_by_client_id(submission.client_id)
        if existing is not None:
            self.logger.info(
                "Idempotent request lost insert race - returning stored result",
                extra={"clientId": submission.client_id, "entryId": existing.id},
            )
            return self._replay_outcome(submission.client_id, existing)

        if await self._content_duplicate_exists(submission, captured_at):
            self.logger.warning(
                "Duplicate entry detected",
                extra={
                    "clientId": submission.client_id,
                    "agentId": agent_id,
                    "productId": str(submission.product_id),
                    "marketId": str(submission.market_id),
                    "constraint": "uq_price_entries_content",
                },
            )
            return SyncOutcome(
                client_id=submission.client_id,
                status='duplicate',
                reason=CONTENT_DUPLICATE,
            )

        # Foreign key or other integrity failure
        raise exc

    async def _find_by_client_id(self, client_id: str) -> Optional[PriceEntry]:
        result = await self.db.execute(
            select(PriceEntry).where(PriceEntry.client_id == client_id)
        )
        return result.scalar_one_or_none()

    async def _content_duplicate_exists(self, submission: EntrySubmission, captured_at: datetime) -> bool:
        result = await self.db.execute(
            select(PriceEntry.id).where(
                PriceEntry.product_id == str(submission.product_id),
                PriceEntry.market_id == str(submission.market_id),
                PriceEntry.unit == submission.unit,
                PriceEntry.captured_day == self._local_day(captured_at),
                PriceEntry.price_value == submission.price_value,
            ).limit(1)
        )
        return result.scalar_one_or_none() is not None

    def _local_day(self, captured_at: datetime) -> date:
        return captured_at.astimezone(self.clock().tzinfo).date()

    @staticmethod
    def _replay_outcome(client_id: str, existing: PriceEntry) -> SyncOutcome:
        status = 'rejected' if existing.status == EntryStatus.rejected else 'accepted'
        return SyncOutcome(client_id=client_id, status=status, reason=ALREADY_PROCESSED, id=existing.id)
